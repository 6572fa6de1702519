"""
Report API endpoints.
This module provides endpoints for generating, previewing and deleting
downloadable CSV/PDF reports.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import HTMLResponse, PlainTextResponse
from app.core.deps import get_base_url, get_report_service
from app.core.errors import ReportNotFoundError, ReportValidationError
from app.core.logging import logger
from app.schemas.report import (
    MessageResponse, Report, ReportGenerate, ReportList, ReportResponse
)
from app.services.report import ReportService

router = APIRouter()


@router.get("", response_model=ReportList)
async def list_reports(
    service: ReportService = Depends(get_report_service),
) -> ReportList:
    """
    List generated reports, newest first.
    """
    try:
        reports = await service.list()
    except Exception as e:
        logger.error(f"Error listing reports: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list reports"
        )

    logger.debug(f"Retrieved {len(reports)} reports")
    return ReportList(reports=[Report.model_validate(r) for r in reports])


@router.post("/generate", response_model=ReportResponse)
async def generate_report(
    report_in: ReportGenerate,
    service: ReportService = Depends(get_report_service),
    base_url: str = Depends(get_base_url),
) -> ReportResponse:
    """
    Generate a report file and register it.

    Args:
        report_in: Report type, period, format and optional custom range
        service: Report service
        base_url: Scheme and host used to build the file URL

    Returns:
        The created report
    """
    try:
        report = await service.generate(report_in, base_url)
    except ReportValidationError as e:
        logger.warning(f"Report generation rejected: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except Exception as e:
        logger.error(f"Error generating report: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Failed to generate report", "error": str(e)},
        )

    logger.info(f"Report generated: {report.name}")
    return ReportResponse(report=Report.model_validate(report))


@router.get("/{report_id}/preview", response_class=HTMLResponse)
async def preview_report(
    report_id: str,
    service: ReportService = Depends(get_report_service),
    base_url: str = Depends(get_base_url),
):
    """
    HTML preview of a report: a table for CSV, an embedded viewer for PDF.
    """
    logger.debug(f"Previewing report: {report_id}")

    try:
        html = await service.preview(report_id, base_url)
    except ReportNotFoundError as e:
        logger.warning(f"Preview unavailable for {report_id}: {e.message}")
        return PlainTextResponse(e.message, status_code=status.HTTP_404_NOT_FOUND)
    except Exception as e:
        logger.error(f"Error previewing report {report_id}: {str(e)}", exc_info=True)
        return PlainTextResponse(
            "Failed to generate preview",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return HTMLResponse(html)


@router.delete("/{report_id}", response_model=MessageResponse)
async def delete_report(
    report_id: str,
    service: ReportService = Depends(get_report_service),
) -> MessageResponse:
    """
    Delete a report and its file.
    """
    logger.debug(f"Deleting report: {report_id}")

    try:
        await service.delete(report_id)
    except ReportNotFoundError:
        logger.warning(f"Report not found for deletion, ID: {report_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Report not found"
        )
    except Exception as e:
        logger.error(f"Error deleting report {report_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Failed to delete report", "error": str(e)},
        )

    return MessageResponse(message="Report deleted")
