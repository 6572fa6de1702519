"""
Service layer for generated reports.

This module ties the pipeline together: resolve the period, fetch and
summarize the data, render the file, then register the report.
"""

from typing import List, Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ReportNotFoundError, ReportValidationError
from app.core.logging import logger
from app.models.report import Report
from app.schemas.report import ReportGenerate
from app.services.periods import ReportPeriod, resolve_period
from app.services.report_data import (
    ReportType,
    fetch_report_data,
    get_report_definition,
    normalize_rows,
)
from app.services.report_files import (
    build_report_name,
    write_csv_report,
    write_pdf_report,
)
from app.services.report_preview import render_preview
from app.services.report_registry import ReportRegistry
from app.utils import make_json_serializable

SUPPORTED_FORMATS = ("csv", "pdf")


def period_label(period: str, from_date: Optional[str], to_date: Optional[str]) -> str:
    if period == ReportPeriod.CUSTOM.value:
        return f"{from_date} to {to_date}"
    return period


class ReportService:
    """Service class for report generation, listing, preview and deletion."""

    def __init__(self, db: AsyncSession, registry: ReportRegistry):
        self.db = db
        self.registry = registry

    async def generate(self, request: ReportGenerate, base_url: str) -> Report:
        """
        Generate a report file and register it.

        Args:
            request: Report type, period, format and optional custom bounds
            base_url: Scheme and host the file URL is built from

        Returns:
            Created report

        Raises:
            ReportValidationError: Missing fields, unknown type, unresolvable
                period or unsupported format
        """
        if not request.type or not request.period or not request.format:
            raise ReportValidationError("Missing required fields")

        report_type = request.type
        definition = get_report_definition(report_type)
        if definition is None:
            raise ReportValidationError("Unsupported report type")

        date_range = resolve_period(request.period, request.from_date, request.to_date)
        if date_range is None:
            raise ReportValidationError("Invalid period / missing custom dates")

        extension = request.format.lower()
        if extension not in SUPPORTED_FORMATS:
            raise ReportValidationError("Unsupported format")

        logger.info(f"Generating {report_type} report for {request.period} as {extension}")

        data = await fetch_report_data(self.db, report_type, date_range)
        rows = normalize_rows(report_type, data)

        storage = self.registry.storage
        name = build_report_name(report_type, request.period, extension)
        if extension == "csv":
            await write_csv_report(storage, name, rows, definition.csv_fields)
        else:
            await write_pdf_report(
                storage,
                name,
                title=f"{ReportType(report_type).value} report",
                period_label=period_label(request.period, request.from_date, request.to_date),
                rows=rows,
                columns=definition.pdf_columns,
            )

        return await self.registry.create(
            name=name,
            type=report_type,
            period=request.period,
            format=extension,
            url=storage.public_url(base_url, name),
            metadata=make_json_serializable({
                "from": request.from_date,
                "to": request.to_date,
                "summary": data.summary,
            }),
        )

    async def list(self) -> List[Report]:
        return await self.registry.list()

    async def preview(self, report_id: str, base_url: str) -> str:
        """
        Render the HTML preview of a report.

        Raises:
            ReportNotFoundError: Unknown id, or the file is gone from disk
        """
        report = await self.registry.get(report_id)
        if report is None:
            raise ReportNotFoundError("Report not found")

        storage = self.registry.storage
        path = storage.path_for(report.name)
        if not path.exists():
            logger.warning(f"Report file missing for {report.id}: {path}")
            raise ReportNotFoundError("Report file not found")

        return await run_in_threadpool(
            render_preview, report, path, storage.public_url(base_url, report.name)
        )

    async def delete(self, report_id: str) -> None:
        await self.registry.delete(report_id)
