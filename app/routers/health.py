"""
Health check endpoints.

Liveness, database connectivity, and the state of the generated reports
directory.
"""

import os
from pathlib import Path
from typing import Dict

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.deps import get_report_storage
from app.core.logging import logger
from app.db.session import get_db
from app.services.report_files import ReportStorage

router = APIRouter()


@router.get("", response_model=Dict[str, str])
async def health_check() -> Dict[str, str]:
    """Liveness probe."""
    logger.debug("Health check endpoint called")
    return {"status": "ok"}


@router.get("/db", response_model=Dict[str, str])
async def database_health_check(
    db: AsyncSession = Depends(get_db)
) -> Dict[str, str]:
    """
    Database health check endpoint.

    Args:
        db: Database session

    Returns:
        Database health status
    """
    try:
        result = await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Database health check failed: {str(e)}")
        return {"status": "error", "database": f"connection_error: {str(e)}"}

    if result.scalar() != 1:
        logger.error("Database health check failed - unexpected result")
        return {"status": "error", "database": "unexpected_result"}
    return {"status": "ok", "database": "connected"}


@router.get("/storage", response_model=Dict[str, str])
async def storage_health_check(
    storage: ReportStorage = Depends(get_report_storage),
) -> Dict[str, str]:
    """
    Check that generated reports can be written.

    Returns:
        ``ok`` when the reports directory exists and is writable
    """
    directory = Path(storage.directory)
    if not directory.is_dir():
        logger.warning(f"Reports directory missing: {directory}")
        return {"status": "error", "storage": "missing"}
    if not os.access(directory, os.W_OK):
        logger.warning(f"Reports directory not writable: {directory}")
        return {"status": "error", "storage": "read_only"}
    return {"status": "ok", "storage": "writable"}
