"""
Dependencies for FastAPI endpoints.

This module wires the report pipeline together per request: storage,
notifier, registry and service.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.services.notifications import ReportNotifier
from app.services.report import ReportService
from app.services.report_files import ReportStorage, default_storage
from app.services.report_registry import ReportRegistry


def get_report_storage() -> ReportStorage:
    """Reports directory and public URL path from settings."""
    return default_storage()


def get_notifier(request: Request) -> ReportNotifier:
    """The notifier installed on the application at startup."""
    return request.app.state.report_notifier


def get_report_registry(
    db: AsyncSession = Depends(get_db),
    notifier: ReportNotifier = Depends(get_notifier),
    storage: ReportStorage = Depends(get_report_storage),
) -> ReportRegistry:
    return ReportRegistry(db, notifier, storage)


def get_report_service(
    db: AsyncSession = Depends(get_db),
    registry: ReportRegistry = Depends(get_report_registry),
) -> ReportService:
    return ReportService(db, registry)


def get_base_url(request: Request) -> str:
    """Scheme and host of the incoming request, without a trailing slash."""
    return str(request.base_url).rstrip("/")
