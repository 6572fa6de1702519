"""
Registry of generated reports.

Records are written once, after their file exists, and only ever deleted.
Every create and delete is announced through the injected notifier.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ReportNotFoundError
from app.core.logging import logger
from app.models.report import Report
from app.schemas.report import Report as ReportSchema
from app.services.notifications import REPORT_CREATED, REPORT_DELETED, ReportNotifier
from app.services.report_files import ReportStorage


def _parse_id(report_id: Any) -> Optional[UUID]:
    if isinstance(report_id, UUID):
        return report_id
    try:
        return UUID(str(report_id))
    except ValueError:
        return None


class ReportRegistry:
    """Persistence and lifecycle of ``Report`` records."""

    def __init__(self, db: AsyncSession, notifier: ReportNotifier, storage: ReportStorage):
        self.db = db
        self.notifier = notifier
        self.storage = storage

    async def create(
        self,
        name: str,
        type: str,
        period: str,
        format: str,
        url: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Report:
        """
        Insert a report record and announce it.

        Args:
            name: Generated file name
            type: Report type
            period: Period token
            format: File format
            url: Public URL of the file
            metadata: Custom range bounds and summary snapshot

        Returns:
            Created report
        """
        logger.info(f"Registering report: {name}")

        report = Report(
            name=name,
            type=type,
            period=period,
            format=format,
            url=url,
            report_metadata=metadata or {},
        )
        self.db.add(report)
        await self.db.commit()
        await self.db.refresh(report)

        payload = ReportSchema.model_validate(report).model_dump(mode="json")
        await self.notifier.notify(REPORT_CREATED, {"report": payload})
        return report

    async def list(self) -> List[Report]:
        """All reports, newest first."""
        logger.debug("Listing reports")
        result = await self.db.execute(
            select(Report).order_by(Report.created_at.desc(), Report.name.desc())
        )
        return list(result.scalars().all())

    async def get(self, report_id: Any) -> Optional[Report]:
        """
        Get a report by ID.

        Returns:
            Report if found, None otherwise (including malformed ids)
        """
        parsed = _parse_id(report_id)
        if parsed is None:
            logger.debug(f"Malformed report id: {report_id!r}")
            return None
        result = await self.db.execute(select(Report).where(Report.id == parsed))
        return result.scalars().first()

    async def delete(self, report_id: Any) -> None:
        """
        Delete a report record and, best effort, its file.

        Raises:
            ReportNotFoundError: No record has this id
        """
        report = await self.get(report_id)
        if report is None:
            raise ReportNotFoundError()

        path = self.storage.path_for(report.name)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to remove report file {path}: {e}")

        deleted_id = str(report.id)
        await self.db.delete(report)
        await self.db.commit()
        logger.info(f"Report deleted: {deleted_id}")

        await self.notifier.notify(REPORT_DELETED, {"id": deleted_id})
