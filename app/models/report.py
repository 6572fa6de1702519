"""
Report model for generated report files.

This module defines the SQLAlchemy model for the report registry. A row is
written once, after its file has been rendered, and is only ever deleted.
"""

from datetime import datetime
import uuid

from sqlalchemy import Column, DateTime, JSON, String, Uuid

from app.models.base import Base


class Report(Base):
    """
    Report model for rendered CSV/PDF reports.

    ``name`` doubles as the storage key under the reports directory.
    """

    __tablename__ = "reports"

    id = Column(Uuid(as_uuid=True), primary_key=True, nullable=False, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    type = Column(String(50), nullable=False)  # transactions, budgets, tax, ...
    period = Column(String(50), nullable=False)
    format = Column(String(10), nullable=False)  # csv | pdf
    url = Column(String(1024), nullable=True)
    # "metadata" is reserved on declarative classes
    report_metadata = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime(timezone=False), nullable=False, default=datetime.now, index=True)
    updated_at = Column(DateTime(timezone=False), nullable=False, default=datetime.now, onupdate=datetime.now)

    def __repr__(self) -> str:
        """String representation of the Report model."""
        return (
            f"<Report(id={self.id}, name='{self.name}', "
            f"type='{self.type}', format='{self.format}')>"
        )
