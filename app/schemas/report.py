"""
Pydantic schemas for reports.

This module defines the request and response schemas for report-related
API endpoints using Pydantic models.
"""

from typing import Dict, Any, List, Optional
from datetime import datetime
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ReportGenerate(BaseModel):
    """Schema for a report generation request.

    Fields are validated by the service so that missing or unknown values
    produce a 400 with a readable message rather than a schema error.
    """

    model_config = ConfigDict(populate_by_name=True)

    type: Optional[str] = None
    period: Optional[str] = None
    format: Optional[str] = None
    from_date: Optional[str] = Field(default=None, alias="from")
    to_date: Optional[str] = Field(default=None, alias="to")


class Report(BaseModel):
    """Schema for report response data."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    type: str
    period: str
    format: str
    url: Optional[str] = None
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("report_metadata", "metadata"),
    )
    created_at: datetime
    updated_at: Optional[datetime] = None


class ReportResponse(BaseModel):
    """Envelope for a single report."""

    report: Report


class ReportList(BaseModel):
    """Envelope for the report listing."""

    reports: List[Report]


class MessageResponse(BaseModel):
    message: str
