"""
Services package initialization.

This module imports all services to make them available from a single import point.
"""

from app.services.report import ReportService
from app.services.report_registry import ReportRegistry
from app.services.notifications import ReportBroadcaster, ReportNotifier

__all__ = ["ReportService", "ReportRegistry", "ReportBroadcaster", "ReportNotifier"]
