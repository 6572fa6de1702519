"""
Report period resolution.

Turns a named period token (``this_month``, ``ytd``, ...) or an explicit
custom range into concrete inclusive datetime bounds in local time.
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Optional

from app.core.logging import logger


class ReportPeriod(str, Enum):
    """Named periods a report can cover."""

    THIS_MONTH = "this_month"
    LAST_MONTH = "last_month"
    THIS_QUARTER = "this_quarter"
    LAST_QUARTER = "last_quarter"
    YTD = "ytd"
    CUSTOM = "custom"


@dataclass(frozen=True)
class DateRange:
    """Inclusive ``[start, end]`` bounds."""

    start: datetime
    end: datetime


END_OF_DAY = time(23, 59, 59, 999000)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, END_OF_DAY)


def _month_span(year: int, month: int, months: int = 1) -> DateRange:
    """Range covering ``months`` calendar months starting at ``year``/``month`` (1-based)."""
    last_month_index = month - 1 + months - 1
    end_year = year + last_month_index // 12
    end_month = last_month_index % 12 + 1
    last_day = calendar.monthrange(end_year, end_month)[1]
    return DateRange(
        start=start_of_day(date(year, month, 1)),
        end=end_of_day(date(end_year, end_month, last_day)),
    )


def _parse_day(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def resolve_period(
    period: str,
    from_date: Optional[str] = None,
    to_date: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Optional[DateRange]:
    """
    Resolve a period token to a date range.

    Args:
        period: Period token, see ``ReportPeriod``
        from_date: Custom range start (``YYYY-MM-DD``), custom periods only
        to_date: Custom range end (``YYYY-MM-DD``), custom periods only
        now: Reference instant, defaults to the current local time

    Returns:
        The resolved range, or None for unknown tokens and incomplete or
        unparseable custom ranges
    """
    now = now or datetime.now()
    year, month = now.year, now.month

    try:
        token = ReportPeriod(period)
    except ValueError:
        logger.debug(f"Unknown report period: {period!r}")
        return None

    if token is ReportPeriod.THIS_MONTH:
        return _month_span(year, month)

    if token is ReportPeriod.LAST_MONTH:
        if month == 1:
            return _month_span(year - 1, 12)
        return _month_span(year, month - 1)

    if token is ReportPeriod.THIS_QUARTER:
        quarter_start = (month - 1) // 3 * 3
        return _month_span(year, quarter_start + 1, months=3)

    if token is ReportPeriod.LAST_QUARTER:
        quarter_start = (month - 1) // 3 * 3 - 3
        quarter_year = year - 1 if quarter_start < 0 else year
        quarter_month = quarter_start + 12 if quarter_start < 0 else quarter_start
        return _month_span(quarter_year, quarter_month + 1, months=3)

    if token is ReportPeriod.YTD:
        return DateRange(start=start_of_day(date(year, 1, 1)), end=now)

    # custom
    if not from_date or not to_date:
        return None
    first, last = _parse_day(from_date), _parse_day(to_date)
    if first is None or last is None:
        logger.debug(f"Unparseable custom range: {from_date!r} to {to_date!r}")
        return None
    return DateRange(start=start_of_day(first), end=end_of_day(last))
