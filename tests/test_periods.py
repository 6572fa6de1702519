"""
Tests for report period resolution.
"""

from datetime import datetime, time

import pytest

from app.services.periods import DateRange, ReportPeriod, resolve_period

NOW = datetime(2024, 5, 20, 14, 30, 15, 123456)
END_OF_DAY = time(23, 59, 59, 999000)


def test_this_month():
    """Test this_month spans the whole current month."""
    result = resolve_period("this_month", now=datetime(2024, 2, 15, 10, 30))

    assert result == DateRange(
        start=datetime(2024, 2, 1),
        end=datetime(2024, 2, 29, 23, 59, 59, 999000),
    )


def test_last_month_rolls_back_year_in_january():
    """Test last_month from January lands in December of the previous year."""
    result = resolve_period("last_month", now=datetime(2024, 1, 10))

    assert result.start == datetime(2023, 12, 1)
    assert result.end == datetime(2023, 12, 31, 23, 59, 59, 999000)


def test_last_month_mid_year():
    result = resolve_period("last_month", now=NOW)

    assert result.start == datetime(2024, 4, 1)
    assert result.end == datetime(2024, 4, 30, 23, 59, 59, 999000)


def test_this_quarter():
    """Test this_quarter covers the three-month block containing now."""
    result = resolve_period("this_quarter", now=NOW)

    assert result.start == datetime(2024, 4, 1)
    assert result.end == datetime(2024, 6, 30, 23, 59, 59, 999000)


def test_this_quarter_last_block_of_year():
    result = resolve_period("this_quarter", now=datetime(2024, 12, 31, 23, 0))

    assert result.start == datetime(2024, 10, 1)
    assert result.end == datetime(2024, 12, 31, 23, 59, 59, 999000)


def test_last_quarter_rolls_back_year():
    """Test last_quarter from Q1 is Q4 of the previous year."""
    result = resolve_period("last_quarter", now=datetime(2024, 2, 1))

    assert result.start == datetime(2023, 10, 1)
    assert result.end == datetime(2023, 12, 31, 23, 59, 59, 999000)


def test_last_quarter_mid_year():
    result = resolve_period("last_quarter", now=NOW)

    assert result.start == datetime(2024, 1, 1)
    assert result.end == datetime(2024, 3, 31, 23, 59, 59, 999000)


def test_ytd_ends_now():
    """Test ytd ends at the reference instant, not at the end of today."""
    result = resolve_period("ytd", now=NOW)

    assert result.start == datetime(2024, 1, 1)
    assert result.end == NOW


def test_custom_single_day():
    """Test a custom range with equal bounds spans exactly that day."""
    result = resolve_period("custom", "2024-02-10", "2024-02-10", now=NOW)

    assert result.start == datetime(2024, 2, 10, 0, 0, 0, 0)
    assert result.end == datetime(2024, 2, 10, 23, 59, 59, 999000)


@pytest.mark.parametrize("from_date,to_date", [
    (None, None),
    ("2024-02-10", None),
    (None, "2024-02-10"),
    ("", "2024-02-10"),
])
def test_custom_requires_both_bounds(from_date, to_date):
    assert resolve_period("custom", from_date, to_date, now=NOW) is None


def test_custom_rejects_unparseable_dates():
    assert resolve_period("custom", "not-a-date", "2024-02-10", now=NOW) is None


@pytest.mark.parametrize("period", ["nonsense", "", "THIS_MONTH", "weekly"])
def test_unknown_period(period):
    assert resolve_period(period, now=NOW) is None


@pytest.mark.parametrize("period", [p.value for p in ReportPeriod])
@pytest.mark.parametrize("now", [
    datetime(2024, 1, 1, 0, 0),
    datetime(2024, 3, 31, 12, 0),
    datetime(2023, 11, 5, 8, 45),
    NOW,
])
def test_resolved_ranges_are_well_formed(period, now):
    """Test every valid token yields ordered, day-aligned bounds."""
    result = resolve_period(period, "2024-02-01", "2024-02-29", now=now)

    assert result is not None
    assert result.start <= result.end
    assert result.start.time() == time.min
    if period == ReportPeriod.YTD.value:
        assert result.end == now
    else:
        assert result.end.time() == END_OF_DAY


def test_defaults_to_current_time():
    before = datetime.now()
    result = resolve_period("ytd")
    after = datetime.now()

    assert before <= result.end <= after
    assert result.start == datetime(result.end.year, 1, 1)
