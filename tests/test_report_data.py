"""
Tests for report data fetching and row normalization.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from app.services.periods import DateRange, resolve_period
from app.services.report_data import (
    REPORT_DEFINITIONS,
    ReportData,
    ReportType,
    fetch_report_data,
    get_report_definition,
    is_income_like,
    normalize_rows,
)

LONG_AGO = datetime(2000, 1, 15, 12, 0)
FEBRUARY = DateRange(start=datetime(2024, 2, 1), end=datetime(2024, 2, 29, 23, 59, 59, 999000))
IN_FEBRUARY = datetime(2024, 2, 10, 9, 0)


@pytest.fixture
def this_month() -> DateRange:
    return resolve_period("this_month")


@pytest.mark.asyncio
@pytest.mark.parametrize("report_type,summary", [
    ("transactions", {"count": 0}),
    ("budgets", {"count": 0}),
    ("tax", {"totalIncome": 0.0, "totalExpense": 0.0, "taxable": 0.0}),
    ("income_statement", {"revenue": 0.0, "expenses": 0.0, "net": 0.0, "byCategory": {}}),
    ("balance_sheet", {"cash": 0.0, "liabilities": 0, "assets": 0.0}),
])
async def test_empty_database_gives_zero_summaries(db_session, this_month, report_type, summary):
    data = await fetch_report_data(db_session, report_type, this_month)

    assert data.rows == []
    assert data.summary == summary


@pytest.mark.asyncio
async def test_transactions_inside_range_only(db_session, make_transaction, this_month):
    """Test rows outside the range on both date columns are excluded."""
    kept = await make_transaction(description="Lunch")
    await make_transaction(description="Ancient", date=LONG_AGO, created_at=LONG_AGO)

    data = await fetch_report_data(db_session, "transactions", this_month)

    assert [row["id"] for row in data.rows] == [str(kept.id)]
    assert data.summary == {"count": 1}


@pytest.mark.asyncio
async def test_either_date_column_matches(db_session, make_transaction):
    """Test a row matches when only its domain date or only its creation time is in range."""
    by_date = await make_transaction(description="By date", date=IN_FEBRUARY, created_at=LONG_AGO)
    by_created = await make_transaction(description="By created", date=LONG_AGO, created_at=IN_FEBRUARY)
    await make_transaction(description="Neither", date=LONG_AGO, created_at=LONG_AGO)

    data = await fetch_report_data(db_session, "transactions", FEBRUARY)

    assert {row["id"] for row in data.rows} == {str(by_date.id), str(by_created.id)}


@pytest.mark.asyncio
async def test_range_bounds_are_inclusive(db_session, make_transaction):
    first = await make_transaction(date=FEBRUARY.start, created_at=LONG_AGO)
    last = await make_transaction(date=FEBRUARY.end, created_at=LONG_AGO)

    data = await fetch_report_data(db_session, "transactions", FEBRUARY)

    assert {row["id"] for row in data.rows} == {str(first.id), str(last.id)}


@pytest.mark.asyncio
async def test_transactions_newest_first(db_session, make_transaction):
    await make_transaction(description="older", created_at=datetime(2024, 2, 3))
    await make_transaction(description="newer", created_at=datetime(2024, 2, 20))

    data = await fetch_report_data(db_session, "transactions", FEBRUARY)

    assert [row["description"] for row in data.rows] == ["newer", "older"]


@pytest.mark.asyncio
async def test_rows_are_plain_json_values(db_session, make_transaction, this_month):
    await make_transaction(amount=Decimal("12.50"))

    data = await fetch_report_data(db_session, "transactions", this_month)
    row = data.rows[0]

    assert row["amount"] == 12.5
    assert isinstance(row["id"], str)
    assert isinstance(row["created_at"], str)
    assert row["is_deleted"] is False


@pytest.mark.asyncio
async def test_tax_classification(db_session, make_transaction, this_month):
    """Test positive amounts count as income even when typed as expense."""
    await make_transaction(type="income", amount=Decimal("1000.00"))
    await make_transaction(type="expense", amount=Decimal("-300.00"))
    await make_transaction(type="expense", amount=Decimal("50.00"))  # refund
    await make_transaction(type="income", amount=Decimal("-20.00"))

    data = await fetch_report_data(db_session, "tax", this_month)

    assert data.summary["totalIncome"] == pytest.approx(1070.0)
    assert data.summary["totalExpense"] == pytest.approx(300.0)
    assert data.summary["taxable"] == pytest.approx(770.0)


@pytest.mark.asyncio
async def test_tax_taxable_never_negative(db_session, make_transaction, this_month):
    await make_transaction(type="income", amount=Decimal("100.00"))
    await make_transaction(type="expense", amount=Decimal("-400.00"))

    data = await fetch_report_data(db_session, "tax", this_month)

    assert data.summary["taxable"] == 0.0


@pytest.mark.asyncio
async def test_income_statement(db_session, make_transaction, this_month):
    await make_transaction(type="income", category="Salary", amount=Decimal("2000.00"))
    await make_transaction(type="expense", category="Food", amount=Decimal("-150.00"))
    await make_transaction(type="expense", category="Food", amount=Decimal("-50.00"))
    await make_transaction(type="expense", category=None, amount=Decimal("-10.00"))

    data = await fetch_report_data(db_session, "income_statement", this_month)

    assert data.summary["revenue"] == pytest.approx(2000.0)
    assert data.summary["expenses"] == pytest.approx(210.0)
    assert data.summary["net"] == pytest.approx(1790.0)
    assert data.summary["byCategory"] == {
        "Salary": pytest.approx(2000.0),
        "Food": pytest.approx(-200.0),
        "Uncategorized": pytest.approx(-10.0),
    }


@pytest.mark.asyncio
async def test_balance_sheet(db_session, make_transaction, make_budget, this_month):
    """Test cash nets income against expenses and budgets are loaded unfiltered."""
    await make_transaction(type="income", amount=Decimal("500.00"))
    await make_transaction(type="expense", amount=Decimal("-120.00"))
    await make_budget(date=LONG_AGO, created_at=LONG_AGO)

    data = await fetch_report_data(db_session, "balance_sheet", this_month)

    assert data.summary == {
        "cash": pytest.approx(380.0),
        "liabilities": 0,
        "assets": pytest.approx(380.0),
    }
    assert len(data.extras["budgets"]) == 1
    assert normalize_rows("balance_sheet", data) == [data.summary]


@pytest.mark.asyncio
async def test_budgets_filtered_by_range(db_session, make_budget, this_month):
    current = await make_budget(title="Current")
    await make_budget(title="Old", date=LONG_AGO, created_at=LONG_AGO)

    data = await fetch_report_data(db_session, "budgets", this_month)

    assert [row["title"] for row in data.rows] == ["Current"]
    assert data.rows[0]["limit"] == 500.0
    assert data.rows[0]["id"] == str(current.id)


@pytest.mark.asyncio
async def test_soft_deleted_rows_count_in_summary_but_not_in_rows(db_session, make_transaction, this_month):
    await make_transaction(type="income", amount=Decimal("100.00"))
    await make_transaction(type="income", amount=Decimal("40.00"), is_deleted=True)

    data = await fetch_report_data(db_session, "tax", this_month)
    rows = normalize_rows("tax", data)

    assert data.summary["totalIncome"] == pytest.approx(140.0)
    assert len(data.rows) == 2
    assert len(rows) == 1
    assert rows[0]["amount"] == 100.0


@pytest.mark.asyncio
async def test_unknown_type_yields_empty_data(db_session, make_transaction, this_month):
    await make_transaction()

    data = await fetch_report_data(db_session, "cash_flow", this_month)

    assert data == ReportData()


def test_every_type_has_a_definition():
    assert set(REPORT_DEFINITIONS) == set(ReportType)
    assert get_report_definition("nope") is None
    assert get_report_definition("tax") is REPORT_DEFINITIONS[ReportType.TAX]


def test_transactions_csv_includes_account():
    definition = get_report_definition("transactions")

    assert definition.csv_fields == ("date", "amount", "type", "category", "description", "account")
    assert definition.pdf_columns == ("date", "amount", "type", "category", "description")


def test_budgets_are_not_normalized():
    data = ReportData(rows=[{"title": "A", "is_deleted": True}])

    assert normalize_rows("budgets", data) == data.rows


@pytest.mark.parametrize("row,expected", [
    ({"type": "income", "amount": -5}, True),
    ({"type": "expense", "amount": 5}, True),
    ({"type": "expense", "amount": -5}, False),
    ({"type": "expense", "amount": None}, False),
    ({"type": "transfer", "amount": 0}, False),
])
def test_is_income_like(row, expected):
    assert is_income_like(row) is expected
