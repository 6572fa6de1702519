"""
Data fetching for generated reports.

Each report type is registered once in ``REPORT_DEFINITIONS`` with the query
that feeds it, the way its rows are normalized before rendering, and the
fields written to CSV and PDF output. Adding a report type means adding an
enum member and one definition.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import logger
from app.models.budget import Budget
from app.models.transaction import Transaction, TransactionType
from app.services.periods import DateRange
from app.utils import model_to_dict

Row = Dict[str, Any]


class ReportType(str, Enum):
    """Report shapes the pipeline can produce."""

    TRANSACTIONS = "transactions"
    BUDGETS = "budgets"
    TAX = "tax"
    INCOME_STATEMENT = "income_statement"
    BALANCE_SHEET = "balance_sheet"


@dataclass
class ReportData:
    """Rows to render plus the summary snapshot stored with the report."""

    rows: List[Row] = field(default_factory=list)
    summary: Dict[str, Any] = field(default_factory=dict)
    # Loaded for the summary only, never rendered
    extras: Dict[str, List[Row]] = field(default_factory=dict)


FetchHandler = Callable[[AsyncSession, DateRange], Awaitable[ReportData]]
RowNormalizer = Callable[[ReportData], List[Row]]


@dataclass(frozen=True)
class ReportDefinition:
    """Everything type-specific about one report."""

    fetch: FetchHandler
    normalize: RowNormalizer
    csv_fields: Optional[Sequence[str]] = None
    pdf_columns: Optional[Sequence[str]] = None


def _in_range(model, date_range: DateRange):
    """Match on either the domain date or the creation timestamp."""
    return or_(
        and_(model.created_at >= date_range.start, model.created_at <= date_range.end),
        and_(model.date >= date_range.start, model.date <= date_range.end),
    )


async def _find_transactions(db: AsyncSession, date_range: DateRange) -> List[Row]:
    result = await db.execute(
        select(Transaction)
        .where(_in_range(Transaction, date_range))
        .order_by(Transaction.created_at.desc())
    )
    return [model_to_dict(tx) for tx in result.scalars().all()]


async def _find_budgets(db: AsyncSession, date_range: Optional[DateRange] = None) -> List[Row]:
    query = select(Budget).order_by(Budget.created_at.desc())
    if date_range is not None:
        query = query.where(_in_range(Budget, date_range))
    result = await db.execute(query)
    return [model_to_dict(budget) for budget in result.scalars().all()]


def _amount(row: Row) -> float:
    return float(row.get("amount") or 0)


def is_income_like(row: Row) -> bool:
    """A row counts as income if declared so, or if its amount is positive."""
    return row.get("type") == TransactionType.INCOME.value or _amount(row) > 0


async def _fetch_transactions(db: AsyncSession, date_range: DateRange) -> ReportData:
    rows = await _find_transactions(db, date_range)
    return ReportData(rows=rows, summary={"count": len(rows)})


async def _fetch_budgets(db: AsyncSession, date_range: DateRange) -> ReportData:
    rows = await _find_budgets(db, date_range)
    return ReportData(rows=rows, summary={"count": len(rows)})


async def _fetch_tax(db: AsyncSession, date_range: DateRange) -> ReportData:
    rows = await _find_transactions(db, date_range)
    total_income = 0.0
    total_expense = 0.0
    for row in rows:
        if is_income_like(row):
            total_income += abs(_amount(row))
        else:
            total_expense += abs(_amount(row))
    return ReportData(
        rows=rows,
        summary={
            "totalIncome": total_income,
            "totalExpense": total_expense,
            "taxable": max(0.0, total_income - total_expense),
        },
    )


async def _fetch_income_statement(db: AsyncSession, date_range: DateRange) -> ReportData:
    rows = await _find_transactions(db, date_range)
    revenue = 0.0
    expenses = 0.0
    by_category: Dict[str, float] = {}
    for row in rows:
        amount = _amount(row)
        if is_income_like(row):
            revenue += abs(amount)
        else:
            expenses += abs(amount)
        category = row.get("category") or "Uncategorized"
        by_category[category] = by_category.get(category, 0.0) + amount
    return ReportData(
        rows=rows,
        summary={
            "revenue": revenue,
            "expenses": expenses,
            "net": revenue - expenses,
            "byCategory": by_category,
        },
    )


async def _fetch_balance_sheet(db: AsyncSession, date_range: DateRange) -> ReportData:
    rows = await _find_transactions(db, date_range)
    cash = 0.0
    for row in rows:
        amount = abs(_amount(row))
        cash += amount if is_income_like(row) else -amount
    budgets = await _find_budgets(db)
    # liabilities are not tracked yet
    return ReportData(
        rows=rows,
        summary={"cash": cash, "liabilities": 0, "assets": cash},
        extras={"budgets": budgets},
    )


def _drop_soft_deleted(data: ReportData) -> List[Row]:
    return [row for row in data.rows if not row.get("is_deleted")]


def _summary_only(data: ReportData) -> List[Row]:
    return [dict(data.summary)]


def _pass_through(data: ReportData) -> List[Row]:
    return list(data.rows)


TRANSACTION_FIELDS = ("date", "amount", "type", "category", "description")
BUDGET_FIELDS = ("title", "limit", "spent", "category")

REPORT_DEFINITIONS: Dict[ReportType, ReportDefinition] = {
    ReportType.TRANSACTIONS: ReportDefinition(
        fetch=_fetch_transactions,
        normalize=_drop_soft_deleted,
        csv_fields=TRANSACTION_FIELDS + ("account",),
        pdf_columns=TRANSACTION_FIELDS,
    ),
    ReportType.BUDGETS: ReportDefinition(
        fetch=_fetch_budgets,
        normalize=_pass_through,
        csv_fields=BUDGET_FIELDS,
        pdf_columns=BUDGET_FIELDS,
    ),
    ReportType.TAX: ReportDefinition(
        fetch=_fetch_tax,
        normalize=_drop_soft_deleted,
        csv_fields=TRANSACTION_FIELDS,
        pdf_columns=TRANSACTION_FIELDS,
    ),
    ReportType.INCOME_STATEMENT: ReportDefinition(
        fetch=_fetch_income_statement,
        normalize=_drop_soft_deleted,
        csv_fields=TRANSACTION_FIELDS,
        pdf_columns=TRANSACTION_FIELDS,
    ),
    ReportType.BALANCE_SHEET: ReportDefinition(
        fetch=_fetch_balance_sheet,
        normalize=_summary_only,
    ),
}


def get_report_definition(report_type: str) -> Optional[ReportDefinition]:
    try:
        return REPORT_DEFINITIONS[ReportType(report_type)]
    except ValueError:
        return None


async def fetch_report_data(
    db: AsyncSession,
    report_type: str,
    date_range: DateRange,
) -> ReportData:
    """
    Query and summarize the records a report covers.

    Args:
        db: Database session
        report_type: One of ``ReportType``; anything else yields empty data
        date_range: Inclusive bounds matched against ``date`` or ``created_at``

    Returns:
        Raw rows and summary
    """
    definition = get_report_definition(report_type)
    if definition is None:
        logger.warning(f"No report definition for type: {report_type!r}")
        return ReportData()

    logger.info(
        f"Fetching {report_type} report data from {date_range.start.isoformat()} "
        f"to {date_range.end.isoformat()}"
    )
    data = await definition.fetch(db, date_range)
    logger.debug(f"Fetched {len(data.rows)} rows for {report_type} report")
    return data


def normalize_rows(report_type: str, data: ReportData) -> List[Row]:
    """Rows as they should be rendered for ``report_type``."""
    definition = get_report_definition(report_type)
    if definition is None:
        return list(data.rows)
    return definition.normalize(data)
