"""
Models package initialization.

This module imports all models to ensure they are registered with SQLAlchemy.
"""

from app.models.base import Base

from app.models.budget import Budget
from app.models.transaction import Transaction, TransactionType
from app.models.report import Report


__all__ = [
    "Base",
    "Budget",
    "Transaction",
    "TransactionType",
    "Report",
]
