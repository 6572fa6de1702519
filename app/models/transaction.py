"""
Transaction model for the personal finance system.

This module defines the SQLAlchemy model for transactions. The report
pipeline only reads them; amounts are signed and may disagree with the
declared type.
"""

from datetime import datetime
from enum import Enum as PyEnum
import uuid

from sqlalchemy import Boolean, Column, DateTime, Numeric, String, Uuid

from app.models.base import Base


class TransactionType(str, PyEnum):
    """Enumeration of transaction types."""

    INCOME = "income"
    EXPENSE = "expense"


class Transaction(Base):
    """
    Transaction model representing a single income or expense entry.

    ``is_deleted`` marks soft-deleted rows, which stay in the table but are
    left out of rendered reports.
    """

    __tablename__ = "transactions"

    id = Column(Uuid(as_uuid=True), primary_key=True, nullable=False, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), nullable=True, index=True)
    type = Column(String(20), nullable=False)
    category = Column(String(100), nullable=True)
    amount = Column(Numeric(15, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="INR")
    date = Column(DateTime(timezone=False), nullable=True, default=datetime.now)
    description = Column(String(255), nullable=True)
    note = Column(String(255), nullable=True)
    account = Column(String(100), nullable=True)
    is_deleted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=False), nullable=False, default=datetime.now)

    def __repr__(self) -> str:
        """String representation of the Transaction model."""
        return (
            f"<Transaction(id={self.id}, type='{self.type}', "
            f"category='{self.category}', amount={self.amount})>"
        )
