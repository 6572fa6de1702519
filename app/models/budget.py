"""
Budget model for the personal finance system.

This module defines the SQLAlchemy model for budgets, which cap spending
for a category over a month.
"""

from datetime import datetime
from decimal import Decimal
import uuid

from sqlalchemy import Column, DateTime, Numeric, String, Uuid

from app.models.base import Base


class Budget(Base):
    """
    Budget model representing a spending limit for a category.
    """

    __tablename__ = "budgets"

    id = Column(Uuid(as_uuid=True), primary_key=True, nullable=False, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), nullable=True, index=True)
    title = Column(String(100), nullable=True)
    category = Column(String(100), nullable=False)
    limit = Column("limit", Numeric(15, 2), nullable=False)
    spent = Column(Numeric(15, 2), nullable=False, default=Decimal("0.00"))
    date = Column(DateTime(timezone=False), nullable=True, default=datetime.now)
    description = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=False), nullable=False, default=datetime.now)
    updated_at = Column(DateTime(timezone=False), nullable=True, onupdate=datetime.now)

    def __repr__(self) -> str:
        """String representation of the Budget model."""
        return (
            f"<Budget(id={self.id}, category='{self.category}', "
            f"limit={self.limit}, spent={self.spent})>"
        )
