"""
Configuration for pytest.

This module provides fixtures and configuration for running tests.
"""

import os
import tempfile

# Settings are read at import time
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("REPORTS_DIR", tempfile.mkdtemp(prefix="taxpal-reports-"))

from decimal import Decimal
from typing import Any, Dict, List, Tuple

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.deps import get_notifier, get_report_storage
from app.db.session import get_db
from app.main import app
from app.models import Base, Budget, Transaction
from app.services.report_files import ReportStorage
from app.services.report_registry import ReportRegistry

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class RecordingNotifier:
    """Notifier that keeps every event instead of broadcasting it."""

    def __init__(self):
        self.events: List[Tuple[str, Dict[str, Any]]] = []

    async def notify(self, event: str, payload: Dict[str, Any]) -> None:
        self.events.append((event, payload))

    def names(self) -> List[str]:
        return [event for event, _ in self.events]


@pytest.fixture
async def test_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine):
    """Create a test database session."""
    TestSessionLocal = sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )
    async with TestSessionLocal() as session:
        yield session
        await session.rollback()


@pytest.fixture
def report_storage(tmp_path) -> ReportStorage:
    return ReportStorage(directory=tmp_path / "reports", url_path="/reports")


@pytest.fixture
def recording_notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def registry(db_session, recording_notifier, report_storage) -> ReportRegistry:
    return ReportRegistry(db_session, recording_notifier, report_storage)


@pytest.fixture
def make_transaction(db_session):
    """Insert a transaction; keyword arguments override the defaults."""
    async def _make(**overrides) -> Transaction:
        values = {
            "type": "expense",
            "category": "Food",
            "amount": Decimal("-25.00"),
            "description": "Groceries",
            "account": "Checking",
        }
        values.update(overrides)
        transaction = Transaction(**values)
        db_session.add(transaction)
        await db_session.commit()
        await db_session.refresh(transaction)
        return transaction
    return _make


@pytest.fixture
def make_budget(db_session):
    """Insert a budget; keyword arguments override the defaults."""
    async def _make(**overrides) -> Budget:
        values = {
            "title": "Monthly food",
            "category": "Food",
            "limit": Decimal("500.00"),
            "spent": Decimal("120.00"),
        }
        values.update(overrides)
        budget = Budget(**values)
        db_session.add(budget)
        await db_session.commit()
        await db_session.refresh(budget)
        return budget
    return _make


@pytest.fixture
async def async_client(db_session, recording_notifier, report_storage):
    """Create an async test client wired to the test database and storage."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: recording_notifier
    app.dependency_overrides[get_report_storage] = lambda: report_storage

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
