"""Shared test fixtures."""

import asyncio
import pytest
from datetime import datetime, timezone
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from budget_tracker.config import Settings
from budget_tracker.context import build_context
from budget_tracker.database import Base
from budget_tracker.main import app
from budget_tracker.models.local_entry import LocalEntry  # noqa: F401
from budget_tracker.schemas.category import Category, EntryType
from budget_tracker.schemas.transaction import Transaction
from budget_tracker.services.event_bus import NotificationBus
from budget_tracker.services.storage import LocalRecordStore

OWNER_ID = "dev-user-id"


@pytest.fixture(scope="function")
def session_factory():
    """Create a fresh local storage database for each test using in-memory SQLite."""
    # Use StaticPool to ensure all connections use the same in-memory database
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    try:
        yield factory
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def test_settings():
    """Local-mode settings that ignore any .env file."""
    return Settings(
        _env_file=None,
        supabase_url=None,
        supabase_anon_key=None,
        dev_user_id=OWNER_ID,
    )


@pytest.fixture
def local_store(session_factory):
    return LocalRecordStore(session_factory, namespace="test_finance")


@pytest.fixture
def bus():
    notification_bus = NotificationBus()
    yield notification_bus
    notification_bus.clear_all()


@pytest.fixture
def context(test_settings, session_factory):
    ctx = build_context(test_settings, session_factory=session_factory)
    yield ctx
    asyncio.run(ctx.close())


@pytest.fixture
def data_service(context):
    return context.data_service()


@pytest.fixture(scope="function")
def client(context):
    """Create a test client bound to the local test context."""
    app.state.context = context
    with TestClient(app) as test_client:
        yield test_client
    app.state.context = None


@pytest.fixture
def sample_category(context):
    """Create a sample expense category with a budget."""
    category = Category(
        name="Food",
        kind=EntryType.expense,
        budget_limit=400,
        owner_id=OWNER_ID,
    )
    return asyncio.run(context.store.save_category(category))


@pytest.fixture
def sample_transaction(context, sample_category):
    """Create a sample expense in the sample category."""
    txn = Transaction(
        description="Groceries",
        amount=100,
        kind=EntryType.expense,
        currency="USD",
        category_id=sample_category.id,
        owner_id=OWNER_ID,
        created_at=datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc),
    )
    return asyncio.run(context.store.save_transaction(txn))

