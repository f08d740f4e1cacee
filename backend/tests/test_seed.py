"""Tests for developer-mode demo data."""

import asyncio

from budget_tracker.seed import seed_demo_data


def test_seed_creates_demo_data(data_service):
    """Seeding an empty owner creates the sample categories and transactions."""
    created = asyncio.run(seed_demo_data(data_service, "dev-user-id"))

    assert created == 5
    categories = asyncio.run(data_service.list_categories("dev-user-id"))
    transactions = asyncio.run(data_service.list_transactions("dev-user-id"))
    assert {c.name for c in categories} == {"Salary", "Side Hustle", "Housing", "Food", "Utilities"}
    assert len(transactions) == 5
    assert all(t.category_id for t in transactions)

    summary = asyncio.run(data_service.get_dashboard("dev-user-id"))
    assert summary.balance == 3000 + 500 - 1200 - 250 - 60


def test_seed_skips_existing_data(data_service):
    asyncio.run(seed_demo_data(data_service, "dev-user-id"))

    assert asyncio.run(seed_demo_data(data_service, "dev-user-id")) == 0
    assert len(asyncio.run(data_service.list_transactions("dev-user-id"))) == 5
