"""
Seed script for developer-mode demo data.
"""

import asyncio
import logging

from budget_tracker.errors import PersistenceError
from budget_tracker.schemas.category import CategoryCreate, EntryType
from budget_tracker.schemas.transaction import TransactionCreate
from budget_tracker.services.data_service import DataService

logger = logging.getLogger(__name__)


async def seed_demo_data(service: DataService, owner_id: str) -> int:
    """
    Seed sample categories and transactions for ``owner_id``.

    Does nothing if the owner already has categories. Returns the number of
    transactions created.
    """
    try:
        existing = await service.list_categories(owner_id)
        if existing:
            logger.info(f"Demo data already present ({len(existing)} categories exist)")
            return 0

        categories_data = [
            {"name": "Salary", "type": EntryType.income, "budget_limit": None},
            {"name": "Side Hustle", "type": EntryType.income, "budget_limit": None},
            {"name": "Housing", "type": EntryType.expense, "budget_limit": 1500},
            {"name": "Food", "type": EntryType.expense, "budget_limit": 400},
            {"name": "Utilities", "type": EntryType.expense, "budget_limit": 200},
        ]

        category_ids = {}
        for cat_data in categories_data:
            category = await service.save_category(owner_id, CategoryCreate(**cat_data))
            category_ids[category.name] = category.id

        transactions_data = [
            ("Salary", 3000, EntryType.income, "Salary"),
            ("Rent", 1200, EntryType.expense, "Housing"),
            ("Groceries", 250, EntryType.expense, "Food"),
            ("Freelance Work", 500, EntryType.income, "Side Hustle"),
            ("Internet Bill", 60, EntryType.expense, "Utilities"),
        ]

        for description, amount, kind, category_name in transactions_data:
            await service.save_transaction(owner_id, TransactionCreate(
                description=description,
                amount=amount,
                type=kind,
                currency=service.settings.default_currency,
                category_id=category_ids[category_name],
            ))

        logger.info(
            f"Seeded {len(categories_data)} categories and {len(transactions_data)} transactions for {owner_id}"
        )
        return len(transactions_data)

    except PersistenceError as e:
        logger.error(f"Error seeding demo data: {e}")
        return 0


async def _main():
    from budget_tracker.config import settings
    from budget_tracker.context import build_context

    context = build_context(settings)
    try:
        await seed_demo_data(context.data_service(), settings.dev_user_id)
    finally:
        await context.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(_main())
