"""
Data service: the application boundary over the record store.

Validates input, stamps ownership, delegates to whichever record store was
chosen at startup and publishes a notification for every mutation. When a
mutation fails nothing is published and the caller's state is left alone.
"""

import logging
from typing import List, Optional, Tuple

from budget_tracker.config import Settings
from budget_tracker.errors import PersistenceError, ValidationError
from budget_tracker.schemas.category import Category, CategoryCreate, EntryType
from budget_tracker.schemas.dashboard import (
    BudgetStatus,
    CategoryChartEntry,
    DashboardSummary,
    MonthTrend,
    Timeframe,
)
from budget_tracker.schemas.transaction import Transaction, TransactionCreate
from budget_tracker.services import aggregation_service, history_service
from budget_tracker.services.dashboard_cache import DashboardCache
from budget_tracker.services.event_bus import Events, NotificationBus
from budget_tracker.services.storage import RecordStore

logger = logging.getLogger(__name__)


class DataService:
    """Category/transaction operations for one application instance."""

    def __init__(
        self,
        store: RecordStore,
        bus: NotificationBus,
        settings: Settings,
        cache: Optional[DashboardCache] = None,
    ):
        self.store = store
        self.bus = bus
        self.settings = settings
        self.cache = cache

    # Validation

    def validate_category(self, payload: CategoryCreate) -> None:
        if not payload.name or not payload.name.strip():
            raise ValidationError("Category name is required", field="name")
        if payload.budget_limit is not None and (not payload.budget_limit.is_finite() or payload.budget_limit < 0):
            raise ValidationError("Budget limit must be a finite number, 0 or more", field="budget_limit")

    async def validate_transaction(self, owner_id: str, payload: TransactionCreate) -> str:
        """Check a transaction payload; returns the normalized currency code."""
        if not payload.description or not payload.description.strip():
            raise ValidationError("Description is required", field="description")
        if payload.amount is None or not payload.amount.is_finite() or payload.amount <= 0:
            raise ValidationError("Amount must be greater than 0", field="amount")

        currency = (payload.currency or self.settings.default_currency).strip().upper()
        if currency not in self.settings.supported_currencies:
            raise ValidationError(f"Unsupported currency: {currency}", field="currency")

        if payload.category_id:
            categories = await self.store.list_categories(owner_id)
            category = next((c for c in categories if c.id == payload.category_id), None)
            if category is None:
                raise ValidationError("Category not found", field="category_id")
            if category.kind != payload.type:
                raise ValidationError(
                    f"A {payload.type.value} transaction can't use a {category.kind.value} category",
                    field="category_id",
                )

        return currency

    # Categories

    async def list_categories(self, owner_id: str) -> List[Category]:
        return await self.store.list_categories(owner_id)

    async def save_category(
        self,
        owner_id: str,
        payload: CategoryCreate,
        category_id: Optional[str] = None
    ) -> Optional[Category]:
        """
        Create a category, or replace the one with ``category_id``.

        Returns None, without publishing, when ``category_id`` is not one of
        the owner's categories. A category's type can't change while
        transactions still reference it.
        """
        self.validate_category(payload)

        if category_id:
            categories = await self.store.list_categories(owner_id)
            existing = next((c for c in categories if c.id == category_id), None)
            if existing is None:
                logger.info(f"Category {category_id} not found for {owner_id}, nothing to update")
                return None
            if existing.kind != payload.type:
                transactions = await self.store.list_transactions(owner_id)
                if any(t.category_id == category_id for t in transactions):
                    raise ValidationError(
                        "Can't change the type of a category that has transactions",
                        field="type",
                    )

        category = Category(
            id=category_id or "",
            name=payload.name.strip(),
            kind=payload.type,
            budget_limit=payload.budget_limit,
            owner_id=owner_id,
        )
        saved = await self.store.save_category(category)

        self.bus.publish(Events.CATEGORY_UPDATED if category_id else Events.CATEGORY_CREATED, saved)
        return saved

    async def delete_category(self, owner_id: str, category_id: str) -> bool:
        """Delete an owned category. Returns False when there was nothing to delete."""
        categories = await self.store.list_categories(owner_id)
        if not any(c.id == category_id for c in categories):
            logger.info(f"Category {category_id} not found for {owner_id}, nothing to delete")
            return False

        await self.store.delete_category(category_id)
        self.bus.publish(Events.CATEGORY_DELETED, category_id)
        return True

    # Transactions

    async def list_transactions(
        self,
        owner_id: str,
        kind: Optional[EntryType] = None,
        search: Optional[str] = None,
        sort_by: str = "date",
        order: str = "desc",
    ) -> List[Transaction]:
        transactions = await self.store.list_transactions(owner_id)
        if kind is None and not search and sort_by == "date" and order == "desc":
            return transactions

        categories = await self.store.list_categories(owner_id) if search else []
        return history_service.filter_transactions(
            transactions,
            categories,
            kind=kind,
            search=search,
            sort_by=sort_by,
            order=order,
        )

    async def save_transaction(
        self,
        owner_id: str,
        payload: TransactionCreate,
        transaction_id: Optional[str] = None
    ) -> Optional[Transaction]:
        """
        Create a transaction, or replace the one with ``transaction_id``.

        Returns None, without publishing, when ``transaction_id`` is not one
        of the owner's transactions.
        """
        currency = await self.validate_transaction(owner_id, payload)

        if transaction_id:
            transactions = await self.store.list_transactions(owner_id)
            if not any(t.id == transaction_id for t in transactions):
                logger.info(f"Transaction {transaction_id} not found for {owner_id}, nothing to update")
                return None

        transaction = Transaction(
            id=transaction_id or "",
            description=payload.description.strip(),
            amount=payload.amount,
            kind=payload.type,
            currency=currency,
            category_id=payload.category_id or None,
            owner_id=owner_id,
            created_at=payload.created_at,
        )
        saved = await self.store.save_transaction(transaction)

        self.bus.publish(Events.TRANSACTION_UPDATED if transaction_id else Events.TRANSACTION_CREATED, saved)
        return saved

    async def delete_transaction(self, owner_id: str, transaction_id: str) -> bool:
        """Delete an owned transaction. Returns False when there was nothing to delete."""
        transactions = await self.store.list_transactions(owner_id)
        if not any(t.id == transaction_id for t in transactions):
            logger.info(f"Transaction {transaction_id} not found for {owner_id}, nothing to delete")
            return False

        await self.store.delete_transaction(transaction_id)
        self.bus.publish(Events.TRANSACTION_DELETED, transaction_id)
        return True

    # Dashboard

    async def load_snapshot(self, owner_id: str) -> Tuple[List[Category], List[Transaction], bool]:
        """
        Fetch both collections for aggregation.

        A failed fetch is logged and replaced by an empty list so the
        dashboard can still be computed. The flag reports whether both
        fetches succeeded.
        """
        complete = True
        try:
            categories = await self.store.list_categories(owner_id)
        except PersistenceError as e:
            logger.error(f"Error fetching categories: {e}")
            categories, complete = [], False
        try:
            transactions = await self.store.list_transactions(owner_id)
        except PersistenceError as e:
            logger.error(f"Error fetching transactions: {e}")
            transactions, complete = [], False
        return categories, transactions, complete

    async def get_dashboard(self, owner_id: str, timeframe: Timeframe = Timeframe.all) -> DashboardSummary:
        use_cache = self.cache is not None and timeframe == Timeframe.all
        if use_cache:
            cached = self.cache.get(owner_id)
            if cached is not None:
                return cached
            generation = self.cache.generation

        categories, transactions, complete = await self.load_snapshot(owner_id)
        transactions = aggregation_service.filter_by_timeframe(transactions, timeframe)
        summary = aggregation_service.compute_dashboard(
            categories,
            transactions,
            recent_limit=self.settings.recent_transactions_limit,
        )

        if use_cache and complete:
            self.cache.put(owner_id, summary, generation=generation)
        return summary

    async def get_monthly_trend(
        self,
        owner_id: str,
        currency: Optional[str] = None,
        months: Optional[int] = None
    ) -> List[MonthTrend]:
        _, transactions, _ = await self.load_snapshot(owner_id)
        return aggregation_service.monthly_trend(
            transactions,
            currency or self.settings.default_currency,
            months or self.settings.trend_months,
        )

    async def get_category_chart(
        self,
        owner_id: str,
        kind: EntryType,
        currency: Optional[str] = None
    ) -> List[CategoryChartEntry]:
        categories, transactions, _ = await self.load_snapshot(owner_id)
        return aggregation_service.category_chart(
            categories,
            transactions,
            kind,
            currency or self.settings.default_currency,
        )

    async def get_budget_status(self, owner_id: str) -> List[BudgetStatus]:
        categories, transactions, _ = await self.load_snapshot(owner_id)
        return aggregation_service.budget_status(categories, transactions)
