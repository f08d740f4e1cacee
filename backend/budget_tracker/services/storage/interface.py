"""
Abstract record store interface.

Two backends implement it: a Supabase (PostgREST) store where row-level
security scopes every row to its owner server side, and a local key-value
store used in developer mode where owner scoping happens in Python.
Consumers depend only on this interface; the concrete backend is chosen
once at startup by ``create_record_store``.
"""

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import List, Optional

from budget_tracker.schemas.category import Category
from budget_tracker.schemas.transaction import Transaction


def new_record_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def prepare_category_insert(category: Category) -> Category:
    """Assign id and creation timestamp to a category about to be inserted."""
    return category.model_copy(update={"id": new_record_id(), "created_at": utcnow()})


def prepare_transaction_insert(transaction: Transaction) -> Transaction:
    """Assign an id; keep a user-supplied transaction date, else stamp now."""
    return transaction.model_copy(update={
        "id": new_record_id(),
        "created_at": transaction.created_at or utcnow(),
    })


class RecordStore(ABC):
    """
    CRUD persistence for categories and transactions, scoped by owner.

    All failures of the underlying medium surface as ``PersistenceError``.
    Updates and deletes of ids that don't exist are no-ops.
    """

    backend_name = "abstract"

    @abstractmethod
    async def list_categories(self, owner_id: str) -> List[Category]:
        """Return the owner's categories, newest first."""

    @abstractmethod
    async def save_category(self, category: Category) -> Category:
        """
        Insert the category when its id is empty, otherwise replace the
        stored record with that id. ``created_at`` never changes on update.
        """

    @abstractmethod
    async def delete_category(self, category_id: str) -> None:
        """
        Delete a category and clear ``category_id`` on every transaction of
        the same owner that referenced it.
        """

    @abstractmethod
    async def list_transactions(self, owner_id: str) -> List[Transaction]:
        """Return the owner's transactions ordered by ``created_at`` descending."""

    @abstractmethod
    async def save_transaction(self, transaction: Transaction) -> Transaction:
        """Insert-or-replace with the same semantics as ``save_category``."""

    @abstractmethod
    async def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction. Deleting a missing id does nothing."""

    def bind(self, access_token: Optional[str]) -> "RecordStore":
        """Return a store acting on behalf of the caller holding ``access_token``."""
        return self

    async def aclose(self) -> None:
        """Release any held resources."""
