"""
Local key-value record store for developer mode.

Categories and transactions live as two JSON arrays under fixed,
namespaced keys (``<namespace>_categories`` / ``<namespace>_transactions``)
in the ``local_storage`` table. Every record of every user shares those two
keys, so owner filtering is done here rather than by the medium.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Callable, List, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as SchemaError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from budget_tracker.errors import PersistenceError
from budget_tracker.models.local_entry import LocalEntry
from budget_tracker.schemas.category import Category
from budget_tracker.schemas.transaction import Transaction
from budget_tracker.services.storage.interface import (
    RecordStore,
    prepare_category_insert,
    prepare_transaction_insert,
)

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class LocalRecordStore(RecordStore):
    """Record store backed by a durable key-value table."""

    backend_name = "local"

    def __init__(self, session_factory: Callable[[], Session], namespace: str = "bolt_finance"):
        self._session_factory = session_factory
        self.categories_key = f"{namespace}_categories"
        self.transactions_key = f"{namespace}_transactions"

    # Raw key-value access

    def _read(self, key: str) -> List[dict]:
        try:
            with self._session_factory() as session:
                entry = session.get(LocalEntry, key)
                if entry is None:
                    return []
                data = json.loads(entry.value)
        except SQLAlchemyError as e:
            logger.error(f"Error reading {key} from local storage: {e}")
            raise PersistenceError(f"Failed to read {key}") from e
        except ValueError as e:
            logger.error(f"Corrupt JSON under {key}: {e}")
            raise PersistenceError(f"Stored data under {key} is corrupt") from e

        if not isinstance(data, list):
            raise PersistenceError(f"Stored data under {key} is not a list")
        return data

    def _write(self, key: str, records: List[dict]) -> None:
        payload = json.dumps(records)
        try:
            with self._session_factory() as session:
                entry = session.get(LocalEntry, key)
                if entry is None:
                    session.add(LocalEntry(key=key, value=payload))
                else:
                    entry.value = payload
                session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error writing {key} to local storage: {e}")
            raise PersistenceError(f"Failed to save {key}") from e

    def _load(self, key: str, model: Type[RecordT]) -> List[RecordT]:
        try:
            return [model.model_validate(raw) for raw in self._read(key)]
        except SchemaError as e:
            logger.error(f"Invalid record under {key}: {e}")
            raise PersistenceError(f"Stored data under {key} is invalid") from e

    def _store(self, key: str, records: List[BaseModel]) -> None:
        self._write(key, [r.to_record() for r in records])

    # Categories

    async def list_categories(self, owner_id: str) -> List[Category]:
        categories = [c for c in self._load(self.categories_key, Category) if c.owner_id == owner_id]
        return sorted(categories, key=lambda c: c.created_at or _EPOCH, reverse=True)

    async def save_category(self, category: Category) -> Category:
        categories = self._load(self.categories_key, Category)

        if not category.id:
            saved = prepare_category_insert(category)
            categories.append(saved)
            self._store(self.categories_key, categories)
            return saved

        for index, existing in enumerate(categories):
            if existing.id == category.id and existing.owner_id == category.owner_id:
                saved = category.model_copy(update={"created_at": existing.created_at})
                categories[index] = saved
                self._store(self.categories_key, categories)
                return saved

        logger.warning(f"Category {category.id} not found for update, ignoring")
        return category

    async def delete_category(self, category_id: str) -> None:
        categories = self._load(self.categories_key, Category)
        target = next((c for c in categories if c.id == category_id), None)
        if target is None:
            return

        # References are cleared before the category itself is removed
        transactions = self._load(self.transactions_key, Transaction)
        cleared = 0
        for index, txn in enumerate(transactions):
            if txn.category_id == category_id and txn.owner_id == target.owner_id:
                transactions[index] = txn.model_copy(update={"category_id": None})
                cleared += 1
        if cleared:
            self._store(self.transactions_key, transactions)

        self._store(self.categories_key, [c for c in categories if c.id != category_id])
        logger.info(f"Deleted category {category_id}, cleared {cleared} transaction(s)")

    # Transactions

    async def list_transactions(self, owner_id: str) -> List[Transaction]:
        transactions = [t for t in self._load(self.transactions_key, Transaction) if t.owner_id == owner_id]
        return sorted(transactions, key=lambda t: t.created_at or _EPOCH, reverse=True)

    async def save_transaction(self, transaction: Transaction) -> Transaction:
        transactions = self._load(self.transactions_key, Transaction)

        if not transaction.id:
            saved = prepare_transaction_insert(transaction)
            transactions.append(saved)
            self._store(self.transactions_key, transactions)
            return saved

        for index, existing in enumerate(transactions):
            if existing.id == transaction.id and existing.owner_id == transaction.owner_id:
                saved = transaction.model_copy(update={
                    "created_at": transaction.created_at or existing.created_at,
                })
                transactions[index] = saved
                self._store(self.transactions_key, transactions)
                return saved

        logger.warning(f"Transaction {transaction.id} not found for update, ignoring")
        return transaction

    async def delete_transaction(self, transaction_id: str) -> None:
        transactions = self._load(self.transactions_key, Transaction)
        remaining = [t for t in transactions if t.id != transaction_id]
        if len(remaining) != len(transactions):
            self._store(self.transactions_key, remaining)
