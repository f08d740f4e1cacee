"""
Supabase record store over the PostgREST HTTP API.

Row-level security on ``categories`` and ``transactions`` only lets the
authenticated caller see or touch rows whose ``owner_id`` matches them, so
requests carry the caller's access token (see ``bind``).
"""

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError as SchemaError

from budget_tracker.errors import PersistenceError
from budget_tracker.schemas.category import Category
from budget_tracker.schemas.transaction import Transaction
from budget_tracker.services.storage.interface import (
    RecordStore,
    prepare_category_insert,
    prepare_transaction_insert,
)

logger = logging.getLogger(__name__)

CATEGORIES_TABLE = "categories"
TRANSACTIONS_TABLE = "transactions"


class RemoteRecordStore(RecordStore):
    """Record store backed by Supabase tables."""

    backend_name = "remote"

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        access_token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self.access_token = access_token
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def bind(self, access_token: Optional[str]) -> "RemoteRecordStore":
        store = RemoteRecordStore(
            self.base_url,
            self.anon_key,
            access_token=access_token,
            client=self._client,
        )
        store._owns_client = False
        return store

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {self.access_token or self.anon_key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }

    async def _request(
        self,
        method: str,
        table: str,
        params: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> List[dict]:
        url = f"{self.base_url}/rest/v1/{table}"
        try:
            resp = await self._client.request(method, url, params=params, json=json, headers=self._headers())
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Supabase {method} {table} failed: {e.response.status_code} {e.response.text}")
            raise PersistenceError(
                f"Remote store rejected {method} on {table} ({e.response.status_code})"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Supabase {method} {table} failed: {e}")
            raise PersistenceError(f"Remote store unreachable: {e}") from e

        if not resp.content:
            return []
        try:
            data = resp.json()
        except ValueError as e:
            raise PersistenceError(f"Remote store returned malformed data for {table}") from e
        if isinstance(data, dict):
            return [data]
        return data

    @staticmethod
    def _parse(rows: List[dict], model):
        try:
            return [model.model_validate(row) for row in rows]
        except SchemaError as e:
            logger.error(f"Invalid row from Supabase: {e}")
            raise PersistenceError("Remote store returned an invalid record") from e

    async def _list(self, table: str, model, owner_id: str):
        rows = await self._request("GET", table, params={
            "select": "*",
            "owner_id": f"eq.{owner_id}",
            "order": "created_at.desc",
        })
        return self._parse(rows, model)

    async def _insert(self, table: str, model, record):
        rows = await self._request("POST", table, json=record.to_record())
        saved = self._parse(rows, model)
        return saved[0] if saved else record

    async def _update(self, table: str, model, record, data: Dict[str, Any]):
        rows = await self._request("PATCH", table, params={"id": f"eq.{record.id}"}, json=data)
        if not rows:
            logger.warning(f"{table} row {record.id} not found for update, ignoring")
            return record
        return self._parse(rows, model)[0]

    # Categories

    async def list_categories(self, owner_id: str) -> List[Category]:
        return await self._list(CATEGORIES_TABLE, Category, owner_id)

    async def save_category(self, category: Category) -> Category:
        if not category.id:
            return await self._insert(CATEGORIES_TABLE, Category, prepare_category_insert(category))

        data = category.to_record()
        data.pop("id")
        data.pop("created_at")
        return await self._update(CATEGORIES_TABLE, Category, category, data)

    async def delete_category(self, category_id: str) -> None:
        # Two separate writes: clear references, then delete the category.
        await self._request(
            "PATCH",
            TRANSACTIONS_TABLE,
            params={"category_id": f"eq.{category_id}"},
            json={"category_id": None},
        )
        await self._request("DELETE", CATEGORIES_TABLE, params={"id": f"eq.{category_id}"})

    # Transactions

    async def list_transactions(self, owner_id: str) -> List[Transaction]:
        return await self._list(TRANSACTIONS_TABLE, Transaction, owner_id)

    async def save_transaction(self, transaction: Transaction) -> Transaction:
        if not transaction.id:
            return await self._insert(TRANSACTIONS_TABLE, Transaction, prepare_transaction_insert(transaction))

        data = transaction.to_record()
        data.pop("id")
        if data.get("created_at") is None:
            data.pop("created_at")
        return await self._update(TRANSACTIONS_TABLE, Transaction, transaction, data)

    async def delete_transaction(self, transaction_id: str) -> None:
        await self._request("DELETE", TRANSACTIONS_TABLE, params={"id": f"eq.{transaction_id}"})
