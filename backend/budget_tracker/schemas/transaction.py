"""
Transaction schemas.

Stored transactions are versioned:

* version 1 records carry no ``currency`` and name the owner ``user_id``;
* version 2 records (current) carry ``currency`` and ``owner_id``.

Every raw record is upgraded on parse by :func:`upgrade_transaction_record`.
The only currency default ever applied is ``LEGACY_CURRENCY`` ("USD").
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from budget_tracker.schemas.category import EntryType, as_utc


TRANSACTION_SCHEMA_VERSION = 2
LEGACY_CURRENCY = "USD"


def upgrade_transaction_record(raw: dict) -> dict:
    """Bring a raw v1 or v2 transaction record up to the current schema."""
    record = dict(raw)

    if not record.get("owner_id") and record.get("user_id"):
        record["owner_id"] = record.pop("user_id")
    else:
        record.pop("user_id", None)

    currency = record.get("currency")
    if currency is None or not str(currency).strip():
        record["currency"] = LEGACY_CURRENCY
    else:
        record["currency"] = str(currency).strip().upper()

    return record


class Transaction(BaseModel):
    """A single income or expense entry.

    ``created_at`` is the transaction date and may be edited by the user.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    description: str
    amount: Decimal = Field(allow_inf_nan=False)
    kind: EntryType = Field(
        validation_alias=AliasChoices("type", "kind"),
        serialization_alias="type",
    )
    currency: str = LEGACY_CURRENCY
    category_id: Optional[str] = None
    owner_id: str = ""
    created_at: Optional[datetime] = None

    @field_validator("created_at")
    @classmethod
    def created_at_as_utc(cls, value):
        return as_utc(value)

    @model_validator(mode="before")
    @classmethod
    def upgrade_schema(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return upgrade_transaction_record(data)
        return data

    def to_record(self) -> dict:
        """Serialize for storage (JSON-safe, ``type`` key)."""
        return self.model_dump(mode="json", by_alias=True)


class TransactionCreate(BaseModel):
    """Payload for creating or replacing a transaction."""
    description: str
    amount: Decimal = Field(allow_inf_nan=False)
    type: EntryType
    currency: Optional[str] = None
    category_id: Optional[str] = None
    created_at: Optional[datetime] = None


class TransactionUpdate(TransactionCreate):
    """Schema for replacing a transaction (full record, last write wins)."""
    pass


class TransactionListResponse(BaseModel):
    items: list[Transaction]
    total: int
