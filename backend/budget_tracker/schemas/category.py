"""
Category Pydantic schemas.
"""

import enum
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class EntryType(str, enum.Enum):
    """Whether a category or transaction is money in or money out."""
    income = "income"
    expense = "expense"


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive timestamps are stored as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Category(BaseModel):
    """A budget category owned by a single user.

    ``kind`` is stored and serialized under the ``type`` key, matching the
    ``categories.type`` column of the remote schema.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    name: str
    kind: EntryType = Field(
        validation_alias=AliasChoices("type", "kind"),
        serialization_alias="type",
    )
    budget_limit: Optional[Decimal] = Field(None, allow_inf_nan=False)
    owner_id: str = ""
    created_at: Optional[datetime] = None

    @field_validator("created_at")
    @classmethod
    def created_at_as_utc(cls, value):
        return as_utc(value)

    def to_record(self) -> dict:
        """Serialize for storage (JSON-safe, ``type`` key)."""
        return self.model_dump(mode="json", by_alias=True)


class CategoryCreate(BaseModel):
    """Payload for creating or replacing a category."""
    name: str
    type: EntryType
    budget_limit: Optional[Decimal] = Field(None, allow_inf_nan=False)


class CategoryUpdate(CategoryCreate):
    """Schema for replacing a category (full record, last write wins)."""
    pass


class CategoryList(BaseModel):
    """Schema for listing categories."""
    items: list[Category]
    total: int
