"""Filtering and sorting for the transaction history view."""

from datetime import datetime, timezone
from typing import List, Optional, Sequence

from budget_tracker.schemas.category import Category, EntryType
from budget_tracker.schemas.transaction import Transaction

SORT_FIELDS = ("date", "amount")

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def filter_transactions(
    transactions: Sequence[Transaction],
    categories: Sequence[Category],
    kind: Optional[EntryType] = None,
    search: Optional[str] = None,
    sort_by: str = "date",
    order: str = "desc",
) -> List[Transaction]:
    """
    Narrow a transaction list the way the history screen does.

    ``search`` matches description or category name, case-insensitively.
    ``sort_by`` is ``date`` (``created_at``) or ``amount``.
    """
    result = list(transactions)

    if kind is not None:
        result = [t for t in result if t.kind == kind]

    if search:
        term = search.lower()
        names = {c.id: c.name.lower() for c in categories}
        result = [
            t for t in result
            if term in t.description.lower() or term in names.get(t.category_id, "")
        ]

    if sort_by == "amount":
        key = lambda t: t.amount
    else:
        key = lambda t: t.created_at or _EPOCH

    return sorted(result, key=key, reverse=(order != "asc"))
