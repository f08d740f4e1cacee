"""
Pydantic schemas package.
"""

from budget_tracker.schemas.category import (
    EntryType,
    Category,
    CategoryCreate,
    CategoryUpdate,
    CategoryList,
)
from budget_tracker.schemas.dashboard import (
    Timeframe,
    CurrencyTotals,
    CategorySpending,
    DashboardSummary,
    MonthTrend,
    CategoryChartEntry,
    BudgetStatus,
)
from budget_tracker.schemas.transaction import (
    TRANSACTION_SCHEMA_VERSION,
    LEGACY_CURRENCY,
    upgrade_transaction_record,
    Transaction,
    TransactionCreate,
    TransactionUpdate,
    TransactionListResponse,
)

__all__ = [
    "EntryType",
    "Category",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryList",
    "Timeframe",
    "CurrencyTotals",
    "CategorySpending",
    "DashboardSummary",
    "MonthTrend",
    "CategoryChartEntry",
    "BudgetStatus",
    "TRANSACTION_SCHEMA_VERSION",
    "LEGACY_CURRENCY",
    "upgrade_transaction_record",
    "Transaction",
    "TransactionCreate",
    "TransactionUpdate",
    "TransactionListResponse",
]
