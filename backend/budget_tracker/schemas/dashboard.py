"""
Dashboard schemas.
"""

import enum

from pydantic import BaseModel, Field
from typing import Dict, List

from budget_tracker.schemas.category import EntryType
from budget_tracker.schemas.transaction import Transaction


class Timeframe(str, enum.Enum):
    """Window the dashboard summary is computed over."""
    week = "week"
    month = "month"
    year = "year"
    all = "all"


class CurrencyTotals(BaseModel):
    income: float = 0.0
    expense: float = 0.0


class CategorySpending(BaseModel):
    id: str
    name: str
    type: EntryType
    spent: float
    budget: float
    percentage: float


class DashboardSummary(BaseModel):
    """
    Everything the dashboard cards show.

    ``balance`` adds the per-currency nets together as raw numbers; there is
    no currency conversion. ``total_income`` and ``total_expenses`` are raw
    cross-currency sums for the same reason.
    """
    totals_by_currency: Dict[str, CurrencyTotals] = Field(default_factory=dict)
    total_income: float = 0.0
    total_expenses: float = 0.0
    balance: float = 0.0
    category_spending: List[CategorySpending] = Field(default_factory=list)
    recent_transactions: List[Transaction] = Field(default_factory=list)


class MonthTrend(BaseModel):
    month: str
    label: str
    income: float
    expense: float


class CategoryChartEntry(BaseModel):
    id: str
    name: str
    amount: float


class BudgetStatus(BaseModel):
    id: str
    name: str
    limit: float
    spent: float
    remaining: float
    percentage: float
