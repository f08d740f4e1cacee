"""
Dashboard API endpoints.
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional

from budget_tracker.dependencies import Caller, get_caller, get_data_service
from budget_tracker.schemas.category import EntryType
from budget_tracker.schemas.dashboard import (
    BudgetStatus,
    CategoryChartEntry,
    DashboardSummary,
    MonthTrend,
    Timeframe,
)
from budget_tracker.services.data_service import DataService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=DashboardSummary)
async def get_dashboard_summary(
    timeframe: Timeframe = Timeframe.all,
    caller: Caller = Depends(get_caller),
    service: DataService = Depends(get_data_service)
):
    """
    Get the dashboard summary.
    Returns: totals_by_currency, total_income, total_expenses, balance,
    category_spending, recent_transactions
    """
    return await service.get_dashboard(caller.owner_id, timeframe)


@router.get("/trends", response_model=list[MonthTrend])
async def get_monthly_trends(
    currency: Optional[str] = None,
    months: Optional[int] = Query(None, ge=1, le=24),
    caller: Caller = Depends(get_caller),
    service: DataService = Depends(get_data_service)
):
    """
    Get income and expenses per month for one currency.
    Returns: [{month, label, income, expense}, ...] oldest first
    """
    return await service.get_monthly_trend(caller.owner_id, currency, months)


@router.get("/categories", response_model=list[CategoryChartEntry])
async def get_category_chart(
    type: EntryType = EntryType.expense,
    currency: Optional[str] = None,
    caller: Caller = Depends(get_caller),
    service: DataService = Depends(get_data_service)
):
    """Per-category totals in one currency, largest first"""
    return await service.get_category_chart(caller.owner_id, type, currency)


@router.get("/budgets", response_model=list[BudgetStatus])
async def get_budget_status(
    caller: Caller = Depends(get_caller),
    service: DataService = Depends(get_data_service)
):
    """Spend against budget for expense categories with a limit"""
    return await service.get_budget_status(caller.owner_id)
