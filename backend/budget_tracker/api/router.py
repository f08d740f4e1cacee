"""
Main API router.
"""

from fastapi import APIRouter
from budget_tracker.api import categories, transactions, dashboard, settings

api_router = APIRouter()

api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(transactions.router)
api_router.include_router(dashboard.router)
api_router.include_router(settings.router)
