"""
Settings API endpoints.
"""

from fastapi import APIRouter, Depends

from budget_tracker.context import AppContext
from budget_tracker.dependencies import get_context

router = APIRouter(tags=["settings"])


@router.get("/currencies")
def get_currencies(context: AppContext = Depends(get_context)):
    """Currencies a transaction may be recorded in."""
    return {
        "default": context.settings.default_currency,
        "supported": context.settings.supported_currencies,
    }
