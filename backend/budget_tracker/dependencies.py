"""
FastAPI dependencies.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request

from budget_tracker.context import AppContext
from budget_tracker.services.data_service import DataService


@dataclass
class Caller:
    """The user a request acts for."""
    owner_id: str
    access_token: Optional[str] = None


def get_context(request: Request) -> AppContext:
    return request.app.state.context


async def get_caller(
    authorization: Optional[str] = Header(None),
    x_user_id: Optional[str] = Header(None),
    context: AppContext = Depends(get_context),
) -> Caller:
    """
    Identify the caller.

    With Supabase configured a bearer token is required and verified there.
    In local mode the ``X-User-Id`` header is trusted, defaulting to the
    developer user.
    """
    if not context.is_remote:
        return Caller(owner_id=x_user_id or context.settings.dev_user_id)

    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Missing bearer token")
    token = authorization[7:].strip()

    user_id = await context.identity.get_user_id(token)
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return Caller(owner_id=user_id, access_token=token)


def get_data_service(
    caller: Caller = Depends(get_caller),
    context: AppContext = Depends(get_context),
) -> DataService:
    return context.data_service(caller.access_token)
