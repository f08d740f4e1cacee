"""
Transaction API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional

from budget_tracker.dependencies import Caller, get_caller, get_data_service
from budget_tracker.schemas.category import EntryType
from budget_tracker.schemas.transaction import (
    Transaction,
    TransactionCreate,
    TransactionListResponse,
    TransactionUpdate,
)
from budget_tracker.services.data_service import DataService

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=TransactionListResponse)
async def list_transactions(
    type: Optional[EntryType] = None,
    search: Optional[str] = None,
    sort_by: str = Query("date", pattern="^(date|amount)$"),
    order: str = Query("desc", pattern="^(asc|desc)$"),
    caller: Caller = Depends(get_caller),
    service: DataService = Depends(get_data_service)
):
    """List transactions with optional type filter, search and sorting"""
    transactions = await service.list_transactions(
        caller.owner_id,
        kind=type,
        search=search,
        sort_by=sort_by,
        order=order,
    )
    return TransactionListResponse(items=transactions, total=len(transactions))


@router.post("", response_model=Transaction, status_code=201)
async def create_transaction(
    transaction: TransactionCreate,
    caller: Caller = Depends(get_caller),
    service: DataService = Depends(get_data_service)
):
    """Record a transaction"""
    return await service.save_transaction(caller.owner_id, transaction)


@router.put("/{transaction_id}", response_model=Transaction)
async def update_transaction(
    transaction_id: str,
    transaction: TransactionUpdate,
    caller: Caller = Depends(get_caller),
    service: DataService = Depends(get_data_service)
):
    """Replace a transaction"""
    updated = await service.save_transaction(caller.owner_id, transaction, transaction_id=transaction_id)
    if updated is None:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return updated


@router.delete("/{transaction_id}", status_code=204)
async def delete_transaction(
    transaction_id: str,
    caller: Caller = Depends(get_caller),
    service: DataService = Depends(get_data_service)
):
    """Delete a transaction"""
    await service.delete_transaction(caller.owner_id, transaction_id)
    return None
