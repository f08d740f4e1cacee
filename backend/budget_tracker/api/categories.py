"""
Category API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException

from budget_tracker.dependencies import Caller, get_caller, get_data_service
from budget_tracker.schemas.category import (
    Category,
    CategoryCreate,
    CategoryList,
    CategoryUpdate,
)
from budget_tracker.services.data_service import DataService

router = APIRouter()


@router.get("", response_model=CategoryList)
async def list_categories(
    caller: Caller = Depends(get_caller),
    service: DataService = Depends(get_data_service)
):
    """List the caller's categories, newest first."""
    categories = await service.list_categories(caller.owner_id)
    return CategoryList(items=categories, total=len(categories))


@router.post("", response_model=Category, status_code=201)
async def create_category(
    category: CategoryCreate,
    caller: Caller = Depends(get_caller),
    service: DataService = Depends(get_data_service)
):
    """Create a new category."""
    return await service.save_category(caller.owner_id, category)


@router.put("/{category_id}", response_model=Category)
async def update_category(
    category_id: str,
    category: CategoryUpdate,
    caller: Caller = Depends(get_caller),
    service: DataService = Depends(get_data_service)
):
    """Replace a category."""
    updated = await service.save_category(caller.owner_id, category, category_id=category_id)
    if updated is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return updated


@router.delete("/{category_id}", status_code=204)
async def delete_category(
    category_id: str,
    caller: Caller = Depends(get_caller),
    service: DataService = Depends(get_data_service)
):
    """Delete a category and uncategorize its transactions."""
    await service.delete_category(caller.owner_id, category_id)
    return None
