"""
Category endpoints for API v1.

Same surface as the account endpoints.  Deleting a category leaves its
transactions uncategorised instead of deleting them.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from finance_tracker_api.app.core.exceptions import NotFoundError
from finance_tracker_api.app.core.security import get_current_user
from finance_tracker_api.app.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from finance_tracker_api.app.schemas.common import BulkDeleteRequest, DataResponse, IdRead
from finance_tracker_api.app.services.category_service import CategoryService


router = APIRouter()


@router.get("/", response_model=DataResponse[List[CategoryRead]])
async def list_categories(current_user: dict = Depends(get_current_user)) -> DataResponse[List[CategoryRead]]:
    return DataResponse(data=await CategoryService.list_categories(current_user["user_id"]))


@router.get("/{category_id}", response_model=DataResponse[CategoryRead])
async def get_category(category_id: str, current_user: dict = Depends(get_current_user)) -> DataResponse[CategoryRead]:
    try:
        category = await CategoryService.get_category(current_user["user_id"], category_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return DataResponse(data=category)


@router.post("/", response_model=DataResponse[CategoryRead], status_code=status.HTTP_201_CREATED)
async def create_category(
    category: CategoryCreate,
    current_user: dict = Depends(get_current_user),
) -> DataResponse[CategoryRead]:
    return DataResponse(data=await CategoryService.create_category(current_user["user_id"], category))


@router.post("/bulk-delete", response_model=DataResponse[List[IdRead]])
async def bulk_delete_categories(
    payload: BulkDeleteRequest,
    current_user: dict = Depends(get_current_user),
) -> DataResponse[List[IdRead]]:
    deleted = await CategoryService.bulk_delete_categories(current_user["user_id"], payload.ids)
    return DataResponse(data=[IdRead(id=category_id) for category_id in deleted])


@router.patch("/{category_id}", response_model=DataResponse[CategoryRead])
async def update_category(
    category_id: str,
    updates: CategoryUpdate,
    current_user: dict = Depends(get_current_user),
) -> DataResponse[CategoryRead]:
    try:
        category = await CategoryService.update_category(current_user["user_id"], category_id, updates)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return DataResponse(data=category)


@router.delete("/{category_id}", response_model=DataResponse[IdRead])
async def delete_category(category_id: str, current_user: dict = Depends(get_current_user)) -> DataResponse[IdRead]:
    try:
        deleted = await CategoryService.delete_category(current_user["user_id"], category_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return DataResponse(data=IdRead(id=deleted))
