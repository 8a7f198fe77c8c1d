"""
Account endpoints for API v1.

CRUD operations on the caller's accounts.  Accounts of other users are
invisible: reading, renaming or deleting them answers 404, and bulk
deletion silently skips them.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from finance_tracker_api.app.core.exceptions import NotFoundError
from finance_tracker_api.app.core.security import get_current_user
from finance_tracker_api.app.schemas.account import AccountCreate, AccountRead, AccountUpdate
from finance_tracker_api.app.schemas.common import BulkDeleteRequest, DataResponse, IdRead
from finance_tracker_api.app.services.account_service import AccountService


router = APIRouter()


@router.get("/", response_model=DataResponse[List[AccountRead]])
async def list_accounts(current_user: dict = Depends(get_current_user)) -> DataResponse[List[AccountRead]]:
    """List the caller's accounts ordered by name."""
    return DataResponse(data=await AccountService.list_accounts(current_user["user_id"]))


@router.get("/{account_id}", response_model=DataResponse[AccountRead])
async def get_account(account_id: str, current_user: dict = Depends(get_current_user)) -> DataResponse[AccountRead]:
    try:
        account = await AccountService.get_account(current_user["user_id"], account_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return DataResponse(data=account)


@router.post("/", response_model=DataResponse[AccountRead], status_code=status.HTTP_201_CREATED)
async def create_account(
    account: AccountCreate,
    current_user: dict = Depends(get_current_user),
) -> DataResponse[AccountRead]:
    return DataResponse(data=await AccountService.create_account(current_user["user_id"], account))


@router.post("/bulk-delete", response_model=DataResponse[List[IdRead]])
async def bulk_delete_accounts(
    payload: BulkDeleteRequest,
    current_user: dict = Depends(get_current_user),
) -> DataResponse[List[IdRead]]:
    """Delete several accounts (and their transactions) at once.

    The response lists only the ids that were actually deleted.
    """
    deleted = await AccountService.bulk_delete_accounts(current_user["user_id"], payload.ids)
    return DataResponse(data=[IdRead(id=account_id) for account_id in deleted])


@router.patch("/{account_id}", response_model=DataResponse[AccountRead])
async def update_account(
    account_id: str,
    updates: AccountUpdate,
    current_user: dict = Depends(get_current_user),
) -> DataResponse[AccountRead]:
    try:
        account = await AccountService.update_account(current_user["user_id"], account_id, updates)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return DataResponse(data=account)


@router.delete("/{account_id}", response_model=DataResponse[IdRead])
async def delete_account(account_id: str, current_user: dict = Depends(get_current_user)) -> DataResponse[IdRead]:
    """Delete an account.  Its transactions are deleted with it."""
    try:
        deleted = await AccountService.delete_account(current_user["user_id"], account_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return DataResponse(data=IdRead(id=deleted))
