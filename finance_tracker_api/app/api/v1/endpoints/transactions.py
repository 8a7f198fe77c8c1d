"""
Transaction endpoints for API v1.

Besides CRUD this router hosts bulk creation, bulk deletion and the CSV
import.  Query parameters keep the names the dashboard sends
(``from``, ``to``, ``accountId``).

Error mapping: a missing or foreign transaction is 404; a payload that
references a foreign account or category, a malformed date filter or
an unusable CSV upload is 400.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from finance_tracker_api.app.core.exceptions import NotFoundError
from finance_tracker_api.app.core.security import get_current_user
from finance_tracker_api.app.schemas.common import BulkDeleteRequest, DataResponse, IdRead
from finance_tracker_api.app.schemas.transaction import (
    ImportPreview,
    ImportPreviewRequest,
    ImportRequest,
    TransactionCreate,
    TransactionListItem,
    TransactionRead,
    TransactionUpdate,
)
from finance_tracker_api.app.services.import_service import ImportService
from finance_tracker_api.app.services.transaction_service import TransactionService


router = APIRouter()


@router.get("/", response_model=DataResponse[List[TransactionListItem]])
async def list_transactions(
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    account_id: Optional[str] = Query(None, alias="accountId"),
    current_user: dict = Depends(get_current_user),
) -> DataResponse[List[TransactionListItem]]:
    """List transactions, newest first.

    - **from**, **to**: inclusive ``YYYY-MM-DD`` bounds; default is the last 30 days.
    - **accountId**: only transactions of this account.
    """
    try:
        transactions = await TransactionService.list_transactions(
            current_user["user_id"],
            date_from=date_from,
            date_to=date_to,
            account_id=account_id,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return DataResponse(data=transactions)


@router.get("/{transaction_id}", response_model=DataResponse[TransactionRead])
async def get_transaction(
    transaction_id: str,
    current_user: dict = Depends(get_current_user),
) -> DataResponse[TransactionRead]:
    try:
        transaction = await TransactionService.get_transaction(current_user["user_id"], transaction_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return DataResponse(data=transaction)


@router.post("/", response_model=DataResponse[TransactionRead], status_code=status.HTTP_201_CREATED)
async def create_transaction(
    transaction: TransactionCreate,
    current_user: dict = Depends(get_current_user),
) -> DataResponse[TransactionRead]:
    try:
        created = await TransactionService.create_transaction(current_user["user_id"], transaction)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return DataResponse(data=created)


@router.post("/bulk-create", response_model=DataResponse[List[TransactionRead]], status_code=status.HTTP_201_CREATED)
async def bulk_create_transactions(
    transactions: List[TransactionCreate],
    current_user: dict = Depends(get_current_user),
) -> DataResponse[List[TransactionRead]]:
    """Create many transactions at once.  Either all are stored or none."""
    try:
        created = await TransactionService.bulk_create_transactions(current_user["user_id"], transactions)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return DataResponse(data=created)


@router.post("/bulk-delete", response_model=DataResponse[List[IdRead]])
async def bulk_delete_transactions(
    payload: BulkDeleteRequest,
    current_user: dict = Depends(get_current_user),
) -> DataResponse[List[IdRead]]:
    deleted = await TransactionService.bulk_delete_transactions(current_user["user_id"], payload.ids)
    return DataResponse(data=[IdRead(id=transaction_id) for transaction_id in deleted])


@router.post("/import/preview", response_model=DataResponse[ImportPreview])
async def preview_import(
    payload: ImportPreviewRequest,
    current_user: dict = Depends(get_current_user),
) -> DataResponse[ImportPreview]:
    """Split an uploaded CSV into its header row and data rows.

    Clients show this to the user to pick which column holds the
    amount, the date and the payee.
    """
    try:
        headers, body = await ImportService.preview(payload.csv)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return DataResponse(data=ImportPreview(headers=headers, body=body))


@router.post("/import", response_model=DataResponse[List[TransactionRead]], status_code=status.HTTP_201_CREATED)
async def import_transactions(
    payload: ImportRequest,
    current_user: dict = Depends(get_current_user),
) -> DataResponse[List[TransactionRead]]:
    """Import a CSV into one account using the given column mapping.

    ``columns`` must assign ``amount``, ``date`` and ``payee`` to one
    column each.  Dates must look like ``2024-03-01 09:30:00``; amounts
    are display units and are stored as milliunits.
    """
    try:
        created = await ImportService.import_transactions(current_user["user_id"], payload)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return DataResponse(data=created)


@router.patch("/{transaction_id}", response_model=DataResponse[TransactionRead])
async def update_transaction(
    transaction_id: str,
    updates: TransactionUpdate,
    current_user: dict = Depends(get_current_user),
) -> DataResponse[TransactionRead]:
    try:
        transaction = await TransactionService.update_transaction(current_user["user_id"], transaction_id, updates)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return DataResponse(data=transaction)


@router.delete("/{transaction_id}", response_model=DataResponse[IdRead])
async def delete_transaction(
    transaction_id: str,
    current_user: dict = Depends(get_current_user),
) -> DataResponse[IdRead]:
    try:
        deleted = await TransactionService.delete_transaction(current_user["user_id"], transaction_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return DataResponse(data=IdRead(id=deleted))
