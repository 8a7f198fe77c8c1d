"""
Summary endpoint for API v1.

Returns the dashboard figures for a date range: totals with
period-over-period change, top spending categories and a daily series.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from finance_tracker_api.app.core.security import get_current_user
from finance_tracker_api.app.schemas.common import DataResponse
from finance_tracker_api.app.schemas.summary import Summary
from finance_tracker_api.app.services.summary_service import SummaryService


router = APIRouter()


@router.get("/", response_model=DataResponse[Summary])
async def get_summary(
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    account_id: Optional[str] = Query(None, alias="accountId"),
    current_user: dict = Depends(get_current_user),
) -> DataResponse[Summary]:
    """Financial summary of the caller's transactions.

    - **from**, **to**: inclusive ``YYYY-MM-DD`` bounds; default is the last 30 days.
    - **accountId**: restrict the summary to one account.
    """
    try:
        summary = await SummaryService.get_summary(
            current_user["user_id"],
            date_from=date_from,
            date_to=date_to,
            account_id=account_id,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return DataResponse(data=summary)
