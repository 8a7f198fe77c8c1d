"""
Top-level router for version 1 of the API.

Aggregates the resource routers under a unified prefix.  When a new
resource is added, include its router here.
"""

from fastapi import APIRouter

from .endpoints import (
    accounts,
    categories,
    summary,
    transactions,
    users,
)

router = APIRouter()

router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(accounts.router, prefix="/accounts", tags=["accounts"])
router.include_router(categories.router, prefix="/categories", tags=["categories"])
router.include_router(transactions.router, prefix="/transactions", tags=["transactions"])
router.include_router(summary.router, prefix="/summary", tags=["summary"])
