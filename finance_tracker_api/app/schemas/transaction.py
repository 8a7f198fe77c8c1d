"""
Pydantic models for transactions and CSV imports.

``amount`` is always an integer number of milliunits: ``-12340`` is an
expense of 12.34.  Negative amounts are expenses, zero and positive
amounts are income.
"""

import datetime as dt
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from ..core.utils import MAX_AMOUNT


class TransactionBase(BaseModel):
    amount: int = Field(..., ge=-MAX_AMOUNT, le=MAX_AMOUNT, examples=[-12340])
    payee: str = Field(..., min_length=1, examples=["Corner Grocery"])
    notes: Optional[str] = Field(None, examples=["Weekly shopping"])
    date: dt.date = Field(..., examples=["2024-03-01"])
    account_id: str
    category_id: Optional[str] = None


class TransactionCreate(TransactionBase):
    """Schema for creating a transaction (single or bulk)."""
    pass


class TransactionUpdate(TransactionBase):
    """Schema for replacing the editable fields of a transaction."""
    pass


class TransactionRead(TransactionBase):
    id: str

    model_config = {
        "from_attributes": True,
    }


class TransactionListItem(TransactionRead):
    """Transaction joined with its account and category names."""

    account: str
    category: Optional[str] = None


ImportField = Literal["amount", "date", "payee", "skip"]


class ImportPreviewRequest(BaseModel):
    csv: str = Field(..., examples=["Date,Payee,Amount\n2024-03-01 09:30:00,Corner Grocery,-12.34\n"])


class ImportPreview(BaseModel):
    headers: List[str]
    body: List[List[str]]


class ImportRequest(BaseModel):
    """Schema for importing a CSV file into one account.

    ``columns`` maps a zero-based column index to the transaction field
    it holds, or ``"skip"``.  Columns that are not listed are skipped.
    """

    csv: str
    account_id: str
    columns: Dict[int, Optional[ImportField]] = Field(
        ..., examples=[{0: "date", 1: "payee", 2: "amount"}]
    )
