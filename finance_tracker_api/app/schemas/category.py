"""Pydantic models for spending categories."""

from typing import Optional

from pydantic import BaseModel, Field


class CategoryBase(BaseModel):
    name: str = Field(..., min_length=1, examples=["Groceries"])


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(CategoryBase):
    pass


class CategoryRead(CategoryBase):
    id: str
    plaid_id: Optional[str] = None

    model_config = {
        "from_attributes": True,
    }
