"""
Pydantic models for accounts.

Clients only ever send a name; ``id`` and the owner are assigned by the
server.  ``plaid_id`` is reserved for an external bank identifier and is
read-only through the API.
"""

from typing import Optional

from pydantic import BaseModel, Field


class AccountBase(BaseModel):
    name: str = Field(..., min_length=1, examples=["Checking"])


class AccountCreate(AccountBase):
    """Schema for creating an account."""
    pass


class AccountUpdate(AccountBase):
    """Schema for renaming an account."""
    pass


class AccountRead(AccountBase):
    id: str
    plaid_id: Optional[str] = None

    model_config = {
        "from_attributes": True,
    }
