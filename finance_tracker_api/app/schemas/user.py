"""
Pydantic models for user data.

Defines schemas for registering, authenticating and reading users.
Passwords are accepted on input only and never returned.
"""

from typing import Optional

from pydantic import BaseModel, Field


class UserBase(BaseModel):
    email: str = Field(..., min_length=3, examples=["user@example.com"])
    full_name: Optional[str] = Field(None, examples=["Jane Doe"])


class UserCreate(UserBase):
    """Schema for registering a user."""

    password: str = Field(..., min_length=1, examples=["strongpassword"])


class UserLogin(BaseModel):
    email: str
    password: str


class UserRead(UserBase):
    """Schema for reading a user from the API."""

    id: int
    disabled: bool = False

    model_config = {
        "from_attributes": True,
    }


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
