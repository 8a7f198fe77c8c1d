"""
Envelope and bulk-operation schemas shared by all resources.

Every response body has the shape ``{"data": ...}``; ``DataResponse``
is the generic pydantic model describing it.
"""

from typing import Generic, List, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    data: T


class IdRead(BaseModel):
    """Identifier of a deleted resource."""

    id: str


class BulkDeleteRequest(BaseModel):
    ids: List[str] = Field(..., examples=[["c0ffee", "deadbeef"]])
