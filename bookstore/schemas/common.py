"""
Response Envelope Schemas

Every endpoint answers with the same JSON envelope:

    {
        "success": true,
        "message": "Book created",          # optional
        "data": {...} | [...],              # optional
        "pagination": {...},                # list endpoints only
        "errors": [...]                     # validation failures only
    }

Routes are declared with ``response_model_exclude_unset=True`` so that
optional envelope keys which were never set are left out of the JSON,
while explicit ``null`` values inside ``data`` are kept.
"""

import math
from decimal import Decimal
from typing import Annotated, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

T = TypeVar("T")

# Amounts stay Decimal in Python and go out as JSON numbers, e.g. 25.98
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class PaginationMeta(BaseModel):
    """Pagination block for list responses."""

    page: int = Field(..., ge=1, description="Current page number")
    limit: int = Field(..., ge=1, description="Items per page")
    total: int = Field(..., ge=0, description="Total matching items")
    total_pages: int = Field(
        ...,
        ge=0,
        alias="totalPages",
        description="ceil(total / limit)",
    )

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit) if total else 0,
        )


class FieldError(BaseModel):
    """A single request validation failure."""

    field: str = Field(..., description="Dotted location, e.g. 'body.items.0.quantity'")
    message: str = Field(..., description="What is wrong with the value")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope for single-object (or plain list) responses."""

    success: bool = True
    message: str | None = None
    data: T | None = None


class PaginatedResponse(BaseModel, Generic[T]):
    """Envelope for paginated list responses."""

    success: bool = True
    message: str | None = None
    data: list[T] = Field(default_factory=list)
    pagination: PaginationMeta


class ErrorResponse(BaseModel):
    """Envelope for failures; used for OpenAPI documentation."""

    success: bool = False
    message: str
    errors: list[FieldError] | None = None


def envelope(data=None, message: str | None = None, **extra) -> dict:
    """
    Build a success envelope containing only the keys that were given.

    Usage:
        return envelope(BookResponse.model_validate(book), message="Book created")
        return envelope(items, pagination=PaginationMeta.build(page, limit, total))
    """
    body: dict = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    body.update(extra)
    return body
