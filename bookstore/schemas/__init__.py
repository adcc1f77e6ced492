"""
Pydantic Schemas Package

This package contains Pydantic models for request/response validation.

WHY Separate Schemas from SQLAlchemy Models?
============================================
1. Security: Control exactly what data is exposed in API responses
2. Validation: Different rules for create vs update vs response
3. Decoupling: Database schema can evolve independently of API

Schema Naming Convention:
- XxxBase: Shared fields between create/update
- XxxCreate: Fields required when creating a new record
- XxxUpdate: Fields allowed when updating (usually all optional)
- XxxResponse: Fields returned in API responses

Every response body is wrapped in the envelope from ``schemas.common``.
"""

from bookstore.schemas.book import (
    BookBase,
    BookCreate,
    BookResponse,
    BookUpdate,
)
from bookstore.schemas.common import (
    ApiResponse,
    ErrorResponse,
    FieldError,
    PaginatedResponse,
    PaginationMeta,
    envelope,
)
from bookstore.schemas.genre import (
    GenreBase,
    GenreCreate,
    GenreResponse,
    GenreUpdate,
    GenreWithCount,
)
from bookstore.schemas.order import (
    OrderCreate,
    OrderDetailResponse,
    OrderItemCreate,
    OrderItemResponse,
    OrderResponse,
    StatisticsResponse,
)
from bookstore.schemas.user import (
    LoginRequest,
    TokenResponse,
    UserCreate,
    UserResponse,
    UserSummary,
)

__all__ = [
    # Envelope
    "ApiResponse",
    "PaginatedResponse",
    "PaginationMeta",
    "FieldError",
    "ErrorResponse",
    "envelope",
    # Genre schemas
    "GenreBase",
    "GenreCreate",
    "GenreUpdate",
    "GenreResponse",
    "GenreWithCount",
    # Book schemas
    "BookBase",
    "BookCreate",
    "BookUpdate",
    "BookResponse",
    # Order schemas
    "OrderItemCreate",
    "OrderCreate",
    "OrderItemResponse",
    "OrderResponse",
    "OrderDetailResponse",
    "StatisticsResponse",
    # User / auth schemas
    "UserCreate",
    "UserResponse",
    "UserSummary",
    "LoginRequest",
    "TokenResponse",
]
