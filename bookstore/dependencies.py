"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.
FastAPI's Depends() function manages their lifecycle.

WHY Dependency Injection?
=========================
1. Reusability: Write once, use in many routes
2. Testing: Easy to override dependencies in tests (see conftest.py)
3. Separation of Concerns: Routes focus on calling services

Dependencies here:
- Database sessions (per-request)
- Pagination / list query parameters
- Bearer token authentication (current user id)
"""

import logging
from typing import Annotated

from fastapi import Depends, Query
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from bookstore.config import get_settings
from bookstore.database import get_db
from bookstore.exceptions import UnauthorizedError
from bookstore.services.security import ACCESS_TOKEN_TYPE, verify_token_type

logger = logging.getLogger(__name__)
settings = get_settings()

# =============================================================================
# Type Aliases with Annotated
# =============================================================================
# Instead of writing:
#   def list_books(db: Session = Depends(get_db)):
#
# You can write:
#   def list_books(db: DbSession):

DbSession = Annotated[Session, Depends(get_db)]


# =============================================================================
# Pagination Parameters
# =============================================================================
class PaginationParams:
    """
    Common pagination parameters for list endpoints.

        GET /books?page=2&limit=5

    - page: Which page to return (1-indexed)
    - limit: How many items per page
    """

    def __init__(
        self,
        page: int = Query(
            default=1,
            ge=1,
            description="Page number (1-indexed)",
            examples=[1, 2, 3],
        ),
        limit: int = Query(
            default=settings.default_page_size,
            ge=1,
            le=settings.max_page_size,
            description=f"Number of items per page (max {settings.max_page_size})",
            examples=[10, 25, 50],
        ),
    ) -> None:
        self.page = page
        self.limit = limit


Pagination = Annotated[PaginationParams, Depends()]


# =============================================================================
# List Filters
# =============================================================================
def get_search_query(
    search: str | None = Query(
        default=None,
        max_length=100,
        description="Case-insensitive substring to search for",
        examples=["orwell", "science"],
    ),
) -> str | None:
    """Search term, or None when empty or not given."""
    if search is None or not search.strip():
        return None
    return search.strip()


SearchQuery = Annotated[str | None, Depends(get_search_query)]


def get_sort_key(
    sort_by: str | None = Query(
        default=None,
        alias="sortBy",
        description="title (A-Z), publication_year (newest first) or price "
                    "(cheapest first); anything else sorts by newest added",
        examples=["title", "price"],
    ),
) -> str | None:
    return sort_by


SortKey = Annotated[str | None, Depends(get_sort_key)]


# =============================================================================
# Bearer Token Authentication
# =============================================================================
# OAuth2PasswordBearer extracts the token from "Authorization: Bearer <token>"
# and adds the "Authorize" button to Swagger UI. auto_error=False so that a
# missing token is reported through our own error envelope.
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.api_prefix}/auth/login",
    auto_error=False,
)


def get_current_user_id(
    token: str | None = Depends(oauth2_scheme),
) -> int:
    """
    Authenticate the request and return the caller's user id.

    The user row is not loaded here; routes that need it go through a service.

    Raises:
        UnauthorizedError: "Token missing" without a bearer token,
            "Invalid token" if it is malformed, expired, of the wrong type
            or carries no usable subject
    """
    if not token:
        raise UnauthorizedError("Token missing")

    payload = verify_token_type(token, ACCESS_TOKEN_TYPE)
    if payload is None:
        raise UnauthorizedError("Invalid token")

    subject = payload.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError):
        logger.warning("Token without a numeric subject")
        raise UnauthorizedError("Invalid token") from None


CurrentUserId = Annotated[int, Depends(get_current_user_id)]
