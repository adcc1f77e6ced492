"""
Books Router

CRUD endpoints for books.

- List endpoints support pagination (page, limit), a case-insensitive
  search over title and writer, and sortBy=title|publication_year|price
- Reads are public; create/update/delete need a bearer token
- Delete is a soft delete; past orders still show the book
"""

from fastapi import APIRouter, Request, status

from bookstore.config import get_settings
from bookstore.dependencies import (
    CurrentUserId,
    DbSession,
    Pagination,
    SearchQuery,
    SortKey,
)
from bookstore.schemas import (
    ApiResponse,
    BookCreate,
    BookResponse,
    BookUpdate,
    PaginatedResponse,
    PaginationMeta,
    envelope,
)
from bookstore.services import catalog
from bookstore.services.rate_limiter import limiter

settings = get_settings()

# =============================================================================
# Router Configuration
# =============================================================================
router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        404: {"description": "Book not found"},
    },
)


def _book_page(db, pagination, search, sort_by, genre_id=None) -> dict:
    books, total = catalog.list_books(
        db,
        pagination.page,
        pagination.limit,
        search=search,
        sort_by=sort_by,
        genre_id=genre_id,
    )
    return envelope(
        [BookResponse.model_validate(book) for book in books],
        pagination=PaginationMeta.build(pagination.page, pagination.limit, total),
    )


# =============================================================================
# CREATE
# =============================================================================
@router.post(
    "",
    response_model=ApiResponse[BookResponse],
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new book",
    description="""
    Add a book to the catalog.

    - title must be unique among non-deleted books
    - genre_id must be an existing, non-deleted genre
    - price must be positive, stock_quantity non-negative
    """,
)
@limiter.limit(settings.rate_limit_write)
def create_book(
    request: Request,
    book_data: BookCreate,
    db: DbSession,
    user_id: CurrentUserId,
) -> dict:
    book = catalog.create_book(db, book_data)
    return envelope(BookResponse.model_validate(book), message="Book created")


# =============================================================================
# READ
# =============================================================================
@router.get(
    "",
    response_model=PaginatedResponse[BookResponse],
    response_model_exclude_unset=True,
    summary="List books",
    description="""
    Paginated list of non-deleted books.

    - **search**: substring of the title or writer (case-insensitive)
    - **sortBy**: `title` (A-Z), `publication_year` (newest first),
      `price` (cheapest first); otherwise the most recently added come first
    """,
)
@limiter.limit(settings.rate_limit_default)
def list_books(
    request: Request,
    db: DbSession,
    pagination: Pagination,
    search: SearchQuery,
    sort_by: SortKey,
) -> dict:
    return _book_page(db, pagination, search, sort_by)


@router.get(
    "/genre/{genre_id}",
    response_model=PaginatedResponse[BookResponse],
    response_model_exclude_unset=True,
    summary="List books of a genre",
    description="Same as the book list, restricted to one non-deleted genre.",
)
@limiter.limit(settings.rate_limit_default)
def list_books_by_genre(
    request: Request,
    genre_id: int,
    db: DbSession,
    pagination: Pagination,
    search: SearchQuery,
    sort_by: SortKey,
) -> dict:
    return _book_page(db, pagination, search, sort_by, genre_id=genre_id)


@router.get(
    "/{book_id}",
    response_model=ApiResponse[BookResponse],
    response_model_exclude_unset=True,
    summary="Get a book by ID",
    description="The book with its genre, even if the genre was deleted since.",
)
@limiter.limit(settings.rate_limit_default)
def get_book(
    request: Request,
    book_id: int,
    db: DbSession,
) -> dict:
    book = catalog.get_book_or_404(db, book_id)
    return envelope(BookResponse.model_validate(book))


# =============================================================================
# UPDATE
# =============================================================================
@router.patch(
    "/{book_id}",
    response_model=ApiResponse[BookResponse],
    response_model_exclude_unset=True,
    summary="Update a book",
    description="Partial update: only the fields sent are changed.",
)
@limiter.limit(settings.rate_limit_write)
def update_book(
    request: Request,
    book_id: int,
    book_data: BookUpdate,
    db: DbSession,
    user_id: CurrentUserId,
) -> dict:
    book = catalog.update_book(db, book_id, book_data)
    return envelope(BookResponse.model_validate(book), message="Book updated")


# =============================================================================
# DELETE
# =============================================================================
@router.delete(
    "/{book_id}",
    response_model=ApiResponse[None],
    response_model_exclude_unset=True,
    summary="Delete a book",
    description="Soft delete: hidden from the catalog, kept for order history.",
)
@limiter.limit(settings.rate_limit_write)
def delete_book(
    request: Request,
    book_id: int,
    db: DbSession,
    user_id: CurrentUserId,
) -> dict:
    catalog.delete_book(db, book_id)
    return envelope(message="Book deleted")
