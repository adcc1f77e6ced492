"""
Genres Router

CRUD endpoints for genres. Reads are public; writes need a bearer token.
Deleting a genre is a soft delete: books keep pointing at it.
"""

from fastapi import APIRouter, Request, status

from bookstore.config import get_settings
from bookstore.dependencies import CurrentUserId, DbSession, Pagination, SearchQuery
from bookstore.schemas import (
    ApiResponse,
    GenreCreate,
    GenreResponse,
    GenreUpdate,
    GenreWithCount,
    PaginatedResponse,
    PaginationMeta,
    envelope,
)
from bookstore.services import catalog
from bookstore.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/genre",
    tags=["Genres"],
    responses={
        404: {"description": "Genre not found"},
    },
)


def _with_count(genre, book_count: int) -> GenreWithCount:
    return GenreWithCount(
        **GenreResponse.model_validate(genre).model_dump(),
        book_count=book_count,
    )


@router.post(
    "",
    response_model=ApiResponse[GenreResponse],
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new genre",
    description="Create a genre. Names must be unique among non-deleted genres.",
)
@limiter.limit(settings.rate_limit_write)
def create_genre(
    request: Request,
    genre_data: GenreCreate,
    db: DbSession,
    user_id: CurrentUserId,
) -> dict:
    genre = catalog.create_genre(db, genre_data.name)
    return envelope(GenreResponse.model_validate(genre), message="Genre created")


@router.get(
    "",
    response_model=PaginatedResponse[GenreWithCount],
    response_model_exclude_unset=True,
    summary="List genres",
    description="Non-deleted genres, newest first, with their number of books.",
)
@limiter.limit(settings.rate_limit_default)
def list_genres(
    request: Request,
    db: DbSession,
    pagination: Pagination,
    search: SearchQuery,
) -> dict:
    rows, total = catalog.list_genres(db, pagination.page, pagination.limit, search)
    return envelope(
        [_with_count(genre, count) for genre, count in rows],
        pagination=PaginationMeta.build(pagination.page, pagination.limit, total),
    )


@router.get(
    "/{genre_id}",
    response_model=ApiResponse[GenreWithCount],
    response_model_exclude_unset=True,
    summary="Get a genre by ID",
)
@limiter.limit(settings.rate_limit_default)
def get_genre(
    request: Request,
    genre_id: int,
    db: DbSession,
) -> dict:
    genre, count = catalog.get_genre(db, genre_id)
    return envelope(_with_count(genre, count))


@router.patch(
    "/{genre_id}",
    response_model=ApiResponse[GenreResponse],
    response_model_exclude_unset=True,
    summary="Rename a genre",
)
@limiter.limit(settings.rate_limit_write)
def update_genre(
    request: Request,
    genre_id: int,
    genre_data: GenreUpdate,
    db: DbSession,
    user_id: CurrentUserId,
) -> dict:
    genre = catalog.update_genre(db, genre_id, genre_data.name)
    return envelope(GenreResponse.model_validate(genre), message="Genre updated")


@router.delete(
    "/{genre_id}",
    response_model=ApiResponse[None],
    response_model_exclude_unset=True,
    summary="Delete a genre",
    description="Soft delete: the genre disappears from listings, its books keep it.",
)
@limiter.limit(settings.rate_limit_write)
def delete_genre(
    request: Request,
    genre_id: int,
    db: DbSession,
    user_id: CurrentUserId,
) -> dict:
    catalog.delete_genre(db, genre_id)
    return envelope(message="Genre deleted")
