"""
Catalog Service

Business rules for genres and books:

- Genre names and book titles are unique among non-deleted rows only,
  so the name of a deleted genre (or title of a deleted book) can be reused.
- Reads, updates and deletes only see non-deleted rows; a missing or
  deleted row is a 404.
- Delete is soft: ``deleted_at`` is set and the row stays, so books keep
  their genre and past orders keep their books.
- A book's genre must be a non-deleted genre when it is set.

Every function takes the request's session and commits its own writes.
"""

import logging
from typing import Any

from sqlalchemy.orm import Session

from bookstore.exceptions import DuplicateError, NotFoundError
from bookstore.models import Book, Genre
from bookstore.repositories import BookRepository, GenreRepository
from bookstore.schemas.book import BookCreate, BookUpdate

logger = logging.getLogger(__name__)


# =============================================================================
# Genres
# =============================================================================
def get_genre_or_404(db: Session, genre_id: int) -> Genre:
    """Load a non-deleted genre or raise NotFoundError."""
    genre = GenreRepository(db).get(genre_id)
    if genre is None:
        raise NotFoundError(f"Genre with id {genre_id} not found")
    return genre


def create_genre(db: Session, name: str) -> Genre:
    genres = GenreRepository(db)
    if genres.name_taken(name):
        raise DuplicateError(f"Genre '{name}' already exists")

    genre = genres.add(Genre(name=name))
    db.commit()
    db.refresh(genre)

    logger.info(f"Created genre: {genre.name} (id={genre.id})")
    return genre


def list_genres(
    db: Session,
    page: int,
    limit: int,
    search: str | None = None,
) -> tuple[list[tuple[Genre, int]], int]:
    """
    One page of genres, newest first, each paired with its book count.

    Returns:
        ([(genre, book_count), ...], total)
    """
    genres = GenreRepository(db)
    items, total = genres.list_page(page, limit, search=search)
    counts = genres.book_counts([genre.id for genre in items])
    return [(genre, counts[genre.id]) for genre in items], total


def get_genre(db: Session, genre_id: int) -> tuple[Genre, int]:
    """A genre and its book count."""
    genre = get_genre_or_404(db, genre_id)
    return genre, GenreRepository(db).book_counts([genre.id])[genre.id]


def update_genre(db: Session, genre_id: int, name: str) -> Genre:
    genres = GenreRepository(db)
    genre = get_genre_or_404(db, genre_id)

    if genres.name_taken(name, exclude_id=genre.id):
        raise DuplicateError(f"Genre '{name}' already exists")

    genre.name = name
    db.commit()
    db.refresh(genre)

    logger.info(f"Updated genre: {genre.name} (id={genre.id})")
    return genre


def delete_genre(db: Session, genre_id: int) -> None:
    genre = get_genre_or_404(db, genre_id)
    genre.soft_delete()
    db.commit()
    logger.info(f"Deleted genre: {genre.name} (id={genre.id})")


# =============================================================================
# Books
# =============================================================================
def get_book_or_404(db: Session, book_id: int) -> Book:
    """Load a non-deleted book (with its genre) or raise NotFoundError."""
    book = BookRepository(db).get_with_genre(book_id)
    if book is None:
        raise NotFoundError(f"Book with id {book_id} not found")
    return book


def create_book(db: Session, data: BookCreate) -> Book:
    """
    Create a book.

    Raises:
        DuplicateError: Title already used by a non-deleted book
        NotFoundError: genre_id is not a non-deleted genre
    """
    books = BookRepository(db)
    if books.title_taken(data.title):
        raise DuplicateError(f"Book with title '{data.title}' already exists")
    get_genre_or_404(db, data.genre_id)

    book = books.add(Book(**data.model_dump()))
    db.commit()

    logger.info(f"Created book: {book.title} (id={book.id})")
    return get_book_or_404(db, book.id)


def list_books(
    db: Session,
    page: int,
    limit: int,
    search: str | None = None,
    sort_by: str | None = None,
    genre_id: int | None = None,
) -> tuple[list[Book], int]:
    """
    One page of books, optionally restricted to a genre.

    Raises:
        NotFoundError: genre_id is given but not a non-deleted genre
    """
    if genre_id is not None:
        get_genre_or_404(db, genre_id)
    return BookRepository(db).list_page(
        page,
        limit,
        search=search,
        sort_by=sort_by,
        genre_id=genre_id,
    )


def update_book(db: Session, book_id: int, data: BookUpdate) -> Book:
    """
    Apply a partial update; only fields present in the request change.

    Raises:
        NotFoundError: Book missing, or new genre_id not a non-deleted genre
        DuplicateError: New title already used by another book
    """
    books = BookRepository(db)
    book = get_book_or_404(db, book_id)
    changes: dict[str, Any] = data.model_dump(exclude_unset=True)

    if "title" in changes and books.title_taken(changes["title"], exclude_id=book.id):
        raise DuplicateError(f"Book with title '{changes['title']}' already exists")
    if "genre_id" in changes:
        get_genre_or_404(db, changes["genre_id"])

    for field, value in changes.items():
        setattr(book, field, value)
    db.commit()

    logger.info(f"Updated book: {book.title} (id={book.id}) fields={sorted(changes)}")
    return get_book_or_404(db, book.id)


def delete_book(db: Session, book_id: int) -> None:
    book = get_book_or_404(db, book_id)
    book.soft_delete()
    db.commit()
    logger.info(f"Deleted book: {book.title} (id={book.id})")
