"""
Catalog Repositories

Queries for genres and books. All of them start from ``Repository.select()``,
so soft-deleted rows never appear in listings, lookups or name checks.
"""

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import selectinload

from bookstore.models import Book, Genre
from bookstore.repositories.base import Repository

# sortBy value -> ORDER BY clause; anything else uses DEFAULT_BOOK_ORDER
BOOK_SORTS = {
    "title": (Book.title.asc(), Book.id.asc()),
    "publication_year": (Book.publication_year.desc(), Book.id.desc()),
    "price": (Book.price.asc(), Book.id.asc()),
}
DEFAULT_BOOK_ORDER = (Book.created_at.desc(), Book.id.desc())


def _contains(column, term: str):
    """Case-insensitive substring match; % and _ in the term match literally."""
    return column.icontains(term, autoescape=True)


class GenreRepository(Repository[Genre]):
    model = Genre

    def name_taken(self, name: str, exclude_id: int | None = None) -> bool:
        criteria = [Genre.name == name]
        if exclude_id is not None:
            criteria.append(Genre.id != exclude_id)
        return self.exists(*criteria)

    def list_page(
        self,
        page: int,
        limit: int,
        search: str | None = None,
    ) -> tuple[list[Genre], int]:
        stmt = self.select()
        if search:
            stmt = stmt.where(_contains(Genre.name, search))
        return self.paginate(
            stmt,
            page,
            limit,
            order_by=(Genre.created_at.desc(), Genre.id.desc()),
        )

    def book_counts(self, genre_ids: list[int]) -> dict[int, int]:
        """Number of non-deleted books per genre id."""
        if not genre_ids:
            return {}
        stmt = (
            select(Book.genre_id, func.count(Book.id))
            .where(Book.genre_id.in_(genre_ids), Book.not_deleted())
            .group_by(Book.genre_id)
        )
        counts = {genre_id: 0 for genre_id in genre_ids}
        counts.update(dict(self.db.execute(stmt).tuples().all()))
        return counts


class BookRepository(Repository[Book]):
    model = Book

    def get_with_genre(self, book_id: int) -> Book | None:
        return self.get(book_id, selectinload(Book.genre))

    def title_taken(self, title: str, exclude_id: int | None = None) -> bool:
        criteria = [Book.title == title]
        if exclude_id is not None:
            criteria.append(Book.id != exclude_id)
        return self.exists(*criteria)

    def list_page(
        self,
        page: int,
        limit: int,
        search: str | None = None,
        sort_by: str | None = None,
        genre_id: int | None = None,
    ) -> tuple[list[Book], int]:
        """
        One page of visible books.

        Args:
            search: Case-insensitive substring matched against title or writer
            sort_by: "title", "publication_year" or "price"; anything else
                sorts newest first
            genre_id: Restrict to one genre
        """
        stmt = self.select()
        if genre_id is not None:
            stmt = stmt.where(Book.genre_id == genre_id)
        if search:
            stmt = stmt.where(
                or_(_contains(Book.title, search), _contains(Book.writer, search))
            )

        return self.paginate(
            stmt,
            page,
            limit,
            order_by=BOOK_SORTS.get(sort_by or "", DEFAULT_BOOK_ORDER),
            options=(selectinload(Book.genre),),
        )

    def decrement_stock(self, book_id: int, quantity: int) -> bool:
        """
        Atomically take ``quantity`` copies out of stock.

        Issues ``UPDATE books SET stock_quantity = stock_quantity - :qty
        WHERE id = :id AND deleted_at IS NULL AND stock_quantity >= :qty``,
        so the row is only touched if the book is still listed and enough
        stock is left at the moment of the write.

        Returns:
            True if the row was updated, False if stock was insufficient
        """
        stmt = (
            update(Book)
            .where(
                Book.id == book_id,
                Book.not_deleted(),
                Book.stock_quantity >= quantity,
            )
            .values(stock_quantity=Book.stock_quantity - quantity)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        return result.rowcount == 1
