"""
Base Repository

Provides a generic repository with lookup and pagination helpers on top
of a synchronous SQLAlchemy session.

Soft-delete filtering lives here: for any model using SoftDeleteMixin,
``select()`` already excludes deleted rows, so every listing, lookup and
duplicate check built on it sees only visible rows. Code that must see
deleted rows (e.g. the genre of a book, or the books of a historical
order) goes through relationships instead.

Subclass and set ``model``::

    class GenreRepository(Repository[Genre]):
        model = Genre
"""

from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from bookstore.database import Base
from bookstore.models.mixins import SoftDeleteMixin

ModelT = TypeVar("ModelT", bound=Base)


class Repository(Generic[ModelT]):
    """Generic repository bound to one session and one model."""

    model: type[ModelT]

    def __init__(self, db: Session) -> None:
        self.db = db

    @property
    def soft_deletes(self) -> bool:
        return issubclass(self.model, SoftDeleteMixin)

    # -- Query building --

    def select(self) -> Select:
        """SELECT of the model restricted to visible (non-deleted) rows."""
        stmt = select(self.model)
        if self.soft_deletes:
            stmt = stmt.where(self.model.not_deleted())
        return stmt

    # -- Lookups --

    def get(self, item_id: int, *options: Any) -> ModelT | None:
        """Get a visible row by primary key, or None."""
        stmt = self.select().where(self.model.id == item_id)
        if options:
            stmt = stmt.options(*options)
        return self.db.execute(stmt).scalar_one_or_none()

    def find_by(self, *criteria: Any) -> ModelT | None:
        """First visible row matching all criteria, or None."""
        stmt = self.select().where(*criteria).limit(1)
        return self.db.execute(stmt).scalars().first()

    def exists(self, *criteria: Any) -> bool:
        return self.find_by(*criteria) is not None

    # -- Pagination --

    def paginate(
        self,
        stmt: Select,
        page: int,
        limit: int,
        order_by: Sequence[Any] = (),
        options: Sequence[Any] = (),
    ) -> tuple[list[ModelT], int]:
        """
        Run ``stmt`` for one page.

        The total is counted over the filtered statement before ordering,
        eager-loading options and LIMIT/OFFSET are applied.

        Returns:
            (items for the requested page, total matching rows)
        """
        count_stmt = select(func.count()).select_from(stmt.subquery())
        total = self.db.execute(count_stmt).scalar() or 0

        page_stmt = (
            stmt
            .options(*options)
            .order_by(*order_by)
            .offset((page - 1) * limit)
            .limit(limit)
        )
        items = self.db.execute(page_stmt).scalars().all()
        return list(items), total

    # -- Writes --

    def add(self, obj: ModelT) -> ModelT:
        """Add a new row to the session. The caller commits."""
        self.db.add(obj)
        return obj
