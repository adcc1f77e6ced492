"""
Genre Model

Represents a book genre/category in the database.

Every book belongs to exactly one genre. Genres are soft-deleted so that
books (and past orders of those books) keep a valid genre reference.
"""

from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookstore.database import Base
from bookstore.models.mixins import SoftDeleteMixin

if TYPE_CHECKING:
    from bookstore.models.book import Book


class Genre(SoftDeleteMixin, Base):
    """
    Genre model representing book categories.

    Table: genres

    Relationships:
    - books: One-to-Many (a genre contains many books)

    Name uniqueness is only enforced among non-deleted genres, so there is
    no UNIQUE constraint on the column; the catalog service checks it.

    Example:
        genre = Genre(name="Science Fiction")
    """

    __tablename__ = "genres"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Basic Fields
    # -------------------------------------------------------------------------
    name: Mapped[str] = mapped_column(
        String(100),
        index=True,
        nullable=False,
        comment="Genre name (e.g., 'Science Fiction', 'Mystery')"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    books: Mapped[List["Book"]] = relationship(
        "Book",
        back_populates="genre",
    )

    def __repr__(self) -> str:
        return f"Genre(id={self.id}, name='{self.name}')"
