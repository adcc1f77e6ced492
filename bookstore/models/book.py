"""
Book Model

The central model of the Bookstore API, representing books for sale.

Stock is the one mutable numeric invariant in the system: it is only
decreased by order placement and must never go negative. The CHECK
constraint backs up the conditional UPDATE used by the order service.
"""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookstore.database import Base
from bookstore.models.mixins import SoftDeleteMixin

if TYPE_CHECKING:
    from bookstore.models.genre import Genre


class Book(SoftDeleteMixin, Base):
    """
    Book model representing books in the store.

    Table: books

    Fields:
    - title: Book title (unique among non-deleted books)
    - writer / publisher: Free text
    - publication_year: Year of publication
    - description: Optional summary
    - price: Unit price with 2 decimal precision
    - stock_quantity: Copies available for sale

    Relationships:
    - genre: Many-to-One (every book has one genre)

    Example:
        book = Book(
            title="1984",
            writer="George Orwell",
            publisher="Secker & Warburg",
            publication_year=1949,
            price=Decimal("12.99"),
            stock_quantity=10,
            genre_id=1,
        )
    """

    __tablename__ = "books"
    __table_args__ = (
        CheckConstraint("stock_quantity >= 0", name="ck_books_stock_nonneg"),
        CheckConstraint("price > 0", name="ck_books_price_positive"),
    )

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Basic Fields
    # -------------------------------------------------------------------------
    title: Mapped[str] = mapped_column(
        String(500),
        index=True,
        nullable=False,
        comment="Book title"
    )

    writer: Mapped[str] = mapped_column(
        String(255),
        index=True,
        nullable=False,
        comment="Author of the book"
    )

    publisher: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Publishing house"
    )

    publication_year: Mapped[int] = mapped_column(
        Integer,
        index=True,
        nullable=False,
        comment="Year of publication"
    )

    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Book description or summary"
    )

    # Numeric(10, 2) = up to 10 digits, 2 after decimal point
    # Using Decimal (not float) for precise money calculations
    price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        index=True,
        nullable=False,
        comment="Unit price"
    )

    stock_quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Copies available for sale"
    )

    genre_id: Mapped[int] = mapped_column(
        ForeignKey("genres.id"),
        index=True,
        nullable=False,
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
    # The genre may be soft-deleted; the book still points at it.
    genre: Mapped["Genre"] = relationship(
        "Genre",
        back_populates="books",
    )

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title}', stock={self.stock_quantity})"
