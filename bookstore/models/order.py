"""
Order Models

An Order (exposed as a "transaction" in the API) is a purchase record
owned by one user. It owns one or more OrderItems, kept in creation order.

Orders and their items are append-only: there are no update or delete
routes for them.

Each OrderItem stores ``unit_price``, the book price read when the order
was placed, so order totals do not drift when a book's price changes later.
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
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookstore.database import Base

if TYPE_CHECKING:
    from bookstore.models.book import Book
    from bookstore.models.user import User


class Order(Base):
    """
    Order model.

    Table: orders

    Relationships:
    - user: Many-to-One (the buyer)
    - items: One-to-Many, ordered by item id (= request order)
    """

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(primary_key=True)

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"),
        index=True,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        index=True,
        nullable=False,
    )

    user: Mapped["User"] = relationship("User", back_populates="orders")

    items: Mapped[list["OrderItem"]] = relationship(
        "OrderItem",
        back_populates="order",
        order_by="OrderItem.id",
        cascade="all, delete-orphan",
    )

    @property
    def total(self) -> Decimal:
        """Sum of unit_price × quantity over the line items."""
        return sum(
            (item.subtotal for item in self.items),
            start=Decimal("0.00"),
        )

    def __repr__(self) -> str:
        return f"Order(id={self.id}, user_id={self.user_id}, items={len(self.items)})"


class OrderItem(Base):
    """
    A single line of an order: one book and how many copies.

    Table: order_items
    """

    __tablename__ = "order_items"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    order_id: Mapped[int] = mapped_column(
        ForeignKey("orders.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    book_id: Mapped[int] = mapped_column(
        ForeignKey("books.id"),
        index=True,
        nullable=False,
    )

    quantity: Mapped[int] = mapped_column(Integer, nullable=False)

    unit_price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        comment="Book price at the time of purchase"
    )

    order: Mapped["Order"] = relationship("Order", back_populates="items")
    book: Mapped["Book"] = relationship("Book")

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity

    def __repr__(self) -> str:
        return (
            f"OrderItem(id={self.id}, book_id={self.book_id}, "
            f"quantity={self.quantity})"
        )
