"""
Order Service

Places orders, lists and fetches a user's orders, and computes sales
statistics.

Placing an order
================
1. Resolve every requested book among non-deleted books (404 otherwise).
2. Check stock for every book against the combined quantity requested
   for it (400 otherwise). Nothing has been written at this point.
3. In one database transaction: insert the order and its items (each
   item keeps the book's current price as ``unit_price``), then take the
   quantities out of stock with a conditional UPDATE per book. If any
   UPDATE matches no row, another order got the stock first; the whole
   transaction is rolled back and the order is rejected.

Totals are always computed from the stored ``unit_price`` values, so an
order's total never changes after it was placed.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bookstore.exceptions import InsufficientStockError, NotFoundError
from bookstore.models import Book, Order, OrderItem
from bookstore.repositories import BookRepository, OrderRepository
from bookstore.schemas.order import OrderItemCreate, StatisticsResponse

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def _requested_quantities(items: list[OrderItemCreate]) -> dict[int, int]:
    """Total quantity per book id, in first-seen order."""
    quantities: dict[int, int] = {}
    for item in items:
        quantities[item.book_id] = quantities.get(item.book_id, 0) + item.quantity
    return quantities


def _resolve_books(
    books: BookRepository,
    quantities: dict[int, int],
) -> dict[int, Book]:
    resolved: dict[int, Book] = {}
    for book_id in quantities:
        book = books.get(book_id)
        if book is None:
            raise NotFoundError(f"Book with id {book_id} not found")
        resolved[book_id] = book

    for book_id, quantity in quantities.items():
        book = resolved[book_id]
        if book.stock_quantity < quantity:
            raise InsufficientStockError(book.id, book.title, book.stock_quantity)

    return resolved


def create_order(db: Session, user_id: int, items: list[OrderItemCreate]) -> Order:
    """
    Place an order for ``user_id``.

    Returns:
        The new order with items, books and genres loaded

    Raises:
        NotFoundError: A requested book does not exist or is deleted
        InsufficientStockError: A book does not have enough copies left
    """
    books = BookRepository(db)
    orders = OrderRepository(db)

    quantities = _requested_quantities(items)
    resolved = _resolve_books(books, quantities)

    order = orders.add(
        Order(
            user_id=user_id,
            items=[
                OrderItem(
                    book_id=item.book_id,
                    quantity=item.quantity,
                    unit_price=resolved[item.book_id].price,
                )
                for item in items
            ],
        )
    )

    try:
        db.flush()
        for book_id, quantity in quantities.items():
            if not books.decrement_stock(book_id, quantity):
                db.rollback()
                raise _stock_taken(books, book_id)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info(
        f"Order {order.id} placed by user {user_id}: "
        f"{len(items)} item(s), total {order.total}"
    )
    return orders.get_with_items(order.id)


def _stock_taken(books: BookRepository, book_id: int) -> Exception:
    """Error for a book whose stock ran out between validation and write."""
    book = books.get(book_id)
    if book is None:
        logger.warning(f"Order rejected: book {book_id} was deleted meanwhile")
        return NotFoundError(f"Book with id {book_id} not found")
    logger.warning(
        f"Order rejected: stock of book {book_id} changed meanwhile "
        f"(available {book.stock_quantity})"
    )
    return InsufficientStockError(book.id, book.title, book.stock_quantity)


def list_orders(db: Session, user_id: int) -> list[Order]:
    """The user's orders, most recent first."""
    return OrderRepository(db).list_for_user(user_id)


def get_order(db: Session, order_id: int, user_id: int) -> Order:
    """
    One of the user's orders.

    Raises:
        NotFoundError: The order does not exist or belongs to someone else
    """
    order = OrderRepository(db).get_for_user(order_id, user_id)
    if order is None:
        raise NotFoundError(f"Transaction with id {order_id} not found")
    return order


def get_statistics(db: Session) -> StatisticsResponse:
    """
    Sales statistics over every order in the system.

    - avgTransaction: mean order total, rounded to 2 places (0 without orders)
    - genre popularity: copies sold per genre name, most sold first; genres
      with equal counts keep the order in which they were first seen
    """
    orders = OrderRepository(db).list_all()

    if not orders:
        return StatisticsResponse(
            total_transactions=0,
            avg_transaction=0,
            most_popular_genre=None,
            least_popular_genre=None,
        )

    revenue = sum((order.total for order in orders), start=Decimal("0"))
    average = (revenue / len(orders)).quantize(CENTS, rounding=ROUND_HALF_UP)

    sold: dict[str, int] = {}
    for order in orders:
        for item in order.items:
            name = item.book.genre.name
            sold[name] = sold.get(name, 0) + item.quantity

    ranked = sorted(sold.items(), key=lambda entry: entry[1], reverse=True)

    return StatisticsResponse(
        total_transactions=len(orders),
        avg_transaction=float(average),
        most_popular_genre=ranked[0][0],
        least_popular_genre=ranked[-1][0],
        genre_breakdown=dict(ranked),
    )
