"""
Order Repository

Orders are always loaded together with their items, each item's book and
that book's genre, because every response and every total needs them.
Books and genres are reached through relationships, so soft-deleted ones
still show up on historical orders.
"""

from sqlalchemy.orm import selectinload

from bookstore.models import Book, Order, OrderItem
from bookstore.repositories.base import Repository

ORDER_DETAIL = selectinload(Order.items).selectinload(OrderItem.book).selectinload(Book.genre)


class OrderRepository(Repository[Order]):
    model = Order

    def list_for_user(self, user_id: int) -> list[Order]:
        """All orders of one user, most recent first."""
        stmt = (
            self.select()
            .where(Order.user_id == user_id)
            .options(ORDER_DETAIL)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_for_user(self, order_id: int, user_id: int) -> Order | None:
        """An order by id, only if it belongs to ``user_id``."""
        stmt = (
            self.select()
            .where(Order.id == order_id, Order.user_id == user_id)
            .options(ORDER_DETAIL, selectinload(Order.user))
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_with_items(self, order_id: int) -> Order | None:
        return self.get(order_id, ORDER_DETAIL)

    def list_all(self) -> list[Order]:
        """Every order in the system, oldest first."""
        stmt = self.select().options(ORDER_DETAIL).order_by(Order.id.asc())
        return list(self.db.execute(stmt).scalars().all())
