"""
Order (Transaction) Pydantic Schemas

Schemas:
- OrderItemCreate / OrderCreate: Request body for placing an order
- OrderItemResponse: One line item with a snapshot of its book and genre
- OrderResponse: Order with items and computed total
- OrderDetailResponse: OrderResponse plus the owning user
- StatisticsResponse: Sales statistics (camelCase keys)
"""

from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from bookstore.schemas.book import BookResponse
from bookstore.schemas.common import Money
from bookstore.schemas.user import UserSummary


class OrderItemCreate(BaseModel):
    """One requested line: a book and how many copies."""

    # Lax mode also accepts numeric strings such as "3"
    book_id: int = Field(..., gt=0, description="ID of the book to buy", examples=[1])
    quantity: int = Field(..., ge=1, description="Number of copies", examples=[2])


class OrderCreate(BaseModel):
    """
    Schema for placing an order.

    Example request body:
    {
        "items": [
            {"book_id": 1, "quantity": 2},
            {"book_id": 3, "quantity": 1}
        ]
    }
    """

    items: list[OrderItemCreate] = Field(
        ...,
        min_length=1,
        description="Books to buy, at least one",
    )


class OrderItemResponse(BaseModel):
    """A line item as returned by the API."""

    id: int
    book_id: int
    quantity: int
    unit_price: Money = Field(..., description="Book price when the order was placed")
    subtotal: Money = Field(..., description="unit_price × quantity")
    book: BookResponse

    model_config = ConfigDict(from_attributes=True)


class OrderResponse(BaseModel):
    """An order with its line items and total."""

    id: int
    user_id: int
    created_at: datetime
    items: list[OrderItemResponse] = Field(default_factory=list)
    total: Money = Field(..., description="Sum of the line item subtotals")

    model_config = ConfigDict(from_attributes=True)


class OrderDetailResponse(OrderResponse):
    """A single order including its owner."""

    user: UserSummary


class StatisticsResponse(BaseModel):
    """
    System-wide sales statistics.

    ``genreBreakdown`` is left out entirely when there are no orders.
    """

    total_transactions: int = Field(..., alias="totalTransactions")
    avg_transaction: float = Field(..., alias="avgTransaction")
    most_popular_genre: str | None = Field(..., alias="mostPopularGenre")
    least_popular_genre: str | None = Field(..., alias="leastPopularGenre")
    genre_breakdown: dict[str, int] | None = Field(
        default=None,
        alias="genreBreakdown",
        description="Genre name -> copies sold, most sold first",
    )

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "totalTransactions": 2,
                "avgTransaction": 17.5,
                "mostPopularGenre": "Science Fiction",
                "leastPopularGenre": "Mystery",
                "genreBreakdown": {"Science Fiction": 5, "Mystery": 2},
            }
        },
    )
