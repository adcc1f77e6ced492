"""
Transactions Router

Placing orders and reading order history. Every endpoint needs a bearer
token. Users only ever see their own orders; the statistics endpoint is
the exception and reports on all orders in the system.
"""

from fastapi import APIRouter, Request, status

from bookstore.config import get_settings
from bookstore.dependencies import CurrentUserId, DbSession
from bookstore.schemas import (
    ApiResponse,
    OrderCreate,
    OrderDetailResponse,
    OrderResponse,
    StatisticsResponse,
    envelope,
)
from bookstore.services import orders
from bookstore.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/transactions",
    tags=["Transactions"],
    responses={
        401: {"description": "Missing or invalid token"},
        404: {"description": "Transaction or book not found"},
    },
)


@router.post(
    "",
    response_model=ApiResponse[OrderResponse],
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
    summary="Place an order",
    description="""
    Buy one or more books.

    The order is all-or-nothing: if any book is missing or does not have
    enough copies in stock, nothing is written and stock is unchanged.
    """,
)
@limiter.limit(settings.rate_limit_write)
def create_transaction(
    request: Request,
    order_data: OrderCreate,
    db: DbSession,
    user_id: CurrentUserId,
) -> dict:
    order = orders.create_order(db, user_id, order_data.items)
    return envelope(OrderResponse.model_validate(order), message="Transaction created")


@router.get(
    "",
    response_model=ApiResponse[list[OrderResponse]],
    response_model_exclude_unset=True,
    summary="List my orders",
    description="The caller's orders, most recent first, each with its total.",
)
@limiter.limit(settings.rate_limit_default)
def list_transactions(
    request: Request,
    db: DbSession,
    user_id: CurrentUserId,
) -> dict:
    return envelope(
        [OrderResponse.model_validate(order) for order in orders.list_orders(db, user_id)]
    )


# Declared before /{order_id} so "statistics" is not parsed as an id
@router.get(
    "/statistics",
    response_model=ApiResponse[StatisticsResponse],
    response_model_exclude_unset=True,
    summary="Sales statistics",
    description="""
    Aggregates over every order in the system:

    - **totalTransactions**: number of orders
    - **avgTransaction**: mean order total (2 decimals, 0 without orders)
    - **mostPopularGenre** / **leastPopularGenre**: by copies sold
    - **genreBreakdown**: copies sold per genre (absent without orders)
    """,
)
@limiter.limit(settings.rate_limit_default)
def get_statistics(
    request: Request,
    db: DbSession,
    user_id: CurrentUserId,
) -> dict:
    return envelope(orders.get_statistics(db))


@router.get(
    "/{order_id}",
    response_model=ApiResponse[OrderDetailResponse],
    response_model_exclude_unset=True,
    summary="Get one of my orders",
    description="Orders of other users are reported as not found.",
)
@limiter.limit(settings.rate_limit_default)
def get_transaction(
    request: Request,
    order_id: int,
    db: DbSession,
    user_id: CurrentUserId,
) -> dict:
    order = orders.get_order(db, order_id, user_id)
    return envelope(OrderDetailResponse.model_validate(order))
