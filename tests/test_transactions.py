"""
Tests for Transaction Endpoints

Covers:
- Placing orders (POST /transactions): totals, stock, all-or-nothing
- Order history (GET /transactions)
- Order detail (GET /transactions/{id}), owner only
"""

from decimal import Decimal

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bookstore.models import Order, OrderItem


def order_count(db: Session) -> int:
    return db.scalar(select(func.count()).select_from(Order))


def place_order(client: TestClient, headers: dict, *lines: tuple[int, int]):
    return client.post(
        "/transactions",
        json={"items": [{"book_id": book_id, "quantity": qty} for book_id, qty in lines]},
        headers=headers,
    )


class TestCreateTransaction:
    """Tests for POST /transactions"""

    def test_create_order(
        self,
        client: TestClient,
        db_session: Session,
        auth_headers,
        sample_user,
        sample_genre,
        book_factory,
    ):
        """Total is the sum of unit_price x quantity; stock goes down."""
        cheap = book_factory(sample_genre, title="Cheap", price=Decimal("5.00"), stock_quantity=10)
        dear = book_factory(sample_genre, title="Dear", price=Decimal("7.50"), stock_quantity=4)

        response = place_order(client, auth_headers, (cheap.id, 2), (dear.id, 2))

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Transaction created"

        data = body["data"]
        assert data["user_id"] == sample_user.id
        assert data["total"] == 25.00
        assert isinstance(data["total"], float)
        assert len(data["items"]) == 2

        first = data["items"][0]
        assert first["book_id"] == cheap.id
        assert first["quantity"] == 2
        assert first["unit_price"] == 5.00
        assert first["subtotal"] == 10.00
        assert isinstance(first["unit_price"], float)
        assert isinstance(first["subtotal"], float)
        assert first["book"]["title"] == "Cheap"
        assert first["book"]["genre"]["name"] == "Science Fiction"

        db_session.refresh(cheap)
        db_session.refresh(dear)
        assert cheap.stock_quantity == 8
        assert dear.stock_quantity == 2

    def test_order_can_take_last_copy(
        self,
        client: TestClient,
        db_session: Session,
        auth_headers,
        sample_genre,
        book_factory,
    ):
        book = book_factory(sample_genre, stock_quantity=3)

        response = place_order(client, auth_headers, (book.id, 3))

        assert response.status_code == status.HTTP_201_CREATED
        db_session.refresh(book)
        assert book.stock_quantity == 0

    def test_total_keeps_price_at_purchase(
        self,
        client: TestClient,
        auth_headers,
        sample_book,
    ):
        """Changing a book's price later does not change past orders."""
        created = place_order(client, auth_headers, (sample_book.id, 1)).json()["data"]
        client.patch(f"/books/{sample_book.id}", json={"price": 99.99}, headers=auth_headers)

        response = client.get(f"/transactions/{created['id']}", headers=auth_headers)

        data = response.json()["data"]
        assert data["total"] == 12.99
        assert data["items"][0]["unit_price"] == 12.99

    def test_duplicate_book_lines_share_stock(
        self,
        client: TestClient,
        db_session: Session,
        auth_headers,
        sample_genre,
        book_factory,
    ):
        """Two lines for the same book are checked against its stock together."""
        book = book_factory(sample_genre, stock_quantity=5)

        response = place_order(client, auth_headers, (book.id, 3), (book.id, 3))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        db_session.refresh(book)
        assert book.stock_quantity == 5
        assert order_count(db_session) == 0

    def test_duplicate_book_lines_within_stock(
        self,
        client: TestClient,
        db_session: Session,
        auth_headers,
        sample_genre,
        book_factory,
    ):
        book = book_factory(sample_genre, stock_quantity=5)

        response = place_order(client, auth_headers, (book.id, 2), (book.id, 3))

        assert response.status_code == status.HTTP_201_CREATED
        assert len(response.json()["data"]["items"]) == 2
        db_session.refresh(book)
        assert book.stock_quantity == 0

    def test_insufficient_stock(
        self,
        client: TestClient,
        db_session: Session,
        auth_headers,
        sample_genre,
        book_factory,
    ):
        """Nothing is written when one line cannot be filled."""
        plenty = book_factory(sample_genre, title="Plenty", stock_quantity=10)
        scarce = book_factory(sample_genre, title="Scarce", stock_quantity=1)

        response = place_order(client, auth_headers, (plenty.id, 2), (scarce.id, 2))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        body = response.json()
        assert body["success"] is False
        assert body["message"] == 'Insufficient stock for "Scarce". Available: 1'

        db_session.refresh(plenty)
        db_session.refresh(scarce)
        assert plenty.stock_quantity == 10
        assert scarce.stock_quantity == 1
        assert order_count(db_session) == 0
        assert db_session.scalar(select(func.count()).select_from(OrderItem)) == 0

    def test_unknown_book(
        self,
        client: TestClient,
        db_session: Session,
        auth_headers,
        sample_book,
    ):
        response = place_order(client, auth_headers, (sample_book.id, 1), (99999, 1))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "Book with id 99999 not found"
        db_session.refresh(sample_book)
        assert sample_book.stock_quantity == 10
        assert order_count(db_session) == 0

    def test_missing_book_reported_before_stock(
        self,
        client: TestClient,
        auth_headers,
        sample_genre,
        book_factory,
    ):
        """A missing book wins over a stock problem earlier in the list."""
        scarce = book_factory(sample_genre, stock_quantity=0)

        response = place_order(client, auth_headers, (scarce.id, 1), (99999, 1))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_deleted_book_cannot_be_ordered(
        self,
        client: TestClient,
        auth_headers,
        sample_book,
    ):
        client.delete(f"/books/{sample_book.id}", headers=auth_headers)

        response = place_order(client, auth_headers, (sample_book.id, 1))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_empty_items(self, client: TestClient, auth_headers):
        response = client.post("/transactions", json={"items": []}, headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Validation error"

    def test_invalid_quantity(self, client: TestClient, auth_headers, sample_book):
        response = place_order(client, auth_headers, (sample_book.id, 1), (sample_book.id, 0))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        fields = {error["field"] for error in response.json()["errors"]}
        assert "items.1.quantity" in fields

    def test_requires_token(self, client: TestClient, db_session: Session, sample_book):
        response = client.post(
            "/transactions",
            json={"items": [{"book_id": sample_book.id, "quantity": 1}]},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert order_count(db_session) == 0


class TestListTransactions:
    """Tests for GET /transactions"""

    def test_list_own_orders_newest_first(
        self,
        client: TestClient,
        auth_headers,
        second_auth_headers,
        sample_book,
    ):
        first = place_order(client, auth_headers, (sample_book.id, 1)).json()["data"]
        second = place_order(client, auth_headers, (sample_book.id, 2)).json()["data"]
        place_order(client, second_auth_headers, (sample_book.id, 1))

        response = client.get("/transactions", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        orders = response.json()["data"]
        assert [order["id"] for order in orders] == [second["id"], first["id"]]
        assert orders[0]["total"] == 25.98

    def test_list_no_orders(self, client: TestClient, auth_headers):
        response = client.get("/transactions", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"] == []

    def test_list_requires_token(self, client: TestClient):
        response = client.get("/transactions")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestGetTransaction:
    """Tests for GET /transactions/{id}"""

    def test_get_own_order(
        self,
        client: TestClient,
        auth_headers,
        sample_user,
        sample_book,
    ):
        created = place_order(client, auth_headers, (sample_book.id, 2)).json()["data"]

        response = client.get(f"/transactions/{created['id']}", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["id"] == created["id"]
        assert data["user"] == {
            "id": sample_user.id,
            "email": sample_user.email,
            "username": "testuser",
        }
        assert data["items"][0]["book"]["title"] == "1984"
        assert data["total"] == 25.98

    def test_order_still_shows_deleted_book(
        self,
        client: TestClient,
        auth_headers,
        sample_book,
    ):
        created = place_order(client, auth_headers, (sample_book.id, 1)).json()["data"]
        client.delete(f"/books/{sample_book.id}", headers=auth_headers)

        response = client.get(f"/transactions/{created['id']}", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        book = response.json()["data"]["items"][0]["book"]
        assert book["deleted_at"] is not None

    def test_other_users_order_is_not_found(
        self,
        client: TestClient,
        auth_headers,
        second_auth_headers,
        sample_book,
    ):
        created = place_order(client, auth_headers, (sample_book.id, 1)).json()["data"]

        response = client.get(f"/transactions/{created['id']}", headers=second_auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == f"Transaction with id {created['id']} not found"

    def test_unknown_order(self, client: TestClient, auth_headers):
        response = client.get("/transactions/99999", headers=auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_non_numeric_id(self, client: TestClient, auth_headers):
        response = client.get("/transactions/abc", headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
