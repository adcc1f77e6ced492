"""
Tests for GET /transactions/statistics
"""

from decimal import Decimal

import pytest
from fastapi import status
from fastapi.testclient import TestClient


@pytest.fixture
def priced_books(sample_genre, second_genre, book_factory):
    """A 10.00 Science Fiction book and a 4.00 Mystery book, plenty in stock."""
    scifi = book_factory(sample_genre, title="Dune", price=Decimal("10.00"), stock_quantity=50)
    mystery = book_factory(
        second_genre,
        title="The Big Sleep",
        price=Decimal("4.00"),
        stock_quantity=50,
    )
    return scifi, mystery


def buy(client: TestClient, headers: dict, *lines: tuple[int, int]) -> None:
    response = client.post(
        "/transactions",
        json={"items": [{"book_id": book_id, "quantity": qty} for book_id, qty in lines]},
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED


class TestStatistics:
    """Tests for GET /transactions/statistics"""

    def test_no_orders(self, client: TestClient, auth_headers):
        """Without orders the breakdown key is left out entirely."""
        response = client.get("/transactions/statistics", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "success": True,
            "data": {
                "totalTransactions": 0,
                "avgTransaction": 0,
                "mostPopularGenre": None,
                "leastPopularGenre": None,
            },
        }

    def test_statistics(self, client: TestClient, auth_headers, priced_books):
        scifi, mystery = priced_books
        buy(client, auth_headers, (scifi.id, 3))
        buy(client, auth_headers, (scifi.id, 2), (mystery.id, 2))

        response = client.get("/transactions/statistics", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["totalTransactions"] == 2
        # (30.00 + 28.00) / 2
        assert data["avgTransaction"] == 29.0
        assert data["mostPopularGenre"] == "Science Fiction"
        assert data["leastPopularGenre"] == "Mystery"
        assert data["genreBreakdown"] == {"Science Fiction": 5, "Mystery": 2}
        assert list(data["genreBreakdown"]) == ["Science Fiction", "Mystery"]

    def test_counts_orders_of_all_users(
        self,
        client: TestClient,
        auth_headers,
        second_auth_headers,
        priced_books,
    ):
        scifi, mystery = priced_books
        buy(client, auth_headers, (scifi.id, 1))
        buy(client, second_auth_headers, (mystery.id, 4))

        response = client.get("/transactions/statistics", headers=second_auth_headers)

        data = response.json()["data"]
        assert data["totalTransactions"] == 2
        assert data["mostPopularGenre"] == "Mystery"
        assert data["leastPopularGenre"] == "Science Fiction"

    def test_average_rounds_half_up(self, client: TestClient, auth_headers, sample_genre, book_factory):
        penny = book_factory(sample_genre, title="Penny", price=Decimal("0.01"), stock_quantity=10)
        buy(client, auth_headers, (penny.id, 1))
        buy(client, auth_headers, (penny.id, 2))

        response = client.get("/transactions/statistics", headers=auth_headers)

        # (0.01 + 0.02) / 2 = 0.015
        assert response.json()["data"]["avgTransaction"] == 0.02

    def test_tied_genres_keep_first_seen_order(
        self,
        client: TestClient,
        auth_headers,
        priced_books,
    ):
        scifi, mystery = priced_books
        buy(client, auth_headers, (mystery.id, 2))
        buy(client, auth_headers, (scifi.id, 2))

        data = client.get("/transactions/statistics", headers=auth_headers).json()["data"]

        assert data["mostPopularGenre"] == "Mystery"
        assert data["leastPopularGenre"] == "Science Fiction"

    def test_single_genre(self, client: TestClient, auth_headers, sample_book):
        buy(client, auth_headers, (sample_book.id, 1))

        data = client.get("/transactions/statistics", headers=auth_headers).json()["data"]

        assert data["mostPopularGenre"] == data["leastPopularGenre"] == "Science Fiction"
        assert data["genreBreakdown"] == {"Science Fiction": 1}

    def test_deleted_genre_still_counted(
        self,
        client: TestClient,
        auth_headers,
        sample_book,
    ):
        buy(client, auth_headers, (sample_book.id, 2))
        client.delete(f"/genre/{sample_book.genre_id}", headers=auth_headers)

        data = client.get("/transactions/statistics", headers=auth_headers).json()["data"]

        assert data["genreBreakdown"] == {"Science Fiction": 2}

    def test_requires_token(self, client: TestClient):
        response = client.get("/transactions/statistics")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
