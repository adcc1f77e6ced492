"""
Tests for the bookstore-cli command line client

The CLI is pointed at the app through FastAPI's TestClient, which is an
httpx.Client, so requests go through the real routes and database.
"""

import argparse
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from bookstore.cli import ApiError, BookstoreClient, main, order_line


def token_of(headers: dict) -> str:
    return headers["Authorization"].removeprefix("Bearer ")


class TestOrderLine:
    def test_parses_book_and_quantity(self):
        assert order_line("3:2") == (3, 2)

    @pytest.mark.parametrize("value", ["3", "a:1", "3:x", ""])
    def test_rejects_malformed(self, value):
        with pytest.raises(argparse.ArgumentTypeError):
            order_line(value)


class TestBookstoreClient:
    def test_login_stores_token(self, client: TestClient, sample_user):
        api = BookstoreClient(http=client)

        api.login("testuser@example.com", "secret123")

        assert api.token
        assert api.me()["data"]["email"] == "testuser@example.com"

    def test_error_envelope_raises(self, client: TestClient):
        api = BookstoreClient(http=client)

        with pytest.raises(ApiError) as exc_info:
            api.get_book(99999)

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Book with id 99999 not found"

    def test_validation_errors_are_listed(self, client: TestClient):
        api = BookstoreClient(http=client)

        with pytest.raises(ApiError) as exc_info:
            api.register("bad-email", "123")

        text = str(exc_info.value)
        assert text.startswith("Error (400): Validation error")
        assert "  - email:" in text
        assert "  - password:" in text


class TestMain:
    def test_login_prints_token(self, client: TestClient, sample_user, capsys):
        code = main(["login", "testuser@example.com", "secret123"], http=client)

        assert code == 0
        token = capsys.readouterr().out.strip()
        assert token.count(".") == 2

    def test_list_books(self, client: TestClient, multiple_books, capsys):
        code = main(["books", "--sort", "price", "--limit", "3"], http=client)

        assert code == 0
        body = json.loads(capsys.readouterr().out)
        assert [book["title"] for book in body["data"]] == [
            "Test Book 01",
            "Test Book 02",
            "Test Book 03",
        ]
        assert body["pagination"]["total"] == 12

    def test_create_book(self, client: TestClient, auth_headers, sample_genre, capsys):
        code = main(
            [
                "--token", token_of(auth_headers),
                "book-create",
                "--title", "Neuromancer",
                "--writer", "William Gibson",
                "--publisher", "Ace",
                "--year", "1984",
                "--price", "9.99",
                "--stock", "4",
                "--genre-id", str(sample_genre.id),
            ],
            http=client,
        )

        assert code == 0
        data = json.loads(capsys.readouterr().out)["data"]
        assert data["title"] == "Neuromancer"
        assert data["price"] == 9.99

    def test_buy(self, client: TestClient, auth_headers, sample_book, capsys):
        code = main(
            ["--token", token_of(auth_headers), "buy", f"{sample_book.id}:2"],
            http=client,
        )

        assert code == 0
        data = json.loads(capsys.readouterr().out)["data"]
        assert data["total"] == 25.98

    def test_api_error_exit_code(self, client: TestClient, capsys):
        code = main(["book", "99999"], http=client)

        assert code == 1
        assert "Error (404): Book with id 99999 not found" in capsys.readouterr().err

    def test_protected_command_without_token(self, client: TestClient, capsys, monkeypatch):
        monkeypatch.delenv("BOOKSTORE_TOKEN", raising=False)

        code = main(["orders"], http=client)

        assert code == 1
        assert "Token missing" in capsys.readouterr().err

    def test_connection_error_exit_code(self, capsys):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        http = httpx.Client(
            base_url="http://bookstore.invalid",
            transport=httpx.MockTransport(refuse),
        )

        code = main(["genres"], http=http)

        assert code == 2
        assert "Could not reach" in capsys.readouterr().err

    def test_bad_order_line_is_usage_error(self, client: TestClient):
        with pytest.raises(SystemExit) as exc_info:
            main(["buy", "not-a-line"], http=client)

        assert exc_info.value.code == 2
