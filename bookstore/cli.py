"""
Bookstore Command Line Client

Talks to a running Bookstore API over HTTP.

Usage:
    bookstore-cli register alice@example.com secret123 --username alice
    export BOOKSTORE_TOKEN=$(bookstore-cli login alice@example.com secret123)
    bookstore-cli books --search orwell --sort price
    bookstore-cli buy 1:2 3:1
    bookstore-cli stats

    # Options:
    --base-url URL   API location (default: $BOOKSTORE_API_URL or http://localhost:3000)
    --token TOKEN    Bearer token (default: $BOOKSTORE_TOKEN)

Every command prints the response envelope as JSON, except ``login`` which
prints just the token. Failed requests print the server's message to stderr
and exit with status 1; connection problems exit with status 2.
"""

import argparse
import json
import logging
import os
import sys
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_TIMEOUT = 10.0


class ApiError(Exception):
    """The API answered with an error envelope."""

    def __init__(self, status_code: int, message: str, errors: list | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.errors = errors or []

    def __str__(self) -> str:
        lines = [f"Error ({self.status_code}): {self.message}"]
        for error in self.errors:
            lines.append(f"  - {error.get('field')}: {error.get('message')}")
        return "\n".join(lines)


class BookstoreClient:
    """
    Thin wrapper over an httpx client that knows the API's envelope.

    Args:
        base_url: API root, e.g. http://localhost:3000
        token: Bearer token sent with every request, if given
        http: Pre-built httpx.Client (tests pass FastAPI's TestClient)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: str | None = None,
        http: httpx.Client | None = None,
    ) -> None:
        self.http = http or httpx.Client(base_url=base_url, timeout=DEFAULT_TIMEOUT)
        self.token = token

    def request(self, method: str, path: str, **kwargs: Any) -> dict:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        logger.debug(f"{method} {path}")
        response = self.http.request(method, path, headers=headers, **kwargs)

        try:
            body = response.json()
        except ValueError:
            raise ApiError(response.status_code, response.text or "Invalid response") from None

        if response.is_error or not body.get("success", False):
            raise ApiError(
                response.status_code,
                body.get("message", "Request failed"),
                body.get("errors"),
            )
        return body

    # -- Auth --

    def register(self, email: str, password: str, username: str | None = None) -> dict:
        payload = {"email": email, "password": password}
        if username:
            payload["username"] = username
        return self.request("POST", "/auth/register", json=payload)

    def login(self, email: str, password: str) -> dict:
        body = self.request("POST", "/auth/login", json={"email": email, "password": password})
        self.token = body["data"]["token"]
        return body

    def me(self) -> dict:
        return self.request("GET", "/auth/me")

    # -- Genres --

    def list_genres(self, page: int = 1, limit: int = 10, search: str | None = None) -> dict:
        return self.request("GET", "/genre", params=_params(page=page, limit=limit, search=search))

    def create_genre(self, name: str) -> dict:
        return self.request("POST", "/genre", json={"name": name})

    def update_genre(self, genre_id: int, name: str) -> dict:
        return self.request("PATCH", f"/genre/{genre_id}", json={"name": name})

    def delete_genre(self, genre_id: int) -> dict:
        return self.request("DELETE", f"/genre/{genre_id}")

    # -- Books --

    def list_books(
        self,
        page: int = 1,
        limit: int = 10,
        search: str | None = None,
        sort_by: str | None = None,
        genre_id: int | None = None,
    ) -> dict:
        path = "/books" if genre_id is None else f"/books/genre/{genre_id}"
        params = _params(page=page, limit=limit, search=search, sortBy=sort_by)
        return self.request("GET", path, params=params)

    def get_book(self, book_id: int) -> dict:
        return self.request("GET", f"/books/{book_id}")

    def create_book(self, fields: dict) -> dict:
        return self.request("POST", "/books", json=fields)

    def update_book(self, book_id: int, fields: dict) -> dict:
        return self.request("PATCH", f"/books/{book_id}", json=fields)

    def delete_book(self, book_id: int) -> dict:
        return self.request("DELETE", f"/books/{book_id}")

    # -- Transactions --

    def buy(self, items: list[tuple[int, int]]) -> dict:
        payload = {"items": [{"book_id": book_id, "quantity": qty} for book_id, qty in items]}
        return self.request("POST", "/transactions", json=payload)

    def list_orders(self) -> dict:
        return self.request("GET", "/transactions")

    def get_order(self, order_id: int) -> dict:
        return self.request("GET", f"/transactions/{order_id}")

    def statistics(self) -> dict:
        return self.request("GET", "/transactions/statistics")


def _params(**values: Any) -> dict:
    """Query parameters without the ones that were not given."""
    return {key: value for key, value in values.items() if value is not None}


def order_line(value: str) -> tuple[int, int]:
    """Parse a BOOK_ID:QTY argument."""
    try:
        book_id, quantity = value.split(":", 1)
        return int(book_id), int(quantity)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"expected BOOK_ID:QTY, got '{value}'"
        ) from None


# =============================================================================
# Argument Parsing
# =============================================================================
def _add_list_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--page", type=int, default=1, help="Page number (default: 1)")
    parser.add_argument("--limit", type=int, default=10, help="Items per page (default: 10)")
    parser.add_argument("--search", help="Case-insensitive substring to search for")


def _add_book_fields(parser: argparse.ArgumentParser, required: bool) -> None:
    parser.add_argument("--title", required=required)
    parser.add_argument("--writer", required=required)
    parser.add_argument("--publisher", required=required)
    parser.add_argument("--year", type=int, dest="publication_year", required=required)
    parser.add_argument("--price", required=required, help="e.g. 12.99")
    parser.add_argument("--stock", type=int, dest="stock_quantity", required=required)
    parser.add_argument("--genre-id", type=int, dest="genre_id", required=required)
    parser.add_argument("--description")


BOOK_FIELDS = (
    "title",
    "writer",
    "publisher",
    "publication_year",
    "price",
    "stock_quantity",
    "genre_id",
    "description",
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bookstore-cli",
        description="Command line client for the Bookstore API",
    )
    parser.add_argument(
        "--base-url",
        default=os.environ.get("BOOKSTORE_API_URL", DEFAULT_BASE_URL),
        help="API root URL (default: $BOOKSTORE_API_URL or %(default)s)",
    )
    parser.add_argument(
        "--token",
        default=os.environ.get("BOOKSTORE_TOKEN"),
        help="Bearer token (default: $BOOKSTORE_TOKEN)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log requests")

    commands = parser.add_subparsers(dest="command", required=True)

    p = commands.add_parser("register", help="Create an account")
    p.add_argument("email")
    p.add_argument("password")
    p.add_argument("--username")

    p = commands.add_parser("login", help="Log in and print a bearer token")
    p.add_argument("email")
    p.add_argument("password")

    commands.add_parser("me", help="Show your profile")

    p = commands.add_parser("genres", help="List genres")
    _add_list_options(p)

    p = commands.add_parser("genre-create", help="Create a genre")
    p.add_argument("name")

    p = commands.add_parser("genre-update", help="Rename a genre")
    p.add_argument("genre_id", type=int)
    p.add_argument("name")

    p = commands.add_parser("genre-delete", help="Delete a genre")
    p.add_argument("genre_id", type=int)

    p = commands.add_parser("books", help="List books")
    _add_list_options(p)
    p.add_argument("--sort", dest="sort_by", help="title, publication_year or price")

    p = commands.add_parser("books-by-genre", help="List the books of one genre")
    p.add_argument("genre_id", type=int)
    _add_list_options(p)
    p.add_argument("--sort", dest="sort_by", help="title, publication_year or price")

    p = commands.add_parser("book", help="Show one book")
    p.add_argument("book_id", type=int)

    p = commands.add_parser("book-create", help="Add a book")
    _add_book_fields(p, required=True)

    p = commands.add_parser("book-update", help="Change some fields of a book")
    p.add_argument("book_id", type=int)
    _add_book_fields(p, required=False)

    p = commands.add_parser("book-delete", help="Delete a book")
    p.add_argument("book_id", type=int)

    p = commands.add_parser("buy", help="Place an order")
    p.add_argument("items", nargs="+", type=order_line, metavar="BOOK_ID:QTY")

    commands.add_parser("orders", help="List your orders")

    p = commands.add_parser("order", help="Show one of your orders")
    p.add_argument("order_id", type=int)

    commands.add_parser("stats", help="Show sales statistics")

    return parser


def _book_fields(args: argparse.Namespace) -> dict:
    return {
        field: getattr(args, field)
        for field in BOOK_FIELDS
        if getattr(args, field) is not None
    }


def run_command(client: BookstoreClient, args: argparse.Namespace) -> dict:
    """Dispatch one parsed command to the client."""
    command = args.command

    if command == "register":
        return client.register(args.email, args.password, args.username)
    if command == "login":
        return client.login(args.email, args.password)
    if command == "me":
        return client.me()
    if command == "genres":
        return client.list_genres(args.page, args.limit, args.search)
    if command == "genre-create":
        return client.create_genre(args.name)
    if command == "genre-update":
        return client.update_genre(args.genre_id, args.name)
    if command == "genre-delete":
        return client.delete_genre(args.genre_id)
    if command == "books":
        return client.list_books(args.page, args.limit, args.search, args.sort_by)
    if command == "books-by-genre":
        return client.list_books(
            args.page, args.limit, args.search, args.sort_by, genre_id=args.genre_id
        )
    if command == "book":
        return client.get_book(args.book_id)
    if command == "book-create":
        return client.create_book(_book_fields(args))
    if command == "book-update":
        return client.update_book(args.book_id, _book_fields(args))
    if command == "book-delete":
        return client.delete_book(args.book_id)
    if command == "buy":
        return client.buy(args.items)
    if command == "orders":
        return client.list_orders()
    if command == "order":
        return client.get_order(args.order_id)
    if command == "stats":
        return client.statistics()

    raise ValueError(f"Unknown command: {command}")


def main(argv: list[str] | None = None, http: httpx.Client | None = None) -> int:
    """
    Entry point of ``bookstore-cli``.

    Args:
        argv: Arguments without the program name (defaults to sys.argv[1:])
        http: httpx client to use instead of opening a new connection

    Returns:
        Process exit status
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    client = BookstoreClient(args.base_url, token=args.token, http=http)

    try:
        body = run_command(client, args)
    except ApiError as e:
        print(e, file=sys.stderr)
        return 1
    except httpx.HTTPError as e:
        print(f"Could not reach {args.base_url}: {e}", file=sys.stderr)
        return 2

    if args.command == "login":
        print(body["data"]["token"])
    else:
        print(json.dumps(body, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
