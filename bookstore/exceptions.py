"""
Application Errors

Services raise these exceptions; the exception handlers registered in
main.py are the single place that turns them into HTTP responses.

    AppError                  (message + status code)
    ├── BadRequestError        400
    │   ├── DuplicateError     400 (email / genre name / book title taken)
    │   └── InsufficientStockError 400
    ├── UnauthorizedError      401
    └── NotFoundError          404
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors that are reported to the client as-is."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class BadRequestError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class DuplicateError(BadRequestError):
    """A unique value (among non-deleted rows) is already in use."""


class InsufficientStockError(BadRequestError):
    """An order line asks for more copies than the book has in stock."""

    def __init__(self, book_id: int, title: str, available: int) -> None:
        super().__init__(
            f'Insufficient stock for "{title}". Available: {available}'
        )
        self.book_id = book_id
        self.title = title
        self.available = available


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
