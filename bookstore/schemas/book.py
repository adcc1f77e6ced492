"""
Book Pydantic Schemas

Handles:
- Text fields that must not be blank (title, writer, publisher)
- Publication year bounds (1000 .. current year + configured horizon)
- Price (positive) and stock (non-negative) validation
- genre_id given as an integer or a numeric string
- Nested genre in responses
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from bookstore.config import get_settings
from bookstore.schemas.common import Money
from bookstore.schemas.genre import GenreResponse

MIN_PUBLICATION_YEAR = 1000


def _check_publication_year(v: int) -> int:
    latest = date.today().year + get_settings().publication_year_horizon
    if not MIN_PUBLICATION_YEAR <= v <= latest:
        raise ValueError(
            f"Publication year must be between {MIN_PUBLICATION_YEAR} and {latest}"
        )
    return v


def _check_text(v: str, label: str) -> str:
    if not v.strip():
        raise ValueError(f"{label} cannot be empty or whitespace")
    return v.strip()


class BookBase(BaseModel):
    """
    Base schema with shared book fields.

    Contains validation for:
    - Title / writer / publisher (non-blank, stripped)
    - Publication year (within bounds)
    - Price (must be positive)
    - Stock quantity (must not be negative)
    """

    title: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Book title",
        examples=["1984", "Pride and Prejudice"],
    )

    writer: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Author of the book",
        examples=["George Orwell"],
    )

    publisher: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Publishing house",
        examples=["Secker & Warburg"],
    )

    publication_year: int = Field(
        ...,
        description="Year of publication",
        examples=[1949],
    )

    description: str | None = Field(
        default=None,
        max_length=5000,
        description="Book description or summary",
        examples=["A dystopian novel set in a totalitarian society..."],
    )

    price: Decimal = Field(
        ...,
        gt=0,  # gt = greater than (no free books)
        max_digits=10,
        decimal_places=2,
        description="Unit price",
        examples=["12.99", "24.95"],
    )

    stock_quantity: int = Field(
        ...,
        ge=0,
        description="Copies available for sale",
        examples=[10],
    )

    @field_validator("publication_year")
    @classmethod
    def validate_publication_year(cls, v: int) -> int:
        return _check_publication_year(v)

    @field_validator("title", "writer", "publisher")
    @classmethod
    def text_must_not_be_empty(cls, v: str, info: ValidationInfo) -> str:
        """Validate and normalize required text fields."""
        return _check_text(v, info.field_name.capitalize())


class BookCreate(BookBase):
    """
    Schema for creating a new book.

    Example request body:
    {
        "title": "1984",
        "writer": "George Orwell",
        "publisher": "Secker & Warburg",
        "publication_year": 1949,
        "price": 12.99,
        "stock_quantity": 10,
        "genre_id": 1
    }
    """

    # Lax mode also accepts numeric strings such as "3"
    genre_id: int = Field(
        ...,
        gt=0,
        description="ID of an existing genre",
        examples=[1],
    )


class BookUpdate(BaseModel):
    """
    Schema for updating an existing book.

    All fields are optional for PATCH-style updates. Only the fields sent
    in the request are applied; required columns cannot be set to null.
    """

    title: str | None = Field(default=None, min_length=1, max_length=500)
    writer: str | None = Field(default=None, min_length=1, max_length=255)
    publisher: str | None = Field(default=None, min_length=1, max_length=255)
    publication_year: int | None = Field(default=None)
    description: str | None = Field(default=None, max_length=5000)
    price: Decimal | None = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    stock_quantity: int | None = Field(default=None, ge=0)
    genre_id: int | None = Field(default=None, gt=0)

    @field_validator(
        "title",
        "writer",
        "publisher",
        "publication_year",
        "price",
        "stock_quantity",
        "genre_id",
    )
    @classmethod
    def required_columns_not_null(cls, v, info: ValidationInfo):
        # Only runs for values present in the request body
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator("title", "writer", "publisher")
    @classmethod
    def text_must_not_be_empty(cls, v: str | None, info: ValidationInfo) -> str | None:
        if v is None:
            return v
        return _check_text(v, info.field_name.capitalize())

    @field_validator("publication_year")
    @classmethod
    def validate_publication_year(cls, v: int | None) -> int | None:
        if v is None:
            return v
        return _check_publication_year(v)


class BookResponse(BaseModel):
    """
    Schema for book responses.

    Output only, so the input validators are not re-applied to stored rows.
    The nested genre is returned even if it has been soft-deleted since,
    so clients always see where the book was filed.
    """

    id: int = Field(..., description="Unique identifier")
    title: str
    writer: str
    publisher: str
    publication_year: int
    description: str | None = None
    price: Money
    stock_quantity: int
    genre_id: int = Field(..., description="ID of the book's genre")
    created_at: datetime = Field(..., description="When the book was created")
    updated_at: datetime = Field(..., description="When the book was last updated")
    deleted_at: datetime | None = Field(default=None)

    genre: GenreResponse | None = Field(default=None, description="The book's genre")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "1984",
                "writer": "George Orwell",
                "publisher": "Secker & Warburg",
                "publication_year": 1949,
                "description": "A dystopian novel about totalitarianism",
                "price": 12.99,
                "stock_quantity": 10,
                "genre_id": 1,
                "created_at": "2024-01-15T10:30:00Z",
                "updated_at": "2024-01-15T10:30:00Z",
                "deleted_at": None,
                "genre": {
                    "id": 1,
                    "name": "Science Fiction",
                    "created_at": "2024-01-15T10:30:00Z",
                    "updated_at": "2024-01-15T10:30:00Z",
                    "deleted_at": None,
                },
            }
        },
    )
