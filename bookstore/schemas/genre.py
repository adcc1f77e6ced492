"""
Genre Pydantic Schemas

Schemas for genre-related API operations.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GenreBase(BaseModel):
    """Base schema with shared genre fields."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Genre name",
        examples=["Science Fiction", "Mystery", "Romance"],
    )

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        """Validate and normalize genre name."""
        if not v.strip():
            raise ValueError("Genre name cannot be empty or whitespace")
        return v.strip()


class GenreCreate(GenreBase):
    """Schema for creating a new genre."""
    pass


class GenreUpdate(GenreBase):
    """Schema for renaming a genre. The name is the only editable field."""
    pass


class GenreResponse(GenreBase):
    """Schema for genre responses."""

    id: int = Field(..., description="Unique identifier")
    created_at: datetime = Field(..., description="When the genre was created")
    updated_at: datetime = Field(..., description="When the genre was last updated")
    deleted_at: datetime | None = Field(
        default=None,
        description="Set once the genre is soft-deleted",
    )

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "name": "Science Fiction",
                "created_at": "2024-01-15T10:30:00Z",
                "updated_at": "2024-01-15T10:30:00Z",
                "deleted_at": None,
            }
        },
    )


class GenreWithCount(GenreResponse):
    """Genre plus the number of (non-deleted) books in it."""

    book_count: int = Field(default=0, ge=0, description="Books in this genre")
