"""
User Pydantic Schemas

Schemas:
- UserCreate: Registration data (email, password, optional username)
- LoginRequest: Email/password login body
- UserResponse: Public user data (never exposes password)
- UserSummary: Minimal user block embedded in login and order responses
- TokenResponse: Login result (bearer token + user)
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class UserCreate(BaseModel):
    """
    Schema for user registration.

    Example request body:
    {
        "email": "john@example.com",
        "password": "secret123",
        "username": "johndoe"
    }
    """

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["john@example.com"],
    )

    password: str = Field(
        ...,
        min_length=6,
        max_length=72,  # bcrypt only uses the first 72 bytes
        description="Password (min 6 characters)",
        examples=["secret123"],
    )

    username: str | None = Field(
        default=None,
        max_length=50,
        description="Optional display name",
        examples=["johndoe"],
    )

    @field_validator("username")
    @classmethod
    def blank_username_is_none(cls, v: str | None) -> str | None:
        """Treat an empty username as not given."""
        if v is None or not v.strip():
            return None
        return v.strip()


class LoginRequest(BaseModel):
    """Schema for email/password login."""

    email: EmailStr = Field(..., description="Registered email address")
    password: str = Field(..., min_length=1, description="Account password")


class UserSummary(BaseModel):
    """Minimal user information."""

    id: int
    email: EmailStr
    username: str | None = None

    model_config = ConfigDict(from_attributes=True)


class UserResponse(UserSummary):
    """
    Schema for user responses (what the API returns).

    SECURITY: Never includes the password hash.
    """

    created_at: datetime = Field(..., description="When the user registered")
    updated_at: datetime = Field(..., description="When the user row last changed")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "email": "john@example.com",
                "username": "johndoe",
                "created_at": "2024-01-15T10:30:00Z",
                "updated_at": "2024-01-15T10:30:00Z",
            }
        },
    )


class TokenResponse(BaseModel):
    """Login result: a bearer token and the authenticated user."""

    token: str = Field(..., description="Bearer token for the Authorization header")
    token_type: str = Field(default="bearer")
    expires_in: int = Field(..., description="Token lifetime in seconds")
    user: UserSummary
