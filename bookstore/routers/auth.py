"""
Authentication Router

Handles user authentication endpoints:
- Registration (email/password, optional username)
- Login (email/password → bearer token)
- Get current user (from bearer token)

Security:
=========
- Passwords are hashed with bcrypt before storage
- Plain text passwords and tokens are never logged or stored
- Tokens are valid for a fixed window (ACCESS_TOKEN_EXPIRE_MINUTES,
  7 days by default); there is no refresh or logout
"""

from fastapi import APIRouter, Request, status

from bookstore.config import get_settings
from bookstore.dependencies import CurrentUserId, DbSession
from bookstore.schemas import (
    ApiResponse,
    LoginRequest,
    TokenResponse,
    UserCreate,
    UserResponse,
    UserSummary,
    envelope,
)
from bookstore.services import auth
from bookstore.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        400: {"description": "Bad request (validation error or email taken)"},
        401: {"description": "Unauthorized"},
    },
)


# -------------------------------------------------------------------------
# Registration Endpoint
# -------------------------------------------------------------------------
@router.post(
    "/register",
    response_model=ApiResponse[UserResponse],
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="""
    Create a new user account with email and password.

    **Requirements:**
    - A valid, unused email address
    - Password of at least 6 characters
    - Username is optional
    """,
)
@limiter.limit(settings.rate_limit_auth)
def register(
    request: Request,
    user_data: UserCreate,
    db: DbSession,
) -> dict:
    user = auth.register_user(db, user_data)
    return envelope(UserResponse.model_validate(user), message="User registered")


# -------------------------------------------------------------------------
# Login Endpoint
# -------------------------------------------------------------------------
@router.post(
    "/login",
    response_model=ApiResponse[TokenResponse],
    response_model_exclude_unset=True,
    summary="Login with email and password",
    description="""
    Authenticate with email and password to receive a bearer token.

    **Usage:**
    Include the token in the Authorization header:
    ```
    Authorization: Bearer <token>
    ```
    """,
)
@limiter.limit(settings.rate_limit_auth)
def login(
    request: Request,
    credentials: LoginRequest,
    db: DbSession,
) -> dict:
    token, user = auth.authenticate(db, credentials.email, credentials.password)
    return envelope(
        TokenResponse(
            token=token,
            token_type="bearer",
            expires_in=auth.token_lifetime_seconds(),
            user=UserSummary.model_validate(user),
        ),
        message="Login successful",
    )


# -------------------------------------------------------------------------
# Get Current User Endpoint
# -------------------------------------------------------------------------
@router.get(
    "/me",
    response_model=ApiResponse[UserResponse],
    response_model_exclude_unset=True,
    summary="Get current user",
    description="The authenticated user's profile.",
)
@limiter.limit(settings.rate_limit_default)
def get_me(
    request: Request,
    db: DbSession,
    user_id: CurrentUserId,
) -> dict:
    user = auth.get_profile(db, user_id)
    return envelope(UserResponse.model_validate(user))
