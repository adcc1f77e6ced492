"""
Authentication Service

Handles user registration, login and profile lookup.

Security Features:
=================
1. Passwords are stored as bcrypt hashes only
2. Unknown email and wrong password produce the same error, so the
   response does not reveal which emails are registered
3. Tokens carry only the user id (``sub``) and expire after the
   configured validity window
"""

import logging

from sqlalchemy.orm import Session

from bookstore.exceptions import DuplicateError, NotFoundError, UnauthorizedError
from bookstore.models import User
from bookstore.repositories import UserRepository
from bookstore.schemas.user import UserCreate
from bookstore.services.security import (
    access_token_lifetime,
    create_access_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def register_user(db: Session, data: UserCreate) -> User:
    """
    Create a new user account.

    Raises:
        DuplicateError: If the email is already registered
    """
    users = UserRepository(db)
    email = data.email.lower()

    if users.get_by_email(email) is not None:
        raise DuplicateError("Email already registered")

    user = users.add(
        User(
            email=email,
            hashed_password=hash_password(data.password),
            username=data.username,
        )
    )
    db.commit()
    db.refresh(user)

    logger.info(f"Registered user {user.id} ({user.email})")
    return user


def authenticate(db: Session, email: str, password: str) -> tuple[str, User]:
    """
    Check credentials and issue an access token.

    Returns:
        Tuple of (token, user)

    Raises:
        UnauthorizedError: If the email is unknown or the password is wrong
    """
    user = UserRepository(db).get_by_email(email.lower())

    if user is None or not verify_password(password, user.hashed_password):
        logger.warning(f"Failed login attempt for {email}")
        raise UnauthorizedError(INVALID_CREDENTIALS)

    token = create_access_token({"sub": str(user.id)})
    logger.info(f"User {user.id} logged in")
    return token, user


def token_lifetime_seconds() -> int:
    return int(access_token_lifetime().total_seconds())


def get_profile(db: Session, user_id: int) -> User:
    """
    Load the profile of an authenticated user.

    Raises:
        NotFoundError: If the user no longer exists
    """
    user = UserRepository(db).get(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user
