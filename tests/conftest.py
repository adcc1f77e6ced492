"""
pytest Fixtures for Bookstore API Tests

This file contains shared fixtures used across all test files.

FIXTURE SCOPES:
- session scope for the engine (expensive to create)
- function scope for sessions and data (isolation between tests)

ISOLATION:
==========
Services commit their own work, and order placement rolls the session
back when stock runs out, so tests cannot run inside one outer
transaction. Instead every test starts from empty tables: after each test
all rows are deleted, children before parents.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
# This disables rate limiting, sets a test secret key and keeps the
# module-level engine away from PostgreSQL
import os

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"
os.environ["DATABASE_URL"] = "sqlite://"

from collections.abc import Generator
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, delete
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bookstore.database import Base, get_db
from bookstore.main import app
from bookstore.models import Book, Genre, User
from bookstore.services.security import create_access_token, hash_password

# =============================================================================
# DATABASE FIXTURES
# =============================================================================
# SQLite in-memory: fast, isolated, no external database needed.
# StaticPool keeps the single connection alive for the whole session;
# without it the in-memory database would disappear between connections.


@pytest.fixture(scope="session")
def engine():
    """Create a SQLite in-memory database engine with all tables."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Session, None, None]:
    """
    Create a fresh database session for each test.

    After the test every table is emptied so tests don't affect each other.
    """
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )
    session = TestSessionLocal()

    yield session

    session.rollback()
    session.close()
    with engine.begin() as connection:
        for table in reversed(Base.metadata.sorted_tables):
            connection.execute(delete(table))


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client with the test database.

    We override the get_db dependency to use our test session.
    """

    def override_get_db():
        """Provide test database session instead of real one."""
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# USER FIXTURES
# =============================================================================
def make_user(db: Session, email: str, password: str, username: str | None) -> User:
    user = User(
        email=email,
        username=username,
        hashed_password=hash_password(password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def bearer(user: User) -> dict[str, str]:
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def sample_user(db_session: Session) -> User:
    """Create a sample user for testing."""
    return make_user(db_session, "testuser@example.com", "secret123", "testuser")


@pytest.fixture
def second_user(db_session: Session) -> User:
    """Create a second user for testing ownership scenarios."""
    return make_user(db_session, "seconduser@example.com", "secret456", None)


@pytest.fixture
def auth_headers(sample_user: User) -> dict[str, str]:
    """Authorization header for sample_user."""
    return bearer(sample_user)


@pytest.fixture
def second_auth_headers(second_user: User) -> dict[str, str]:
    """Authorization header for second_user."""
    return bearer(second_user)


# =============================================================================
# CATALOG FIXTURES
# =============================================================================
def make_book(db: Session, genre: Genre, **fields) -> Book:
    values = {
        "title": "1984",
        "writer": "George Orwell",
        "publisher": "Secker & Warburg",
        "publication_year": 1949,
        "description": "A dystopian novel set in a totalitarian society.",
        "price": Decimal("12.99"),
        "stock_quantity": 10,
    }
    values.update(fields)
    book = Book(genre_id=genre.id, **values)
    db.add(book)
    db.commit()
    db.refresh(book)
    return book


@pytest.fixture
def sample_genre(db_session: Session) -> Genre:
    """Create a sample genre for testing."""
    genre = Genre(name="Science Fiction")
    db_session.add(genre)
    db_session.commit()
    db_session.refresh(genre)
    return genre


@pytest.fixture
def second_genre(db_session: Session) -> Genre:
    genre = Genre(name="Mystery")
    db_session.add(genre)
    db_session.commit()
    db_session.refresh(genre)
    return genre


@pytest.fixture
def sample_book(db_session: Session, sample_genre: Genre) -> Book:
    """Create a sample book in sample_genre."""
    return make_book(db_session, sample_genre)


@pytest.fixture
def multiple_books(db_session: Session, sample_genre: Genre) -> list[Book]:
    """Create 12 books for pagination testing (more than the default page size)."""
    books = []
    for i in range(12):
        book = Book(
            title=f"Test Book {i + 1:02d}",
            writer="Writer Even" if i % 2 == 0 else "Writer Odd",
            publisher="Test Press",
            publication_year=1950 + i,
            price=Decimal(f"{10 + i}.99"),
            stock_quantity=5,
            genre_id=sample_genre.id,
        )
        books.append(book)
        db_session.add(book)

    db_session.commit()
    for book in books:
        db_session.refresh(book)

    return books


@pytest.fixture
def book_factory(db_session: Session):
    """Create books with custom fields: book_factory(genre, title=..., price=...)."""

    def factory(genre: Genre, **fields) -> Book:
        return make_book(db_session, genre, **fields)

    return factory
