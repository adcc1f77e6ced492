#!/usr/bin/env python3
"""
Database Seed Script

Populates the database with sample data for development.

USAGE:
    # From the project root with venv activated
    python scripts/seed_data.py

    # Options:
    python scripts/seed_data.py --keep    # Don't clear existing catalog data

This script:
1. Creates tables if they don't exist
2. Clears existing orders, books and genres (unless --keep)
3. Creates sample genres and books
4. Creates a demo user (demo@bookstore.dev / demo1234) if missing
"""

import argparse
import sys
from decimal import Decimal
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete
from sqlalchemy.orm import Session

from bookstore.database import SessionLocal, create_tables
from bookstore.models import Book, Genre, Order, OrderItem, User
from bookstore.repositories import UserRepository
from bookstore.services.security import hash_password

DEMO_EMAIL = "demo@bookstore.dev"
DEMO_PASSWORD = "demo1234"


def clear_data(db: Session) -> None:
    """Clear orders and the catalog. Users are kept."""
    print("Clearing existing data...")
    db.execute(delete(OrderItem))
    db.execute(delete(Order))
    db.execute(delete(Book))
    db.execute(delete(Genre))
    db.commit()
    print("Data cleared.")


def create_genres(db: Session) -> dict[str, Genre]:
    """Create sample genres."""
    print("Creating genres...")
    names = [
        "Science Fiction",
        "Fantasy",
        "Mystery",
        "Classic Literature",
        "Dystopian",
        "Romance",
    ]

    genres = {}
    for name in names:
        genre = Genre(name=name)
        db.add(genre)
        genres[name] = genre

    db.commit()
    for genre in genres.values():
        db.refresh(genre)

    print(f"Created {len(genres)} genres.")
    return genres


def create_books(db: Session, genres: dict[str, Genre]) -> list[Book]:
    """Create sample books, each filed under one genre."""
    print("Creating books...")

    books_data = [
        {
            "title": "1984",
            "writer": "George Orwell",
            "publisher": "Secker & Warburg",
            "publication_year": 1949,
            "description": "A dystopian novel set in a totalitarian society under constant surveillance.",
            "price": Decimal("12.99"),
            "stock_quantity": 25,
            "genre": "Dystopian",
        },
        {
            "title": "Animal Farm",
            "writer": "George Orwell",
            "publisher": "Secker & Warburg",
            "publication_year": 1945,
            "description": "An allegorical novella reflecting events leading up to the Russian Revolution.",
            "price": Decimal("9.99"),
            "stock_quantity": 18,
            "genre": "Classic Literature",
        },
        {
            "title": "Pride and Prejudice",
            "writer": "Jane Austen",
            "publisher": "T. Egerton",
            "publication_year": 1813,
            "description": "A romantic novel following the emotional development of Elizabeth Bennet.",
            "price": Decimal("8.99"),
            "stock_quantity": 30,
            "genre": "Romance",
        },
        {
            "title": "The Old Man and the Sea",
            "writer": "Ernest Hemingway",
            "publisher": "Charles Scribner's Sons",
            "publication_year": 1952,
            "description": "An aging Cuban fisherman and his epic battle with a giant marlin.",
            "price": Decimal("11.99"),
            "stock_quantity": 12,
            "genre": "Classic Literature",
        },
        {
            "title": "Murder on the Orient Express",
            "writer": "Agatha Christie",
            "publisher": "Collins Crime Club",
            "publication_year": 1934,
            "description": "Hercule Poirot investigates a murder on a train stuck in a snowdrift.",
            "price": Decimal("14.99"),
            "stock_quantity": 20,
            "genre": "Mystery",
        },
        {
            "title": "Foundation",
            "writer": "Isaac Asimov",
            "publisher": "Gnome Press",
            "publication_year": 1951,
            "description": "The first novel about the fall of the Galactic Empire.",
            "price": Decimal("15.99"),
            "stock_quantity": 15,
            "genre": "Science Fiction",
        },
        {
            "title": "The Hobbit",
            "writer": "J.R.R. Tolkien",
            "publisher": "George Allen & Unwin",
            "publication_year": 1937,
            "description": "Bilbo Baggins embarks on a quest to reclaim the Lonely Mountain.",
            "price": Decimal("14.99"),
            "stock_quantity": 22,
            "genre": "Fantasy",
        },
        {
            "title": "I, Robot",
            "writer": "Isaac Asimov",
            "publisher": "Gnome Press",
            "publication_year": 1950,
            "description": "Nine science fiction short stories about robots.",
            "price": Decimal("13.99"),
            "stock_quantity": 10,
            "genre": "Science Fiction",
        },
    ]

    books = []
    for data in books_data:
        genre_name = data.pop("genre")
        book = Book(**data, genre=genres[genre_name])
        db.add(book)
        books.append(book)

    db.commit()
    for book in books:
        db.refresh(book)

    print(f"Created {len(books)} books.")
    return books


def ensure_demo_user(db: Session) -> User:
    """Create the demo account unless it already exists."""
    users = UserRepository(db)
    user = users.get_by_email(DEMO_EMAIL)
    if user is None:
        user = users.add(
            User(
                email=DEMO_EMAIL,
                hashed_password=hash_password(DEMO_PASSWORD),
                username="demo",
            )
        )
        db.commit()
        print(f"Created demo user {DEMO_EMAIL} / {DEMO_PASSWORD}")
    return user


def seed_database(clear_existing: bool = True) -> None:
    """
    Main function to seed the database.

    Args:
        clear_existing: If True, clears orders and the catalog before seeding.
    """
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    create_tables()

    db = SessionLocal()

    try:
        if clear_existing:
            clear_data(db)

        genres = create_genres(db)
        books = create_books(db, genres)
        ensure_demo_user(db)

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Genres: {len(genres)}")
        print(f"  - Books: {len(books)}")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Seed the bookstore database")
    parser.add_argument(
        "--keep",
        action="store_true",
        help="Keep existing orders, books and genres",
    )
    args = parser.parse_args()
    seed_database(clear_existing=not args.keep)


if __name__ == "__main__":
    main()
