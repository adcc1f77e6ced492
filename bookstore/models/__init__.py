"""
SQLAlchemy Models Package

This package contains all database models for the Bookstore API.

Model Relationships:
- Genre -> Book: One-to-Many (a book has exactly one genre)
- User -> Order: One-to-Many (a user places many orders)
- Order -> OrderItem: One-to-Many (an order has one or more lines)
- OrderItem -> Book: Many-to-One

Import all models here to:
1. Make them available as: from bookstore.models import Book, Genre
2. Ensure Alembic discovers them for migrations
"""

from bookstore.models.user import User
from bookstore.models.genre import Genre
from bookstore.models.book import Book
from bookstore.models.order import Order, OrderItem

__all__ = [
    "User",
    "Genre",
    "Book",
    "Order",
    "OrderItem",
]
