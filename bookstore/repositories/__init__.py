"""
Repositories Package

Thin query layer between services and the ORM. Each repository wraps one
model and applies the soft-delete predicate to every query it builds.
"""

from bookstore.repositories.accounts import UserRepository
from bookstore.repositories.base import Repository
from bookstore.repositories.catalog import BookRepository, GenreRepository
from bookstore.repositories.orders import OrderRepository

__all__ = [
    "Repository",
    "UserRepository",
    "GenreRepository",
    "BookRepository",
    "OrderRepository",
]
