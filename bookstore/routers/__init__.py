"""
API Routers Package

This package contains FastAPI routers that handle API endpoints.

WHY Routers?
============
1. Organization: Group related endpoints together
2. Modularity: Each router can have its own prefix, tags, dependencies
3. Maintainability: Easy to find and modify endpoint code

Router Structure:
- auth.py: /auth/* endpoints (registration, login, profile)
- genres.py: /genre/* endpoints
- books.py: /books/* endpoints
- transactions.py: /transactions/* endpoints (orders and statistics)

Each router is imported and registered in main.py, under
settings.api_prefix (empty by default).
"""

from bookstore.routers.auth import router as auth_router
from bookstore.routers.books import router as books_router
from bookstore.routers.genres import router as genres_router
from bookstore.routers.transactions import router as transactions_router

__all__ = [
    "auth_router",
    "genres_router",
    "books_router",
    "transactions_router",
]
