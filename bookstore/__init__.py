"""
Bookstore API Application Package

Backend for a small bookstore: user accounts, a genre and book catalog,
and order placement with stock tracking and sales statistics.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy database connection and session management
- exceptions.py: Application error hierarchy mapped to HTTP responses
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection functions
- models/: SQLAlchemy ORM models
- repositories/: Query helpers with soft-delete filtering
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Business logic (catalog, orders, security, rate limiting)
- cli.py: Command line client for a running API
"""

__version__ = "0.1.0"
