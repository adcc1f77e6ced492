"""
Services Package

This package contains business logic services that are:
- Separate from HTTP handling (routers)
- Reusable across different parts of the application
- Easier to test in isolation

Services raise ``bookstore.exceptions.AppError`` subclasses; the exception
handlers in main.py turn them into responses.

Current services:
- auth.py: Registration, login and profile lookup
- catalog.py: Genre and book CRUD with soft delete
- orders.py: Order placement, order history and sales statistics
- rate_limiter.py: Rate limiting with slowapi
- security.py: Password hashing and JWT utilities
"""
