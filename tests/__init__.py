"""
Test Suite for the Bookstore API

Test Organization:
- conftest.py: Shared fixtures (test database, client, sample data)
- test_auth.py: /auth endpoints
- test_genres.py: /genre endpoints
- test_books.py: /books endpoints
- test_transactions.py: /transactions endpoints
- test_statistics.py: /transactions/statistics
- test_order_service.py: Order placement rollback paths
- test_main.py: Root, health and error envelope
- test_security.py: Passwords, tokens and rate limiting
- test_cli.py: bookstore-cli against the in-process app

Running Tests:
    # Run all tests (coverage report included)
    pytest

    # HTML coverage report
    pytest --cov-report=html

    # Run specific file
    pytest tests/test_books.py

    # Run with verbose output
    pytest -v
"""
