"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application.

Key Concepts:
=============

1. Application Factory Pattern
   - create_app() function returns configured app
   - Easier to test (can create multiple instances)

2. Lifespan Events
   - startup: log configuration
   - shutdown: release the database connection pool

3. Middleware Stack
   - CORS: Allow cross-origin requests
   - slowapi: Rate limiting

4. Exception Handlers
   - The single place where errors become HTTP responses
   - Every error uses the envelope {success: false, message, errors?}
   - Unexpected errors are logged and reported without internal detail
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookstore.config import get_settings
from bookstore.database import engine
from bookstore.dependencies import DbSession
from bookstore.exceptions import AppError
from bookstore.routers import (
    auth_router,
    books_router,
    genres_router,
    transactions_router,
)
from bookstore.schemas import envelope
from bookstore.services.rate_limiter import limiter, rate_limit_exceeded_handler

# =============================================================================
# Logging Configuration
# =============================================================================
# Configure logging before creating the app
settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

VALIDATION_MESSAGE = "Validation error"
REQUEST_LOCATIONS = {"body", "query", "path", "header"}


def error_body(message: str, errors: list[dict] | None = None) -> dict:
    body: dict = {"success": False, "message": message}
    if errors is not None:
        body["errors"] = errors
    return body


def field_errors(exc: RequestValidationError) -> list[dict]:
    """
    Flatten validation errors into [{field, message}].

    The location prefix ("body", "query", ...) is dropped, so a bad
    quantity in the second order line is reported as "items.1.quantity".
    """
    result = []
    for err in exc.errors():
        loc = list(err.get("loc", ()))
        if len(loc) > 1 and loc[0] in REQUEST_LOCATIONS:
            loc = loc[1:]
        result.append({
            "field": ".".join(str(part) for part in loc),
            "message": err.get("msg", "Invalid value"),
        })
    return result


# =============================================================================
# Lifespan Events
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Code before yield: Runs on startup
    Code after yield: Runs on shutdown
    """
    # ----- STARTUP -----
    logger.info(f"Starting {settings.app_name}...")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"API version: {settings.api_version}")
    logger.info(f"Rate limiting enabled: {settings.rate_limit_enabled}")

    yield  # Application runs here

    # ----- SHUTDOWN -----
    logger.info(f"Shutting down {settings.app_name}...")
    engine.dispose()


# =============================================================================
# Application Factory
# =============================================================================
def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.app_name,
        description="""
## Bookstore API

Backend for a small bookstore.

### Features
- **Auth**: Register, log in, read your profile
- **Genres**: Manage the genres books are filed under
- **Books**: Catalog with search, sorting and pagination
- **Transactions**: Buy books and look at your order history and sales statistics

### Authentication
Send `Authorization: Bearer <token>` (from `POST /auth/login`) to any
endpoint that changes data or concerns your orders.

### Responses
Every response is an envelope: `{success, message?, data?, pagination?, errors?}`.
        """,
        version=settings.api_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # -------------------------------------------------------------------------
    # Rate Limiting
    # -------------------------------------------------------------------------
    # Attach the limiter to the app state so it can be accessed by decorators
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """Errors raised on purpose by services and dependencies."""
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.message),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Schema failures in body, query or path (e.g. a non-numeric id)."""
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(VALIDATION_MESSAGE, field_errors(exc)),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        """Unknown routes, wrong methods and other framework-level errors."""
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(
        request: Request,
        exc: SQLAlchemyError,
    ) -> JSONResponse:
        """
        Handle SQLAlchemy database errors.

        Logs the actual error for debugging while hiding details from users.
        """
        logger.error(f"Database error: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(
                str(exc) if settings.debug
                else "A database error occurred. Please try again later."
            ),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """
        Catch-all exception handler.

        In production, hide internal errors from users.
        In debug mode, show more details.
        """
        logger.error(f"Unhandled error: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(
                str(exc) if settings.debug else "An internal error occurred."
            ),
        )

    # -------------------------------------------------------------------------
    # Register Routers
    # -------------------------------------------------------------------------
    app.include_router(auth_router, prefix=settings.api_prefix)
    app.include_router(genres_router, prefix=settings.api_prefix)
    app.include_router(books_router, prefix=settings.api_prefix)
    app.include_router(transactions_router, prefix=settings.api_prefix)

    # -------------------------------------------------------------------------
    # Health Check Endpoint
    # -------------------------------------------------------------------------
    @app.get(
        "/health",
        tags=["Health"],
        summary="Health check",
        description="Check if the API is running and the database is reachable.",
    )
    def health_check(db: DbSession) -> JSONResponse:
        """
        Health check endpoint.

        Used by load balancers, container probes and monitoring. Answers
        503 when the database cannot be reached.
        """
        try:
            db.execute(text("SELECT 1"))
            database = "ok"
        except SQLAlchemyError as exc:
            logger.error(f"Health check: database unreachable: {exc}")
            database = "unreachable"

        healthy = database == "ok"
        return JSONResponse(
            status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
            content=envelope({
                "status": "healthy" if healthy else "unhealthy",
                "app": settings.app_name,
                "version": settings.api_version,
                "database": database,
                "rate_limiting": {
                    "enabled": settings.rate_limit_enabled,
                    "default_limit": settings.rate_limit_default,
                },
            }),
        )

    @app.get(
        "/",
        tags=["Root"],
        summary="API root",
        description="Welcome message and API information.",
    )
    async def root() -> dict:
        """Root endpoint with API information."""
        return envelope(
            {
                "version": settings.api_version,
                "docs": "/docs",
                "health": "/health",
            },
            message=f"Welcome to {settings.app_name}",
        )

    return app


# =============================================================================
# Application Instance
# =============================================================================
# This is what uvicorn imports: uvicorn bookstore.main:app

app = create_app()


# =============================================================================
# Development Server
# =============================================================================
# This allows running the app directly with: python -m bookstore.main

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "bookstore.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
