"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures lifespan events and wires process-wide components.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from src.adapters.repository.memory import InMemoryAccountRepository
from src.adapters.repository.postgres import run_migrations
from src.api.v1 import router as v1_router
from src.config.settings import Settings, get_settings
from src.domain.hashing import build_hasher
from src.domain.tokens import TokenIssuer, TokenValidator

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Account identity API v1 - Sign up, activate, sign in and recover accounts",
    },
]


def configure_components(app: FastAPI, settings: Settings) -> None:
    """
    Build the process-wide, immutable components and store them in app state.

    Raises:
        ConfigurationError: If the token secret or password scheme is unusable
    """
    token_settings = settings.token_settings()
    app.state.token_issuer = TokenIssuer(token_settings)
    app.state.token_validator = TokenValidator(token_settings)
    app.state.hasher = build_hasher(settings.password_scheme, settings.bcrypt_cost)
    app.state.mail_settings = settings.mail_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Loads token, hashing and mail configuration (fails fast if invalid)
    - Creates the database connection pool and runs migrations, or an
      in-memory store when no database is configured
    - Closes connection pool on shutdown
    """
    settings = get_settings()

    logger.info("Starting application...")
    configure_components(app, settings)

    pool = None
    if settings.repository_backend == "postgres":
        logger.info("Connecting to database...")
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
        )
        logger.info("Running database migrations...")
        run_migrations(pool)
    else:
        logger.info("Using in-memory account store")
        app.state.repository = InMemoryAccountRepository()

    # Store pool in app state for dependency injection
    app.state.pool = pool

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")


app = FastAPI(
    title="lms-identity",
    description="Account identity API - Sign up, activation, sign in and password recovery",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

# Include v1 API routes
app.include_router(v1_router, prefix="/v1")


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application (and database, when configured) is healthy.
    Raises exception if database connection fails.
    """
    pool = getattr(request.app.state, "pool", None)
    if pool is not None:
        with pool.connection() as conn:
            conn.execute("SELECT 1")

    return {"status": "healthy"}
