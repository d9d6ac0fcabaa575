"""FastAPI application factory.

Creates and configures the FastAPI application with the auth router,
middleware, and exception handlers.

API Versioning:
    All API endpoints are versioned under /api/v1/ prefix.
    The health check endpoint remains unversioned at /health.
"""

import logging
import sys
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator
from uuid import uuid4

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine

from bookbuddy.infrastructure.persistence.sqlalchemy.expiry_sweeper import (
    ExpirySweeper,
)
from bookbuddy.infrastructure.persistence.sqlalchemy.init_db import create_tables
from bookbuddy.presentation.api.dependencies import get_engine, get_session_maker
from bookbuddy.presentation.api.exception_handlers import (
    setup_exception_handlers,
)
from bookbuddy.presentation.api.rate_limit import RateLimiter
from bookbuddy.presentation.api.routers import auth_router
from bookbuddy_config.settings import Settings, get_settings


@lru_cache(maxsize=1)
def _configure_logging() -> None:
    """Configure application logging.

    Sets up logging for the bookbuddy packages with:
    - Console output with timestamps and module names
    - Configurable log level for bookbuddy modules (from settings)
    - WARNING level for noisy third-party libraries
    """
    settings = get_settings()
    log_level_str = settings.log_level.upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    log_format = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt=date_format,
        stream=sys.stdout,
        force=True,  # Override any existing config
    )

    for name in ("bookbuddy", "bookbuddy_auth", "bookbuddy_identity"):
        logging.getLogger(name).setLevel(log_level)

    # Quiet down noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"
API_V1_PREFIX = "/api/v1"
REQUEST_ID_HEADER = "X-Request-ID"

OPENAPI_TAGS = [
    {
        "name": "Authentication",
        "description": """User authentication and session management.

**Sign-in:**
- Register with username, email and password
- Login with email or username and password
- Login with a one-time code sent by email

**Sessions:**
- Short-lived JWT access tokens in the response body
- Rotating refresh tokens in an HttpOnly `refreshToken` cookie
- Logout of one session or all sessions

**Recovery:**
- Email verification links
- Password reset links (revoke all sessions)
- Email address reminders by username
""",
    },
    {
        "name": "Health",
        "description": "Service health monitoring endpoints.",
    },
    {
        "name": "Info",
        "description": "API information and discovery.",
    },
]


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings = get_settings()
    logger.info("Starting BookBuddy API v%s...", API_VERSION)
    engine = get_engine()
    await _init_database_schema(engine)

    sweeper = ExpirySweeper(
        get_session_maker(),
        interval_seconds=settings.expiry_sweep_interval_seconds,
    )
    await sweeper.start()
    yield

    # Shutdown - stop background work, then dispose the shared engine
    logger.info("Shutting down BookBuddy API...")
    await sweeper.stop()
    await engine.dispose()
    logger.info("Database connections closed")


async def _init_database_schema(engine: AsyncEngine) -> None:
    """Initialize database schema (if not existent) and verify connectivity."""
    logger.info("Initializing database schema...")
    try:
        await create_tables(engine)
    except ConnectionRefusedError:
        logger.critical("Could not connect to the database.")
        raise SystemExit(1) from None

    logger.info("Database schema initialized successfully")


def create_v1_router() -> APIRouter:
    """Create the v1 API router with all endpoints."""
    v1_router = APIRouter()
    v1_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
    return v1_router


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    settings
        Optional settings override for testing.

    Returns
    -------
    Configured FastAPI application instance.
    """
    # Configure logging on first app creation (not on module import)
    _configure_logging()

    if settings is None:
        settings = get_settings()

    app_name = settings.app_name

    app = FastAPI(
        title=f"{app_name} API",
        description="Authentication and session-token service for **BookBuddy**.",
        version=API_VERSION,
        docs_url="/docs" if settings.api_debug else None,
        redoc_url="/redoc" if settings.api_debug else None,
        openapi_url="/openapi.json" if settings.api_debug else None,
        lifespan=lifespan,
        openapi_tags=OPENAPI_TAGS,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        """Tag each request with an id and return it in the response.

        A client-supplied ``X-Request-ID`` is kept so traces can span an
        upstream proxy; otherwise a fresh UUID is generated.
        """
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    app.state.rate_limiter = RateLimiter() if settings.rate_limit_enabled else None

    # Register domain exception handlers for consistent error responses
    setup_exception_handlers(app)

    app.include_router(create_v1_router(), prefix=API_V1_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict:
        """Health check endpoint.

        Unversioned for load balancer/monitoring compatibility.
        """
        return {
            "status": "healthy",
            "version": API_VERSION,
            "api_versions": ["v1"],
        }

    @app.get("/", tags=["Info"])
    async def root() -> dict:
        """API root endpoint with version information."""
        return {
            "name": f"{app_name} API",
            "version": API_VERSION,
            "docs": "/docs" if settings.api_debug else None,
            "api_base": API_V1_PREFIX,
            "endpoints": {
                "health": "/health",
                "auth": f"{API_V1_PREFIX}/auth",
            },
        }

    return app
