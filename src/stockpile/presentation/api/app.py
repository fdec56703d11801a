"""Stockpile HTTP application.

Business routes live under ``/api/v1``. The Prometheus scrape endpoint is
served unversioned at ``/metrics`` when metrics are enabled.
"""

import logging
import sys
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CollectorRegistry

from stockpile.domain.shared.time import TIMESTAMP_FORMAT
from stockpile.infrastructure.observability import (
    CONTENT_TYPE_LATEST,
    AuthMetrics,
    HTTPMetrics,
    render_latest,
)
from stockpile.presentation.api.dependencies import create_tables, get_engine
from stockpile.presentation.api.exception_handlers import setup_exception_handlers
from stockpile.presentation.api.middleware import MetricsMiddleware
from stockpile.presentation.api.routers import auth_router, system_router
from stockpile_config.settings import Settings, get_settings

LOG_FILE_NAME = "stockpile.log"
NOISY_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "aiosqlite")


@lru_cache(maxsize=1)
def _configure_logging() -> None:
    """Install root handlers once per process.

    Records go to stdout and, when ``log_dir`` is set, also to
    ``<log_dir>/stockpile.log``. ``LOG_LEVEL`` applies to the stockpile
    packages; chatty libraries are held at WARNING.
    """
    settings = get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if settings.log_dir is not None:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
        log_file = settings.log_dir / LOG_FILE_NAME
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt=TIMESTAMP_FORMAT,
        handlers=handlers,
        force=True,
    )

    for name in ("stockpile", "stockpile_auth"):
        logging.getLogger(name).setLevel(level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"
API_V1_PREFIX = "/api/v1"

OPENAPI_TAGS = [
    {
        "name": "Authentication",
        "description": """User registration and token management.

**Tokens:**
- Short-lived access token (default 15 minutes), sent as `Authorization: Bearer`
- Long-lived refresh token (default 7 days), exchanged at `/auth/refresh-token`
- Both are HS256 JWTs signed with separate secrets

**Security:**
- Passwords are hashed with bcrypt
- Tokens are stateless; logout does not revoke them
""",
    },
    {
        "name": "System",
        "description": "Health and liveness endpoints.",
    },
    {
        "name": "Info",
        "description": "API information and metrics.",
    },
]


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncGenerator[None, None]:
    """Create missing tables on startup and release the pool on shutdown."""
    logger.info("Stockpile API %s starting", API_VERSION)
    try:
        await create_tables()
    except ConnectionRefusedError:
        logger.critical("Database refused the connection, aborting startup")
        raise SystemExit(1) from None
    yield

    logger.info("Stockpile API stopping")
    await get_engine().dispose()


def create_v1_router() -> APIRouter:
    router = APIRouter()
    router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
    router.include_router(system_router, tags=["System"])
    return router


def _setup_metrics(app: FastAPI) -> None:
    """Give the app its own metrics registry, middleware and endpoint."""
    registry = CollectorRegistry()
    app.state.metrics_registry = registry
    app.state.auth_metrics = AuthMetrics(registry)
    app.add_middleware(MetricsMiddleware, metrics=HTTPMetrics(registry))

    @app.get("/metrics", tags=["Info"], include_in_schema=False)
    async def metrics() -> Response:
        """Prometheus scrape endpoint."""
        return Response(
            content=render_latest(registry),
            media_type=CONTENT_TYPE_LATEST,
        )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the API with its middleware, handlers and routes.

    Parameters
    ----------
    settings
        Used instead of the process settings, mainly by tests
    """
    _configure_logging()
    settings = settings or get_settings()
    app_name = settings.app_name

    app = FastAPI(
        title=f"{app_name} API",
        description="Inventory API with **JWT authentication** and Prometheus metrics.",
        version=API_VERSION,
        docs_url="/docs" if settings.api_debug else None,
        redoc_url="/redoc" if settings.api_debug else None,
        openapi_url="/openapi.json" if settings.api_debug else None,
        lifespan=lifespan,
        openapi_tags=OPENAPI_TAGS,
    )
    app.state.auth_metrics = None

    if settings.metrics_enabled:
        _setup_metrics(app)

    # Added last so it wraps the metrics middleware and answers preflights
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Accept", "Authorization"],
        expose_headers=["Content-Length"],
        max_age=settings.api_cors_max_age,
    )

    setup_exception_handlers(app)

    app.include_router(create_v1_router(), prefix=API_V1_PREFIX)

    @app.get("/", tags=["Info"])
    async def root() -> dict:
        """Name, version and entry points of the API."""
        return {
            "name": f"{app_name} API",
            "version": API_VERSION,
            "docs": "/docs" if settings.api_debug else None,
            "api_base": API_V1_PREFIX,
            "endpoints": {
                "auth": f"{API_V1_PREFIX}/auth",
                "health": f"{API_V1_PREFIX}/health",
                "status": f"{API_V1_PREFIX}/status",
                "metrics": "/metrics" if settings.metrics_enabled else None,
            },
        }

    return app


# uvicorn stockpile.presentation.api.app:app
app = create_app()
