"""Request-scoped dependencies of the API.

Database sessions come from a single engine shared by the process. Token,
password and credential services are built per request from settings.
``CurrentUserId`` resolves the bearer access token to a user id.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Annotated, AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from stockpile.application.services import CredentialService
from stockpile.infrastructure.observability import AuthMetrics
from stockpile.presentation.api.config import get_api_settings
from stockpile_auth import (
    InvalidTokenError,
    PasswordHashingService,
    TokenExpiredError,
    TokenService,
)
from stockpile_auth.persistence.sqlalchemy import (
    AuthBase,
    CredentialRepositorySQLAlchemy,
)
from stockpile_config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


@lru_cache()
def get_database_url() -> str:
    """Database URL from settings.

    For a file-backed SQLite URL the parent directory of the database file
    is created on first call.
    """
    url = make_url(get_settings().database_url)
    file_backed = url.database not in (None, "", ":memory:")
    if url.get_backend_name() == "sqlite" and file_backed:
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return url.render_as_string(hide_password=False)


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    """Process-wide async engine; disposed by the app lifespan on shutdown."""
    return create_async_engine(get_database_url(), echo=False, pool_pre_ping=True)


@lru_cache(maxsize=1)
def get_session_maker() -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """One session per request, closed when the response is sent."""
    async with get_session_maker()() as session:
        yield session


DBSession = Annotated[AsyncSession, Depends(get_db_session)]


async def create_tables() -> None:
    """Create the credential tables that do not exist yet.

    Existing tables are left untouched, so this is safe on every startup.
    """
    logger.info("Creating missing database tables")
    async with get_engine().begin() as conn:
        await conn.run_sync(AuthBase.metadata.create_all)
    logger.info("Database tables ready")


SettingsDep = Annotated[Settings, Depends(get_api_settings)]


def get_token_service(settings: SettingsDep) -> TokenService:
    """TokenService with secrets and lifetimes from settings."""
    return TokenService(
        access_secret=settings.jwt_secret.get_secret_value(),
        refresh_secret=settings.jwt_refresh_secret.get_secret_value(),
        access_token_ttl_minutes=settings.jwt_access_ttl_minutes,
        refresh_token_ttl_hours=settings.jwt_refresh_ttl_hours,
        issuer=settings.jwt_issuer,
    )


def get_password_service(settings: SettingsDep) -> PasswordHashingService:
    """PasswordHashingService with the configured bcrypt cost."""
    return PasswordHashingService(rounds=settings.bcrypt_rounds)


def get_auth_metrics(request: Request) -> AuthMetrics | None:
    """Get the app's auth metrics, or None when metrics are disabled."""
    return getattr(request.app.state, "auth_metrics", None)


TokenSvc = Annotated[TokenService, Depends(get_token_service)]
AuthMetricsDep = Annotated[AuthMetrics | None, Depends(get_auth_metrics)]


async def get_credential_service(
    session: DBSession,
    token_service: TokenSvc,
    metrics: AuthMetricsDep,
    password_service: PasswordHashingService = Depends(get_password_service),
) -> CredentialService:
    """CredentialService bound to the request session."""
    return CredentialService(
        credential_repository=CredentialRepositorySQLAlchemy(session),
        password_service=password_service,
        token_service=token_service,
        metrics=metrics,
    )


CredentialSvc = Annotated[CredentialService, Depends(get_credential_service)]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user_id(
    token_service: TokenSvc,
    metrics: AuthMetricsDep,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> int:
    """Resolve the bearer access token to the user id it was issued for.

    Only the token is checked here. Handlers that need the user record
    load it through the CredentialService.

    Parameters
    ----------
    token_service
        Token service for access token validation
    metrics
        Auth metrics recording validation outcomes, if enabled
    credentials
        Bearer token from Authorization header

    Returns
    -------
    The user id carried by the token

    Raises
    ------
    HTTPException
        401 if the token is missing, invalid, expired or not an access token
    """
    if credentials is None:
        raise _unauthorized("Authentication required")

    try:
        claims = token_service.validate_access(credentials.credentials)
    except TokenExpiredError as e:
        if metrics is not None:
            metrics.record_token_validation("expired")
        logger.info("Expired token presented")
        raise _unauthorized(e.message) from e
    except InvalidTokenError as e:
        if metrics is not None:
            metrics.record_token_validation("invalid")
        logger.warning("Invalid token: %s", e.message)
        raise _unauthorized("Invalid or expired token") from e

    if metrics is not None:
        metrics.record_token_validation("valid")
    return claims.user_id


CurrentUserId = Annotated[int, Depends(get_current_user_id)]
