"""Stockpile settings.

Every field can be set through an environment variable of the same name
(``JWT_SECRET``, ``DATABASE_URL``, ``LOG_DIR``...). Environment variables
win over the .env file, which is looked up in this order:

- the path in ``STOCKPILE_ENV_FILE`` (relative paths resolve against the
  project root)
- ``config/.env.dev`` for local development
- ``config/.env`` for Docker deployments
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import (
    Field,
    SecretStr,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE_VARIABLE = "STOCKPILE_ENV_FILE"
ENV_FILE_CANDIDATES = (".env.dev", ".env")


def _find_project_root() -> Path:
    """Walk up from this package to the first directory with config/ or .git."""
    here = Path(__file__).resolve()
    for directory in here.parents:
        if (directory / "config").is_dir() or (directory / ".git").is_dir():
            return directory
    return here.parents[2]


def get_config_dir() -> Path:
    """Directory holding the .env files."""
    return _find_project_root() / "config"


def _resolve_env_file_path() -> Path | None:
    explicit = os.environ.get(ENV_FILE_VARIABLE)
    if explicit:
        path = Path(explicit)
        if not path.is_absolute():
            path = _find_project_root() / path
        return path if path.exists() else None

    for name in ENV_FILE_CANDIDATES:
        candidate = get_config_dir() / name
        if candidate.exists():
            return candidate
    return None


class Settings(BaseSettings):
    """Runtime configuration for the API, the token service and the CLI.

    The two signing secrets have no default and must be distinct and
    non-empty: constructing Settings otherwise fails, so the API refuses to
    start misconfigured.
    """

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file_path(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Token signing, required
    jwt_secret: SecretStr  # access tokens
    jwt_refresh_secret: SecretStr  # refresh tokens, must differ from jwt_secret

    app_name: str = "Stockpile"
    debug: bool = False

    database_url: str = "sqlite+aiosqlite:///./data/stockpile.db"

    # HTTP server and CORS
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    api_cors_origins: str = "*"
    api_cors_max_age: int = 86400  # seconds a preflight may be cached

    # Token lifetimes
    jwt_access_ttl_minutes: int = Field(default=15, ge=1)
    jwt_refresh_ttl_hours: int = Field(default=168, ge=1)
    jwt_issuer: str = "stockpile"

    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    log_level: str = "INFO"
    log_dir: Path | None = None  # also log to <log_dir>/stockpile.log

    metrics_enabled: bool = True

    @field_validator("api_cors_origins", mode="before")
    @classmethod
    def _join_cors_origins(cls, v: Any) -> str:
        if isinstance(v, (list, tuple)):
            return ",".join(v)
        return str(v) if v else ""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins(self) -> list[str]:
        """CORS origins as a list; ``["*"]`` allows any origin."""
        return [o.strip() for o in self.api_cors_origins.split(",") if o.strip()]

    @model_validator(mode="after")
    def _check_jwt_secrets(self) -> Settings:
        access = self.jwt_secret.get_secret_value()
        refresh = self.jwt_refresh_secret.get_secret_value()
        if not access or not refresh:
            msg = "JWT_SECRET and JWT_REFRESH_SECRET cannot be empty"
            raise ValueError(msg)
        if access == refresh:
            msg = "JWT_SECRET and JWT_REFRESH_SECRET must be different"
            raise ValueError(msg)
        return self


@lru_cache()
def get_settings() -> Settings:
    """Load settings once per process.

    Raises
    ------
    pydantic.ValidationError
        If JWT_SECRET or JWT_REFRESH_SECRET is missing, empty, or both are
        equal
    """
    return Settings()  # type: ignore[call-arg]


def clear_settings_cache() -> None:
    """Forget the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
