"""Stockpile Auth - Generic authentication infrastructure.

This package provides authentication infrastructure that is independent
of the inventory domain. It handles:
- Password hashing (bcrypt)
- JWT access/refresh token creation, validation and refresh
- Credential storage (with pluggable persistence)

Architecture:
    stockpile_auth/
    ├── services/           # Pure logic (password hashing, JWT)
    ├── repositories/       # Abstract interfaces
    ├── persistence/        # Implementations by technology
    │   └── sqlalchemy/     # SQLAlchemy implementation
    ├── schemas.py          # Data classes
    └── exceptions.py       # Auth exceptions

Usage:
    from stockpile_auth import PasswordHashingService, TokenService
    from stockpile_auth.persistence.sqlalchemy import (
        AuthBase,
        CredentialRepositorySQLAlchemy,
    )
"""

from stockpile_auth.exceptions import (
    AuthError,
    EmailTakenError,
    ErrorCode,
    InternalError,
    InvalidClaimsError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    InvalidSignatureError,
    InvalidTokenError,
    MalformedTokenError,
    StoreError,
    TokenExpiredError,
    UserNotFoundError,
    WeakPasswordError,
    WrongTokenTypeError,
)
from stockpile_auth.repositories import CredentialRepository
from stockpile_auth.schemas import (
    Credential,
    SessionResult,
    TokenClaims,
    TokenPair,
    TokenType,
    UserProfile,
)
from stockpile_auth.services import PasswordHashingService, TokenService

__all__ = [
    # Services
    "PasswordHashingService",
    "TokenService",
    # Repositories (interfaces)
    "CredentialRepository",
    # Schemas
    "Credential",
    "SessionResult",
    "TokenClaims",
    "TokenPair",
    "TokenType",
    "UserProfile",
    # Exceptions
    "AuthError",
    "EmailTakenError",
    "ErrorCode",
    "InternalError",
    "InvalidClaimsError",
    "InvalidCredentialsError",
    "InvalidRefreshTokenError",
    "InvalidSignatureError",
    "InvalidTokenError",
    "MalformedTokenError",
    "StoreError",
    "TokenExpiredError",
    "UserNotFoundError",
    "WeakPasswordError",
    "WrongTokenTypeError",
]
