"""API request/response schemas."""

from stockpile.presentation.api.schemas.auth import (
    AuthResponse,
    LoginRequest,
    LogoutResponse,
    MeResponse,
    RefreshTokenRequest,
    RegisterRequest,
    UserResponse,
)
from stockpile.presentation.api.schemas.system import HealthResponse, StatusResponse

__all__ = [
    "AuthResponse",
    "HealthResponse",
    "LoginRequest",
    "LogoutResponse",
    "MeResponse",
    "RefreshTokenRequest",
    "RegisterRequest",
    "StatusResponse",
    "UserResponse",
]
