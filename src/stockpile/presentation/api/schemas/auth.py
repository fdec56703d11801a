"""Authentication schemas for request/response models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from stockpile_auth import SessionResult, UserProfile


class RegisterRequest(BaseModel):
    """Request schema for user registration.

    Password strength is checked by the password service, so a weak
    password is reported as ``WEAK_PASSWORD`` rather than a 422.
    """

    name: str | None = Field(default=None, max_length=100)
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., description="Password (at least 8 characters)")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "John",
                "email": "john@example.com",
                "password": "password123",
            },
        },
    )


class LoginRequest(BaseModel):
    """Request schema for user login."""

    email: EmailStr
    password: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "john@example.com",
                "password": "password123",
            },
        },
    )


class RefreshTokenRequest(BaseModel):
    """Request schema for access token refresh."""

    refresh_token: str = Field(..., min_length=1)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "refresh_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
            },
        },
    )


class UserResponse(BaseModel):
    """Public user profile. Never carries the password hash."""

    id: int
    name: str | None
    email: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "UserResponse":
        return cls(
            id=profile.id,
            name=profile.name,
            email=profile.email,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )


class AuthResponse(BaseModel):
    """Response schema for successful signup, signin and refresh."""

    message: str = "success"
    user: UserResponse
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int = Field(..., description="Access token lifetime in seconds")

    @classmethod
    def from_session(cls, session: SessionResult) -> "AuthResponse":
        return cls(
            user=UserResponse.from_profile(session.user),
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            token_type=session.token_type,
            expires_in=session.expires_in,
        )


class MeResponse(BaseModel):
    """Response schema for the current user endpoint."""

    message: str = "success"
    user: UserResponse


class LogoutResponse(BaseModel):
    """Response schema for logout."""

    message: str = "success"
    data: str = "Successfully logged out"
