"""Authentication router for user registration, login, and token management."""

import logging

from fastapi import APIRouter

from stockpile.presentation.api.dependencies import (
    CredentialSvc,
    CurrentUserId,
    DBSession,
)
from stockpile.presentation.api.schemas.auth import (
    AuthResponse,
    LoginRequest,
    LogoutResponse,
    MeResponse,
    RefreshTokenRequest,
    RegisterRequest,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/signup",
    summary="Register a new user",
    responses={
        200: {"description": "User registered successfully"},
        400: {"description": "Password does not meet requirements"},
        409: {"description": "Email already registered"},
    },
)
async def signup(
    request: RegisterRequest,
    credential_service: CredentialSvc,
    session: DBSession,
) -> AuthResponse:
    """
    Register a new account.

    Returns the new user together with an access and a refresh token.
    """
    try:
        result = await credential_service.register(
            name=request.name,
            email=request.email,
            password=request.password,
        )
        await session.commit()
    except Exception:
        await session.rollback()
        raise

    return AuthResponse.from_session(result)


@router.post(
    "/signin",
    summary="Authenticate user",
    responses={
        200: {"description": "Login successful"},
        401: {"description": "Invalid email or password"},
    },
)
async def signin(
    request: LoginRequest,
    credential_service: CredentialSvc,
) -> AuthResponse:
    """Authenticate with email and password."""
    result = await credential_service.login(
        email=request.email,
        password=request.password,
    )
    return AuthResponse.from_session(result)


@router.post(
    "/refresh-token",
    summary="Refresh access token",
    responses={
        200: {"description": "New access token issued"},
        401: {"description": "Invalid or expired refresh token"},
    },
)
async def refresh_token(
    request: RefreshTokenRequest,
    credential_service: CredentialSvc,
) -> AuthResponse:
    """
    Exchange a refresh token for a new access token.

    The refresh token itself is returned unchanged and stays valid until
    it expires.
    """
    result = await credential_service.refresh(request.refresh_token)
    return AuthResponse.from_session(result)


@router.get(
    "/me",
    summary="Get current user",
    responses={
        200: {"description": "Current user profile"},
        401: {"description": "Missing or invalid access token"},
        404: {"description": "User no longer exists"},
    },
)
async def me(
    user_id: CurrentUserId,
    credential_service: CredentialSvc,
) -> MeResponse:
    """Return the profile of the authenticated user."""
    profile = await credential_service.get_by_id(user_id)
    return MeResponse(user=UserResponse.from_profile(profile))


@router.post(
    "/logout",
    summary="Logout",
    responses={
        200: {"description": "Logged out"},
        401: {"description": "Missing or invalid access token"},
    },
)
async def logout(
    user_id: CurrentUserId,
    credential_service: CredentialSvc,
) -> LogoutResponse:
    """
    Log out the authenticated user.

    Tokens are stateless: clients discard them, and tokens issued earlier
    remain valid until they expire.
    """
    await credential_service.logout(user_id)
    return LogoutResponse()
