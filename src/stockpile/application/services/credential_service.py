"""Credential service for user registration, login and token refresh."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from stockpile_auth import (
    Credential,
    CredentialRepository,
    EmailTakenError,
    InternalError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    InvalidTokenError,
    PasswordHashingService,
    SessionResult,
    TokenService,
    UserNotFoundError,
    UserProfile,
)

if TYPE_CHECKING:
    from stockpile.infrastructure.observability import AuthMetrics

logger = logging.getLogger(__name__)


class CredentialService:
    """
    Application service for the credential lifecycle.

    Orchestrates stockpile_auth infrastructure (password hashing, JWT
    tokens, credential store) to provide:
    - Registration
    - Login with password
    - Access token refresh
    - Profile lookup and logout

    Tokens are stateless. Logout only verifies that the user exists;
    tokens issued earlier stay valid until they expire.
    """

    def __init__(
        self,
        credential_repository: CredentialRepository,
        password_service: PasswordHashingService,
        token_service: TokenService,
        metrics: AuthMetrics | None = None,
    ):
        self._credential_repo = credential_repository
        self._password_service = password_service
        self._token_service = token_service
        self._metrics = metrics

    def _create_session(self, credential: Credential) -> SessionResult:
        pair = self._token_service.generate_token_pair(credential)
        if self._metrics is not None:
            self._metrics.record_tokens_issued()
        return SessionResult(
            user=credential.to_profile(),
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
            expires_in=pair.expires_in,
        )

    def _record_attempt(self, auth_type: str, success: bool) -> None:
        if self._metrics is not None:
            self._metrics.record_auth_attempt(auth_type, success=success)

    async def register(
        self,
        name: str | None,
        email: str,
        password: str,
    ) -> SessionResult:
        try:
            session = await self._register(name, email, password)
        except Exception:
            self._record_attempt("signup", success=False)
            raise
        self._record_attempt("signup", success=True)
        return session

    async def _register(
        self,
        name: str | None,
        email: str,
        password: str,
    ) -> SessionResult:
        # Pre-check only; the unique index on email is what prevents duplicates
        if await self._credential_repo.email_exists(email):
            logger.info("Registration rejected, email taken: %s", email)
            raise EmailTakenError(email)

        try:
            password_hash = self._password_service.hash(password)
        except (ValueError, TypeError) as e:
            logger.exception("Password hashing failed for %s", email)
            raise InternalError("Failed to hash password") from e

        credential = await self._credential_repo.create(
            name=name,
            email=email,
            password_hash=password_hash,
        )

        logger.info("User registered: %s (id: %s)", email, credential.id)
        return self._create_session(credential)

    async def login(self, email: str, password: str) -> SessionResult:
        try:
            session = await self._login(email, password)
        except Exception:
            self._record_attempt("signin", success=False)
            raise
        self._record_attempt("signin", success=True)
        return session

    async def _login(self, email: str, password: str) -> SessionResult:
        credential = await self._credential_repo.find_by_email(email)
        if credential is None:
            logger.info("Login failed: %s", email)
            raise InvalidCredentialsError

        if not self._password_service.verify(password, credential.password_hash):
            logger.info("Login failed: %s", email)
            raise InvalidCredentialsError

        logger.info("User logged in: %s", email)
        return self._create_session(credential)

    async def get_by_id(self, user_id: int) -> UserProfile:
        credential = await self._credential_repo.find_by_id(user_id)
        if credential is None:
            raise UserNotFoundError(user_id)
        return credential.to_profile()

    async def refresh(self, refresh_token: str) -> SessionResult:
        """Exchange a refresh token for a new access token.

        The returned session carries the same refresh token; refresh
        tokens are not rotated.

        Raises
        ------
        InvalidRefreshTokenError
            If the token is invalid, expired, of the wrong type, or its
            subject no longer exists
        """
        try:
            access_token, expires_in = self._token_service.refresh_access(
                refresh_token,
            )
            claims = self._token_service.validate_refresh(refresh_token)
            user_id = self._token_service.extract_subject(claims)
            user = await self.get_by_id(user_id)
        except (InvalidTokenError, UserNotFoundError) as e:
            logger.info("Refresh rejected: %s", e.message)
            raise InvalidRefreshTokenError from e

        logger.debug("Access token refreshed for user: %s", user.id)
        return SessionResult(
            user=user,
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=expires_in,
        )

    async def logout(self, user_id: int) -> None:
        # Existence check only: there is no server-side session to end
        await self.get_by_id(user_id)
        logger.info("User logged out: %s", user_id)
