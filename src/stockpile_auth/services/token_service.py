"""JWT token service.

Mints, validates and refreshes the access/refresh token pair used for
bearer authentication. Access and refresh tokens are signed with two
independent secrets, so a leaked access-token key cannot be used to forge
refresh tokens and vice versa.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import uuid4

import jwt

from stockpile_auth.exceptions import (
    InternalError,
    InvalidClaimsError,
    InvalidSignatureError,
    MalformedTokenError,
    TokenExpiredError,
    WrongTokenTypeError,
)
from stockpile_auth.schemas import Credential, TokenClaims, TokenPair, TokenType

logger = logging.getLogger(__name__)


class TokenService:
    """Service for JWT token creation and verification.

    Handles access tokens (short-lived) and refresh tokens (long-lived).
    Tokens are stateless: validity depends only on signature and time
    window, nothing is stored server-side.

    Examples
    --------
    >>> service = TokenService(access_secret="a" * 32, refresh_secret="b" * 32)
    >>> pair = service.generate_token_pair(credential)
    >>> claims = service.validate_access(pair.access_token)
    >>> service.extract_subject(claims)
    42
    """

    DEFAULT_ACCESS_TTL_MINUTES = 15
    DEFAULT_REFRESH_TTL_HOURS = 7 * 24
    DEFAULT_ISSUER = "stockpile"
    ALGORITHM = "HS256"
    HMAC_ALGORITHMS = frozenset({"HS256", "HS384", "HS512"})
    REQUIRED_CLAIMS = ("exp", "iat", "nbf", "sub", "iss")

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_token_ttl_minutes: int = DEFAULT_ACCESS_TTL_MINUTES,
        refresh_token_ttl_hours: int = DEFAULT_REFRESH_TTL_HOURS,
        issuer: str = DEFAULT_ISSUER,
    ):
        """Initialize the token service.

        Parameters
        ----------
        access_secret
            Secret for signing access tokens. Must be kept secure.
        refresh_secret
            Secret for signing refresh tokens. Must differ from
            ``access_secret``.
        access_token_ttl_minutes
            Minutes until an access token expires (default 15)
        refresh_token_ttl_hours
            Hours until a refresh token expires (default 168, 7 days)
        issuer
            Value of the ``iss`` claim, checked on validation
        """
        if not access_secret or not refresh_secret:
            msg = "JWT secrets cannot be empty"
            raise ValueError(msg)
        if access_secret == refresh_secret:
            msg = "Access and refresh secrets must be different"
            raise ValueError(msg)

        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self._access_ttl = timedelta(minutes=access_token_ttl_minutes)
        self._refresh_ttl = timedelta(hours=refresh_token_ttl_hours)
        self._issuer = issuer

    @property
    def access_token_expires_in(self) -> int:
        """Access token lifetime in seconds."""
        return int(self._access_ttl.total_seconds())

    def generate_token_pair(self, credential: Credential) -> TokenPair:
        """Mint an access token and a refresh token for a credential.

        Both tokens share subject and issue time; they differ in ``type``,
        expiry and signing secret.

        Raises
        ------
        InternalError
            If the signing backend fails
        """
        now = datetime.now(tz=timezone.utc)
        access_token = self.create_access_token(
            user_id=credential.id,
            email=credential.email,
            now=now,
        )
        refresh_token = self.create_refresh_token(
            user_id=credential.id,
            email=credential.email,
            now=now,
        )
        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self.access_token_expires_in,
        )

    def create_access_token(
        self,
        user_id: int,
        email: str,
        expires_delta: timedelta | None = None,
        now: datetime | None = None,
    ) -> str:
        """Create a short-lived access token signed with the access secret.

        Parameters
        ----------
        user_id
            The credential id
        email
            The user's email address
        expires_delta
            Custom lifetime (optional, may be negative in tests)
        now
            Issue time (defaults to the current time)
        """
        return self._create_token(
            user_id=user_id,
            email=email,
            token_type=TokenType.ACCESS,
            expires_delta=self._access_ttl if expires_delta is None else expires_delta,
            secret=self._access_secret,
            now=now,
        )

    def create_refresh_token(
        self,
        user_id: int,
        email: str,
        expires_delta: timedelta | None = None,
        now: datetime | None = None,
    ) -> str:
        """Create a long-lived refresh token signed with the refresh secret.

        Refresh tokens are used to obtain new access tokens without
        requiring the user to log in again.
        """
        return self._create_token(
            user_id=user_id,
            email=email,
            token_type=TokenType.REFRESH,
            expires_delta=self._refresh_ttl if expires_delta is None else expires_delta,
            secret=self._refresh_secret,
            now=now,
        )

    def validate(self, token: str, secret: str) -> TokenClaims:
        """Verify and decode a JWT token against the given secret.

        Signature, expiry, not-before, issuer and claim shape are checked
        together; a token is either fully valid or rejected.

        Parameters
        ----------
        token
            The JWT token string to verify
        secret
            The secret the token is expected to be signed with

        Returns
        -------
        TokenClaims containing the decoded data

        Raises
        ------
        TokenExpiredError
            If ``exp`` has passed
        InvalidSignatureError
            If the algorithm is not HMAC or the signature does not verify
        MalformedTokenError
            If the token cannot be parsed, is not yet valid, or lacks claims
        InvalidClaimsError
            If the claims have the wrong shape
        """
        try:
            header = jwt.get_unverified_header(token)
        except jwt.PyJWTError as e:
            raise MalformedTokenError(f"Malformed token: {e}") from e

        # PyJWT does not type-check the header, so "alg" may be any JSON value
        alg = header.get("alg")
        if not isinstance(alg, str) or alg not in self.HMAC_ALGORITHMS:
            msg = "Unexpected signing method"
            raise InvalidSignatureError(msg)

        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.ALGORITHM],
                issuer=self._issuer,
                options={"require": list(self.REQUIRED_CLAIMS)},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as e:
            raise InvalidSignatureError(f"Invalid token signature: {e}") from e
        except jwt.InvalidIssuerError as e:
            raise InvalidClaimsError(f"Invalid issuer: {e}") from e
        except jwt.ImmatureSignatureError as e:
            raise MalformedTokenError(f"Token is not yet valid: {e}") from e
        except jwt.InvalidTokenError as e:
            raise MalformedTokenError(f"Malformed token: {e}") from e

        return TokenClaims.from_payload(payload)

    def validate_access(self, token: str) -> TokenClaims:
        """Validate an access token presented as a bearer credential.

        Raises
        ------
        WrongTokenTypeError
            If the verified token is not an access token
        """
        claims = self.validate(token, self._access_secret)
        if not claims.is_access_token():
            msg = "Not an access token"
            raise WrongTokenTypeError(msg)
        return claims

    def validate_refresh(self, token: str) -> TokenClaims:
        """Validate a refresh token against the refresh secret.

        Raises
        ------
        WrongTokenTypeError
            If the token is not a refresh token
        """
        self._reject_unverified_type(token, TokenType.REFRESH)
        claims = self.validate(token, self._refresh_secret)
        if not claims.is_refresh_token():
            msg = "Not a refresh token"
            raise WrongTokenTypeError(msg)
        return claims

    def extract_subject(self, claims: TokenClaims | Mapping[str, Any]) -> int:
        """Return the user id a token was issued for.

        Raises
        ------
        InvalidClaimsError
            If the claims do not have the expected shape
        """
        if isinstance(claims, TokenClaims):
            return claims.user_id
        if isinstance(claims, Mapping):
            return TokenClaims.from_payload(claims).user_id
        msg = f"Unsupported claims object: {type(claims).__name__}"
        raise InvalidClaimsError(msg)

    def refresh_access(self, refresh_token: str) -> tuple[str, int]:
        """Mint a new access token from a valid refresh token.

        The refresh token itself is not rotated; callers keep using it
        until it expires.

        Returns
        -------
        Tuple of (access_token, expires_in_seconds)

        Raises
        ------
        WrongTokenTypeError
            If the token is not a refresh token
        InvalidTokenError
            Any other validation failure (see ``validate``)
        """
        claims = self.validate_refresh(refresh_token)
        access_token = self.create_access_token(
            user_id=claims.user_id,
            email=claims.email,
        )
        logger.debug("Access token refreshed for user: %s", claims.user_id)
        return access_token, self.access_token_expires_in

    def _reject_unverified_type(self, token: str, expected: TokenType) -> None:
        """Reject a token whose unverified ``type`` claim is wrong.

        Only used to classify the failure: an access token presented for
        refresh is signed with the other secret and would otherwise be
        reported as a signature error. Tokens that cannot be read here are
        left to ``validate``.
        """
        try:
            payload = jwt.decode(token, options={"verify_signature": False})
        except jwt.PyJWTError:
            return

        token_type = payload.get("type")
        if isinstance(token_type, str) and token_type != expected.value:
            msg = f"Expected a {expected.value} token, got {token_type}"
            raise WrongTokenTypeError(msg)

    def _create_token(
        self,
        user_id: int,
        email: str,
        token_type: TokenType,
        expires_delta: timedelta,
        secret: str,
        now: datetime | None = None,
    ) -> str:
        """Create a signed JWT token with the given parameters."""
        issued_at = now or datetime.now(tz=timezone.utc)
        expire = issued_at + expires_delta

        payload = {
            "user_id": user_id,
            "email": email,
            "type": token_type.value,
            "iat": issued_at,
            "nbf": issued_at,
            "exp": expire,
            "iss": self._issuer,
            "sub": str(user_id),
            "jti": uuid4().hex,
        }

        try:
            return jwt.encode(payload, secret, algorithm=self.ALGORITHM)
        except (jwt.PyJWTError, TypeError, ValueError) as e:
            logger.exception("Failed to sign %s token", token_type.value)
            raise InternalError("Failed to generate tokens") from e
