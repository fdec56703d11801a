"""Auth schemas and data structures.

These are simple data classes used for transferring credential and
token data between components.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from stockpile_auth.exceptions import InvalidClaimsError

TOKEN_TYPE_BEARER = "Bearer"  # NOQA: S105


class TokenType(str, Enum):
    """Kind of JWT, carried in the ``type`` claim."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class Credential:
    """A stored authentication record.

    ``password_hash`` is a bcrypt digest. It is never serialized outward;
    use ``to_profile()`` for anything that leaves the service.
    """

    id: int
    name: str | None
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime

    def to_profile(self) -> UserProfile:
        """Public projection without the password hash."""
        return UserProfile(
            id=self.id,
            name=self.name,
            email=self.email,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def __repr__(self) -> str:
        return f"Credential(id={self.id!r}, email={self.email!r})"


@dataclass(frozen=True)
class UserProfile:
    """Public user data returned to callers."""

    id: int
    name: str | None
    email: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class TokenClaims:
    """Decoded and verified JWT claims.

    Attributes
    ----------
    user_id
        The credential id the token was issued for
    email
        The user's email address at issue time
    token_type
        Access or refresh
    issued_at
        ``iat`` claim
    not_before
        ``nbf`` claim
    expires_at
        ``exp`` claim
    issuer
        ``iss`` claim
    subject
        ``sub`` claim, the user id as a string
    token_id
        ``jti`` claim, unique per minted token
    """

    user_id: int
    email: str
    token_type: TokenType
    issued_at: datetime
    not_before: datetime
    expires_at: datetime
    issuer: str
    subject: str
    token_id: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> TokenClaims:
        """Build claims from a decoded JWT payload.

        Raises
        ------
        InvalidClaimsError
            If a claim is missing or has the wrong type
        """
        try:
            user_id = payload["user_id"]
            if isinstance(user_id, bool) or not isinstance(user_id, int):
                msg = "user_id must be an integer"
                raise InvalidClaimsError(msg)

            subject = payload["sub"]
            if subject != str(user_id):
                msg = "sub does not match user_id"
                raise InvalidClaimsError(msg)

            email = payload["email"]
            issuer = payload["iss"]
            token_id = payload["jti"]
            if not all(isinstance(v, str) for v in (email, issuer, token_id)):
                msg = "email, iss and jti must be strings"
                raise InvalidClaimsError(msg)

            return cls(
                user_id=user_id,
                email=email,
                token_type=TokenType(payload["type"]),
                issued_at=_from_timestamp(payload["iat"]),
                not_before=_from_timestamp(payload["nbf"]),
                expires_at=_from_timestamp(payload["exp"]),
                issuer=issuer,
                subject=subject,
                token_id=token_id,
            )
        except KeyError as e:
            msg = f"Missing claim: {e.args[0]}"
            raise InvalidClaimsError(msg) from e
        except (TypeError, ValueError, OverflowError) as e:
            msg = f"Malformed claim value: {e}"
            raise InvalidClaimsError(msg) from e

    def is_access_token(self) -> bool:
        """Check if this is an access token."""
        return self.token_type is TokenType.ACCESS

    def is_refresh_token(self) -> bool:
        """Check if this is a refresh token."""
        return self.token_type is TokenType.REFRESH


@dataclass(frozen=True)
class TokenPair:
    """An access token and its sibling refresh token."""

    access_token: str
    refresh_token: str
    expires_in: int  # access token lifetime in seconds


@dataclass(frozen=True)
class SessionResult:
    """Result of register, login and refresh."""

    user: UserProfile
    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = TOKEN_TYPE_BEARER


def _from_timestamp(value: Any) -> datetime:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        msg = f"expected numeric timestamp, got {type(value).__name__}"
        raise TypeError(msg)
    return datetime.fromtimestamp(value, tz=timezone.utc)
