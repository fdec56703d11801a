"""Unit tests for auth schemas."""

from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone

import pytest

from stockpile_auth.exceptions import InvalidClaimsError
from stockpile_auth.schemas import Credential, SessionResult, TokenClaims, TokenType

NOW = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def _payload(**overrides):
    payload = {
        "user_id": 5,
        "email": "five@example.com",
        "type": "refresh",
        "iat": int(NOW.timestamp()),
        "nbf": int(NOW.timestamp()),
        "exp": int((NOW + timedelta(hours=1)).timestamp()),
        "iss": "stockpile",
        "sub": "5",
        "jti": "deadbeef",
    }
    payload.update(overrides)
    return payload


class TestCredential:
    def setup_method(self):
        self.credential = Credential(
            id=1,
            name="John",
            email="john@example.com",
            password_hash="$2b$12$secret-hash",
            created_at=NOW,
            updated_at=NOW,
        )

    def test_profile_has_no_password_hash(self):
        profile = self.credential.to_profile()

        assert profile.id == 1
        assert profile.name == "John"
        assert profile.email == "john@example.com"
        assert not hasattr(profile, "password_hash")

    def test_repr_hides_password_hash(self):
        assert "secret-hash" not in repr(self.credential)

    def test_is_immutable(self):
        with pytest.raises(FrozenInstanceError):
            self.credential.email = "other@example.com"  # type: ignore[misc]


class TestTokenClaims:
    def test_from_payload(self):
        claims = TokenClaims.from_payload(_payload())

        assert claims.user_id == 5
        assert claims.token_type is TokenType.REFRESH
        assert claims.is_refresh_token()
        assert claims.issued_at == NOW
        assert claims.expires_at == NOW + timedelta(hours=1)
        assert claims.subject == "5"
        assert claims.token_id == "deadbeef"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"user_id": True},
            {"user_id": 5.0},
            {"email": 1},
            {"type": "other"},
            {"exp": "tomorrow"},
            {"sub": "6"},
        ],
    )
    def test_wrong_shapes_rejected(self, overrides):
        with pytest.raises(InvalidClaimsError):
            TokenClaims.from_payload(_payload(**overrides))

    def test_missing_claim_rejected(self):
        payload = _payload()
        del payload["jti"]

        with pytest.raises(InvalidClaimsError, match="jti"):
            TokenClaims.from_payload(payload)


def test_session_result_defaults_to_bearer():
    credential = Credential(1, None, "a@example.com", "h", NOW, NOW)

    result = SessionResult(
        user=credential.to_profile(),
        access_token="a",
        refresh_token="r",
        expires_in=900,
    )

    assert result.token_type == "Bearer"
