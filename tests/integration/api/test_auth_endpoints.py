"""Integration tests for authentication endpoints."""

import base64
import json
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from stockpile_auth import TokenService

pytestmark = pytest.mark.integration


def _segment(data: dict) -> str:
    raw = json.dumps(data, separators=(",", ":")).encode()
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


# Header "alg" is a JSON list instead of an algorithm name
LIST_ALG_TOKEN = ".".join(
    [
        _segment({"alg": ["HS256"], "typ": "JWT"}),
        _segment({"type": "refresh", "sub": "1", "user_id": 1}),
        "c2ln",
    ]
)


def _token_service(api_settings) -> TokenService:
    return TokenService(
        access_secret=api_settings.jwt_secret.get_secret_value(),
        refresh_secret=api_settings.jwt_refresh_secret.get_secret_value(),
    )


class TestSignup:
    """Tests for POST /api/v1/auth/signup."""

    def test_signup_success(self, test_client: TestClient, api_v1_prefix: str):
        response = test_client.post(
            f"{api_v1_prefix}/auth/signup",
            json={
                "name": "John",
                "email": "john@example.com",
                "password": "password123",
            },
        )

        assert response.status_code == 200
        data = response.json()

        assert data["message"] == "success"
        assert data["user"]["name"] == "John"
        assert data["user"]["email"] == "john@example.com"
        assert "id" in data["user"]
        assert "created_at" in data["user"]
        assert "updated_at" in data["user"]
        assert "password" not in data["user"]
        assert "password_hash" not in data["user"]
        assert data["access_token"]
        assert data["refresh_token"]
        assert data["token_type"] == "Bearer"
        assert data["expires_in"] == 900

    def test_signup_duplicate_email(
        self,
        test_client: TestClient,
        registered_session: dict,
        registered_user_data: dict,
        api_v1_prefix: str,
    ):
        response = test_client.post(
            f"{api_v1_prefix}/auth/signup",
            json=registered_user_data,
        )

        assert response.status_code == 409
        assert response.json() == {
            "detail": "Email already registered",
            "code": "EMAIL_TAKEN",
        }

    def test_signup_weak_password(self, test_client: TestClient, api_v1_prefix: str):
        response = test_client.post(
            f"{api_v1_prefix}/auth/signup",
            json={"name": "Short", "email": "short@example.com", "password": "short"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "WEAK_PASSWORD"

    def test_signup_invalid_email(self, test_client: TestClient, api_v1_prefix: str):
        response = test_client.post(
            f"{api_v1_prefix}/auth/signup",
            json={"name": "Bad", "email": "not-an-email", "password": "password123"},
        )

        assert response.status_code == 422

    def test_signup_missing_password(self, test_client: TestClient, api_v1_prefix: str):
        response = test_client.post(
            f"{api_v1_prefix}/auth/signup",
            json={"email": "nopass@example.com"},
        )

        assert response.status_code == 422


class TestSignin:
    """Tests for POST /api/v1/auth/signin."""

    def test_signin_success(
        self,
        test_client: TestClient,
        registered_session: dict,
        registered_user_data: dict,
        api_v1_prefix: str,
    ):
        response = test_client.post(
            f"{api_v1_prefix}/auth/signin",
            json={
                "email": registered_user_data["email"],
                "password": registered_user_data["password"],
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == registered_session["user"]["id"]
        assert data["token_type"] == "Bearer"
        assert data["expires_in"] == 900

    def test_signin_wrong_password_and_unknown_email_match(
        self,
        test_client: TestClient,
        registered_session: dict,
        api_v1_prefix: str,
    ):
        wrong_password = test_client.post(
            f"{api_v1_prefix}/auth/signin",
            json={"email": "john@example.com", "password": "wrongpassword"},
        )
        unknown_email = test_client.post(
            f"{api_v1_prefix}/auth/signin",
            json={"email": "nobody@example.com", "password": "password123"},
        )

        assert wrong_password.status_code == 401
        assert unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json()
        assert wrong_password.json()["code"] == "INVALID_CREDENTIALS"


class TestRefreshToken:
    """Tests for POST /api/v1/auth/refresh-token."""

    def test_refresh_success(
        self,
        test_client: TestClient,
        registered_session: dict,
        api_v1_prefix: str,
    ):
        response = test_client.post(
            f"{api_v1_prefix}/auth/refresh-token",
            json={"refresh_token": registered_session["refresh_token"]},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["access_token"] != registered_session["access_token"]
        assert data["refresh_token"] == registered_session["refresh_token"]
        assert data["expires_in"] == 900
        assert data["user"]["email"] == "john@example.com"

    def test_refreshed_access_token_works(
        self,
        test_client: TestClient,
        registered_session: dict,
        api_v1_prefix: str,
    ):
        refreshed = test_client.post(
            f"{api_v1_prefix}/auth/refresh-token",
            json={"refresh_token": registered_session["refresh_token"]},
        ).json()

        response = test_client.get(
            f"{api_v1_prefix}/auth/me",
            headers={"Authorization": f"Bearer {refreshed['access_token']}"},
        )

        assert response.status_code == 200

    def test_refresh_with_access_token_rejected(
        self,
        test_client: TestClient,
        registered_session: dict,
        api_v1_prefix: str,
    ):
        response = test_client.post(
            f"{api_v1_prefix}/auth/refresh-token",
            json={"refresh_token": registered_session["access_token"]},
        )

        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_REFRESH_TOKEN"

    def test_refresh_with_garbage_rejected(
        self,
        test_client: TestClient,
        api_v1_prefix: str,
    ):
        response = test_client.post(
            f"{api_v1_prefix}/auth/refresh-token",
            json={"refresh_token": "not-a-token"},
        )

        assert response.status_code == 401

    def test_refresh_missing_body_field(
        self,
        test_client: TestClient,
        api_v1_prefix: str,
    ):
        response = test_client.post(f"{api_v1_prefix}/auth/refresh-token", json={})

        assert response.status_code == 422

    def test_refresh_with_non_string_alg_rejected(
        self,
        test_client: TestClient,
        api_v1_prefix: str,
    ):
        response = test_client.post(
            f"{api_v1_prefix}/auth/refresh-token",
            json={"refresh_token": LIST_ALG_TOKEN},
        )

        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_REFRESH_TOKEN"


class TestMe:
    """Tests for GET /api/v1/auth/me."""

    def test_me_returns_profile(
        self,
        test_client: TestClient,
        auth_headers: dict,
        api_v1_prefix: str,
    ):
        response = test_client.get(f"{api_v1_prefix}/auth/me", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "success"
        assert data["user"]["email"] == "john@example.com"
        assert data["user"]["name"] == "John"

    def test_me_without_token(self, test_client: TestClient, api_v1_prefix: str):
        response = test_client.get(f"{api_v1_prefix}/auth/me")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_me_with_refresh_token(
        self,
        test_client: TestClient,
        registered_session: dict,
        api_v1_prefix: str,
    ):
        response = test_client.get(
            f"{api_v1_prefix}/auth/me",
            headers={"Authorization": f"Bearer {registered_session['refresh_token']}"},
        )

        assert response.status_code == 401

    def test_me_with_expired_token(
        self,
        test_client: TestClient,
        api_settings,
        registered_session: dict,
        api_v1_prefix: str,
    ):
        token = _token_service(api_settings).create_access_token(
            registered_session["user"]["id"],
            "john@example.com",
            expires_delta=timedelta(seconds=-1),
        )

        response = test_client.get(
            f"{api_v1_prefix}/auth/me",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 401
        assert "expired" in response.json()["detail"].lower()

    def test_me_with_non_string_alg(self, test_client: TestClient, api_v1_prefix: str):
        response = test_client.get(
            f"{api_v1_prefix}/auth/me",
            headers={"Authorization": f"Bearer {LIST_ALG_TOKEN}"},
        )

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_me_for_deleted_user(
        self,
        test_client: TestClient,
        api_settings,
        api_v1_prefix: str,
    ):
        token = _token_service(api_settings).create_access_token(
            999,
            "ghost@example.com",
        )

        response = test_client.get(
            f"{api_v1_prefix}/auth/me",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 404
        assert response.json()["code"] == "USER_NOT_FOUND"


class TestLogout:
    """Tests for POST /api/v1/auth/logout."""

    def test_logout_success(
        self,
        test_client: TestClient,
        auth_headers: dict,
        api_v1_prefix: str,
    ):
        response = test_client.post(
            f"{api_v1_prefix}/auth/logout",
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json() == {
            "message": "success",
            "data": "Successfully logged out",
        }

    def test_token_still_valid_after_logout(
        self,
        test_client: TestClient,
        auth_headers: dict,
        api_v1_prefix: str,
    ):
        test_client.post(f"{api_v1_prefix}/auth/logout", headers=auth_headers)

        response = test_client.get(f"{api_v1_prefix}/auth/me", headers=auth_headers)

        assert response.status_code == 200

    def test_logout_requires_auth(self, test_client: TestClient, api_v1_prefix: str):
        response = test_client.post(f"{api_v1_prefix}/auth/logout")

        assert response.status_code == 401
