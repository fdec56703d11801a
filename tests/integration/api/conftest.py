"""Pytest fixtures for API integration tests."""

import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from stockpile.presentation.api.app import API_V1_PREFIX, create_app
from stockpile.presentation.api.config import get_api_settings
from stockpile.presentation.api.dependencies import get_db_session
from stockpile_auth.persistence.sqlalchemy import AuthBase
from stockpile_config.settings import Settings


@pytest.fixture
def api_v1_prefix() -> str:
    """Get the API v1 prefix for building URLs."""
    return API_V1_PREFIX


@pytest.fixture
def api_settings() -> Settings:
    """Test API settings with debug enabled and cheap bcrypt."""
    return Settings(
        _env_file=None,
        jwt_secret=SecretStr("api-test-access-secret-0123456789abcdef"),
        jwt_refresh_secret=SecretStr("api-test-refresh-secret-0123456789abcdef"),
        api_debug=True,
        api_cors_origins="http://localhost:3000",
        bcrypt_rounds=4,
    )


@pytest.fixture
async def api_db_engine(tmp_path):
    """Create a file-backed SQLite database for testing.

    The TestClient runs the app on its own event loop, so connections are
    not pooled across loops.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'api.db'}",
        echo=False,
        poolclass=NullPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(AuthBase.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def test_app(api_settings, api_db_engine):
    """Create an app wired to the test database and settings."""
    app = create_app(settings=api_settings)

    test_session_maker = async_sessionmaker(
        api_db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async def override_get_db_session():
        async with test_session_maker() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_api_settings] = lambda: api_settings
    return app


@pytest.fixture
def test_client(test_app) -> TestClient:
    """Create a test client. The lifespan is not run; tables already exist."""
    return TestClient(test_app)


@pytest.fixture
def registered_user_data() -> dict:
    """Test user registration data."""
    return {
        "name": "John",
        "email": "john@example.com",
        "password": "password123",
    }


@pytest.fixture
def registered_session(test_client, registered_user_data, api_v1_prefix) -> dict:
    """Register the test user and return the auth response body."""
    response = test_client.post(
        f"{api_v1_prefix}/auth/signup",
        json=registered_user_data,
    )
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def auth_headers(registered_session) -> dict:
    """Get auth headers for the registered user."""
    return {"Authorization": f"Bearer {registered_session['access_token']}"}
