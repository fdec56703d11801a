"""Root pytest configuration.

Test Structure:
    tests/
    ├── unit/                 # Fast, isolated tests (mocks, no database)
    │   ├── stockpile_auth/
    │   ├── stockpile_config/
    │   ├── application/
    │   ├── infrastructure/
    │   └── presentation/
    └── integration/          # SQLite-backed persistence and HTTP tests
        ├── persistence/
        ├── application/
        └── api/

Integration tests need no external services and run by default.

Environment Variables:
    SKIP_INTEGRATION=1    Skip @pytest.mark.integration tests

Pytest Options:
    --skip-integration    Skip integration tests
"""

import os

import pytest

# Settings require both secrets; the API module builds an app at import time
os.environ.setdefault("JWT_SECRET", "test-access-secret-0123456789abcdef0123456789")
os.environ.setdefault(
    "JWT_REFRESH_SECRET",
    "test-refresh-secret-0123456789abcdef0123456789",
)
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from stockpile_config import clear_settings_cache  # noqa: E402


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--skip-integration",
        action="store_true",
        default=False,
        help="Skip tests marked with @pytest.mark.integration",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests when explicitly requested."""
    skip_integration = config.getoption("--skip-integration") or os.environ.get(
        "SKIP_INTEGRATION",
        "",
    ).lower() in ("1", "true", "yes")

    if not skip_integration:
        return

    marker = pytest.mark.skip(reason="Integration tests disabled")
    for item in items:
        if "integration" in {mark.name for mark in item.iter_markers()}:
            item.add_marker(marker)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Make every test read settings from the current environment."""
    clear_settings_cache()
    yield
    clear_settings_cache()
