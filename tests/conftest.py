"""Root pytest configuration for test discovery and auto-skip behavior.

Test Structure:
    tests/
    ├── bookbuddy_auth/        # Token, hashing and one-time-secret primitives
    │   ├── unit/              # Fast, isolated tests with mocks
    │   └── persistence/       # Repositories against in-memory SQLite
    ├── bookbuddy_identity/    # Identity services, domain and repositories
    ├── bookbuddy_config/      # Settings loading
    ├── bookbuddy/             # Flows, background sweeper, HTTP API
    │   └── integration/       # Tests with Testcontainers PostgreSQL
    └── shared/                # Shared fixtures and utilities

Environment Variables:
    RUN_INTEGRATION=1    Run @pytest.mark.integration tests
    RUN_ALL_TESTS=1      Run all tests (overrides other settings)

Pytest Options:
    --run-integration    Run integration tests
    --run-all            Run all tests
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# Load .env.dev for tests (same as local development)
CONFIG_DIR = PROJECT_ROOT / "config"
if (CONFIG_DIR / ".env.dev").exists():
    load_dotenv(CONFIG_DIR / ".env.dev")

# Required settings for tests that build the app or its dependencies
os.environ.setdefault("JWT_ACCESS_SECRET", "test-access-secret")
os.environ.setdefault("JWT_REFRESH_SECRET", "test-refresh-secret")
os.environ.setdefault("LOGIN_CODE_SECRET", "test-login-code-secret")
os.environ.setdefault("POSTGRES_PASSWORD", "postgres")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SMTP_ENABLED", "false")

from bookbuddy_config import clear_settings_cache  # noqa: E402


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run tests marked with @pytest.mark.integration",
    )
    parser.addoption(
        "--run-all",
        action="store_true",
        default=False,
        help="Run all tests regardless of markers",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: Tests that need a PostgreSQL container (auto-skipped)",
    )
    config.addinivalue_line(
        "markers",
        "slow: Tests that take more than 1 second",
    )


def _flag_enabled(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


def pytest_collection_modifyitems(config, items):
    """Auto-skip integration tests unless explicitly enabled."""
    if config.getoption("--run-all") or _flag_enabled("RUN_ALL_TESTS"):
        return

    if config.getoption("--run-integration") or _flag_enabled("RUN_INTEGRATION"):
        return

    skip_integration = pytest.mark.skip(
        reason="Integration test - run with --run-integration or RUN_INTEGRATION=1",
    )
    for item in items:
        item_markers = {mark.name for mark in item.iter_markers()}
        if "integration" in item_markers:
            item.add_marker(skip_integration)


@pytest.fixture(scope="session", autouse=True)
def configure_app_settings():
    """Start and end the session with fresh settings."""
    clear_settings_cache()
    yield
    clear_settings_cache()
