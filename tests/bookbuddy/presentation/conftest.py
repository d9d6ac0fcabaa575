"""Pytest fixtures for API tests.

The app runs in-process over ``httpx.ASGITransport`` so that requests and
the in-memory SQLite engine share one event loop. The lifespan is not
started; database, mailer and hashing dependencies are overridden.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr

from bookbuddy.presentation.api.app import API_V1_PREFIX, create_app
from bookbuddy.presentation.api.config import get_api_settings
from bookbuddy.presentation.api.dependencies import (
    get_db_session,
    get_mailer,
    get_password_service,
)
from bookbuddy_auth import PasswordHashingService
from bookbuddy_config.settings import Settings
from tests.shared.fixtures.factories import (
    TEST_ACCESS_SECRET,
    TEST_BCRYPT_ROUNDS,
    TEST_CODE_SECRET,
    TEST_REFRESH_SECRET,
    RecordingMailer,
)


@pytest.fixture
def api_v1_prefix() -> str:
    """Get the API v1 prefix for building URLs."""
    return API_V1_PREFIX


@pytest.fixture
def api_settings() -> Settings:
    """Test API settings with debug enabled."""
    return Settings(
        jwt_access_secret=SecretStr(TEST_ACCESS_SECRET),
        jwt_refresh_secret=SecretStr(TEST_REFRESH_SECRET),
        login_code_secret=SecretStr(TEST_CODE_SECRET),
        postgres_password=SecretStr("test-password"),
        environment="test",
        api_debug=True,
        api_cors_origins="http://localhost:5173",
        api_url="http://api.test",
        client_url="http://client.test",
        bcrypt_rounds=TEST_BCRYPT_ROUNDS,
    )


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def app(api_settings, session_maker, mailer):
    """Create the app with an in-memory database and a recording mailer."""
    app = create_app(settings=api_settings)

    async def override_get_db_session():
        async with session_maker() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_api_settings] = lambda: api_settings
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_password_service] = lambda: PasswordHashingService(
        rounds=TEST_BCRYPT_ROUNDS,
    )
    return app


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
    ) as client:
        yield client


@pytest.fixture
def registered_user_data() -> dict:
    """Test user registration data."""
    return {
        "username": "alice",
        "email": "alice@x.com",
        "password": "Secret123!",
    }


@pytest_asyncio.fixture
async def auth_headers(client, registered_user_data, api_v1_prefix) -> dict:
    """Register the test user and return bearer headers for it."""
    response = await client.post(f"{api_v1_prefix}/auth/register", json=registered_user_data)
    assert response.status_code == 201

    token = response.json()["accessToken"]
    return {"Authorization": f"Bearer {token}"}
