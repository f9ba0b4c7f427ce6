"""
Integration test fixtures.

Apps are built through create_app() with an in-memory option store and a
mocked CAPTCHA provider, so no Redis or network access is needed.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from app import create_app
from config import AppSettings
from infrastructure.options.memory import InMemoryOptionStore
from services.captcha_settings import SECRET_KEY_OPTION, SITE_KEY_OPTION

ADMIN_TOKEN = "admin-test-token"


@pytest.fixture
def option_store():
    return InMemoryOptionStore(
        {SITE_KEY_OPTION: "6LcSiteKey", SECRET_KEY_OPTION: "configured-secret"}
    )


@pytest.fixture
def captcha_provider():
    provider = AsyncMock()
    provider.verify.return_value = True
    return provider


@pytest.fixture
def comment_handler():
    return AsyncMock()


@pytest.fixture
def settings():
    return AppSettings(secret_key="integration-secret", admin_token=ADMIN_TOKEN)


@pytest.fixture
def client(settings, option_store, captcha_provider, comment_handler):
    app = create_app(
        settings,
        comment_handler=comment_handler,
        option_store=option_store,
        captcha_provider=captcha_provider,
    )
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def nonces(client):
    """The NonceManager the running app mints and checks nonces with."""
    return client.app.state.nonces
