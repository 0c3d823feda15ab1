import hashlib
import hmac
import logging
import os
import time
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

# Set test environment variables
os.environ.update(
    {
        "ENV": "test",
        "STRIPE_SECRET_KEY": "sk_test_dummy",
        "STRIPE_WEBHOOK_SECRET": "whsec_test",
        "WEBHOOK_TOLERANCE": "300",
        "NOTIFICATION_URL": "",
    }
)

from stripe_relay.api.deps import event_router  # noqa: E402
from stripe_relay.core.config import Settings, get_settings  # noqa: E402
from stripe_relay.services.event_router import EventRouter  # noqa: E402
from stripe_relay.services.webhook_handlers import (  # noqa: E402
    EVENT_HANDLERS,
    Collaborators,
)

logger = logging.getLogger(__name__)


def stripe_header(body: bytes, secret: str, timestamp: int | None = None) -> str:
    ts = int(time.time()) if timestamp is None else timestamp
    payload = f"{ts}.".encode("utf-8") + body
    sig = hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()
    return f"t={ts},v1={sig}"


@pytest.fixture
def settings() -> Settings:
    return get_settings()


@pytest.fixture
def app():
    from stripe_relay.main import app

    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sign(settings):
    """Sign a raw body with the configured webhook secret."""
    secret = settings.stripe_webhook_secret.get_secret_value()

    def _sign(body: bytes, timestamp: int | None = None) -> str:
        return stripe_header(body, secret, timestamp)

    return _sign


@pytest.fixture
def handlers() -> dict[str, MagicMock]:
    return {event_type: MagicMock(name=event_type) for event_type in EVENT_HANDLERS}


@pytest.fixture
def collaborators() -> Collaborators:
    return Collaborators(notifier=MagicMock(), store=MagicMock())


@pytest.fixture
def mock_router(app, handlers, collaborators) -> EventRouter:
    """Route webhooks to MagicMock handlers instead of the real stubs."""
    router = EventRouter(handlers=handlers, collaborators=collaborators)
    app.dependency_overrides[event_router] = lambda: router
    logger.info("Event router dependency overridden with mock handlers")
    return router
