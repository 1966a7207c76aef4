import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from gradient_labs.common.config import ClientConfig, ReceiverConfig, WebhookConfig
from gradient_labs.receiver.handlers import WebhookHandler
from gradient_labs.receiver.server import create_app
from gradient_labs.webhooks.signature import (
    VerifierConfig,
    WebhookVerifier,
    compute_signature,
)


SIGNING_KEY = "test-signing-key"
NOW = 1_700_000_000


class MockWebhookHandler(WebhookHandler):
    """Records every webhook it is handed."""

    def __init__(self):
        self.handled = []
        self._handle_mock = MagicMock(side_effect=self._record)

    async def on_agent_message(self, webhook, event):
        self._handle_mock("agent_message", webhook, event)

    async def on_conversation_hand_off(self, webhook, event):
        self._handle_mock("conversation_hand_off", webhook, event)

    async def on_conversation_finished(self, webhook, event):
        self._handle_mock("conversation_finished", webhook, event)

    def _record(self, kind, webhook, event):
        self.handled.append((kind, webhook, event))


def signature_header(body: bytes, secret: str = SIGNING_KEY, timestamp: int = NOW) -> str:
    digest = compute_signature(secret.encode(), timestamp, body).hex()
    return f"t={timestamp},v1={digest}"


@pytest.fixture
def sign():
    """Fixture that provides a function signing a body like the platform does."""
    return signature_header


@pytest.fixture
def verifier_config():
    return VerifierConfig(secret=SIGNING_KEY.encode())


@pytest.fixture
def verifier(verifier_config):
    """Fixture that provides a verifier with a clock frozen at NOW."""
    return WebhookVerifier(verifier_config, clock=lambda: float(NOW))


@pytest.fixture
def conversation_data():
    return {
        "id": "c1",
        "customer_id": "u1",
        "metadata": {"ticket": 1234},
    }


@pytest.fixture
def make_webhook_body(conversation_data):
    """Fixture that provides a function building a raw webhook body."""

    def _make(webhook_type="agent.message", data=None, **fields):
        if data is None:
            data = {"conversation": conversation_data, "body": "hello"}
        envelope = {
            "id": "webhook-1",
            "type": webhook_type,
            "sequence_number": 7,
            "timestamp": "2023-11-14T22:13:20Z",
            "data": data,
        }
        envelope.update(fields)
        return json.dumps(envelope).encode()

    return _make


@pytest.fixture
def mock_webhook_handler():
    return MockWebhookHandler()


@pytest.fixture
def receiver_config():
    """Fixture that provides a sample receiver configuration."""
    return ReceiverConfig(
        host="0.0.0.0",
        port=8000,
        log_level="INFO",
        webhook=WebhookConfig(signing_key=SIGNING_KEY),
    )


@pytest.fixture
def receiver_app(receiver_config, verifier, mock_webhook_handler):
    """Fixture that provides a configured receiver FastAPI app."""
    with patch("gradient_labs.receiver.app.get_verifier") as mock_get_verifier, patch(
        "gradient_labs.receiver.app.get_webhook_handler"
    ) as mock_get_handler:
        mock_get_verifier.return_value = verifier
        mock_get_handler.return_value = mock_webhook_handler
        app = create_app(receiver_config)
        yield app


@pytest.fixture
def receiver_client(receiver_app):
    """Fixture that provides a test client for the receiver API."""
    return TestClient(receiver_app)


@pytest.fixture
def client_config():
    return ClientConfig(
        api_key="test-api-key",
        base_url="https://api.example.com/",
        timeout=5,
        webhook=WebhookConfig(signing_key=SIGNING_KEY),
    )


@pytest.fixture
def mock_session():
    """Fixture that provides a mock aiohttp session answering every request."""
    session = MagicMock()

    def respond(status=200, text=""):
        response = MagicMock()
        response.status = status
        response.text = AsyncMock(return_value=text)

        cm = MagicMock()
        cm.__aenter__ = AsyncMock(return_value=response)
        cm.__aexit__ = AsyncMock(return_value=None)
        session.request.return_value = cm
        return response

    session.respond = respond
    respond()
    return session
