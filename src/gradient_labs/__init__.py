"""Python bindings for the Gradient Labs API and its webhooks."""

__version__ = "0.1.0"

from gradient_labs.client import Client
from gradient_labs.common.config import ClientConfig, ReceiverConfig, WebhookConfig
from gradient_labs.common.errors import (
    GradientLabsError,
    InvalidWebhookSignatureError,
    ResponseError,
    UnknownWebhookTypeError,
    WebhookDecodeError,
)
from gradient_labs.webhooks import (
    AgentMessageEvent,
    ConversationFinishedEvent,
    ConversationHandOffEvent,
    VerifierConfig,
    Webhook,
    WebhookConversation,
    WebhookEnvelope,
    WebhookType,
    WebhookVerifier,
    parse_webhook,
)

__all__ = [
    "__version__",
    "Client",
    "ClientConfig",
    "ReceiverConfig",
    "WebhookConfig",
    "GradientLabsError",
    "InvalidWebhookSignatureError",
    "ResponseError",
    "UnknownWebhookTypeError",
    "WebhookDecodeError",
    "AgentMessageEvent",
    "ConversationFinishedEvent",
    "ConversationHandOffEvent",
    "VerifierConfig",
    "Webhook",
    "WebhookConversation",
    "WebhookEnvelope",
    "WebhookType",
    "WebhookVerifier",
    "parse_webhook",
]
