"""Webhook verification and event resolution."""

from gradient_labs.webhooks.events import (
    EVENT_TYPES,
    AgentMessageEvent,
    ConversationFinishedEvent,
    ConversationHandOffEvent,
    Webhook,
    WebhookConversation,
    WebhookEnvelope,
    WebhookEvent,
    WebhookType,
    parse_webhook,
)
from gradient_labs.webhooks.signature import (
    DEFAULT_LEEWAY,
    SIGNATURE_HEADER,
    SignatureFormatError,
    SignatureHeader,
    VerifierConfig,
    WebhookVerifier,
    compute_signature,
    parse_signature_header,
)

__all__ = [
    # Events
    "EVENT_TYPES",
    "AgentMessageEvent",
    "ConversationFinishedEvent",
    "ConversationHandOffEvent",
    "Webhook",
    "WebhookConversation",
    "WebhookEnvelope",
    "WebhookEvent",
    "WebhookType",
    "parse_webhook",
    # Signature
    "DEFAULT_LEEWAY",
    "SIGNATURE_HEADER",
    "SignatureFormatError",
    "SignatureHeader",
    "VerifierConfig",
    "WebhookVerifier",
    "compute_signature",
    "parse_signature_header",
]
