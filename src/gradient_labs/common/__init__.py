"""Common utilities and models for the Gradient Labs SDK."""

from gradient_labs.common.errors import (
    GradientLabsError,
    InvalidWebhookSignatureError,
    ResponseError,
    UnknownWebhookTypeError,
    WebhookDecodeError,
)
from gradient_labs.common.config import (
    DEFAULT_URL,
    BaseConfig,
    ClientConfig,
    MetricsConfig,
    ReceiverConfig,
    WebhookConfig,
)
from gradient_labs.common.logging import configure_logging
from gradient_labs.common.metrics import (
    MetricsRegistry,
    measure_time,
    metrics,
    start_metrics_server,
)
from gradient_labs.common.models import (
    AddMessageParams,
    AgentMetadata,
    AssignmentParams,
    CancelParams,
    Channel,
    Conversation,
    ConversationEventType,
    EndParams,
    EventParams,
    FinishParams,
    Message,
    ParticipantType,
    RatingParams,
    ResumeParams,
    StartConversationParams,
    Status,
)

__all__ = [
    # Errors
    "GradientLabsError",
    "InvalidWebhookSignatureError",
    "ResponseError",
    "UnknownWebhookTypeError",
    "WebhookDecodeError",
    # Config
    "DEFAULT_URL",
    "BaseConfig",
    "ClientConfig",
    "MetricsConfig",
    "ReceiverConfig",
    "WebhookConfig",
    # Logging
    "configure_logging",
    # Metrics
    "MetricsRegistry",
    "measure_time",
    "metrics",
    "start_metrics_server",
    # Models
    "AddMessageParams",
    "AgentMetadata",
    "AssignmentParams",
    "CancelParams",
    "Channel",
    "Conversation",
    "ConversationEventType",
    "EndParams",
    "EventParams",
    "FinishParams",
    "Message",
    "ParticipantType",
    "RatingParams",
    "ResumeParams",
    "StartConversationParams",
    "Status",
]
