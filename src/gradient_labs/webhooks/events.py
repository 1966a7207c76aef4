from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from gradient_labs.common.errors import UnknownWebhookTypeError, WebhookDecodeError


class WebhookType(str, Enum):
    # The agent wants to send the customer a message.
    AGENT_MESSAGE = "agent.message"
    # The agent is handing the conversation off to a human.
    CONVERSATION_HAND_OFF = "conversation.hand_off"
    # The agent has concluded the conversation; close any matching ticket.
    CONVERSATION_FINISHED = "conversation.finished"


class WebhookConversation(BaseModel):
    """The conversation a webhook event relates to."""

    model_config = ConfigDict(frozen=True)

    id: str
    customer_id: str
    # Echoed back from the metadata given when the conversation was started.
    metadata: Any = None


class AgentMessageEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: ClassVar[WebhookType] = WebhookType.AGENT_MESSAGE

    conversation: WebhookConversation
    body: str


class ConversationHandOffEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: ClassVar[WebhookType] = WebhookType.CONVERSATION_HAND_OFF

    conversation: WebhookConversation
    target: Optional[str] = None
    reason: str = Field("", alias="reason_code")
    # Human-legible description of the reason code.
    description: str = Field("", alias="reason")


class ConversationFinishedEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: ClassVar[WebhookType] = WebhookType.CONVERSATION_FINISHED

    conversation: WebhookConversation


WebhookEvent = Union[AgentMessageEvent, ConversationHandOffEvent, ConversationFinishedEvent]

EVENT_TYPES: Dict[WebhookType, Type[BaseModel]] = {
    WebhookType.AGENT_MESSAGE: AgentMessageEvent,
    WebhookType.CONVERSATION_HAND_OFF: ConversationHandOffEvent,
    WebhookType.CONVERSATION_FINISHED: ConversationFinishedEvent,
}


class WebhookEnvelope(BaseModel):
    """The type-agnostic outer structure of every webhook event."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: str
    # Can be used to establish an order of webhook events.
    sequence_number: int
    timestamp: datetime
    # Left undecoded until the type is known.
    data: Any = None


class Webhook(BaseModel):
    """A verified webhook resolved to one of the known event types.

    Use the accessors (e.g. `agent_message()`) to get at the event data.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    type: WebhookType
    sequence_number: int
    timestamp: datetime
    event: WebhookEvent

    @property
    def conversation(self) -> WebhookConversation:
        return self.event.conversation

    def agent_message(self) -> Optional[AgentMessageEvent]:
        """The data for an `agent.message` event, or None for other types."""
        if self.type is WebhookType.AGENT_MESSAGE:
            return self.event
        return None

    def conversation_hand_off(self) -> Optional[ConversationHandOffEvent]:
        """The data for a `conversation.hand_off` event, or None for other types."""
        if self.type is WebhookType.CONVERSATION_HAND_OFF:
            return self.event
        return None

    def conversation_finished(self) -> Optional[ConversationFinishedEvent]:
        """The data for a `conversation.finished` event, or None for other types."""
        if self.type is WebhookType.CONVERSATION_FINISHED:
            return self.event
        return None


def parse_webhook(body: bytes) -> Webhook:
    """Resolve a verified webhook body into a typed Webhook.

    Only call this with a body that has already passed signature
    verification.

    Raises:
        WebhookDecodeError: the body is not a valid envelope, or its data does
            not match the shape of its (known) event type.
        UnknownWebhookTypeError: the event type is not one this SDK knows; the
            decoded envelope is attached so the caller can log and acknowledge it.
    """
    try:
        envelope = WebhookEnvelope.model_validate_json(body)
    except ValidationError as e:
        raise WebhookDecodeError(f"invalid webhook envelope: {e}") from e

    try:
        webhook_type = WebhookType(envelope.type)
    except ValueError:
        raise UnknownWebhookTypeError(envelope) from None

    event_model = EVENT_TYPES[webhook_type]
    try:
        event = event_model.model_validate(envelope.data)
    except ValidationError as e:
        raise WebhookDecodeError(
            f"invalid data for {webhook_type.value} webhook {envelope.id}: {e}"
        ) from e

    return Webhook(
        id=envelope.id,
        type=webhook_type,
        sequence_number=envelope.sequence_number,
        timestamp=envelope.timestamp,
        event=event,
    )
