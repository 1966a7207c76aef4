from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class Channel(str, Enum):
    WEB = "web"
    EMAIL = "email"


class Status(str, Enum):
    # Following the conversation without participating (e.g. after a hand-off).
    OBSERVING = "observing"
    ACTIVE = "active"
    # Closed early; the agent can no longer participate.
    CANCELLED = "cancelled"
    FINISHED = "finished"
    # The agent hit an irrecoverable error, such as failed webhook delivery.
    FAILED = "failed"


class ParticipantType(str, Enum):
    CUSTOMER = "Customer"
    HUMAN_AGENT = "Agent"
    BOT = "Bot"
    AI_AGENT = "AI Agent"


class ConversationEventType(str, Enum):
    INTERNAL_NOTE = "internal-note"
    JOIN = "join"
    LEAVE = "leave"
    MESSAGE_DELIVERED = "delivered"
    MESSAGE_READ = "read"
    TYPING = "typing"


class APIModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to the JSON body the API expects."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class AgentMetadata(APIModel):
    intent: Optional[str] = None
    intent_hand_off_target: Optional[str] = Field(None, alias="intent_handoff_target")
    hand_off_reason: Optional[str] = Field(None, alias="handoff_reason")
    hand_off_note: Optional[str] = Field(None, alias="handoff_note")


class Conversation(APIModel):
    id: str
    customer_id: str
    channel: Channel
    metadata: Any = None
    created: datetime
    updated: datetime
    status: Status
    is_active: bool = Field(False, alias="agent_is_active")
    agent_metadata: Optional[AgentMetadata] = Field(None, alias="latest_agent_metadata")


class Message(APIModel):
    id: str
    body: str
    participant_id: str
    participant_type: ParticipantType
    created: datetime
    metadata: Any = None


class StartConversationParams(APIModel):
    id: str
    customer_id: str
    channel: Channel
    assignee_id: Optional[str] = None
    # Set to ParticipantType.AI_AGENT to assign the conversation to the AI agent.
    assignee_type: Optional[ParticipantType] = None
    # Passed back with webhooks for this conversation.
    metadata: Any = None
    created: Optional[datetime] = None
    resources: Optional[Dict[str, Any]] = None
    # Sent back in the X-GradientLabs-Token header of tool calls.
    conversation_token: Optional[str] = None


class AddMessageParams(APIModel):
    id: str
    body: str
    participant_id: str
    participant_type: ParticipantType
    created: datetime
    metadata: Any = None


class EventParams(APIModel):
    type: ConversationEventType
    participant_id: str
    participant_type: ParticipantType
    message_id: Optional[str] = None
    timestamp: Optional[datetime] = None
    idempotency_key: Optional[str] = None


class AssignmentParams(APIModel):
    assignee_type: ParticipantType
    assignee_id: Optional[str] = None
    timestamp: Optional[datetime] = None


class CancelParams(APIModel):
    timestamp: Optional[datetime] = None


class FinishParams(APIModel):
    timestamp: Optional[datetime] = None


class EndParams(APIModel):
    finished: Optional[datetime] = None


class ResumeParams(APIModel):
    assignee_type: ParticipantType
    assignee_id: Optional[str] = None
    timestamp: Optional[datetime] = None
    reason: Optional[str] = None


class RatingParams(APIModel):
    survey_type: str = Field(alias="type")
    value: int
    max_value: int
    min_value: int
    comments: Optional[str] = None
    timestamp: Optional[datetime] = None
