import json
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from gradient_labs.common.models import (
    AgentMetadata,
    CancelParams,
    Channel,
    Conversation,
    ParticipantType,
    RatingParams,
    StartConversationParams,
    Status,
)


class TestConversation:

    def test_decode(self):
        """Test that a conversation is decoded from its API representation."""
        conversation = Conversation.model_validate({
            "id": "c1",
            "customer_id": "u1",
            "channel": "email",
            "created": "2024-01-01T00:00:00Z",
            "updated": "2024-01-01T00:05:00Z",
            "status": "observing",
            "agent_is_active": False,
            "latest_agent_metadata": {
                "intent": "card-lost",
                "intent_handoff_target": "cards-team",
                "handoff_note": "customer lost their card",
            },
        })
        assert conversation.channel is Channel.EMAIL
        assert conversation.status is Status.OBSERVING
        assert conversation.metadata is None
        assert conversation.agent_metadata == AgentMetadata(
            intent="card-lost",
            intent_hand_off_target="cards-team",
            hand_off_note="customer lost their card",
        )

    def test_unknown_status(self):
        """Test that an unknown status is rejected."""
        with pytest.raises(ValidationError):
            Conversation.model_validate({
                "id": "c1",
                "customer_id": "u1",
                "channel": "web",
                "created": "2024-01-01T00:00:00Z",
                "updated": "2024-01-01T00:00:00Z",
                "status": "paused",
            })


class TestParams:

    def test_to_payload_omits_unset_optionals(self):
        """Test that optional fields left unset are not sent."""
        params = StartConversationParams(id="c1", customer_id="u1", channel=Channel.WEB)
        assert params.to_payload() == {"id": "c1", "customer_id": "u1", "channel": "web"}

    def test_to_payload_serializes_timestamps(self):
        """Test that timestamps are sent as ISO 8601 strings."""
        params = CancelParams(timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc))
        assert json.dumps(params.to_payload()) == '{"timestamp": "2024-01-01T00:00:00Z"}'

    def test_rating_uses_type_alias(self):
        """Test that the rating survey type can be set by name or alias."""
        by_alias = RatingParams(type="csat", value=5, max_value=5, min_value=1)
        by_name = RatingParams(survey_type="csat", value=5, max_value=5, min_value=1)
        assert by_alias == by_name
        assert by_alias.to_payload()["type"] == "csat"

    def test_participant_type_values(self):
        """Test that participant types use the API's wire values."""
        assert ParticipantType.AI_AGENT.value == "AI Agent"
        assert ParticipantType.HUMAN_AGENT.value == "Agent"
