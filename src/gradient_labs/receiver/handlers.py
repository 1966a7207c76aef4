from abc import ABC, abstractmethod

from loguru import logger

from gradient_labs.webhooks.events import (
    AgentMessageEvent,
    ConversationFinishedEvent,
    ConversationHandOffEvent,
    Webhook,
)


class WebhookHandler(ABC):
    """Receives resolved webhooks, one method per event type.

    Subclasses must implement every event type, so adding a new one is a
    change every handler has to deal with.
    """

    async def handle(self, webhook: Webhook) -> None:
        event = webhook.event
        if isinstance(event, AgentMessageEvent):
            await self.on_agent_message(webhook, event)
        elif isinstance(event, ConversationHandOffEvent):
            await self.on_conversation_hand_off(webhook, event)
        elif isinstance(event, ConversationFinishedEvent):
            await self.on_conversation_finished(webhook, event)
        else:
            raise TypeError(f"No handler for webhook event {type(event).__name__}")

    @abstractmethod
    async def on_agent_message(self, webhook: Webhook, event: AgentMessageEvent) -> None:
        pass

    @abstractmethod
    async def on_conversation_hand_off(
        self, webhook: Webhook, event: ConversationHandOffEvent
    ) -> None:
        pass

    @abstractmethod
    async def on_conversation_finished(
        self, webhook: Webhook, event: ConversationFinishedEvent
    ) -> None:
        pass


class LoggingWebhookHandler(WebhookHandler):
    async def on_agent_message(self, webhook: Webhook, event: AgentMessageEvent) -> None:
        logger.info(
            f"Agent message for conversation {event.conversation.id} "
            f"(webhook {webhook.id}, seq {webhook.sequence_number}): {event.body}"
        )

    async def on_conversation_hand_off(
        self, webhook: Webhook, event: ConversationHandOffEvent
    ) -> None:
        logger.info(
            f"Conversation {event.conversation.id} handed off to "
            f"{event.target or 'default target'} "
            f"(webhook {webhook.id}, reason={event.reason})"
        )

    async def on_conversation_finished(
        self, webhook: Webhook, event: ConversationFinishedEvent
    ) -> None:
        logger.info(
            f"Conversation {event.conversation.id} finished (webhook {webhook.id})"
        )
