import json
import platform
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Mapping, Optional

import aiohttp
from loguru import logger

from gradient_labs import __version__
from gradient_labs.common.config import ClientConfig
from gradient_labs.common.errors import ResponseError
from gradient_labs.common.metrics import measure_time, metrics
from gradient_labs.common.models import (
    APIModel,
    AddMessageParams,
    AssignmentParams,
    CancelParams,
    Conversation,
    EndParams,
    EventParams,
    FinishParams,
    Message,
    RatingParams,
    ResumeParams,
    StartConversationParams,
)
from gradient_labs.webhooks.events import Webhook, parse_webhook
from gradient_labs.webhooks.signature import WebhookVerifier


USER_AGENT = f"Gradient-Labs-Python ({__version__}/{platform.python_version()})"


class Client:
    """Client for the Gradient Labs API.

    An `api_key` is required. A webhook signing key is only needed to
    receive webhooks. Pass an `aiohttp.ClientSession` to control the
    transport (connection pooling, tracing, tests); otherwise a session is
    opened per request.
    """

    def __init__(
        self,
        config: ClientConfig,
        session: Optional[aiohttp.ClientSession] = None,
        verifier: Optional[WebhookVerifier] = None,
    ):
        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self.timeout = config.timeout
        self._session = session

        if verifier is None and config.webhook.signing_key:
            verifier = WebhookVerifier(config.webhook.verifier_config())
        self.webhook_verifier = verifier

    # Webhooks

    def verify_webhook(self, body: bytes, signature: Optional[str]) -> None:
        """Verify the authenticity of a webhook from its raw body and signature header.

        You don't need to call this if you're already using `parse_webhook`.
        """
        if self.webhook_verifier is None:
            raise RuntimeError("Webhook signing key not configured")
        self.webhook_verifier.verify_signature(body, signature)

    def verify_webhook_request(self, body: bytes, headers: Mapping[str, str]) -> None:
        if self.webhook_verifier is None:
            raise RuntimeError("Webhook signing key not configured")
        self.webhook_verifier.verify_request(body, headers)

    def parse_webhook(self, body: bytes, signature: Optional[str]) -> Webhook:
        """Verify a webhook's signature and resolve it into a typed Webhook."""
        self.verify_webhook(body, signature)
        return parse_webhook(body)

    # Conversations

    async def start_conversation(self, params: StartConversationParams) -> Conversation:
        data = await self._request("POST", "conversations", params)
        return Conversation.model_validate(data)

    async def read_conversation(self, conversation_id: str) -> Conversation:
        data = await self._request("GET", f"conversations/{conversation_id}")
        return Conversation.model_validate(data)

    async def add_message(self, conversation_id: str, params: AddMessageParams) -> Message:
        """Record a message sent by the customer or a human agent."""
        data = await self._request(
            "POST", f"conversations/{conversation_id}/messages", params
        )
        return Message.model_validate(data)

    async def add_conversation_event(self, conversation_id: str, params: EventParams) -> None:
        """Record an event such as the customer starting to type."""
        await self._request("POST", f"conversations/{conversation_id}/events", params)

    async def assign_conversation(
        self, conversation_id: str, params: AssignmentParams
    ) -> None:
        await self._request("PUT", f"conversations/{conversation_id}/assignee", params)

    async def cancel_conversation(
        self, conversation_id: str, params: Optional[CancelParams] = None
    ) -> None:
        await self._request(
            "PUT", f"conversations/{conversation_id}/cancel", params or CancelParams()
        )

    async def finish_conversation(
        self, conversation_id: str, params: Optional[FinishParams] = None
    ) -> None:
        await self._request(
            "PUT", f"conversations/{conversation_id}/finish", params or FinishParams()
        )

    async def end_conversation(
        self, conversation_id: str, params: Optional[EndParams] = None
    ) -> None:
        await self._request(
            "POST", f"conversations/{conversation_id}/end", params or EndParams()
        )

    async def resume_conversation(self, conversation_id: str, params: ResumeParams) -> None:
        """Hand the conversation back to the AI agent."""
        await self._request("PUT", f"conversations/{conversation_id}/resume", params)

    async def rate_conversation(self, conversation_id: str, params: RatingParams) -> None:
        """Record a customer satisfaction rating for the conversation."""
        await self._request("PUT", f"conversations/{conversation_id}/rate", params)

    # Transport

    @asynccontextmanager
    async def _session_context(self) -> AsyncIterator[aiohttp.ClientSession]:
        if self._session is not None:
            yield self._session
            return
        async with aiohttp.ClientSession() as session:
            yield session

    def _headers(self, has_body: bool) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.config.api_key}",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }
        if has_body:
            headers["Content-Type"] = "application/json"
        return headers

    @measure_time(
        metrics.api_request_latency, lambda self, method, *args, **kwargs: {"method": method}
    )
    async def _request(
        self, method: str, path: str, body: Optional[APIModel] = None
    ) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        data = json.dumps(body.to_payload()) if body is not None else None

        async with self._session_context() as session:
            async with session.request(
                method,
                url,
                headers=self._headers(data is not None),
                data=data,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                text = await response.text()
                metrics.api_request_total.labels(
                    method=method, status_code=response.status
                ).inc()
                logger.debug(f"{method} {url} returned {response.status}")
                return handle_response(response.status, text)


def handle_response(status: int, text: str) -> Any:
    """Decode an API response body, raising ResponseError for non-2xx statuses."""
    if status < 200 or status > 299:
        raise response_error(status, text)

    if not text:
        return None
    return json.loads(text)


def response_error(status: int, text: str) -> ResponseError:
    try:
        payload = json.loads(text)
    except ValueError:
        payload = None

    if not isinstance(payload, dict):
        return ResponseError(status)

    details = payload.get("details")
    return ResponseError(
        status,
        message=payload.get("message") or "",
        details=details if isinstance(details, dict) else None,
    )
