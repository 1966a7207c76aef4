"""Exceptions raised by the Gradient Labs SDK."""

from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from gradient_labs.webhooks.events import WebhookEnvelope


class GradientLabsError(Exception):
    """Base exception for the SDK."""


class InvalidWebhookSignatureError(GradientLabsError):
    """The authenticity of a webhook could not be verified.

    Raised for a missing or malformed signature header, an expired timestamp
    and a signature mismatch alike. Respond with an HTTP 401.
    """

    def __init__(self, header_name: str):
        self.header_name = header_name
        super().__init__(f"{header_name} header is invalid")


class UnknownWebhookTypeError(GradientLabsError):
    """The webhook carried an event type this SDK does not know about.

    Log it and respond with an HTTP 200 so the platform does not retry.
    """

    def __init__(self, envelope: "WebhookEnvelope"):
        self.envelope = envelope
        super().__init__(f"unknown webhook event type received: {envelope.type!r}")

    @property
    def webhook_type(self) -> str:
        return self.envelope.type


class WebhookDecodeError(GradientLabsError):
    """A verified webhook body did not match the shape of its event type."""


class ResponseError(GradientLabsError):
    """An error response from the API."""

    def __init__(
        self,
        status_code: int,
        message: str = "",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.status_code = status_code
        self.message = message
        self.details = details
        super().__init__(self._render())

    @property
    def trace_id(self) -> str:
        """Identifier that Gradient Labs support can use to investigate the error."""
        if not self.details:
            return ""
        trace_id = self.details.get("trace_id")
        if not isinstance(trace_id, str):
            return ""
        return trace_id

    def _render(self) -> str:
        text = self.message or f"unexpected response status: {self.status_code}"
        if self.trace_id:
            text += f" (trace id: {self.trace_id})"
        return text
