"""Client for the Gradient Labs API."""

from gradient_labs.client.client import USER_AGENT, Client, handle_response

__all__ = [
    "USER_AGENT",
    "Client",
    "handle_response",
]
