"""Webhook receiver service."""

from gradient_labs.receiver.app import (
    cli,
    get_app_config,
    get_verifier,
    get_webhook_handler,
    load_config_from_file,
    setup_app,
)
from gradient_labs.receiver.handlers import LoggingWebhookHandler, WebhookHandler
from gradient_labs.receiver.server import create_app, run_server

__all__ = [
    "get_app_config",
    "get_verifier",
    "get_webhook_handler",
    "load_config_from_file",
    "setup_app",
    "cli",
    "LoggingWebhookHandler",
    "WebhookHandler",
    "create_app",
    "run_server",
]
