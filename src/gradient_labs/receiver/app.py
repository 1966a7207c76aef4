import sys
import time
from pathlib import Path
from typing import Optional

import click
import yaml
from loguru import logger

from gradient_labs.common.config import ReceiverConfig
from gradient_labs.common.errors import (
    InvalidWebhookSignatureError,
    UnknownWebhookTypeError,
    WebhookDecodeError,
)
from gradient_labs.common.logging import configure_logging
from gradient_labs.receiver.handlers import LoggingWebhookHandler, WebhookHandler
from gradient_labs.receiver.server import run_server
from gradient_labs.webhooks.events import parse_webhook
from gradient_labs.webhooks.signature import WebhookVerifier


_app_config: Optional[ReceiverConfig] = None
_verifier: Optional[WebhookVerifier] = None
_webhook_handler: Optional[WebhookHandler] = None


def get_app_config() -> ReceiverConfig:
    global _app_config
    if not _app_config:
        raise RuntimeError("Application config not initialized")
    return _app_config


def get_verifier() -> WebhookVerifier:
    global _verifier
    if not _verifier:
        raise RuntimeError("Webhook verifier not initialized")
    return _verifier


def get_webhook_handler() -> WebhookHandler:
    global _webhook_handler
    if not _webhook_handler:
        raise RuntimeError("Webhook handler not initialized")
    return _webhook_handler


def load_config_from_file(config_path: str) -> ReceiverConfig:
    """Load configuration from a YAML file."""
    file_path = Path(config_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(file_path, "r") as f:
        config_data = yaml.safe_load(f) or {}

    return ReceiverConfig.model_validate(config_data)


def setup_app(config: ReceiverConfig, handler: Optional[WebhookHandler] = None):
    """Initialize the application with the given config."""
    global _app_config, _verifier, _webhook_handler

    configure_logging(config.log_level)

    config.validate_webhook_config()

    _verifier = WebhookVerifier(config.webhook.verifier_config())
    _webhook_handler = handler or LoggingWebhookHandler()
    _app_config = config

    logger.info("Gradient Labs webhook receiver initialized")


@click.group()
def cli():
    """Gradient Labs Webhook Receiver CLI"""
    pass


@cli.command("serve")
@click.option(
    "--config",
    "-c",
    required=True,
    help="Path to configuration file",
)
def serve(config: str):
    """Start the webhook receiver server."""
    try:
        config_obj = load_config_from_file(config)
        setup_app(config_obj)
        run_server(config_obj)
    except Exception as e:
        logger.error(f"Failed to start receiver: {e}")
        sys.exit(1)


@cli.command("verify")
@click.option(
    "--config",
    "-c",
    required=True,
    help="Path to configuration file",
)
@click.option(
    "--body-file",
    "-b",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="File holding the raw webhook body",
)
@click.option(
    "--signature",
    "-s",
    required=True,
    help="Value of the signature header",
)
@click.option(
    "--now",
    type=int,
    default=None,
    help="Unix time to verify against (defaults to the current time)",
)
def verify(config: str, body_file: str, signature: str, now: Optional[int]):
    """Verify a captured webhook and print its resolved type."""
    config_obj = load_config_from_file(config)
    configure_logging(config_obj.log_level)

    clock = (lambda: float(now)) if now is not None else time.time
    verifier = WebhookVerifier(config_obj.webhook.verifier_config(), clock=clock)
    body = Path(body_file).read_bytes()

    try:
        verifier.verify_signature(body, signature)
    except InvalidWebhookSignatureError as e:
        click.echo(f"invalid: {e}", err=True)
        sys.exit(1)

    try:
        webhook = parse_webhook(body)
    except UnknownWebhookTypeError as e:
        click.echo(f"valid: unknown type {e.webhook_type} (id={e.envelope.id})")
        return
    except WebhookDecodeError as e:
        click.echo(f"valid signature, undecodable body: {e}", err=True)
        sys.exit(2)

    click.echo(
        f"valid: {webhook.type.value} (id={webhook.id}, "
        f"conversation={webhook.conversation.id})"
    )


if __name__ == "__main__":
    cli()
