from fastapi import APIRouter, Depends, HTTPException, Request
from loguru import logger

from gradient_labs.common.errors import (
    InvalidWebhookSignatureError,
    UnknownWebhookTypeError,
    WebhookDecodeError,
)
from gradient_labs.common.metrics import measure_time, metrics
from gradient_labs.receiver.handlers import WebhookHandler
from gradient_labs.webhooks.events import parse_webhook
from gradient_labs.webhooks.signature import WebhookVerifier


router = APIRouter()


async def get_verifier() -> WebhookVerifier:
    from gradient_labs.receiver.app import get_verifier
    return get_verifier()


async def get_webhook_handler() -> WebhookHandler:
    from gradient_labs.receiver.app import get_webhook_handler
    return get_webhook_handler()


@measure_time(metrics.webhook_processing_time)
async def receive_webhook(
    request: Request,
    verifier: WebhookVerifier = Depends(get_verifier),
    handler: WebhookHandler = Depends(get_webhook_handler),
):
    body = await request.body()
    metrics.webhook_received_total.inc()

    try:
        verifier.verify_request(body, request.headers)
    except InvalidWebhookSignatureError:
        metrics.webhook_rejected_total.labels(reason="signature").inc()
        logger.warning("Rejected webhook with invalid signature")
        raise HTTPException(status_code=401, detail="Invalid signature")

    try:
        webhook = parse_webhook(body)
    except UnknownWebhookTypeError as e:
        metrics.webhook_ignored_total.inc()
        logger.info(
            f"Ignoring webhook {e.envelope.id} of unknown type {e.webhook_type!r}"
        )
        return {"status": "ignored", "id": e.envelope.id, "type": e.webhook_type}
    except WebhookDecodeError as e:
        metrics.webhook_rejected_total.labels(reason="decode").inc()
        logger.error(f"Failed to decode webhook: {e}")
        raise HTTPException(status_code=400, detail="Invalid webhook payload")

    try:
        await handler.handle(webhook)
    except Exception as e:
        metrics.webhook_handler_errors.labels(type=webhook.type.value).inc()
        logger.error(f"Failed to handle {webhook.type.value} webhook {webhook.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to handle webhook")

    metrics.webhook_handled_total.labels(type=webhook.type.value).inc()
    logger.info(f"Handled {webhook.type.value} webhook {webhook.id}")
    return {"status": "ok", "id": webhook.id, "type": webhook.type.value}


@router.get("/health")
async def health_check():
    return {"status": "ok"}
