from typing import Optional

import uvicorn
from fastapi import FastAPI
from loguru import logger

from gradient_labs import __version__
from gradient_labs.common.config import ReceiverConfig
from gradient_labs.common.logging import configure_logging
from gradient_labs.common.metrics import metrics, start_metrics_server
from gradient_labs.receiver.routes import receive_webhook, router


def create_app(config: ReceiverConfig) -> FastAPI:
    app = FastAPI(
        title="Gradient Labs Webhook Receiver",
        description="Verifies and dispatches Gradient Labs webhooks",
        version=__version__,
    )

    app.add_api_route(config.path, receive_webhook, methods=["POST"])
    app.include_router(router)

    @app.on_event("startup")
    async def startup_event():
        configure_logging(config.log_level)

        # Start metrics server if enabled
        if config.metrics.enabled:
            start_metrics_server(config.metrics.port, config.metrics.host)
            logger.info(
                f"Metrics server started on {config.metrics.host}:{config.metrics.port}"
            )

        metrics.up.labels(component="receiver").set(1)

        logger.info(
            f"Webhook receiver started on {config.host}:{config.port}{config.path} "
            f"(header={config.webhook.signature_header}, "
            f"leeway={config.webhook.leeway.total_seconds():.0f}s)"
        )

    @app.on_event("shutdown")
    async def shutdown_event():
        metrics.up.labels(component="receiver").set(0)
        logger.info("Webhook receiver shutting down")

    return app


def run_server(config: Optional[ReceiverConfig] = None):
    if not config:
        from gradient_labs.receiver.app import get_app_config

        config = get_app_config()

    app = create_app(config)

    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level="info",
    )
