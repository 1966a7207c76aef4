import time
from functools import wraps
from typing import Callable, Dict, Optional, Union

from loguru import logger
from prometheus_client import REGISTRY, Counter, Gauge, Histogram, start_http_server


class MetricsRegistry:
    def __init__(self, registry=None):
        # Use a provided registry or the default one
        self.registry = registry or REGISTRY

        # Webhook metrics
        self.webhook_received_total = Counter(
            "gradient_labs_webhook_received_total",
            "Total number of webhook requests received",
            registry=self.registry,
        )
        self.webhook_rejected_total = Counter(
            "gradient_labs_webhook_rejected_total",
            "Total number of webhooks rejected",
            ["reason"],
            registry=self.registry,
        )
        self.webhook_ignored_total = Counter(
            "gradient_labs_webhook_ignored_total",
            "Total number of webhooks acknowledged with an unknown type",
            registry=self.registry,
        )
        self.webhook_handled_total = Counter(
            "gradient_labs_webhook_handled_total",
            "Total number of webhooks handled",
            ["type"],
            registry=self.registry,
        )
        self.webhook_handler_errors = Counter(
            "gradient_labs_webhook_handler_errors",
            "Total number of errors raised by webhook handlers",
            ["type"],
            registry=self.registry,
        )
        self.webhook_processing_time = Histogram(
            "gradient_labs_webhook_processing_seconds",
            "Time spent processing webhooks",
            registry=self.registry,
        )

        # API client metrics
        self.api_request_total = Counter(
            "gradient_labs_api_request_total",
            "Total number of API requests",
            ["method", "status_code"],
            registry=self.registry,
        )
        self.api_request_latency = Histogram(
            "gradient_labs_api_request_seconds",
            "Time spent on API requests",
            ["method"],
            registry=self.registry,
        )

        # Common metrics
        self.up = Gauge(
            "gradient_labs_up",
            "Whether the service is up",
            ["component"],
            registry=self.registry,
        )


# Global metrics registry
metrics = MetricsRegistry()


def start_metrics_server(port: int = 9090, host: str = "127.0.0.1"):
    """Start the Prometheus metrics server."""
    start_http_server(port, host)


def measure_time(
    metric: Histogram, labels: Optional[Union[Dict[str, str], Callable]] = None
) -> Callable:
    """Decorator to measure the execution time of a coroutine function.

    `labels` is either a fixed dict or a callable receiving the call's
    positional and keyword arguments and returning one.
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            labels_dict = {}
            if callable(labels):
                try:
                    labels_dict = labels(*args, **kwargs)
                except Exception as e:
                    logger.error(f"Error getting labels from function: {e}")
            elif isinstance(labels, dict):
                labels_dict = labels

            start_time = time.time()
            try:
                return await func(*args, **kwargs)
            finally:
                duration = time.time() - start_time
                try:
                    if labels_dict:
                        metric.labels(**labels_dict).observe(duration)
                    else:
                        metric.observe(duration)
                except Exception as e:
                    logger.error(f"Error recording metric: {e}")

        return wrapper

    return decorator
