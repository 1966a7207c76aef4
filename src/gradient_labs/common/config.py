from datetime import timedelta
from typing import Optional

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

from gradient_labs.webhooks.signature import (
    DEFAULT_LEEWAY,
    SIGNATURE_HEADER,
    VerifierConfig,
)


DEFAULT_URL = "https://api.gradient-labs.ai"


class MetricsConfig(BaseModel):
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 9090
    path: str = "/metrics"


class WebhookConfig(BaseModel):
    signing_key: Optional[str] = None
    leeway: timedelta = DEFAULT_LEEWAY  # seconds or ISO 8601 duration
    signature_header: str = SIGNATURE_HEADER

    def verifier_config(self) -> VerifierConfig:
        if not self.signing_key:
            raise ValueError("No webhook signing key configured")
        return VerifierConfig(
            secret=self.signing_key.encode(),
            leeway=self.leeway,
            header_name=self.signature_header,
        )


class BaseConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_prefix="GRADIENT_LABS_",
        extra="ignore",
    )

    log_level: str = "INFO"
    webhook: WebhookConfig = WebhookConfig()
    metrics: MetricsConfig = MetricsConfig()


class ClientConfig(BaseConfig):
    api_key: str
    base_url: str = DEFAULT_URL
    timeout: int = 10  # seconds


class ReceiverConfig(BaseConfig):
    host: str = "0.0.0.0"
    port: int = 8000
    path: str = "/webhook"

    def validate_webhook_config(self) -> None:
        if not self.webhook.signing_key:
            raise ValueError("Webhook receiver requires a webhook signing key")
