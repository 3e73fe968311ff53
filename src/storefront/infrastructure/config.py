"""Application settings, loaded from ``STOREFRONT_*`` environment variables.

Nested sections use ``__`` as delimiter, e.g.
``STOREFRONT_PAYMENT_GATEWAY__ENABLED=true``.  Settings are read once in
the composition root and handed to the code that needs them; nothing else
reads the environment.
"""

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from storefront.application.policy import OrderPolicy
from storefront.application.retry import RetryPolicy

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


class PaymentGatewaySettings(BaseModel):
    """Credentials and endpoint of the online payment gateway."""

    enabled: bool = False
    api_url: str = "https://api.ikhokha.com/public-api/v1"
    application_id: str = ""
    application_secret: SecretStr = SecretStr("")


class StorefrontSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str = f"sqlite:///{_DATA_DIR / 'storefront.db'}"
    database_echo: bool = False

    currency: str = "ZAR"
    tax_rate: Decimal = Decimal("0.15")
    shipping_fee: Decimal = Decimal("0.00")
    order_number_prefix: str = "FUS"

    transaction_max_attempts: int = Field(default=3, ge=1)
    transaction_backoff_seconds: float = Field(default=0.05, ge=0)

    archive_retention_days: int = Field(default=14, ge=1)
    notification_workers: int = Field(default=2, ge=1)
    log_level: str = "WARNING"

    payment_gateway: PaymentGatewaySettings = Field(default_factory=PaymentGatewaySettings)

    def order_policy(self) -> OrderPolicy:
        return OrderPolicy(
            tax_rate=self.tax_rate,
            currency=self.currency,
            shipping_fee=self.shipping_fee,
            order_number_prefix=self.order_number_prefix,
            online_payments_enabled=self.payment_gateway.enabled,
            archive_retention_days=self.archive_retention_days,
        )

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.transaction_max_attempts,
            backoff_seconds=self.transaction_backoff_seconds,
        )


@lru_cache()
def get_settings() -> StorefrontSettings:
    """Return cached settings for the whole process."""
    return StorefrontSettings()
