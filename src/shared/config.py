"""Storefront configuration.

Values come from environment variables so the same build runs in
development, test and production. Adapters (payment gateway, email
function channel) read their credentials from here when the app wires them.
"""

import os
from dataclasses import dataclass

DEFAULT_CURRENCY = "INR"
DEFAULT_MERCHANT_NAME = "Vadi-e-Kashmir"
DEFAULT_EMAIL_FUNCTION_ID = "send-email"


def validate_currency(value: str | None) -> str:
    """Normalize an ISO-4217 currency code, defaulting to INR."""
    code = (value or DEFAULT_CURRENCY).strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise ValueError(f"Invalid currency code: {value!r} (expected ISO-4217, e.g. INR)")
    return code


@dataclass(frozen=True)
class StorefrontConfig:
    currency: str = DEFAULT_CURRENCY
    merchant_name: str = DEFAULT_MERCHANT_NAME
    gateway_key_id: str | None = None
    email_function_id: str = DEFAULT_EMAIL_FUNCTION_ID
    environment: str = "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_env(cls) -> "StorefrontConfig":
        """Build the configuration from the process environment."""
        return cls(
            currency=validate_currency(os.getenv("STOREFRONT_CURRENCY")),
            merchant_name=os.getenv("STOREFRONT_MERCHANT_NAME", DEFAULT_MERCHANT_NAME),
            gateway_key_id=os.getenv("RAZORPAY_KEY_ID") or None,
            email_function_id=os.getenv("EMAIL_FUNCTION_ID", DEFAULT_EMAIL_FUNCTION_ID),
            environment=(os.getenv("PROTEAN_ENV") or "development").lower(),
        )


_config: StorefrontConfig | None = None


def get_config() -> StorefrontConfig:
    """Return the process-wide configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = StorefrontConfig.from_env()
    return _config


def set_config(config: StorefrontConfig) -> None:
    """Override the active configuration (useful for tests)."""
    global _config
    _config = config


def reset_config() -> None:
    global _config
    _config = None
