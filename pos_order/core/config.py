"""
core/config.py
----------------

Application configuration module.

Defines strongly‑typed settings loaded from the environment using
``pydantic-settings``. These settings control where the POS order API
lives, which credentials are sent, the request timeout and whether
request/response logging is enabled. The values provided here are
sensible defaults but can be overridden via environment variables at
deployment time.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Dict

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_API_URL = "https://abs.paylony.com/api"

DEFAULT_PAYMENT_TYPES: Dict[str, str] = {
    "card_purchase": "Card Purchase",
    "pay_with_phone": "Pay with Phone",
    "ussd": "USSD",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    The settings structure is flat and uses environment variables
    prefixed with ``POS_ORDER_``.  For example, to override the default
    request timeout you can set ``POS_ORDER_TIMEOUT=15``.  Mapping
    fields such as ``payment_types`` are read as JSON.

    The ``retry_*`` fields are accepted so existing deployments keep
    validating, but no code path consults them: orders are never
    retried automatically.
    """

    # Upstream API
    api_url: str = Field(DEFAULT_API_URL, description="Base URL of the POS order API.")
    api_key: str = Field("", description="Bearer token sent with every request when set.")
    default_terminal_id: str = Field("", description="Terminal used when a call omits one.")

    payment_types: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_PAYMENT_TYPES),
        description="Human readable labels for the supported payment types.",
    )

    # HTTP client settings
    timeout: float = Field(60.0, gt=0, description="Hard timeout for HTTP requests in seconds.")
    logging: bool = Field(False, description="Log outgoing payloads and decoded responses.")

    # Retry settings (inert)
    retry_enabled: bool = Field(True, description="Reserved; automatic retry is not implemented.")
    retry_max_attempts: int = Field(3, ge=0, description="Reserved; automatic retry is not implemented.")
    retry_delay: float = Field(5.0, ge=0, description="Reserved; automatic retry is not implemented.")

    model_config = SettingsConfigDict(env_prefix="POS_ORDER_", env_file=None, case_sensitive=False)


@lru_cache()
def get_settings() -> Settings:
    """Return a cached instance of the application settings.

    Using a cache prevents expensive environment parsing on every call.
    Call ``get_settings.cache_clear()`` after changing the environment.
    """
    return Settings()
