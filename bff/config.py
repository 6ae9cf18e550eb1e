"""
Environment configuration.

Settings are read from os.environ once per process and validated with
pydantic. Use get_settings() everywhere; tests call get_settings.cache_clear()
after changing the environment.
"""

import os
from functools import cache
from typing import Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

from bff.logging import get_logger

logger = get_logger(__name__)

# Store API namespace and the admin REST namespace
STORE_NAMESPACE = "wc/store/v1"
ADMIN_NAMESPACE = "wc/v3"
APP_CONFIG_NAMESPACE = "muo/v1"

# Fallback storefront config when the WordPress endpoint is missing
DEFAULT_APP_CONFIG = {
    "cod_fee": 20,
    "shipping_cost": 79,
    "free_shipping_threshold": 500,
}


class Settings(BaseModel):
    """Validated process settings."""

    environment: Literal["development", "production", "test"] = "development"
    api_version: str = "v1"

    # WooCommerce
    woocommerce_url: str = ""
    woocommerce_consumer_key: str = ""
    woocommerce_consumer_secret: str = ""

    # Security
    api_key: str = ""
    allowed_origins: list[str] = Field(default_factory=lambda: ["http://localhost:19006"])
    rate_limit_window_seconds: int = Field(default=900, gt=0)
    rate_limit_max_requests: int = Field(default=100, gt=0)

    # Razorpay
    razorpay_key_id: str = ""
    razorpay_key_secret: str = ""
    store_name: str = "Makeup Ocean"

    # Upstash Redis
    upstash_redis_rest_url: str = ""
    upstash_redis_rest_token: str = ""

    # Timeouts / cache
    cache_ttl_seconds: int = Field(default=300, gt=0)
    upstream_timeout_seconds: float = Field(default=30.0, gt=0)
    sync_timeout_seconds: float = Field(default=60.0, gt=0)

    @field_validator("woocommerce_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if value and not value.startswith(("http://", "https://")):
            raise ValueError("WOOCOMMERCE_URL must be an http(s) URL")
        return value

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def razorpay_configured(self) -> bool:
        return bool(self.razorpay_key_id and self.razorpay_key_secret)

    @property
    def redis_configured(self) -> bool:
        return bool(self.upstash_redis_rest_url and self.upstash_redis_rest_token)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables (unset vars use defaults)."""
        names = {
            "environment": "ENVIRONMENT",
            "api_version": "API_VERSION",
            "woocommerce_url": "WOOCOMMERCE_URL",
            "woocommerce_consumer_key": "WOOCOMMERCE_CONSUMER_KEY",
            "woocommerce_consumer_secret": "WOOCOMMERCE_CONSUMER_SECRET",
            "api_key": "API_KEY",
            "allowed_origins": "ALLOWED_ORIGINS",
            "rate_limit_window_seconds": "RATE_LIMIT_WINDOW_SECONDS",
            "rate_limit_max_requests": "RATE_LIMIT_MAX_REQUESTS",
            "razorpay_key_id": "RAZORPAY_KEY_ID",
            "razorpay_key_secret": "RAZORPAY_KEY_SECRET",
            "store_name": "STORE_NAME",
            "upstash_redis_rest_url": "UPSTASH_REDIS_REST_URL",
            "upstash_redis_rest_token": "UPSTASH_REDIS_REST_TOKEN",
            "cache_ttl_seconds": "CACHE_TTL_SECONDS",
            "upstream_timeout_seconds": "UPSTREAM_TIMEOUT_SECONDS",
            "sync_timeout_seconds": "SYNC_TIMEOUT_SECONDS",
        }
        values = {
            field: os.environ[env_name]
            for field, env_name in names.items()
            if os.environ.get(env_name)
        }
        return cls(**values)


@cache
def get_settings() -> Settings:
    """Get process settings (singleton)."""
    return Settings.from_env()


def validate_env() -> bool:
    """
    Validate environment variables on startup.

    Logs every problem and every disabled optional feature.

    Returns:
        True if the required configuration is present and well-formed
    """
    try:
        settings = Settings.from_env()
    except ValidationError as e:
        logger.error("Environment validation failed:")
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"])
            logger.error("  - %s: %s", field.upper(), error["msg"])
        return False

    problems = []
    if not settings.woocommerce_url:
        problems.append("WOOCOMMERCE_URL is required")
    if len(settings.woocommerce_consumer_key) < 10:
        problems.append("WOOCOMMERCE_CONSUMER_KEY is required")
    if len(settings.woocommerce_consumer_secret) < 10:
        problems.append("WOOCOMMERCE_CONSUMER_SECRET is required")
    if len(settings.api_key) < 16:
        problems.append("API_KEY is required (min 16 chars)")

    if problems:
        logger.error("Environment validation failed:")
        for problem in problems:
            logger.error("  - %s", problem)
        return False

    warnings = []
    if not settings.razorpay_configured:
        warnings.append("Razorpay not configured (payment features disabled)")
    if not settings.redis_configured:
        warnings.append("Redis not configured (using in-memory cache)")

    if warnings:
        logger.warning("Environment warnings:")
        for warning in warnings:
            logger.warning("  - %s", warning)

    logger.info("Environment validation passed")
    return True
