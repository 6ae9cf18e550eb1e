"""
Tests for environment configuration
"""
import pytest
from pydantic import ValidationError

from bff.config import Settings, get_settings, validate_env


def test_settings_from_env(reset_settings):
    reset_settings.setenv("WOOCOMMERCE_URL", "https://shop.example.com/")
    reset_settings.setenv("ALLOWED_ORIGINS", "https://app.example.com, http://localhost:19006")
    reset_settings.setenv("SYNC_TIMEOUT_SECONDS", "45")

    settings = get_settings()

    assert settings.woocommerce_url == "https://shop.example.com"
    assert settings.allowed_origins == ["https://app.example.com", "http://localhost:19006"]
    assert settings.sync_timeout_seconds == 45.0


def test_empty_env_values_use_defaults(reset_settings):
    reset_settings.setenv("API_VERSION", "")
    reset_settings.delenv("CACHE_TTL_SECONDS", raising=False)

    settings = get_settings()

    assert settings.api_version == "v1"
    assert settings.cache_ttl_seconds == 300


def test_feature_flags(reset_settings):
    reset_settings.setenv("RAZORPAY_KEY_ID", "rzp_test_key")
    reset_settings.setenv("RAZORPAY_KEY_SECRET", "rzp_test_secret")
    reset_settings.delenv("UPSTASH_REDIS_REST_URL", raising=False)

    settings = get_settings()

    assert settings.razorpay_configured is True
    assert settings.redis_configured is False


def test_invalid_url_rejected():
    with pytest.raises(ValidationError):
        Settings(woocommerce_url="shop.example.com")


def test_invalid_environment_rejected():
    with pytest.raises(ValidationError):
        Settings(environment="staging")


def test_validate_env_passes_with_required_values(reset_settings):
    assert validate_env() is True


@pytest.mark.parametrize(
    "name,value",
    [
        ("WOOCOMMERCE_URL", ""),
        ("WOOCOMMERCE_CONSUMER_KEY", "short"),
        ("API_KEY", "too-short"),
    ],
)
def test_validate_env_fails_on_missing_values(reset_settings, name, value):
    reset_settings.setenv(name, value)

    assert validate_env() is False


def test_validate_env_fails_on_malformed_values(reset_settings):
    reset_settings.setenv("RATE_LIMIT_MAX_REQUESTS", "lots")

    assert validate_env() is False
