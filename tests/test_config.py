"""Tests for environment settings."""

import pytest

from reputestack.config import Settings
from reputestack.tiers import LETTER, PRIMARY


def test_defaults_from_empty_env():
    s = Settings.from_env({})
    assert s.scheme is PRIMARY
    assert s.log_level == "INFO"
    assert s.allowed_origins == ["*"]
    assert s.rate_limit_enabled is True
    assert s.write_rate_limit == "60/minute"
    assert s.default_chain == "base"
    assert s.production is False


def test_values_from_env():
    s = Settings.from_env({
        "REPUTESTACK_TIER_SCHEME": "letter",
        "ALLOWED_ORIGINS": "https://a.example, https://b.example",
        "RATELIMIT_ENABLED": "False",
        "REPUTESTACK_DEFAULT_CHAIN": "ethereum",
        "REPUTESTACK_PRODUCTION": "1",
    })
    assert s.scheme is LETTER
    assert s.allowed_origins == ["https://a.example", "https://b.example"]
    assert s.rate_limit_enabled is False
    assert s.default_chain == "ethereum"
    assert s.production is True


def test_bad_scheme_fails_at_startup():
    with pytest.raises(ValueError):
        Settings.from_env({"REPUTESTACK_TIER_SCHEME": "stars"})


@pytest.mark.parametrize("value", ["lots", "60/fortnight", ""])
def test_bad_rate_limit_fails_at_startup(value):
    with pytest.raises(ValueError):
        Settings.from_env({"REPUTESTACK_RATE_LIMIT": value})


def test_rate_limit_from_env():
    assert Settings.from_env({"REPUTESTACK_RATE_LIMIT": "5/second"}).write_rate_limit == "5/second"
