"""Tests for environment settings."""

import logging

import pytest
from pydantic import ValidationError

from tracker_gateway.cache.manager import InMemoryCacheManager, NoOpCache
from tracker_gateway.http.constants import (
    DEFAULT_BASE_URL,
    ORG_HEADER_CLOUD_ORG_ID,
    ORG_HEADER_ORG_ID,
)
from tracker_gateway.settings.app import TrackerSettings, get_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove tracker variables inherited from the environment."""
    for name in (
        "TRACKER_TOKEN",
        "TRACKER_ORG_ID",
        "TRACKER_CLOUD_ORG_ID",
        "TRACKER_AUTH_SCHEME",
        "TRACKER_CACHE_ENABLED",
        "TRACKER_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def _settings(**values: object) -> TrackerSettings:
    return TrackerSettings(_env_file=None, **values)  # type: ignore[call-arg]


class TestTrackerSettings:
    """Tests for TrackerSettings."""

    def test_defaults(self) -> None:
        settings = _settings(token="t", org_id="1")

        assert settings.api_base == DEFAULT_BASE_URL
        assert settings.auth_scheme == "Bearer"
        assert settings.cache_enabled is True
        assert settings.max_batch_concurrency is None
        assert settings.max_batch_size is None
        assert settings.logging_level == logging.INFO

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TRACKER_TOKEN", "env-token")
        monkeypatch.setenv("TRACKER_CLOUD_ORG_ID", "cloud-1")
        monkeypatch.setenv("TRACKER_AUTH_SCHEME", "OAuth")
        monkeypatch.setenv("TRACKER_LOG_LEVEL", "DEBUG")

        settings = get_settings()

        assert settings.token == "env-token"
        assert settings.cloud_org_id == "cloud-1"
        assert settings.auth_scheme == "OAuth"
        assert settings.logging_level == logging.DEBUG

    def test_token_required(self) -> None:
        with pytest.raises(ValidationError):
            _settings(org_id="1")

    def test_rejects_zero_batch_concurrency(self) -> None:
        with pytest.raises(ValidationError):
            _settings(token="t", org_id="1", max_batch_concurrency=0)

    def test_rejects_zero_batch_size(self) -> None:
        with pytest.raises(ValidationError):
            _settings(token="t", org_id="1", max_batch_size=0)


class TestToTransportConfig:
    """Tests for TrackerSettings.to_transport_config."""

    def test_org_id_header(self) -> None:
        config = _settings(token="t", org_id="42").to_transport_config()

        assert config.org_id == "42"
        assert config.org_header == ORG_HEADER_ORG_ID

    def test_cloud_org_preferred(self) -> None:
        config = _settings(
            token="t", org_id="42", cloud_org_id="bpf-1", max_batch_concurrency=4
        ).to_transport_config()

        assert config.org_id == "bpf-1"
        assert config.org_header == ORG_HEADER_CLOUD_ORG_ID
        assert config.max_batch_concurrency == 4

    def test_max_batch_size_passed_through(self) -> None:
        config = _settings(
            token="t", org_id="1", max_batch_size=50
        ).to_transport_config()

        assert config.max_batch_size == 50

    def test_missing_org_id(self) -> None:
        with pytest.raises(ValueError, match="TRACKER_ORG_ID"):
            _settings(token="t").to_transport_config()


class TestBuilders:
    """Tests for strategy and cache builders."""

    def test_to_retry_strategy(self) -> None:
        strategy = _settings(
            token="t",
            org_id="1",
            retry_max_attempts=5,
            retry_base_delay_ms=200,
            retry_max_delay_ms=2000,
        ).to_retry_strategy()

        assert strategy.max_retries == 5
        assert strategy.base_delay_ms == 200
        assert strategy.max_delay_ms == 2000

    def test_build_cache(self) -> None:
        cache = _settings(token="t", org_id="1", cache_ttl_seconds=30).build_cache()

        assert isinstance(cache, InMemoryCacheManager)
        assert cache.default_ttl_seconds == 30

    def test_build_cache_disabled(self) -> None:
        cache = _settings(token="t", org_id="1", cache_enabled=False).build_cache()

        assert isinstance(cache, NoOpCache)
