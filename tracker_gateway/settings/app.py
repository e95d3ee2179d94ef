"""Application settings powered by Pydantic BaseSettings."""

import logging
from typing import Annotated, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tracker_gateway.cache.manager import (
    DEFAULT_CACHE_TTL_SECONDS,
    CacheManager,
    InMemoryCacheManager,
    NoOpCache,
)
from tracker_gateway.http.config import TransportConfig
from tracker_gateway.http.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
    ORG_HEADER_CLOUD_ORG_ID,
    ORG_HEADER_ORG_ID,
)
from tracker_gateway.retry.strategy import ExponentialBackoffStrategy


class TrackerSettings(BaseSettings):
    """Environment configuration for the composition root.

    The execution layer never reads these itself; the process wiring turns
    them into a ``TransportConfig``, a retry strategy and a cache.
    """

    model_config = SettingsConfigDict(
        env_prefix="TRACKER_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    token: str = Field(min_length=1)
    org_id: str | None = None
    cloud_org_id: str | None = None
    auth_scheme: Literal["Bearer", "OAuth"] = "Bearer"
    api_base: str = DEFAULT_BASE_URL
    request_timeout: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    max_batch_concurrency: Annotated[int, Field(ge=1)] | None = None
    max_batch_size: Annotated[int, Field(ge=1)] | None = None

    cache_enabled: bool = True
    cache_ttl_seconds: float = Field(default=DEFAULT_CACHE_TTL_SECONDS, gt=0)

    retry_max_attempts: int = Field(default=3, ge=0, le=10)
    retry_base_delay_ms: int = Field(default=1000, ge=0)
    retry_max_delay_ms: int = Field(default=10000, ge=0)

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_json: bool = True

    def to_transport_config(self) -> TransportConfig:
        """Build the transport configuration.

        Returns:
            TransportConfig using the Cloud organization header when a
            Cloud organization id is set.

        Raises:
            ValueError: If neither organization id is set.
        """
        if self.cloud_org_id:
            org_id, org_header = self.cloud_org_id, ORG_HEADER_CLOUD_ORG_ID
        elif self.org_id:
            org_id, org_header = self.org_id, ORG_HEADER_ORG_ID
        else:
            msg = "Set TRACKER_ORG_ID or TRACKER_CLOUD_ORG_ID"
            raise ValueError(msg)

        return TransportConfig(
            base_url=self.api_base,
            token=self.token,
            org_id=org_id,
            org_header=org_header,
            auth_scheme=self.auth_scheme,
            timeout_seconds=self.request_timeout,
            max_batch_concurrency=self.max_batch_concurrency,
            max_batch_size=self.max_batch_size,
        )

    def to_retry_strategy(self) -> ExponentialBackoffStrategy:
        """Build the shared retry strategy."""
        return ExponentialBackoffStrategy(
            max_retries=self.retry_max_attempts,
            base_delay_ms=self.retry_base_delay_ms,
            max_delay_ms=self.retry_max_delay_ms,
        )

    def build_cache(self) -> CacheManager:
        """Build the cache, or a no-op one when caching is disabled."""
        if not self.cache_enabled:
            return NoOpCache()
        return InMemoryCacheManager(default_ttl_seconds=self.cache_ttl_seconds)

    @property
    def logging_level(self) -> int:
        """Log level as a ``logging`` constant."""
        return logging.getLevelNamesMapping()[self.log_level]


def get_settings() -> TrackerSettings:
    """Get a settings instance."""
    return TrackerSettings()  # type: ignore[call-arg]
