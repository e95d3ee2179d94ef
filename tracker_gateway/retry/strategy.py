"""Retry decision policies."""

import random
from typing import Annotated, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from tracker_gateway.http.constants import (
    DEFAULT_RETRY_AFTER_SECONDS,
    MAX_RETRY_AFTER_SECONDS,
)
from tracker_gateway.http.errors import ApiError, ErrorClass, RateLimitedApiError


RETRYABLE_ERROR_CLASSES = frozenset(
    {
        ErrorClass.NETWORK,
        ErrorClass.TIMEOUT,
        ErrorClass.RATE_LIMITED,
        ErrorClass.SERVER,
    }
)


@runtime_checkable
class RetryStrategy(Protocol):
    """Protocol for retry decision policies.

    Implementations are pure: the same error and attempt always yield the
    same decision, so one instance can be shared by every operation.
    """

    @property
    def default_retry_after_seconds(self) -> int:
        """Wait assumed for 429 responses without a Retry-After header."""
        ...

    def is_retryable(self, error: ApiError | RateLimitedApiError) -> bool:
        """Whether the error kind is worth retrying, ignoring the attempt count."""
        ...

    def should_retry(self, error: ApiError | RateLimitedApiError, attempt: int) -> bool:
        """Decide whether a failed attempt should be retried.

        Args:
            error: Canonical error of the failed attempt.
            attempt: Attempt number (0-indexed).

        Returns:
            True if another attempt should be made.
        """
        ...

    def compute_delay(
        self, attempt: int, error: ApiError | RateLimitedApiError
    ) -> int:
        """Compute the wait before the next attempt.

        Args:
            attempt: Attempt number that just failed (0-indexed).
            error: Canonical error of the failed attempt.

        Returns:
            Delay in milliseconds.
        """
        ...


class ExponentialBackoffStrategy(BaseModel):
    """Exponential backoff with server-advised waits for rate limiting.

    delay = min(base_delay_ms * exponential_base ^ attempt, max_delay_ms)

    For a rate-limited error the server-advised ``retry_after_seconds``
    replaces the exponential value, capped at ``max_retry_after_seconds``.
    An advised wait of zero falls back to the exponential value.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_retries: Annotated[int, Field(ge=0, le=10)] = 3
    base_delay_ms: Annotated[int, Field(ge=0, le=60000)] = 1000
    max_delay_ms: Annotated[int, Field(ge=0, le=300000)] = 10000
    exponential_base: Annotated[float, Field(ge=1.0, le=5.0)] = 2.0
    jitter_factor: Annotated[float, Field(ge=0.0, le=1.0)] = 0.0
    default_retry_after_seconds: Annotated[int, Field(ge=0, le=3600)] = (
        DEFAULT_RETRY_AFTER_SECONDS
    )
    max_retry_after_seconds: Annotated[int, Field(ge=0, le=3600)] = (
        MAX_RETRY_AFTER_SECONDS
    )

    def should_retry(self, error: ApiError | RateLimitedApiError, attempt: int) -> bool:
        """Retry network faults, 408, 429 and 5xx until max_retries is reached.

        Args:
            error: Canonical error of the failed attempt.
            attempt: Attempt number (0-indexed).

        Returns:
            True if the request should be retried.
        """
        if attempt >= self.max_retries:
            return False
        return self.is_retryable(error)

    def is_retryable(self, error: ApiError | RateLimitedApiError) -> bool:
        """Network faults, 408, 429 and 5xx are retryable."""
        return error.error_class in RETRYABLE_ERROR_CLASSES

    def compute_delay(
        self, attempt: int, error: ApiError | RateLimitedApiError
    ) -> int:
        """Calculate delay before the next retry attempt.

        Args:
            attempt: Attempt number that just failed (0-indexed).
            error: Canonical error of the failed attempt.

        Returns:
            Delay in milliseconds.
        """
        if isinstance(error, RateLimitedApiError) and error.retry_after_seconds > 0:
            advised = min(error.retry_after_seconds, self.max_retry_after_seconds)
            return advised * 1000

        return self.backoff_delay(attempt)

    def backoff_delay(self, attempt: int) -> int:
        """Exponential delay for an attempt, ignoring any server advice.

        Args:
            attempt: Attempt number (0-indexed).

        Returns:
            Delay in milliseconds.
        """
        delay = self.base_delay_ms * (self.exponential_base**attempt)
        delay = min(delay, self.max_delay_ms)

        if self.jitter_factor:
            # Spread concurrent batch retries apart
            delay += delay * self.jitter_factor * random.random()  # noqa: S311
        return int(delay)


DEFAULT_RETRY_STRATEGY = ExponentialBackoffStrategy()
