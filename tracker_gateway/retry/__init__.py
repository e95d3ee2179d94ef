"""Retry policies and the retry handler."""

from tracker_gateway.retry.handler import RetryHandler
from tracker_gateway.retry.strategy import (
    DEFAULT_RETRY_STRATEGY,
    RETRYABLE_ERROR_CLASSES,
    ExponentialBackoffStrategy,
    RetryStrategy,
)


__all__ = [
    "DEFAULT_RETRY_STRATEGY",
    "RETRYABLE_ERROR_CLASSES",
    "ExponentialBackoffStrategy",
    "RetryHandler",
    "RetryStrategy",
]
