"""Retry orchestration for async units of work."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog

from tracker_gateway.http.error_mapper import ErrorMapper, is_transport_failure
from tracker_gateway.http.errors import ErrorClass
from tracker_gateway.observability.metrics import ExecutionMetrics
from tracker_gateway.retry.strategy import RetryStrategy


T = TypeVar("T")

SleepFn = Callable[[float], Awaitable[None]]


class RetryHandler:
    """Runs a unit of work repeatedly according to a retry strategy.

    The handler never wraps failures: once the strategy declines another
    attempt, the exception raised by the last attempt propagates unchanged.
    Total wall-clock time is bounded only by the strategy's delays; callers
    needing a deadline wrap the call in ``asyncio.timeout``.
    """

    def __init__(
        self,
        strategy: RetryStrategy,
        logger: structlog.stdlib.BoundLogger,
        sleep: SleepFn = asyncio.sleep,
        error_mapper: ErrorMapper | None = None,
    ) -> None:
        """Initialize the retry handler.

        Args:
            strategy: Retry decision policy.
            logger: Logger used for retry and give-up events.
            sleep: Coroutine used to wait between attempts, in seconds.
            error_mapper: Classifier for raised failures. Defaults to one
                using the strategy's Retry-After fallback.
        """
        self._strategy = strategy
        self._sleep = sleep
        self._mapper = error_mapper or ErrorMapper(
            default_retry_after_seconds=strategy.default_retry_after_seconds
        )
        self._metrics = ExecutionMetrics.get_instance()
        self._log = logger.bind(component="retry")

    @property
    def strategy(self) -> RetryStrategy:
        """The retry policy in use."""
        return self._strategy

    async def execute_with_retry(
        self,
        unit_of_work: Callable[[], Awaitable[T]],
        start_attempt: int = 0,
    ) -> T:
        """Execute a unit of work, retrying retryable failures.

        Args:
            unit_of_work: Zero-argument callable returning a fresh awaitable
                on every call.
            start_attempt: Attempt number to start counting from.

        Returns:
            Result of the first successful attempt.

        Raises:
            Exception: The exception of the last attempt, unchanged.
        """
        attempt = start_attempt

        while True:
            try:
                return await unit_of_work()
            except Exception as exc:
                if not is_transport_failure(exc):
                    self._log.debug(
                        "retry_not_attempted",
                        attempt=attempt,
                        error_class=ErrorClass.UNKNOWN.value,
                        error=str(exc) or type(exc).__name__,
                    )
                    self._metrics.record_retry_stop(ErrorClass.UNKNOWN.value)
                    raise

                error = self._mapper.classify(exc)

                if not self._strategy.should_retry(error, attempt):
                    if self._strategy.is_retryable(error):
                        self._log.warning(
                            "retry_exhausted",
                            attempts=attempt - start_attempt + 1,
                            status_code=error.status_code,
                            error_class=error.error_class.value,
                            error=error.message,
                        )
                    else:
                        self._log.debug(
                            "retry_not_attempted",
                            attempt=attempt,
                            status_code=error.status_code,
                            error_class=error.error_class.value,
                            error=error.message,
                        )
                    self._metrics.record_retry_stop(error.error_class.value)
                    raise

                delay_ms = self._strategy.compute_delay(attempt, error)
                self._log.warning(
                    "retry_scheduled",
                    attempt=attempt + 1,
                    status_code=error.status_code,
                    error=error.message,
                    delay_ms=delay_ms,
                )
                self._metrics.record_retry()

            await self._sleep(delay_ms / 1000.0)
            attempt += 1
