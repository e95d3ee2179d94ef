"""Base class composing transport, retry, cache and batching for operations."""

import copy
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar

import structlog

from tracker_gateway.batch.executor import BatchExecutor
from tracker_gateway.batch.models import BatchItem, BatchItemOutcome, ProcessedBatch
from tracker_gateway.batch.processor import BatchResultProcessor
from tracker_gateway.cache.manager import CacheManager
from tracker_gateway.http.client import TrackerHttpClient
from tracker_gateway.observability.metrics import ExecutionMetrics
from tracker_gateway.retry.handler import RetryHandler


T = TypeVar("T")


class BaseOperation:
    """Common building blocks for concrete tracker API operations.

    Collaborators are passed explicitly so tests can substitute fakes.
    Operations use ``with_cache`` only for idempotent reads; mutations go
    through ``with_retry`` alone and invalidate the keys they affect.
    """

    def __init__(
        self,
        http_client: TrackerHttpClient,
        retry_handler: RetryHandler,
        cache_manager: CacheManager,
        logger: structlog.stdlib.BoundLogger,
        batch_executor: BatchExecutor | None = None,
    ) -> None:
        """Initialize the operation.

        Args:
            http_client: Transport for single and batch calls.
            retry_handler: Retry orchestration for units of work.
            cache_manager: Cache for idempotent reads.
            logger: Logger bound to the operation name.
            batch_executor: Executor for fan-out calls. Defaults to the
                client's, bounded by the configured batch concurrency.
        """
        self.http_client = http_client
        self.retry_handler = retry_handler
        self.cache_manager = cache_manager
        self.logger = logger.bind(operation=type(self).__name__)
        self.batch_executor = batch_executor or http_client.batch_executor
        self._metrics = ExecutionMetrics.get_instance()

    async def with_retry(self, fn: Callable[[], Awaitable[T]]) -> T:
        """Run ``fn`` through the retry handler.

        Raises:
            Exception: The last attempt's exception once retries stop.
        """
        return await self.retry_handler.execute_with_retry(fn)

    async def with_cache(
        self,
        key: str,
        fn: Callable[[], Awaitable[T]],
        ttl_seconds: float | None = None,
    ) -> T:
        """Return the cached value for ``key`` or compute and store it.

        On a hit ``fn`` is not called. A ``None`` result is returned but
        not stored. The cache keeps its own copy and every hit returns a
        fresh one, so callers may mutate results freely.

        Args:
            key: Cache key, normally from ``EntityCacheKey.create_key``.
            fn: Producer of the value on a miss.
            ttl_seconds: Entry TTL; the cache default when None.

        Returns:
            Cached or freshly computed value.
        """
        cached = self.cache_manager.get(key)
        if cached is not None:
            self._metrics.record_cache_hit()
            self.logger.debug("cache_hit", key=key)
            return copy.deepcopy(cached)  # type: ignore[no-any-return]

        self._metrics.record_cache_miss()
        self.logger.debug("cache_miss", key=key)
        value = await fn()
        if value is not None:
            self.cache_manager.set(key, copy.deepcopy(value), ttl_seconds)
        return value

    async def run_batch(
        self, items: Sequence[BatchItem[Any, T]]
    ) -> list[BatchItemOutcome[T]]:
        """Settle independent units of work concurrently.

        Raises:
            ValueError: If there are more items than the configured
                ``max_batch_size``. No item is started.
        """
        max_batch_size = self.http_client.config.max_batch_size
        if max_batch_size is not None and len(items) > max_batch_size:
            msg = (
                f"Batch of {len(items)} items exceeds max_batch_size "
                f"{max_batch_size}"
            )
            raise ValueError(msg)
        return await self.batch_executor.run_batch(items)

    def process_batch(
        self,
        outcomes: Sequence[BatchItemOutcome[T]],
        map_fn: Callable[[T], Any] | None = None,
    ) -> ProcessedBatch[Any]:
        """Split outcomes into successes and explained failures."""
        return BatchResultProcessor.process(outcomes, map_fn)

    async def download_file(self, path: str) -> bytes:
        """Download binary content with retries; never cached."""
        return await self.with_retry(lambda: self.http_client.get_bytes(path))

    def invalidate(self, *keys: str) -> None:
        """Drop cache entries made stale by a mutation."""
        for key in keys:
            self.cache_manager.delete(key)
