"""Concurrent batch execution with per-item failure isolation."""

import asyncio
import time
from collections.abc import Sequence
from typing import Any, TypeVar

import structlog

from tracker_gateway.batch.models import (
    BatchItem,
    BatchItemOutcome,
    FulfilledOutcome,
    RejectedOutcome,
)
from tracker_gateway.observability.metrics import ExecutionMetrics


T = TypeVar("T")


class BatchExecutor:
    """Runs independent units of work concurrently and settles all of them.

    Provides:
    - All-settled semantics: one failing item never aborts the others
    - Output in input order, each outcome tagged with key and index
    - Optional bound on in-flight items
    """

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger,
        max_concurrency: int | None = None,
    ) -> None:
        """Initialize the batch executor.

        Args:
            logger: Logger for batch lifecycle events.
            max_concurrency: Maximum items in flight at once. None starts
                every item immediately.
        """
        if max_concurrency is not None and max_concurrency < 1:
            msg = f"max_concurrency must be at least 1, got {max_concurrency}"
            raise ValueError(msg)
        self._max_concurrency = max_concurrency
        self._metrics = ExecutionMetrics.get_instance()
        self._log = logger.bind(component="batch")

    async def run_batch(
        self, items: Sequence[BatchItem[Any, T]]
    ) -> list[BatchItemOutcome[T]]:
        """Run every item and collect one outcome per item.

        Args:
            items: Units of work with their correlation keys.

        Returns:
            Outcomes in input order; ``len(result) == len(items)``.
        """
        if not items:
            self._log.warning("batch_empty")
            return []

        start_time_ns = time.perf_counter_ns()
        semaphore = (
            asyncio.Semaphore(self._max_concurrency)
            if self._max_concurrency is not None
            else None
        )

        outcomes: list[BatchItemOutcome[T]] = await asyncio.gather(
            *(
                self._settle(index, item, semaphore)
                for index, item in enumerate(items)
            )
        )

        fulfilled = sum(1 for outcome in outcomes if outcome.is_fulfilled)
        rejected = len(outcomes) - fulfilled
        self._metrics.record_batch(fulfilled=fulfilled, rejected=rejected)
        self._log.info(
            "batch_completed",
            total=len(outcomes),
            fulfilled=fulfilled,
            rejected=rejected,
            duration_ms=round((time.perf_counter_ns() - start_time_ns) / 1_000_000, 2),
        )
        return outcomes

    async def _settle(
        self,
        index: int,
        item: BatchItem[Any, T],
        semaphore: asyncio.Semaphore | None,
    ) -> BatchItemOutcome[T]:
        try:
            if semaphore is None:
                value = await item.work()
            else:
                async with semaphore:
                    value = await item.work()
        except Exception as exc:  # noqa: BLE001
            self._log.debug(
                "batch_item_rejected",
                key=str(item.key),
                index=index,
                error=str(exc) or type(exc).__name__,
            )
            return RejectedOutcome(key=item.key, index=index, reason=exc)

        return FulfilledOutcome(key=item.key, index=index, value=value)
