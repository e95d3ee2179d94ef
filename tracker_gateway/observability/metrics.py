"""Metrics collection for the execution layer."""

from dataclasses import dataclass, field
from typing import ClassVar


@dataclass
class ExecutionMetrics:
    """Metrics for tracker API execution.

    Singleton class that tracks request counts, transport failures,
    retries, cache effectiveness, and batch outcomes.
    """

    http_requests_total: dict[int, int] = field(default_factory=dict)
    http_transport_failures_total: int = 0
    http_duration_ms_total: float = 0.0
    http_request_count: int = 0
    retry_total: int = 0
    retry_exhausted_total: dict[str, int] = field(default_factory=dict)
    cache_hits_total: int = 0
    cache_misses_total: int = 0
    batches_total: int = 0
    batch_items_fulfilled_total: int = 0
    batch_items_rejected_total: int = 0

    _instance: ClassVar["ExecutionMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "ExecutionMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_request(self, status_code: int, duration_ms: float) -> None:
        """Record a completed HTTP request.

        Args:
            status_code: HTTP status code.
            duration_ms: Duration in milliseconds.
        """
        self.http_requests_total[status_code] = (
            self.http_requests_total.get(status_code, 0) + 1
        )
        self.http_duration_ms_total += duration_ms
        self.http_request_count += 1

    def record_transport_failure(self) -> None:
        """Record a request that got no HTTP response."""
        self.http_transport_failures_total += 1

    def record_retry(self) -> None:
        """Record a scheduled retry."""
        self.retry_total += 1

    def record_retry_stop(self, error_class: str) -> None:
        """Record a unit of work that failed without a further retry.

        Args:
            error_class: Classification of the final error.
        """
        self.retry_exhausted_total[error_class] = (
            self.retry_exhausted_total.get(error_class, 0) + 1
        )

    def record_cache_hit(self) -> None:
        """Record a cache hit."""
        self.cache_hits_total += 1

    def record_cache_miss(self) -> None:
        """Record a cache miss."""
        self.cache_misses_total += 1

    def record_batch(self, fulfilled: int, rejected: int) -> None:
        """Record a settled batch.

        Args:
            fulfilled: Number of items that resolved.
            rejected: Number of items that raised.
        """
        self.batches_total += 1
        self.batch_items_fulfilled_total += fulfilled
        self.batch_items_rejected_total += rejected

    @property
    def avg_duration_ms(self) -> float:
        """Average HTTP request duration in milliseconds."""
        if self.http_request_count == 0:
            return 0.0
        return self.http_duration_ms_total / self.http_request_count

    @property
    def cache_hit_ratio(self) -> float:
        """Share of cache lookups that hit."""
        lookups = self.cache_hits_total + self.cache_misses_total
        if lookups == 0:
            return 0.0
        return self.cache_hits_total / lookups

    def to_dict(self) -> dict[str, int | float | dict[str, int] | dict[int, int]]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "http_requests_total": dict(self.http_requests_total),
            "http_transport_failures_total": self.http_transport_failures_total,
            "http_duration_ms_total": self.http_duration_ms_total,
            "http_request_count": self.http_request_count,
            "retry_total": self.retry_total,
            "retry_exhausted_total": dict(self.retry_exhausted_total),
            "cache_hits_total": self.cache_hits_total,
            "cache_misses_total": self.cache_misses_total,
            "batches_total": self.batches_total,
            "batch_items_fulfilled_total": self.batch_items_fulfilled_total,
            "batch_items_rejected_total": self.batch_items_rejected_total,
        }
