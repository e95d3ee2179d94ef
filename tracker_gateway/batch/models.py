"""Data models for batch execution and reporting."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, ClassVar, Generic, Literal, TypeVar


K = TypeVar("K")
T = TypeVar("T")


@dataclass(frozen=True)
class BatchItem(Generic[K, T]):
    """One independent unit of work in a batch.

    Attributes:
        key: Caller identifier copied to the outcome (issue key, path, ...).
        work: Zero-argument callable returning the awaitable to run.
    """

    key: K
    work: Callable[[], Awaitable[T]]


@dataclass(frozen=True)
class FulfilledOutcome(Generic[K, T]):
    """Batch item whose work returned a value."""

    key: K
    index: int
    value: T

    status: ClassVar[Literal["fulfilled"]] = "fulfilled"

    @property
    def is_fulfilled(self) -> bool:
        """Always True for fulfilled outcomes."""
        return True


@dataclass(frozen=True)
class RejectedOutcome(Generic[K]):
    """Batch item whose work raised."""

    key: K
    index: int
    reason: Exception

    status: ClassVar[Literal["rejected"]] = "rejected"

    @property
    def is_fulfilled(self) -> bool:
        """Always False for rejected outcomes."""
        return False


BatchItemOutcome = FulfilledOutcome[Any, T] | RejectedOutcome[Any]


@dataclass(frozen=True)
class BatchSuccess(Generic[T]):
    """Successful entry of a processed batch."""

    key: Any
    data: T


@dataclass(frozen=True)
class BatchFailure:
    """Failed entry of a processed batch with a printable reason."""

    key: Any
    error: str


@dataclass
class ProcessedBatch(Generic[T]):
    """Batch outcomes split into successes and explained failures.

    A batch with some failures is a partial success, never a single
    opaque error.
    """

    successful: list[BatchSuccess[T]] = field(default_factory=list)
    failed: list[BatchFailure] = field(default_factory=list)

    @property
    def total(self) -> int:
        """Number of items in the batch."""
        return len(self.successful) + len(self.failed)

    @property
    def all_succeeded(self) -> bool:
        """True when no item failed."""
        return not self.failed

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for tool responses.

        Returns:
            Dictionary with successful and failed entries.
        """
        return {
            "successful": [{"key": s.key, "data": s.data} for s in self.successful],
            "failed": [{"key": f.key, "error": f.error} for f in self.failed],
        }
