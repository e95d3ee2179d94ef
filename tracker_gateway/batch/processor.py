"""Reshaping of batch outcomes into success/failure reports."""

from collections.abc import Callable, Iterable, Sequence
from typing import Any, TypeVar

import httpx

from tracker_gateway.batch.models import (
    BatchFailure,
    BatchItemOutcome,
    BatchSuccess,
    FulfilledOutcome,
    ProcessedBatch,
)
from tracker_gateway.http.error_mapper import classify_error
from tracker_gateway.http.errors import TrackerApiError


T = TypeVar("T")
U = TypeVar("U")

# An empty value from the tracker cannot be told apart from "not found"
EMPTY_RESULT_MESSAGE = "Item not found or empty result"

FIELD_PATH_SEPARATOR = "."


class BatchResultProcessor:
    """Splits batch outcomes into successful data and printable failures."""

    @staticmethod
    def process(
        outcomes: Sequence[BatchItemOutcome[T]],
        map_fn: Callable[[T], U] | None = None,
    ) -> ProcessedBatch[Any]:
        """Process raw batch outcomes.

        Args:
            outcomes: Outcomes from ``BatchExecutor.run_batch``.
            map_fn: Optional transform for fulfilled values, e.g. a field
                projection from ``project_fields``.

        Returns:
            ProcessedBatch where every outcome lands in exactly one list.
        """
        processed: ProcessedBatch[Any] = ProcessedBatch()

        for outcome in outcomes:
            if isinstance(outcome, FulfilledOutcome):
                if outcome.value is None:
                    processed.failed.append(
                        BatchFailure(key=outcome.key, error=EMPTY_RESULT_MESSAGE)
                    )
                    continue
                data = map_fn(outcome.value) if map_fn is not None else outcome.value
                processed.successful.append(BatchSuccess(key=outcome.key, data=data))
            else:
                processed.failed.append(
                    BatchFailure(key=outcome.key, error=describe_failure(outcome.reason))
                )

        return processed


def describe_failure(reason: BaseException) -> str:
    """Render a batch item failure as a single message.

    Args:
        reason: Exception raised by the item's work.

    Returns:
        The structured message when the error carries one, else ``str(reason)``.
    """
    if isinstance(reason, TrackerApiError):
        return reason.message
    if isinstance(reason, httpx.HTTPError):
        return classify_error(reason).message
    return str(reason) or type(reason).__name__


def project_fields(fields: Iterable[str]) -> Callable[[Any], Any]:
    """Build a ``map_fn`` keeping only the requested fields.

    Dotted paths (``status.key``) select nested values and keep the nesting.
    Non-dict values pass through unchanged; missing fields are skipped.

    Args:
        fields: Field names or dotted paths to keep.

    Returns:
        Projection function for ``BatchResultProcessor.process``.
    """
    paths = [tuple(f.split(FIELD_PATH_SEPARATOR)) for f in fields if f]

    def _project(value: Any) -> Any:
        if not isinstance(value, dict) or not paths:
            return value
        result: dict[str, Any] = {}
        for path in paths:
            _copy_path(value, result, path)
        return result

    return _project


def _copy_path(
    source: dict[str, Any], target: dict[str, Any], path: tuple[str, ...]
) -> None:
    value: Any = source
    for part in path:
        if not isinstance(value, dict) or part not in value:
            return
        value = value[part]

    *parents, leaf = path
    node = target
    for part in parents:
        child = node.setdefault(part, {})
        if not isinstance(child, dict):
            return
        node = child
    node[leaf] = value
