"""Partial-failure-tolerant batch execution and reporting."""

from tracker_gateway.batch.executor import BatchExecutor
from tracker_gateway.batch.models import (
    BatchFailure,
    BatchItem,
    BatchItemOutcome,
    BatchSuccess,
    FulfilledOutcome,
    ProcessedBatch,
    RejectedOutcome,
)
from tracker_gateway.batch.processor import (
    EMPTY_RESULT_MESSAGE,
    BatchResultProcessor,
    describe_failure,
    project_fields,
)


__all__ = [
    "EMPTY_RESULT_MESSAGE",
    "BatchExecutor",
    "BatchFailure",
    "BatchItem",
    "BatchItemOutcome",
    "BatchResultProcessor",
    "BatchSuccess",
    "FulfilledOutcome",
    "ProcessedBatch",
    "RejectedOutcome",
    "describe_failure",
    "project_fields",
]
