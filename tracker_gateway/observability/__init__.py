"""Structured logging and metrics for the execution layer."""

from tracker_gateway.observability.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
    get_logger,
)
from tracker_gateway.observability.metrics import ExecutionMetrics


__all__ = [
    "ExecutionMetrics",
    "bind_request_context",
    "clear_request_context",
    "configure_logging",
    "get_logger",
]
