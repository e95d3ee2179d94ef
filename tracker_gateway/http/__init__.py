"""Tracker HTTP transport and error normalization.

This module provides:
- Canonical error values and the mapper producing them
- An async client injecting auth and organization headers
- Batch verb methods with all-settled semantics
- Header redaction for logging
"""

from tracker_gateway.http.constants import (
    DEFAULT_RETRY_AFTER_SECONDS,
    HTTP_STATUS_NETWORK_ERROR,
    HTTP_STATUS_REQUEST_TIMEOUT,
    HTTP_STATUS_TOO_MANY_REQUESTS,
    MAX_RETRY_AFTER_SECONDS,
    ORG_HEADER_CLOUD_ORG_ID,
    ORG_HEADER_ORG_ID,
)
from tracker_gateway.http.errors import (
    ApiError,
    CanonicalError,
    ErrorClass,
    RateLimitedApiError,
    TrackerApiError,
)
from tracker_gateway.http.error_mapper import (
    ErrorMapper,
    classify_error,
    is_transport_failure,
    parse_retry_after,
)
from tracker_gateway.http.config import TransportConfig
from tracker_gateway.http.redact import redact_headers, redact_url_credentials
from tracker_gateway.http.client import BatchRequest, TrackerHttpClient


__all__ = [
    # Client
    "TrackerHttpClient",
    "BatchRequest",
    # Config
    "TransportConfig",
    # Errors
    "ApiError",
    "RateLimitedApiError",
    "CanonicalError",
    "ErrorClass",
    "TrackerApiError",
    "ErrorMapper",
    "classify_error",
    "is_transport_failure",
    "parse_retry_after",
    # Constants
    "HTTP_STATUS_NETWORK_ERROR",
    "HTTP_STATUS_REQUEST_TIMEOUT",
    "HTTP_STATUS_TOO_MANY_REQUESTS",
    "DEFAULT_RETRY_AFTER_SECONDS",
    "MAX_RETRY_AFTER_SECONDS",
    "ORG_HEADER_ORG_ID",
    "ORG_HEADER_CLOUD_ORG_ID",
    # Redaction
    "redact_headers",
    "redact_url_credentials",
]
