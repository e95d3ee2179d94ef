"""Error mapping from raw transport failures to canonical errors.

Turns anything the transport raises into an ``ApiError`` or a
``RateLimitedApiError``. Pure mapping with no side effects.
"""

from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from http import HTTPStatus
from typing import Any

import httpx

from tracker_gateway.http.constants import (
    DEFAULT_RETRY_AFTER_SECONDS,
    HTTP_STATUS_NETWORK_ERROR,
    HTTP_STATUS_TOO_MANY_REQUESTS,
)
from tracker_gateway.http.errors import (
    ApiError,
    FieldErrors,
    RateLimitedApiError,
    TrackerApiError,
)


class ErrorMapper:
    """Maps raised failures onto the canonical error shape.

    Handles:
    - ``TrackerApiError``: already classified, returned unchanged
    - ``httpx.HTTPStatusError``: status and body from the response
    - ``httpx.RequestError``: no response received, status 0

    Any other exception was raised by local code, not by the transport,
    and is rejected with ``TypeError``; see ``is_transport_failure``.
    """

    def __init__(
        self, default_retry_after_seconds: int = DEFAULT_RETRY_AFTER_SECONDS
    ) -> None:
        """Initialize the error mapper.

        Args:
            default_retry_after_seconds: Wait used for 429 responses that
                carry no usable Retry-After header.
        """
        self._default_retry_after_seconds = default_retry_after_seconds

    def classify(self, failure: BaseException) -> ApiError | RateLimitedApiError:
        """Classify a raised failure.

        Args:
            failure: Exception raised by the transport or an operation.

        Returns:
            Canonical error value.

        Raises:
            TypeError: If the failure did not come from the transport.
        """
        if isinstance(failure, TrackerApiError):
            return failure.error

        if isinstance(failure, httpx.HTTPStatusError):
            return self._from_response(failure.response)

        if isinstance(failure, httpx.TimeoutException):
            return ApiError(
                status_code=HTTP_STATUS_NETWORK_ERROR,
                message=f"Request timed out: {_describe(failure)}",
            )

        if isinstance(failure, httpx.RequestError):
            return ApiError(
                status_code=HTTP_STATUS_NETWORK_ERROR,
                message=f"Network error: {_describe(failure)}",
            )

        msg = f"Not a transport failure: {type(failure).__name__}"
        raise TypeError(msg)

    def _from_response(
        self, response: httpx.Response
    ) -> ApiError | RateLimitedApiError:
        status_code = response.status_code
        body = _read_json_body(response)
        message = _extract_message(body) or _default_message(status_code)
        field_errors = _extract_field_errors(body)

        if status_code == HTTP_STATUS_TOO_MANY_REQUESTS:
            retry_after = parse_retry_after(response.headers.get("retry-after"))
            return RateLimitedApiError(
                message=message,
                field_errors=field_errors,
                retry_after_seconds=(
                    retry_after
                    if retry_after is not None
                    else self._default_retry_after_seconds
                ),
            )

        return ApiError(
            status_code=status_code,
            message=message,
            field_errors=field_errors,
        )


_default_mapper = ErrorMapper()


def classify_error(failure: BaseException) -> ApiError | RateLimitedApiError:
    """Classify a failure with the default Retry-After fallback.

    Args:
        failure: Exception raised by the transport or an operation.

    Returns:
        Canonical error value.

    Raises:
        TypeError: If the failure did not come from the transport.
    """
    return _default_mapper.classify(failure)


def is_transport_failure(failure: BaseException) -> bool:
    """Whether the failure can be classified into a canonical error.

    True for httpx errors and already-classified ``TrackerApiError``. Anything
    else (``KeyError``, ``TypeError``, ...) was raised by local code after or
    instead of a request and must not be retried as a network fault.
    """
    return isinstance(failure, TrackerApiError | httpx.HTTPError)


def parse_retry_after(value: str | None) -> int | None:
    """Parse Retry-After header value.

    Args:
        value: Header value (seconds or HTTP date).

    Returns:
        Seconds to wait, or None if not parseable.
    """
    if not value:
        return None

    # Try parsing as integer seconds
    try:
        return max(0, int(value.strip()))
    except ValueError:
        pass

    # Try parsing as HTTP date
    try:
        dt = parsedate_to_datetime(value)
    except (ValueError, TypeError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    delta = dt - datetime.now(UTC)
    return max(0, int(delta.total_seconds()))


def _describe(failure: BaseException) -> str:
    text = str(failure)
    return text or type(failure).__name__


def _read_json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except (ValueError, httpx.ResponseNotRead):
        return None


def _extract_message(body: Any) -> str | None:
    """Pull a readable message out of a tracker error body."""
    if not isinstance(body, dict):
        return None

    messages = body.get("errorMessages")
    if isinstance(messages, list):
        parts = [str(m) for m in messages if m]
        if parts:
            return "; ".join(parts)

    for key in ("message", "error", "errorMessage"):
        value = body.get(key)
        if isinstance(value, str) and value:
            return value

    return None


def _extract_field_errors(body: Any) -> FieldErrors:
    if not isinstance(body, dict):
        return {}
    errors = body.get("errors")
    if not isinstance(errors, dict):
        return {}

    result: FieldErrors = {}
    for field, value in errors.items():
        if isinstance(value, list):
            result[str(field)] = [str(v) for v in value]
        elif value is not None:
            result[str(field)] = [str(value)]
    return result


def _default_message(status_code: int) -> str:
    try:
        phrase = HTTPStatus(status_code).phrase
    except ValueError:
        phrase = "Unknown status"
    return f"HTTP {status_code}: {phrase}"
