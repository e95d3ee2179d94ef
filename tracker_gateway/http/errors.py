"""Canonical error values for the tracker API layer.

Every failure raised while talking to the tracker is normalized into one of
two frozen variants:

- ``ApiError``: any failure that is not rate limiting (including network
  faults, reported with ``status_code == 0``)
- ``RateLimitedApiError``: a 429 response, always carrying the advised wait

Only the rate-limited variant has ``retry_after_seconds``; callers must
narrow on ``kind`` (or ``isinstance``) before reading it.
"""

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from tracker_gateway.http.constants import (
    HTTP_STATUS_CLIENT_ERROR_MIN,
    HTTP_STATUS_NETWORK_ERROR,
    HTTP_STATUS_REQUEST_TIMEOUT,
    HTTP_STATUS_SERVER_ERROR_MAX,
    HTTP_STATUS_SERVER_ERROR_MIN,
    HTTP_STATUS_TOO_MANY_REQUESTS,
)


class ErrorClass(str, Enum):
    """Classification of tracker API errors for retry decisions and reporting.

    - NETWORK: No HTTP response was received (status 0)
    - TIMEOUT: Server reported a request timeout (408)
    - RATE_LIMITED: 429 Too Many Requests
    - SERVER: 5xx server error
    - VALIDATION: 4xx with field-level errors attached
    - CLIENT: Any other 4xx client error
    - UNKNOWN: Status outside the ranges above
    """

    NETWORK = "NETWORK"
    TIMEOUT = "TIMEOUT"
    RATE_LIMITED = "RATE_LIMITED"
    SERVER = "SERVER"
    VALIDATION = "VALIDATION"
    CLIENT = "CLIENT"
    UNKNOWN = "UNKNOWN"


FieldErrors = dict[str, list[str]]


class _BaseApiError(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    status_code: Annotated[int, Field(ge=0, description="HTTP status, 0 if none")]
    message: Annotated[str, Field(min_length=1, description="Human-readable message")]
    field_errors: FieldErrors = Field(
        default_factory=dict, description="Validation messages keyed by field"
    )

    @property
    def error_class(self) -> ErrorClass:
        """Classify the error by its status code."""
        status = self.status_code
        if status == HTTP_STATUS_NETWORK_ERROR:
            return ErrorClass.NETWORK
        if status == HTTP_STATUS_TOO_MANY_REQUESTS:
            return ErrorClass.RATE_LIMITED
        if status == HTTP_STATUS_REQUEST_TIMEOUT:
            return ErrorClass.TIMEOUT
        if HTTP_STATUS_SERVER_ERROR_MIN <= status < HTTP_STATUS_SERVER_ERROR_MAX:
            return ErrorClass.SERVER
        if HTTP_STATUS_CLIENT_ERROR_MIN <= status < HTTP_STATUS_SERVER_ERROR_MIN:
            return ErrorClass.VALIDATION if self.field_errors else ErrorClass.CLIENT
        return ErrorClass.UNKNOWN

    def to_dict(self) -> dict[str, object]:
        """Convert error to dictionary for logging/serialization.

        Returns:
            Dictionary representation of the error.
        """
        return self.model_dump()


class ApiError(_BaseApiError):
    """Any tracker failure other than rate limiting."""

    kind: Literal["api_error"] = "api_error"

    @model_validator(mode="after")
    def _reject_rate_limit_status(self) -> "ApiError":
        if self.status_code == HTTP_STATUS_TOO_MANY_REQUESTS:
            msg = "status 429 must be represented by RateLimitedApiError"
            raise ValueError(msg)
        return self


class RateLimitedApiError(_BaseApiError):
    """429 response with the server-advised wait before retrying."""

    kind: Literal["rate_limited"] = "rate_limited"
    status_code: Literal[429] = HTTP_STATUS_TOO_MANY_REQUESTS
    retry_after_seconds: Annotated[
        int, Field(ge=0, description="Seconds to wait before retrying")
    ]


CanonicalError = Annotated[ApiError | RateLimitedApiError, Field(discriminator="kind")]


class TrackerApiError(Exception):
    """Exception carrying an already-classified tracker error.

    Raised by operations for failures detected after a response was received,
    and accepted as-is by the error mapper.

    Attributes:
        error: The canonical error value.
    """

    def __init__(self, error: ApiError | RateLimitedApiError) -> None:
        super().__init__(error.message)
        self.error = error

    @property
    def status_code(self) -> int:
        """HTTP status of the wrapped error."""
        return self.error.status_code

    @property
    def message(self) -> str:
        """Human-readable message of the wrapped error."""
        return self.error.message

    @property
    def field_errors(self) -> FieldErrors:
        """Field-level validation messages, possibly empty."""
        return self.error.field_errors

    @property
    def retry_after_seconds(self) -> int | None:
        """Advised wait for rate-limited errors, None for every other error."""
        if isinstance(self.error, RateLimitedApiError):
            return self.error.retry_after_seconds
        return None
