"""Deterministic stand-ins for time and the tracker HTTP boundary."""

from collections.abc import Callable
from typing import Any

import httpx
import structlog

from tracker_gateway.http.client import TrackerHttpClient
from tracker_gateway.http.config import TransportConfig


TEST_BASE_URL = "https://tracker.test"
TEST_TOKEN = "test-token"  # noqa: S105
TEST_ORG_ID = "org-42"


class FakeSleep:
    """Records requested sleeps instead of waiting."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class FakeClock:
    """Manually advanced monotonic clock in seconds."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_logger() -> structlog.stdlib.BoundLogger:
    """Logger for components under test."""
    logger: structlog.stdlib.BoundLogger = structlog.get_logger("tests")
    return logger


def make_config(**overrides: Any) -> TransportConfig:
    """TransportConfig pointing at the fake tracker."""
    values: dict[str, Any] = {
        "base_url": TEST_BASE_URL,
        "token": TEST_TOKEN,
        "org_id": TEST_ORG_ID,
    }
    values.update(overrides)
    return TransportConfig(**values)


def make_client(
    handler: Callable[[httpx.Request], Any],
    **config_overrides: Any,
) -> TrackerHttpClient:
    """Client whose requests are answered by ``handler``.

    ``handler`` may be a coroutine function to simulate slow responses.
    """
    return TrackerHttpClient(
        make_config(**config_overrides),
        make_logger(),
        transport=httpx.MockTransport(handler),
    )


def status_error(
    status_code: int,
    body: Any = None,
    headers: dict[str, str] | None = None,
    path: str = "/v3/issues/TEST-1",
) -> httpx.HTTPStatusError:
    """Build the exception httpx raises for a non-2xx response."""
    request = httpx.Request("GET", f"{TEST_BASE_URL}{path}")
    response = httpx.Response(
        status_code,
        json=body,
        headers=headers,
        request=request,
    )
    return httpx.HTTPStatusError(
        f"HTTP {status_code}", request=request, response=response
    )
