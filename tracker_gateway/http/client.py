"""Async HTTP client for the tracker REST API."""

import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import TracebackType
from typing import Any

import httpx
import structlog

from tracker_gateway.batch.executor import BatchExecutor
from tracker_gateway.batch.models import BatchItem, BatchItemOutcome
from tracker_gateway.http.config import TransportConfig
from tracker_gateway.http.constants import HTTP_STATUS_NO_CONTENT
from tracker_gateway.http.errors import ApiError, TrackerApiError
from tracker_gateway.http.redact import redact_headers, redact_url_credentials
from tracker_gateway.observability.metrics import ExecutionMetrics


QueryParams = Mapping[str, str | int | float | bool | None]


@dataclass(frozen=True)
class BatchRequest:
    """Descriptor of one request in a batch of writes.

    Attributes:
        path: API path relative to the base URL.
        body: JSON body to send.
        params: Query parameters.
        key: Correlation key for the outcome; defaults to ``path``.
    """

    path: str
    body: Any = None
    params: QueryParams | None = None
    key: str | None = None

    @property
    def correlation_key(self) -> str:
        """Key reported on the matching batch outcome."""
        return self.key if self.key is not None else self.path


@dataclass
class _RequestSpec:
    method: str
    path: str
    params: QueryParams | None = None
    json_body: Any = None
    headers: dict[str, str] = field(default_factory=dict)


class TrackerHttpClient:
    """Tracker API client issuing one HTTP call per logical request.

    Provides:
    - Authorization and organization headers on every request
    - Verb methods returning the parsed JSON body
    - Batch methods settling many independent calls at once
    - Header redaction for logging and metrics collection

    Non-2xx responses raise ``httpx.HTTPStatusError``, connection faults
    raise ``httpx.RequestError`` and a 2xx body that is not JSON raises
    ``TrackerApiError`` with the response status. Classification, retries
    and caching are left to the caller.
    """

    def __init__(
        self,
        config: TransportConfig,
        logger: structlog.stdlib.BoundLogger,
        batch_executor: BatchExecutor | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the HTTP client.

        Args:
            config: Transport configuration.
            logger: Logger for request events.
            batch_executor: Executor used by batch methods. Defaults to one
                bounded by ``config.max_batch_concurrency``.
            transport: Optional httpx transport (e.g. ``httpx.MockTransport``).
        """
        self._config = config
        self._log = logger.bind(
            component="http", base_url=redact_url_credentials(config.base_url)
        )
        self._metrics = ExecutionMetrics.get_instance()
        self._batch_executor = batch_executor or BatchExecutor(
            logger,
            max_concurrency=config.max_batch_concurrency,
        )
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.timeout_seconds,
            headers={
                "User-Agent": config.user_agent,
                "Accept": "application/json",
                **config.auth_headers(),
            },
            transport=transport,
        )

    @property
    def config(self) -> TransportConfig:
        """Transport configuration in use."""
        return self._config

    @property
    def batch_executor(self) -> BatchExecutor:
        """Executor bounded by the configured batch concurrency."""
        return self._batch_executor

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()

    async def __aenter__(self) -> "TrackerHttpClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    # Verb methods

    async def get(self, path: str, params: QueryParams | None = None) -> Any:
        """Issue a GET request and return the parsed body."""
        response = await self._send(_RequestSpec("GET", path, params=params))
        return _parse_body(response)

    async def post(
        self, path: str, body: Any = None, params: QueryParams | None = None
    ) -> Any:
        """Issue a POST request and return the parsed body."""
        response = await self._send(
            _RequestSpec("POST", path, params=params, json_body=body)
        )
        return _parse_body(response)

    async def patch(
        self, path: str, body: Any = None, params: QueryParams | None = None
    ) -> Any:
        """Issue a PATCH request and return the parsed body."""
        response = await self._send(
            _RequestSpec("PATCH", path, params=params, json_body=body)
        )
        return _parse_body(response)

    async def put(
        self, path: str, body: Any = None, params: QueryParams | None = None
    ) -> Any:
        """Issue a PUT request and return the parsed body."""
        response = await self._send(
            _RequestSpec("PUT", path, params=params, json_body=body)
        )
        return _parse_body(response)

    async def delete(self, path: str, params: QueryParams | None = None) -> Any:
        """Issue a DELETE request and return the parsed body, if any."""
        response = await self._send(_RequestSpec("DELETE", path, params=params))
        return _parse_body(response)

    async def get_bytes(self, path: str, params: QueryParams | None = None) -> bytes:
        """Download a binary resource such as an attachment.

        Returns:
            Raw response body.
        """
        response = await self._send(
            _RequestSpec("GET", path, params=params, headers={"Accept": "*/*"})
        )
        return response.content

    # Batch methods

    async def get_batch(
        self, paths: Sequence[str], params: QueryParams | None = None
    ) -> list[BatchItemOutcome[Any]]:
        """GET every path concurrently; outcomes are keyed by path."""
        items = [
            BatchItem(key=path, work=lambda path=path: self.get(path, params))
            for path in paths
        ]
        return await self._batch_executor.run_batch(items)

    async def post_batch(
        self, requests: Sequence[BatchRequest]
    ) -> list[BatchItemOutcome[Any]]:
        """POST every request concurrently."""
        items = [
            BatchItem(
                key=req.correlation_key,
                work=lambda req=req: self.post(req.path, req.body, req.params),
            )
            for req in requests
        ]
        return await self._batch_executor.run_batch(items)

    async def patch_batch(
        self, requests: Sequence[BatchRequest]
    ) -> list[BatchItemOutcome[Any]]:
        """PATCH every request concurrently."""
        items = [
            BatchItem(
                key=req.correlation_key,
                work=lambda req=req: self.patch(req.path, req.body, req.params),
            )
            for req in requests
        ]
        return await self._batch_executor.run_batch(items)

    async def delete_batch(
        self, paths: Sequence[str]
    ) -> list[BatchItemOutcome[Any]]:
        """DELETE every path concurrently; outcomes are keyed by path."""
        items = [
            BatchItem(key=path, work=lambda path=path: self.delete(path))
            for path in paths
        ]
        return await self._batch_executor.run_batch(items)

    async def _send(self, req: _RequestSpec) -> httpx.Response:
        """Send one request and raise on transport faults or non-2xx status.

        Args:
            req: Request to send.

        Returns:
            Successful response with its body read.

        Raises:
            httpx.HTTPStatusError: On a non-2xx response.
            httpx.RequestError: When no response was received.
        """
        log = self._log.bind(method=req.method, path=req.path)
        request = self._client.build_request(
            req.method,
            req.path,
            params=req.params,
            json=req.json_body,
            headers=req.headers or None,
        )
        start_time_ns = time.perf_counter_ns()

        try:
            response = await self._client.send(request)
        except httpx.RequestError as exc:
            self._metrics.record_transport_failure()
            log.warning(
                "http_transport_error",
                error=str(exc) or type(exc).__name__,
                headers=redact_headers(dict(request.headers)),
            )
            raise

        duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
        self._metrics.record_request(response.status_code, duration_ms)
        log.debug(
            "http_request",
            status_code=response.status_code,
            bytes=len(response.content),
            duration_ms=round(duration_ms, 2),
        )

        response.raise_for_status()
        return response


def _parse_body(response: httpx.Response) -> Any:
    if response.status_code == HTTP_STATUS_NO_CONTENT or not response.content:
        return None
    try:
        return response.json()
    except ValueError as exc:
        # The request was processed; the status keeps this out of retries
        raise TrackerApiError(
            ApiError(
                status_code=response.status_code,
                message=(
                    f"Invalid JSON in HTTP {response.status_code} response "
                    f"({response.headers.get('content-type', 'no content type')})"
                ),
            )
        ) from exc
