"""Unit tests for batch result processing."""

import httpx
import pytest

from tests.helpers.fakes import status_error
from tracker_gateway.batch.models import (
    BatchItemOutcome,
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
from tracker_gateway.http.errors import ApiError, TrackerApiError


def _fulfilled(key: str, index: int, value: object) -> FulfilledOutcome:
    return FulfilledOutcome(key=key, index=index, value=value)


def _rejected(key: str, index: int, reason: Exception) -> RejectedOutcome:
    return RejectedOutcome(key=key, index=index, reason=reason)


class TestBatchResultProcessor:
    """Tests for BatchResultProcessor.process."""

    def test_partial_success(self) -> None:
        """A and C succeed, B fails with its message."""
        outcomes: list[BatchItemOutcome] = [
            _fulfilled("A", 0, {"key": "A"}),
            _rejected(
                "B", 1, TrackerApiError(ApiError(status_code=404, message="not found"))
            ),
            _fulfilled("C", 2, {"key": "C"}),
        ]

        processed = BatchResultProcessor.process(outcomes)

        assert [s.key for s in processed.successful] == ["A", "C"]
        assert [s.data for s in processed.successful] == [{"key": "A"}, {"key": "C"}]
        assert len(processed.failed) == 1
        assert processed.failed[0].key == "B"
        assert processed.failed[0].error == "not found"
        assert processed.total == 3
        assert processed.all_succeeded is False

    def test_none_value_becomes_failure(self) -> None:
        processed = BatchResultProcessor.process([_fulfilled("A", 0, None)])

        assert processed.successful == []
        assert processed.failed[0].key == "A"
        assert processed.failed[0].error == EMPTY_RESULT_MESSAGE

    def test_falsy_values_are_successes(self) -> None:
        """Only None is treated as empty."""
        outcomes: list[BatchItemOutcome] = [
            _fulfilled("A", 0, []),
            _fulfilled("B", 1, 0),
            _fulfilled("C", 2, ""),
        ]

        processed = BatchResultProcessor.process(outcomes)

        assert [s.key for s in processed.successful] == ["A", "B", "C"]
        assert processed.all_succeeded is True

    def test_every_outcome_lands_in_one_list(self) -> None:
        outcomes: list[BatchItemOutcome] = [
            _fulfilled("A", 0, 1),
            _fulfilled("B", 1, None),
            _rejected("C", 2, RuntimeError("x")),
            _fulfilled("D", 3, 4),
        ]

        processed = BatchResultProcessor.process(outcomes)

        assert len(processed.successful) + len(processed.failed) == len(outcomes)

    def test_map_fn_applies_to_successes_only(self) -> None:
        outcomes: list[BatchItemOutcome] = [
            _fulfilled("A", 0, {"n": 1}),
            _rejected("B", 1, RuntimeError("broken")),
        ]

        processed = BatchResultProcessor.process(outcomes, lambda v: v["n"] * 10)

        assert processed.successful[0].data == 10
        assert processed.failed[0].error == "broken"

    def test_empty_outcomes(self) -> None:
        processed = BatchResultProcessor.process([])

        assert processed.total == 0
        assert processed.all_succeeded is True

    def test_to_dict(self) -> None:
        processed = BatchResultProcessor.process(
            [_fulfilled("A", 0, {"id": 1}), _fulfilled("B", 1, None)]
        )

        assert processed.to_dict() == {
            "successful": [{"key": "A", "data": {"id": 1}}],
            "failed": [{"key": "B", "error": EMPTY_RESULT_MESSAGE}],
        }

    def test_default_processed_batch_is_empty(self) -> None:
        assert ProcessedBatch().to_dict() == {"successful": [], "failed": []}


class TestDescribeFailure:
    """Tests for describe_failure."""

    def test_tracker_api_error(self) -> None:
        error = TrackerApiError(ApiError(status_code=403, message="Forbidden queue"))

        assert describe_failure(error) == "Forbidden queue"

    def test_http_status_error_uses_body_message(self) -> None:
        error = status_error(404, {"errorMessages": ["Issue does not exist"]})

        assert describe_failure(error) == "Issue does not exist"

    def test_transport_error(self) -> None:
        message = describe_failure(httpx.ConnectError("refused"))

        assert message.startswith("Network error")

    def test_plain_exception(self) -> None:
        assert describe_failure(ValueError("bad input")) == "bad input"

    def test_exception_without_message(self) -> None:
        assert describe_failure(KeyError()) == "KeyError"


class TestProjectFields:
    """Tests for project_fields."""

    @pytest.fixture
    def issue(self) -> dict[str, object]:
        return {
            "key": "QUEUE-1",
            "summary": "Title",
            "status": {"key": "open", "display": "Open"},
            "assignee": None,
        }

    def test_top_level_fields(self, issue: dict[str, object]) -> None:
        project = project_fields(["key", "summary"])

        assert project(issue) == {"key": "QUEUE-1", "summary": "Title"}

    def test_dotted_path_keeps_nesting(self, issue: dict[str, object]) -> None:
        project = project_fields(["key", "status.key"])

        assert project(issue) == {"key": "QUEUE-1", "status": {"key": "open"}}

    def test_missing_fields_are_skipped(self, issue: dict[str, object]) -> None:
        project = project_fields(["key", "priority", "assignee.login"])

        assert project(issue) == {"key": "QUEUE-1"}

    def test_explicit_none_is_kept(self, issue: dict[str, object]) -> None:
        assert project_fields(["assignee"])(issue) == {"assignee": None}

    def test_non_dict_passes_through(self) -> None:
        project = project_fields(["key"])

        assert project([1, 2]) == [1, 2]

    def test_no_fields_returns_value(self, issue: dict[str, object]) -> None:
        assert project_fields([])(issue) is issue
