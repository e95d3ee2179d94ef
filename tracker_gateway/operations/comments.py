"""Comment creation across issues."""

from collections.abc import Mapping
from typing import Any

from tracker_gateway.batch.models import BatchItem, ProcessedBatch
from tracker_gateway.operations.base import BaseOperation


COMMENTS_PATH = "/v3/issues/{issue_key}/comments"


class AddCommentsOperation(BaseOperation):
    """Post comments to several issues at once.

    Writes are retried but never cached; failures are reported per issue.
    """

    async def execute(self, comments: Mapping[str, str]) -> ProcessedBatch[Any]:
        """Add one comment per issue.

        Args:
            comments: Comment text keyed by issue key.

        Returns:
            Created comments plus per-issue failures.

        Raises:
            ValueError: If more comments are passed than the configured batch
                size allows. No request is sent.
        """
        items = [
            BatchItem(
                key=issue_key,
                work=lambda key=issue_key, text=text: self._add_one(key, text),
            )
            for issue_key, text in comments.items()
        ]
        outcomes = await self.run_batch(items)
        result = self.process_batch(outcomes)

        self.logger.info(
            "comments_added",
            successful=len(result.successful),
            failed=len(result.failed),
        )
        return result

    async def _add_one(self, issue_key: str, text: str) -> Any:
        path = COMMENTS_PATH.format(issue_key=issue_key)
        return await self.with_retry(
            lambda: self.http_client.post(path, {"text": text})
        )
