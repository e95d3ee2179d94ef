"""Issue read and update operations."""

from collections.abc import Sequence
from typing import Any

from tracker_gateway.batch.models import BatchItem, ProcessedBatch
from tracker_gateway.batch.processor import project_fields
from tracker_gateway.cache.keys import EntityCacheKey, EntityType
from tracker_gateway.operations.base import BaseOperation


ISSUE_PATH = "/v3/issues/{issue_key}"


class GetIssuesOperation(BaseOperation):
    """Fetch several issues by key in one batch.

    Each issue is a cached, retried GET; a missing issue is reported as a
    failure for that key only.
    """

    async def execute(
        self,
        issue_keys: Sequence[str],
        fields: Sequence[str] | None = None,
    ) -> ProcessedBatch[Any]:
        """Fetch issues concurrently.

        Args:
            issue_keys: Issue keys such as ``QUEUE-123``.
            fields: Optional field projection applied to each issue.

        Returns:
            Issues found plus per-key failures.

        Raises:
            ValueError: If more keys are passed than the configured batch
                size allows. No request is sent.
        """
        self.logger.debug("get_issues_started", count=len(issue_keys))

        items = [
            BatchItem(key=issue_key, work=lambda key=issue_key: self._get_one(key))
            for issue_key in issue_keys
        ]
        outcomes = await self.run_batch(items)
        result = self.process_batch(
            outcomes, project_fields(fields) if fields else None
        )

        self.logger.info(
            "get_issues_completed",
            successful=len(result.successful),
            failed=len(result.failed),
        )
        return result

    async def _get_one(self, issue_key: str) -> Any:
        cache_key = EntityCacheKey.create_key(EntityType.ISSUE, issue_key)
        path = ISSUE_PATH.format(issue_key=issue_key)
        return await self.with_cache(
            cache_key,
            lambda: self.with_retry(lambda: self.http_client.get(path)),
        )


class UpdateIssueOperation(BaseOperation):
    """Update issue fields and drop the stale cached copy."""

    async def execute(self, issue_key: str, changes: dict[str, Any]) -> Any:
        """Apply a partial update.

        Args:
            issue_key: Issue key such as ``QUEUE-123``.
            changes: Field values to set.

        Returns:
            Updated issue as returned by the tracker.
        """
        path = ISSUE_PATH.format(issue_key=issue_key)
        updated = await self.with_retry(lambda: self.http_client.patch(path, changes))
        self.invalidate(EntityCacheKey.create_key(EntityType.ISSUE, issue_key))

        self.logger.info(
            "issue_updated", issue_key=issue_key, fields=sorted(changes.keys())
        )
        return updated
