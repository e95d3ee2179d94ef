"""Attachment listing and download operations."""

from typing import Any
from urllib.parse import quote

from tracker_gateway.cache.keys import EntityCacheKey, EntityType
from tracker_gateway.http.errors import ApiError, TrackerApiError
from tracker_gateway.operations.base import BaseOperation


ATTACHMENTS_PATH = "/v2/issues/{issue_id}/attachments"


def attachments_cache_key(issue_id: str) -> str:
    """Cache key for the attachment list of one issue."""
    return EntityCacheKey.create_key(EntityType.ATTACHMENT, f"list:{issue_id}")


class GetAttachmentsOperation(BaseOperation):
    """List the files attached to an issue (cached)."""

    async def execute(self, issue_id: str) -> list[dict[str, Any]]:
        """Get all attachments of an issue.

        Args:
            issue_id: Issue key or numeric id.

        Returns:
            Attachment metadata list, possibly empty.
        """
        path = ATTACHMENTS_PATH.format(issue_id=issue_id)
        attachments = await self.with_cache(
            attachments_cache_key(issue_id),
            lambda: self.with_retry(lambda: self.http_client.get(path)),
        )
        attachments = attachments or []

        self.logger.info(
            "attachments_listed", issue_id=issue_id, count=len(attachments)
        )
        return attachments


class DownloadAttachmentOperation(BaseOperation):
    """Download attachment content and look up its metadata."""

    async def execute(self, issue_id: str, attachment_id: str, filename: str) -> bytes:
        """Download one attachment.

        Args:
            issue_id: Issue key or numeric id.
            attachment_id: Attachment identifier.
            filename: Attachment file name, part of the download URL.

        Returns:
            File content.
        """
        path = (
            f"{ATTACHMENTS_PATH.format(issue_id=issue_id)}/"
            f"{attachment_id}/{quote(filename, safe='')}"
        )
        content = await self.download_file(path)

        self.logger.info(
            "attachment_downloaded",
            issue_id=issue_id,
            attachment_id=attachment_id,
            size=len(content),
        )
        return content

    async def get_metadata(self, issue_id: str, attachment_id: str) -> dict[str, Any]:
        """Find one attachment in the issue's listing.

        Raises:
            TrackerApiError: With status 404 if the attachment is not listed.
        """
        path = ATTACHMENTS_PATH.format(issue_id=issue_id)
        attachments = await self.with_cache(
            attachments_cache_key(issue_id),
            lambda: self.with_retry(lambda: self.http_client.get(path)),
        )

        for attachment in attachments or []:
            if str(attachment.get("id")) == attachment_id:
                return attachment  # type: ignore[no-any-return]

        available = ", ".join(str(a.get("id")) for a in attachments or [])
        raise TrackerApiError(
            ApiError(
                status_code=404,
                message=(
                    f"Attachment {attachment_id} not found in issue {issue_id}. "
                    f"Available: {available or 'none'}"
                ),
            )
        )
