"""Operation base class and the concrete tracker operations built on it."""

from tracker_gateway.operations.attachments import (
    DownloadAttachmentOperation,
    GetAttachmentsOperation,
)
from tracker_gateway.operations.base import BaseOperation
from tracker_gateway.operations.comments import AddCommentsOperation
from tracker_gateway.operations.issues import GetIssuesOperation, UpdateIssueOperation


__all__ = [
    "AddCommentsOperation",
    "BaseOperation",
    "DownloadAttachmentOperation",
    "GetAttachmentsOperation",
    "GetIssuesOperation",
    "UpdateIssueOperation",
]
