"""Slack API client package: blocking HTTP interface to Slack's upload methods.

WHY: Uploading a file to Slack takes three dependent HTTP calls. This
package encapsulates them behind one client class and a few dataclasses.

HOW: Uses httpx.Client. SlackUploadClient has one method per protocol
step. Responses are parsed into the dataclasses defined in models.py.

RULES:
- All HTTP calls go through SlackUploadClient (no direct httpx usage elsewhere)
- Authentication is via Bearer token on Slack methods only
"""

from slack_file_uploader.api.client import (
    FileTransferError,
    SlackUploadClient,
    SlackUploadError,
    UploadURLError,
)
from slack_file_uploader.api.models import CompletionResult, UploadRequest, UploadURLResponse

__all__ = [
    "CompletionResult",
    "FileTransferError",
    "SlackUploadClient",
    "SlackUploadError",
    "UploadRequest",
    "UploadURLError",
    "UploadURLResponse",
]
