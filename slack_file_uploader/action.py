"""The upload-to-Slack pipeline action.

WHY: A pipeline step needs a single call that either uploads the file and
hands back Slack's answer, or fails quietly with a log line. The pipeline
decides what a failed upload means, not the uploader.

HOW: upload_file_to_slack() resolves the filename, then runs the three
SlackUploadClient steps in order. Every exception raised along the way
(filesystem, Slack rejection, transfer failure, httpx errors) is caught
once here, logged, and turned into None. On success the CompletionResult
is returned and, when a PipelineContext is given, published under
FILE_UPLOAD_TO_SLACK_RESULT.

The module also carries the action's user-facing documentation
(description, details, authors, examples) used by the CLI.

RULES:
- Order is fixed: get upload URL → send bytes → complete upload
- No retries; the first failure ends the run
- Failure returns None; the reason only goes to the log
- The API token is never logged (only request.redacted() is)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import httpx

from slack_file_uploader import config
from slack_file_uploader.api.client import SlackUploadClient, SlackUploadError
from slack_file_uploader.api.models import CompletionResult, UploadRequest
from slack_file_uploader.core.filenames import display_name, display_type, resolve_filename
from slack_file_uploader.core.pipeline import FILE_UPLOAD_TO_SLACK_RESULT, PipelineContext

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Documentation
# ---------------------------------------------------------------------------

DESCRIPTION = "Upload a file to slack channel"
DETAILS = "Upload a file to slack channel or DM to a slack user"
AUTHORS: List[str] = ["crazymanish"]

EXAMPLES: List[str] = [
    "slack-file-uploader \\\n"
    "  --channels slack_channel_name \\\n"
    "  --file-path build/test.png",
    "slack-file-uploader \\\n"
    "  --title \"This is test title\" \\\n"
    "  --channels \"slack_channel_name1, slack_channel_name2\" \\\n"
    "  --file-path build/report.xml",
    "slack-file-uploader \\\n"
    "  --title \"This is test title\" \\\n"
    "  --initial-comment \"This is test initial comment\" \\\n"
    "  --channels slack_channel_name \\\n"
    "  --file-path build/screenshots.zip",
    "# Reply in a thread: pass the parent message's ts value\n"
    "slack-file-uploader \\\n"
    "  --title \"This is test title\" \\\n"
    "  --initial-comment \"This is test initial comment\" \\\n"
    "  --channels slack_channel_name \\\n"
    "  --file-path build/screenshots.zip \\\n"
    "  --thread-ts 1700000000.000100",
]


def is_supported(platform: Optional[str] = None) -> bool:
    """Uploading a file does not depend on the build platform."""
    return True


# ---------------------------------------------------------------------------
# Action
# ---------------------------------------------------------------------------


def upload_file_to_slack(
    request: UploadRequest,
    context: Optional[PipelineContext] = None,
    transport: Optional[httpx.BaseTransport] = None,
    base_url: Optional[str] = None,
) -> Optional[CompletionResult]:
    """Upload request.file_path to Slack and return the completion result.

    WHY: This is the single entry point the pipeline (and the CLI) calls.
    It turns the three-call protocol into "result or None".

    HOW: Reads the file size, asks for an upload URL, reads the file into
    memory and posts it, then completes the upload with the optional
    title/channels/comment/thread. Any exception is logged and swallowed
    into a None return.

    RULES:
    - Step 2 is never attempted if step 1 fails; step 3 never if step 2 fails
    - On success logs a success line and publishes to context (if given)
    - On failure context is left untouched

    Args:
        request: The frozen upload request.
        context: Optional pipeline context to publish the result into.
        transport: Optional httpx transport (tests inject a MockTransport).
        base_url: Slack API base URL; defaults to config.SLACK_API_BASE_URL.

    Returns:
        The CompletionResult, or None if any step failed.
    """
    logger.debug("Uploading to Slack: %s", request.redacted())

    try:
        file_path = Path(request.file_path)
        logger.debug(
            "Display metadata: name=%s type=%s",
            display_name(request.file_name, request.file_path),
            display_type(request.file_type, request.file_path),
        )
        upload_filename = resolve_filename(request.file_name, request.file_path)
        length = file_path.stat().st_size

        with SlackUploadClient(
            request.api_token,
            base_url=base_url or config.SLACK_API_BASE_URL,
            transport=transport,
        ) as client:
            upload = client.get_upload_url(upload_filename, length)
            logger.debug("Got upload URL for file %s", upload.file_id)

            with open(file_path, "rb") as f:
                content = f.read()
            client.send_file_bytes(upload.upload_url, content)
            logger.debug("Sent %d bytes for file %s", len(content), upload.file_id)

            result = client.complete_upload(
                upload.file_id,
                title=request.title,
                channels=request.channels,
                initial_comment=request.initial_comment,
                thread_ts=request.thread_ts,
            )
    except SlackUploadError as exc:
        logger.error("%s", exc)
        return None
    except Exception:
        logger.exception("Exception while uploading %s to Slack", request.file_path)
        return None

    logger.info("Successfully uploaded file to Slack! 🚀")
    if context is not None:
        context.set(FILE_UPLOAD_TO_SLACK_RESULT, result)
    return result
