"""Synchronous HTTP client for Slack's external file upload methods.

WHY: Slack uploads are a three-call protocol: ask for an upload URL, send
the bytes there, then complete the upload (optionally sharing it to
channels). This module wraps each call behind one client class so the
action (and tests) don't need to know HTTP details.

HOW: Uses httpx.Client for blocking HTTP. SlackUploadClient is a context
manager. Enter it to open the connection pool, exit to close it. Each
protocol step is a separate method:
get_upload_url → send_file_bytes → complete_upload.

RULES:
- Always use the context manager (with SlackUploadClient(...) as client:)
- Slack methods get the Bearer token per request; the upload URL never does
- Form-encoded bodies for the Slack methods, raw octet-stream for the bytes
- Steps 1 and 2 raise on failure; step 3 returns whatever Slack answered
- No retries and no custom timeouts (httpx defaults apply)
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

import httpx

from slack_file_uploader.api.models import (
    CompletionResult,
    UploadURLResponse,
    parse_json,
)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_SLACK_API_BASE_URL = "https://slack.com/api"

GET_UPLOAD_URL_METHOD = "files.getUploadURLExternal"
COMPLETE_UPLOAD_METHOD = "files.completeUploadExternal"

_OCTET_STREAM = "application/octet-stream"


class SlackUploadError(Exception):
    """Base class for upload failures detected by the client."""


class UploadURLError(SlackUploadError):
    """Raised when files.getUploadURLExternal does not return a usable URL.

    WHY: Slack reports problems (bad token, missing scope, invalid length)
    as HTTP 200 with {"ok": false, "error": ...}. The caller needs the
    parsed payload to log what Slack actually said.

    RULES:
    - payload is the parsed response body ({} if it was not JSON)
    """

    def __init__(self, payload: Dict[str, Any]) -> None:
        self.payload = payload
        super().__init__("Failed to get upload URL from Slack: {!r}".format(payload))


class FileTransferError(SlackUploadError):
    """Raised when the byte upload to the upload URL is not answered with 200.

    RULES:
    - status_code is the HTTP status returned by the upload host
    """

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(
            "File upload to Slack upload_url failed with status {}".format(status_code)
        )


class SlackUploadClient:
    """Blocking client for the three Slack external upload calls.

    WHY: Provides a small, typed interface for the upload workflow:
    get URL → send bytes → complete. Handles auth headers, encoding and
    response parsing.

    HOW: Wraps httpx.Client. The Slack base URL is set on the client so
    method calls use relative paths; the upload URL is absolute and is
    posted to as-is. A transport may be injected (tests use
    httpx.MockTransport).

    RULES:
    - Use as: with SlackUploadClient(token) as client: ...
    - base_url defaults to https://slack.com/api
    - No Authorization header is set on the client itself
    """

    def __init__(
        self,
        api_token: str,
        base_url: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._api_token = api_token
        self._base_url = (base_url or DEFAULT_SLACK_API_BASE_URL).rstrip("/")
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def __repr__(self) -> str:
        return "SlackUploadClient(base_url={!r})".format(self._base_url)

    def __enter__(self) -> SlackUploadClient:
        self._client = httpx.Client(base_url=self._base_url, transport=self._transport)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            self._client.close()
            self._client = None

    def _ensure_client(self) -> httpx.Client:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "SlackUploadClient must be used as a context manager: "
                "with SlackUploadClient(token) as client: ..."
            )
        return self._client

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": "Bearer {}".format(self._api_token)}

    # ------------------------------------------------------------------
    # Step 1: Request upload URL
    # ------------------------------------------------------------------

    def get_upload_url(self, filename: str, length: int) -> UploadURLResponse:
        """Ask Slack for a one-time upload URL and file ID.

        WHY: Slack no longer accepts file bytes on its API host. It hands
        out a pre-signed URL for the bytes and a file ID to reference them.

        HOW: Form-encoded POST to files.getUploadURLExternal with filename
        and length. The body is parsed leniently and validated.

        RULES:
        - filename is the resolved upload filename (with extension)
        - length is the exact byte size of the file
        - Raises UploadURLError unless ok, upload_url and file_id are all set
        - A non-JSON body counts as {} and fails validation

        Args:
            filename: Name Slack should store the file under.
            length: Size of the file in bytes.

        Returns:
            A valid UploadURLResponse.
        """
        client = self._ensure_client()
        resp = client.post(
            "/" + GET_UPLOAD_URL_METHOD,
            headers=self._auth_headers(),
            data={"filename": filename, "length": str(length)},
        )

        payload = parse_json(resp.text)
        upload = UploadURLResponse.from_dict(payload)
        if not upload.is_valid():
            raise UploadURLError(payload)
        return upload

    # ------------------------------------------------------------------
    # Step 2: Send file bytes
    # ------------------------------------------------------------------

    def send_file_bytes(self, upload_url: str, content: bytes) -> None:
        """POST the raw file content to the upload URL.

        WHY: The upload URL only accepts the bytes themselves; no auth,
        no multipart envelope.

        RULES:
        - Content-Type is application/octet-stream
        - The whole content is sent in one request (no chunking)
        - Any status other than exactly 200 raises FileTransferError
        """
        client = self._ensure_client()
        resp = client.post(
            upload_url,
            headers={"Content-Type": _OCTET_STREAM},
            content=content,
        )

        if resp.status_code != 200:
            raise FileTransferError(resp.status_code)

    # ------------------------------------------------------------------
    # Step 3: Complete upload
    # ------------------------------------------------------------------

    def complete_upload(
        self,
        file_id: str,
        title: Optional[str] = None,
        channels: Optional[str] = None,
        initial_comment: Optional[str] = None,
        thread_ts: Optional[str] = None,
    ) -> CompletionResult:
        """Finalize the upload and optionally share it.

        WHY: Until completed, an uploaded file is invisible. Completion is
        also where the file is attached to channels, a thread and a comment.

        HOW: Builds the form with build_completion_form() and POSTs it to
        files.completeUploadExternal. The response is wrapped as-is.

        RULES:
        - Returns a CompletionResult for any HTTP status
        - Slack's "ok" flag is not checked here

        Returns:
            CompletionResult with status, raw body and parsed JSON.
        """
        client = self._ensure_client()
        form = build_completion_form(
            file_id,
            title=title,
            channels=channels,
            initial_comment=initial_comment,
            thread_ts=thread_ts,
        )
        resp = client.post(
            "/" + COMPLETE_UPLOAD_METHOD,
            headers=self._auth_headers(),
            data=form,
        )
        return CompletionResult.from_response(resp)


# ---------------------------------------------------------------------------
# Payload helpers
# ---------------------------------------------------------------------------


def build_completion_form(
    file_id: str,
    title: Optional[str] = None,
    channels: Optional[str] = None,
    initial_comment: Optional[str] = None,
    thread_ts: Optional[str] = None,
) -> Dict[str, str]:
    """Assemble the form fields for files.completeUploadExternal.

    WHY: Slack treats a present-but-empty field differently from an
    absent one (an empty channels value is an error), so only provided
    values may be sent.

    HOW: files is a compact JSON array with one entry; title goes inside
    that entry. The other optional values become top-level fields.

    RULES:
    - files is always present: [{"id": file_id}] plus "title" if provided
    - channels, initial_comment, thread_ts only when provided
    - None and "" both mean "not provided"
    - channels is passed through unchanged (no splitting)
    """
    entry: Dict[str, str] = {"id": file_id}
    if title:
        entry["title"] = title

    form: Dict[str, str] = {"files": json.dumps([entry], separators=(",", ":"))}

    if channels:
        form["channels"] = channels
    if initial_comment:
        form["initial_comment"] = initial_comment
    if thread_ts:
        form["thread_ts"] = thread_ts

    return form
