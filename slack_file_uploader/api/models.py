"""Request and response dataclasses for the Slack external upload flow.

WHY: Slack's upload methods return loosely shaped JSON and the caller hands
us a bag of optional strings. Typed dataclasses make both explicit, keep the
API token out of repr() and logs, and give the action a stable result shape
to publish to the pipeline.

HOW: UploadRequest is the frozen input of one run. UploadURLResponse and
CompletionResult are built from raw responses via factory methods. JSON is
parsed with parse_json(), which never raises.

RULES:
- UploadRequest is immutable; api_token is excluded from repr()
- redacted() is the only form of a request that may be logged
- parse_json() returns {} for empty, invalid, or non-object JSON
- CompletionResult wraps any step-3 response, whatever its status
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

REDACTED = "********"
"""Placeholder shown instead of sensitive option values."""


def parse_json(text: Optional[str]) -> Dict[str, Any]:
    """Parse a response body into a dict, falling back to an empty dict.

    WHY: Slack answers with JSON, but proxies, upload hosts and error pages
    do not. A body we cannot read is treated as "no fields" so validation
    fails cleanly instead of crashing the run.

    RULES:
    - None or "" → {}
    - Invalid JSON → {}
    - Valid JSON that is not an object (list, string, number) → {}
    - Nesting too deep for the decoder → {}
    """
    if not text:
        return {}
    try:
        value = json.loads(text)
    except (ValueError, RecursionError):
        return {}
    if not isinstance(value, dict):
        return {}
    return value


@dataclass(frozen=True)
class UploadRequest:
    """Everything one upload run needs, fixed at call start.

    WHY: The action receives its inputs once and must not mutate them
    between phases. Freezing the dataclass makes that explicit.

    RULES:
    - api_token and file_path are required
    - channels is a comma-separated string, passed to Slack unchanged
    - file_type is accepted for display only; the protocol never sends it
    - None means "not provided" for every optional field
    """

    api_token: str = field(repr=False)
    file_path: str
    file_name: Optional[str] = None
    file_type: Optional[str] = None
    title: Optional[str] = None
    channels: Optional[str] = None
    initial_comment: Optional[str] = None
    thread_ts: Optional[str] = None

    def redacted(self) -> Dict[str, Any]:
        """Return a log-safe dict of the request with the token masked."""
        return {
            "api_token": REDACTED if self.api_token else "",
            "file_path": self.file_path,
            "file_name": self.file_name,
            "file_type": self.file_type,
            "title": self.title,
            "channels": self.channels,
            "initial_comment": self.initial_comment,
            "thread_ts": self.thread_ts,
        }


@dataclass
class UploadURLResponse:
    """Parsed body of files.getUploadURLExternal.

    RULES:
    - Missing fields default to False / "" so is_valid() can decide
    - raw keeps the whole parsed payload for the failure log line
    """

    ok: bool
    upload_url: str
    file_id: str
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> UploadURLResponse:
        return cls(
            ok=bool(data.get("ok")),
            upload_url=data.get("upload_url") or "",
            file_id=data.get("file_id") or "",
            raw=data,
        )

    def is_valid(self) -> bool:
        """True only when ok is truthy and both upload_url and file_id are set."""
        return bool(self.ok and self.upload_url and self.file_id)


@dataclass
class CompletionResult:
    """Outcome of files.completeUploadExternal, handed back to the pipeline.

    WHY: Later pipeline steps want the raw status and body (for their own
    checks) as well as the parsed payload (to read file IDs and permalinks).

    HOW: Built by from_response() from any httpx.Response. Slack's "ok"
    flag is not inspected here; callers see exactly what Slack returned.

    RULES:
    - status is the HTTP status code of the completion call
    - body is the raw response text, "" when empty
    - json is parse_json(body)
    """

    status: int
    body: str
    json: Dict[str, Any]

    @classmethod
    def from_response(cls, response: httpx.Response) -> CompletionResult:
        body = response.text or ""
        return cls(status=response.status_code, body=body, json=parse_json(body))

    def to_dict(self) -> Dict[str, Any]:
        """Return the pipeline-facing ``{status, body, json}`` mapping."""
        return {"status": self.status, "body": self.body, "json": self.json}
