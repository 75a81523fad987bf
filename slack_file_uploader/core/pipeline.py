"""Shared values passed between steps of one pipeline run.

WHY: Later steps of a release pipeline want to read what the upload step
produced (file ID, permalink, HTTP status) without re-running it. Instead
of a process-wide global, the caller owns a PipelineContext and hands it
to each step explicitly.

HOW: A thin wrapper around a dict keyed by well-known string identifiers.
Steps write with set(); later steps read with get().

RULES:
- One context per pipeline run, owned by the caller
- Writing an existing key overwrites it
- No locking; a context is not shared across threads
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

FILE_UPLOAD_TO_SLACK_RESULT = "FILE_UPLOAD_TO_SLACK_RESULT"
"""Key under which the upload action publishes its CompletionResult."""


@dataclass
class PipelineContext:
    """Mutable mapping of results shared by the steps of one run."""

    shared_values: Dict[str, Any] = field(default_factory=dict)

    def set(self, key: str, value: Any) -> None:
        self.shared_values[key] = value

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        return self.shared_values.get(key, default)

    def __contains__(self, key: object) -> bool:
        return key in self.shared_values
