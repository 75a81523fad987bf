"""Configuration constants, option table, and .env loading.

WHY: The uploader runs inside CI pipelines where values arrive either as
explicit arguments or as environment variables set by the pipeline. Keeping
the option table as plain data (name, env var, description, flags) lets the
CLI, the docs output and request building share one source of truth.

HOW: python-dotenv loads the .env file on import. OPTIONS lists every
recognized option. build_request() merges explicit values over the
environment, checks required options, and returns a frozen UploadRequest.

RULES:
- Explicit values win over environment values
- Empty strings count as unset
- api_token falls back to SLACK_API_TOKEN when its own env var is unset
- Sensitive options are never printed or logged in clear text
- Missing required options raise ConfigError before any network call
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from dotenv import load_dotenv

from slack_file_uploader.api.client import DEFAULT_SLACK_API_BASE_URL
from slack_file_uploader.api.models import REDACTED, UploadRequest

# Load .env from the working directory (where the pipeline runs)
load_dotenv()

# ---------------------------------------------------------------------------
# API configuration defaults
# ---------------------------------------------------------------------------

SLACK_API_BASE_URL = os.getenv("SLACK_API_BASE_URL", DEFAULT_SLACK_API_BASE_URL)

FALLBACK_TOKEN_ENV = "SLACK_API_TOKEN"
"""Generic Slack token variable used when the action-specific one is unset."""


class ConfigError(ValueError):
    """Raised when a required option has no value.

    RULES:
    - Message names the option and the env var that would satisfy it
    """


@dataclass(frozen=True)
class ConfigOption:
    """One recognized option of the upload action.

    RULES:
    - key matches the UploadRequest field name
    - env_name is checked when no explicit value is given
    - sensitive options are shown as REDACTED wherever values are displayed
    """

    key: str
    env_name: str
    description: str
    optional: bool = True
    sensitive: bool = False


OPTIONS: List[ConfigOption] = [
    ConfigOption(
        key="api_token",
        env_name="FL_FILE_UPLOAD_TO_SLACK_BOT_TOKEN",
        description="Slack bot token",
        optional=False,
        sensitive=True,
    ),
    ConfigOption(
        key="channels",
        env_name="FL_FILE_UPLOAD_TO_SLACK_CHANNELS",
        description="Comma-separated list of slack #channel names where the file will be shared",
        optional=False,
    ),
    ConfigOption(
        key="file_path",
        env_name="FL_FILE_UPLOAD_TO_SLACK_FILE_PATH",
        description="Relative file path which will upload to slack",
        optional=False,
    ),
    ConfigOption(
        key="file_name",
        env_name="FL_FILE_UPLOAD_TO_SLACK_FILE_NAME",
        description="Optional filename of the file",
    ),
    ConfigOption(
        key="file_type",
        env_name="FL_FILE_UPLOAD_TO_SLACK_FILE_TYPE",
        description="Optional filetype of the file",
    ),
    ConfigOption(
        key="title",
        env_name="FL_FILE_UPLOAD_TO_SLACK_TITLE",
        description="Optional title of the file",
    ),
    ConfigOption(
        key="initial_comment",
        env_name="FL_FILE_UPLOAD_TO_SLACK_INITIAL_COMMENT",
        description="Optional message text introducing the file",
    ),
    ConfigOption(
        key="thread_ts",
        env_name="FL_FILE_UPLOAD_TO_SLACK_THREAD_TS",
        description="Provide another message's ts value to make this message a reply",
    ),
]

OPTIONS_BY_KEY: Dict[str, ConfigOption] = {opt.key: opt for opt in OPTIONS}


def _clean(value: Optional[str]) -> Optional[str]:
    """Normalize an option value: empty or whitespace-only strings become None."""
    if value is None:
        return None
    if not str(value).strip():
        return None
    return str(value)


def resolve_option(
    option: ConfigOption,
    values: Mapping[str, Optional[str]],
    environ: Mapping[str, str],
) -> Optional[str]:
    """Resolve one option from explicit values, then the environment.

    RULES:
    - Explicit value (non-empty) wins
    - Then option.env_name
    - api_token additionally falls back to SLACK_API_TOKEN
    - Returns None when nothing is set
    """
    value = _clean(values.get(option.key))
    if value is not None:
        return value

    value = _clean(environ.get(option.env_name))
    if value is not None:
        return value

    if option.key == "api_token":
        return _clean(environ.get(FALLBACK_TOKEN_ENV))

    return None


def build_request(
    values: Optional[Mapping[str, Optional[str]]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> UploadRequest:
    """Build an UploadRequest from explicit values and the environment.

    WHY: The pipeline may set some options as arguments and others as
    environment variables. This merges both and fails early, with a clear
    message, when a required option is missing.

    HOW: Resolves every option in OPTIONS with resolve_option(), collects
    missing required ones, and raises ConfigError listing all of them.

    RULES:
    - Keys in values that are not recognized options are ignored
    - All missing required options are reported together
    - environ defaults to os.environ (already populated by python-dotenv)

    Args:
        values: Explicit option values keyed by option key.
        environ: Environment mapping to fall back to.

    Returns:
        A frozen UploadRequest.
    """
    values = values or {}
    environ = os.environ if environ is None else environ

    resolved: Dict[str, Optional[str]] = {}
    missing: List[str] = []
    for option in OPTIONS:
        value = resolve_option(option, values, environ)
        if value is None and not option.optional:
            missing.append("{} (env: {})".format(option.key, option.env_name))
        resolved[option.key] = value

    if missing:
        raise ConfigError("Missing required option(s): {}".format(", ".join(missing)))

    return UploadRequest(**resolved)


def describe_options(environ: Optional[Mapping[str, str]] = None) -> List[str]:
    """Return one human-readable line per option, with its current env value.

    RULES:
    - Sensitive values are shown as REDACTED when set
    - Unset values are shown as "-"
    """
    environ = os.environ if environ is None else environ
    lines: List[str] = []
    for option in OPTIONS:
        current = resolve_option(option, {}, environ)
        if current is None:
            shown = "-"
        elif option.sensitive:
            shown = REDACTED
        else:
            shown = current
        lines.append(
            "{:<16} {:<40} {:<9} {}  [{}]".format(
                option.key,
                option.env_name,
                "optional" if option.optional else "required",
                option.description,
                shown,
            )
        )
    return lines
