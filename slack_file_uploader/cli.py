"""Command-line interface for the Slack File Uploader.

WHY: Pipelines that are plain shell scripts need to upload artifacts to
Slack without writing Python. The CLI maps flags (or FL_FILE_UPLOAD_TO_SLACK_*
environment variables) onto an UploadRequest and runs the action.

HOW: Uses argparse. Every option in config.OPTIONS becomes a --flag with
default None so unset flags fall back to the environment in
config.build_request(). Logging goes to stderr; the result JSON goes to
stdout so it can be piped into jq or a later step.

RULES:
- Exit 0 and print {"status", "body", "json"} on success
- Exit 1 when a required option is missing or the upload produced no result
- --list-options and --examples print documentation and exit 0
- Logging is configured here only (the library never configures handlers)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from slack_file_uploader import __version__
from slack_file_uploader.action import DESCRIPTION, DETAILS, EXAMPLES, upload_file_to_slack
from slack_file_uploader.config import OPTIONS, ConfigError, build_request, describe_options


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout, which carries the result JSON.
    """
    print(msg, file=sys.stderr, flush=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable: tests can inspect the parser without running an upload.

    HOW: One --flag per entry in config.OPTIONS (underscores become
    dashes), plus the documentation and verbosity switches.

    RULES:
    - All option flags default to None (env fallback happens later)
    - The token flag exists but the env var is the recommended way
    """
    parser = argparse.ArgumentParser(
        prog="slack-file-uploader",
        description="{}. {}.".format(DESCRIPTION, DETAILS),
    )

    for option in OPTIONS:
        help_text = "{} (env: {})".format(option.description, option.env_name)
        if not option.optional:
            help_text += ", required"
        parser.add_argument(
            "--" + option.key.replace("_", "-"),
            dest=option.key,
            default=None,
            help=help_text,
        )

    parser.add_argument(
        "--list-options",
        action="store_true",
        help="Print all recognized options with their environment variables and exit.",
    )

    parser.add_argument(
        "--examples",
        action="store_true",
        help="Print example invocations and exit.",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s {}".format(__version__),
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    WHY: This is the function that __main__.py and the console script call.

    HOW: Parses arguments, handles documentation modes, builds the request,
    runs the upload and prints the result.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list_options:
        for line in describe_options():
            print(line)
        return

    if args.examples:
        print("\n\n".join(EXAMPLES))
        return

    _configure_logging(args.verbose)

    values = {option.key: getattr(args, option.key) for option in OPTIONS}
    try:
        request = build_request(values)
    except ConfigError as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)

    _status("Uploading {} to Slack...".format(request.file_path))
    result = upload_file_to_slack(request)
    if result is None:
        print("Error: Upload to Slack failed (see log above).", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
