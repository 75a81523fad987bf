"""Filename helpers for Slack uploads.

WHY: Slack uses the uploaded filename to pick a preview renderer and the
icon shown in the channel, so the name we send must carry the real
extension even when the user only gave a display name like "report".

HOW: resolve_filename() decides the name sent to files.getUploadURLExternal.
display_name() and display_type() derive looser labels used only in log
output.

RULES:
- resolve_filename: no name → basename of the path (with extension)
- resolve_filename: name without extension → name + the path's extension
- resolve_filename: name with extension → name unchanged
- display helpers never raise and never affect what is sent to Slack
"""

from __future__ import annotations

import os
from typing import Optional


def resolve_filename(provided_name: Optional[str], file_path: str) -> str:
    """Return the filename to send with the upload URL request.

    Examples:
        >>> resolve_filename("", "/a/b.png")
        'b.png'
        >>> resolve_filename("report", "/a/b.png")
        'report.png'
        >>> resolve_filename("report.xml", "/a/b.png")
        'report.xml'
    """
    if not provided_name:
        return os.path.basename(file_path)

    if not os.path.splitext(provided_name)[1]:
        return provided_name + os.path.splitext(file_path)[1]

    return provided_name


def display_name(provided_name: Optional[str], file_path: str) -> str:
    """Given name, or the path's basename without extension ("/x/shot.png" → "shot")."""
    if provided_name:
        return provided_name
    return os.path.splitext(os.path.basename(file_path))[0]


def display_type(provided_type: Optional[str], file_path: str) -> str:
    """Given type, or the path's extension without the dot ("/x/shot.png" → "png")."""
    if provided_type:
        return provided_type
    return os.path.splitext(file_path)[1][1:]
