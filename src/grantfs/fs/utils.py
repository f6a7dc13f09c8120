"""Path utilities and name validation for granted trees."""

from __future__ import annotations

import mimetypes
from urllib.parse import unquote

SEPARATOR = "/"

DEFAULT_MIME_TYPE = "application/octet-stream"

MAX_NAME_LENGTH = 255


# =============================================================================
# Path Utilities
# =============================================================================


def normalize_segments(raw: str | None) -> list[str]:
    """Normalize a tree-relative path into its list of segments.

    - Trims surrounding whitespace
    - Treats backslashes as separators
    - Drops leading, trailing and repeated separators
    - Never interprets ``.`` or ``..``

    Examples:
        normalize_segments("a\\\\b//c/") -> ["a", "b", "c"]
        normalize_segments("/a/b/c") -> ["a", "b", "c"]
        normalize_segments("   ") -> []
    """
    if not raw:
        return []

    path = raw.strip().replace("\\", SEPARATOR).strip(SEPARATOR)
    if not path:
        return []

    return [segment for segment in path.split(SEPARATOR) if segment.strip()]


def split_leaf(segments: list[str]) -> tuple[list[str], str]:
    """Split segments into (parent_segments, leaf_name).

    Examples:
        split_leaf(["a", "b", "f.bin"]) -> (["a", "b"], "f.bin")
        split_leaf([]) -> ([], "")
    """
    if not segments:
        return [], ""
    return segments[:-1], segments[-1]


def join_segments(segments: list[str]) -> str:
    """Render segments back to a display path (``""`` for the root)."""
    return SEPARATOR.join(segments)


def validate_name(name: str) -> tuple[bool, str]:
    """Validate a single entry name for create and rename.

    Returns:
        (is_valid, error_message) - error_message is empty if valid
    """
    if not name or not name.strip():
        return False, "Name is empty"

    if SEPARATOR in name or "\\" in name:
        return False, f"Name contains a path separator: {name}"

    for ch in name:
        code = ord(ch)
        if code == 0:
            return False, "Name contains null bytes"
        if 0x01 <= code <= 0x1F:
            return False, f"Name contains control character: 0x{code:02x}"

    if len(name) > MAX_NAME_LENGTH:
        return False, f"Name too long (max {MAX_NAME_LENGTH} characters)"

    return True, ""


def last_path_component(identifier: str) -> str:
    """Last non-empty ``/``-separated component of an identifier, URL-decoded."""
    parts = [p for p in identifier.strip().split(SEPARATOR) if p]
    if not parts:
        return ""
    return unquote(parts[-1]).strip()


def guess_mime_type(filename: str) -> str:
    """Guess the MIME type of a file based on its name."""
    mime_type, _ = mimetypes.guess_type(filename)
    return mime_type or DEFAULT_MIME_TYPE
