"""Conversions between file URIs, path strings and Paths.

Command arguments arrive as Paths, plain or quoted path strings, file:// URIs,
or percent-encoded (sometimes doubly encoded) URIs.
"""

import re
from pathlib import Path
from urllib.parse import unquote
from urllib.parse import urlparse

from .normalize import normalize_import_spec

_WINDOWS_DRIVE = re.compile(r"^[A-Za-z]:[\\/]")


def _file_uri_to_path(uri: str) -> Path:
    parsed = urlparse(uri)
    path = unquote(parsed.path)
    # file:///C:/x parses to '/C:/x'
    if re.match(r"^/[A-Za-z]:/", path):
        path = path[1:]
    if parsed.netloc and parsed.netloc != "localhost":
        path = f"//{parsed.netloc}{path}"
    return Path(path)


def to_path(value: object) -> Path | None:
    """Normalize a path-like argument to a Path.

    Returns:
        Path for absolute paths and file:// URIs, None for anything else
    """
    if isinstance(value, Path):
        return value
    if not isinstance(value, str) or not value:
        return None

    text = normalize_import_spec(value)

    # Up to three rounds to undo double encoding
    for _ in range(3):
        if text.lower().startswith("file:"):
            return _file_uri_to_path(text)
        decoded = unquote(text)
        if decoded == text:
            break
        text = decoded

    if text.startswith("/") or _WINDOWS_DRIVE.match(text):
        return Path(text)
    return None


def to_uri(path: Path) -> str:
    """file:// URI for an absolute path."""
    return path.as_uri()
