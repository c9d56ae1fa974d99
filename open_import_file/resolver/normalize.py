"""Import specifier and path normalization helpers."""

import os
from pathlib import Path

_QUOTES = ("'", '"')


def normalize_import_spec(spec: str) -> str:
    """Strip one layer of matching straight quotes from an import specifier.

    Anything else (mismatched quotes, a lone quote) is returned unchanged.
    """
    if len(spec) >= 2 and spec[0] in _QUOTES and spec[-1] == spec[0]:
        return spec[1:-1]
    return spec


def is_relative_spec(spec: str) -> bool:
    return spec.startswith(".")


def base_name_from_spec(spec: str) -> str:
    """Final path segment of a specifier.

    Example: '@/utils/helpers' -> 'helpers', './file' -> 'file'
    """
    return spec.split("/")[-1] or spec


def normalize_path(path: str | os.PathLike[str]) -> Path:
    """Absolute, normalized form of a path (symlinks are not resolved)."""
    return Path(os.path.normpath(os.path.abspath(os.fspath(path))))
