"""Existence probing for candidate base paths.

Phase 1 checks a fixed suffix list concurrently but picks the winner by list
priority, never by completion order. Phase 2 scans the parent directory for
any file sharing the base name, which covers extensions outside the list.
"""

import asyncio
import logging
import os
from collections.abc import Sequence
from pathlib import Path

from .models import DEFAULT_EXTENSIONS
from .normalize import normalize_path

logger = logging.getLogger(__name__)


def _is_file(path: str) -> bool:
    return os.path.isfile(path)


def _scan_directory(base: str) -> Path | None:
    directory, name = os.path.split(base)
    if not name:
        return None
    try:
        with os.scandir(directory or ".") as entries:
            files = sorted(entry.name for entry in entries if entry.is_file())
    except OSError as e:
        logger.debug(f"[probe] cannot list {directory}: {e}")
        return None

    for filename in files:
        if filename.startswith(name):
            return normalize_path(os.path.join(directory, filename))
    return None


class ExtensionProber:
    """Finds the real file behind a candidate base path.

    Args:
        extensions: Suffixes appended to the base path, highest priority first
    """

    def __init__(self, extensions: Sequence[str] = DEFAULT_EXTENSIONS):
        self.extensions = tuple(extensions)

    async def probe(self, base_path: str | os.PathLike[str]) -> Path | None:
        """Return the first existing file for base_path, or None."""
        base = os.fspath(base_path)

        checks = await asyncio.gather(
            *(asyncio.to_thread(_is_file, base + ext) for ext in self.extensions),
            return_exceptions=True,
        )
        for ext, exists in zip(self.extensions, checks):
            if exists is True:
                found = normalize_path(base + ext)
                logger.debug(f"[probe] {base} -> {found}")
                return found

        found = await asyncio.to_thread(_scan_directory, base)
        if found is not None:
            logger.debug(f"[probe] {base} -> {found} (directory scan)")
        return found

    def __repr__(self) -> str:
        return f"ExtensionProber({len(self.extensions)} suffixes)"
