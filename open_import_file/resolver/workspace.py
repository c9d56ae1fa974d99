"""Workspace folders and workspace-wide file search."""

import asyncio
import logging
import os
import re
from collections.abc import Sequence
from functools import lru_cache
from pathlib import Path
from typing import Protocol

from .normalize import normalize_path

logger = logging.getLogger(__name__)


class Workspace:
    """The set of folders the resolver works within.

    Args:
        folders: Workspace folders (default: current working directory)
    """

    def __init__(self, folders: Sequence[str | os.PathLike[str]] | None = None):
        resolved = [normalize_path(folder) for folder in folders or []]
        self.folders: list[Path] = resolved or [normalize_path(Path.cwd())]

    def root_for(self, path: str | os.PathLike[str] | None = None) -> Path:
        """Project root for a file: the innermost folder containing it, else the first folder."""
        if path is not None:
            target = normalize_path(path)
            containing = [folder for folder in self.folders if target.is_relative_to(folder)]
            if containing:
                return max(containing, key=lambda folder: len(folder.parts))
        return self.folders[0]

    def __repr__(self) -> str:
        return f"Workspace({[str(f) for f in self.folders]})"


@lru_cache(maxsize=128)
def glob_to_regex(pattern: str) -> re.Pattern[str]:
    """Translate a workspace glob to a regex over POSIX relative paths.

    '**/' matches any directory prefix (including none), '**' matches anything,
    '*' and '?' stay within one path segment.
    """
    parts = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**/", i):
            parts.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("**", i):
            parts.append(".*")
            i += 2
        elif pattern[i] == "*":
            parts.append("[^/]*")
            i += 1
        elif pattern[i] == "?":
            parts.append("[^/]")
            i += 1
        else:
            parts.append(re.escape(pattern[i]))
            i += 1
    return re.compile("^" + "".join(parts) + "$")


class WorkspaceFileSearch(Protocol):
    async def find_files(self, include: str, exclude: str | None = None, max_results: int = 10) -> list[Path]: ...


class GlobFileSearch:
    """Glob search over workspace folders, excluded directories pruned.

    Folders and entries are visited in sorted order so results are stable.
    """

    def __init__(self, folders: Sequence[str | os.PathLike[str]]):
        self.folders = [normalize_path(folder) for folder in folders]

    async def find_files(self, include: str, exclude: str | None = None, max_results: int = 10) -> list[Path]:
        return await asyncio.to_thread(self._walk, include, exclude, max_results)

    def _walk(self, include: str, exclude: str | None, max_results: int) -> list[Path]:
        include_re = glob_to_regex(include)
        exclude_re = glob_to_regex(exclude) if exclude else None
        results: list[Path] = []

        for folder in self.folders:
            for dirpath, dirnames, filenames in os.walk(folder):
                rel_dir = Path(dirpath).relative_to(folder).as_posix()
                prefix = "" if rel_dir == "." else rel_dir + "/"

                if exclude_re is not None:
                    dirnames[:] = [d for d in dirnames if not exclude_re.match(f"{prefix}{d}/")]
                dirnames.sort()

                for filename in sorted(filenames):
                    rel_path = prefix + filename
                    if not include_re.match(rel_path):
                        continue
                    if exclude_re is not None and exclude_re.match(rel_path):
                        continue
                    results.append(Path(dirpath) / filename)
                    if len(results) >= max_results:
                        return results

        logger.debug(f"[search] {include} -> {len(results)} match(es)")
        return results
