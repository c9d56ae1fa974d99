"""Alias matching: non-relative specifiers to candidate base paths.

Bundler aliases are checked before path mappings, and within each source
longer keys are checked first so that '@app/ui' outranks '@app'.
"""

import logging
import os
import re
from collections.abc import Iterable
from collections.abc import Mapping
from collections.abc import Sequence
from functools import lru_cache
from pathlib import Path

from .config_loader import ConfigLoader
from .models import ConfigSnapshot
from .normalize import normalize_path

logger = logging.getLogger(__name__)


@lru_cache(maxsize=256)
def compile_path_pattern(key: str) -> re.Pattern[str] | None:
    """Compile a single-wildcard path-mapping key to an anchored regex.

    Returns:
        Pattern capturing the '*' text, or None if the key has more than one '*'
    """
    if key.count("*") != 1:
        return None
    prefix, suffix = key.split("*")
    return re.compile(f"^{re.escape(prefix)}(.*){re.escape(suffix)}$")


def _longest_first(keys: Iterable[str]) -> list[str]:
    return sorted(keys, key=len, reverse=True)


def match_bundler_aliases(spec: str, aliases: Mapping[str, Path]) -> list[Path]:
    """One candidate per alias key equal to spec or prefixing it with '/'."""
    candidates = []
    for alias in _longest_first(aliases):
        if spec == alias:
            remainder = ""
        elif spec.startswith(alias + "/"):
            remainder = spec[len(alias) + 1 :]
        else:
            continue
        # Remainder always stays under the target, even with extra slashes
        candidates.append(Path(os.path.join(aliases[alias], remainder.lstrip("/"))))
    return candidates


def match_path_mappings(spec: str, paths: Mapping[str, Sequence[str]], base: Path) -> list[Path]:
    """Candidates from tsconfig-style paths, targets resolved against base."""
    candidates = []
    for key in _longest_first(paths):
        if "*" not in key:
            if spec != key:
                continue
            replacements = list(paths[key])
        else:
            pattern = compile_path_pattern(key)
            if pattern is None:
                logger.debug(f"[resolve] ignoring path mapping with multiple wildcards: {key}")
                continue
            match = pattern.match(spec)
            if not match:
                continue
            wildcard = match.group(1)
            replacements = [target.replace("*", wildcard, 1) for target in paths[key]]

        candidates.extend(base / replacement for replacement in replacements)
    return candidates


def match_snapshot(spec: str, snapshot: ConfigSnapshot) -> list[Path]:
    """Ordered unique candidates for spec from both alias sources."""
    results = match_bundler_aliases(spec, snapshot.aliases)
    results += match_path_mappings(spec, snapshot.paths, snapshot.paths_base)

    unique: dict[str, Path] = {}
    for candidate in results:
        normalized = normalize_path(candidate)
        unique.setdefault(os.fspath(normalized), normalized)
    return list(unique.values())


class AliasMatcher:
    """Produces candidate base paths (no extension) for aliased specifiers."""

    def __init__(self, loader: ConfigLoader | None = None):
        self.loader = loader or ConfigLoader()

    def match(self, spec: str, project_root: Path, requesting_file: Path | None = None) -> list[Path]:
        snapshot = self.loader.load(project_root, requesting_file)
        candidates = match_snapshot(spec, snapshot)
        logger.debug(f"[resolve] alias candidates for {spec}: {[str(c) for c in candidates]}")
        return candidates
