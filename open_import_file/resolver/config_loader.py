"""Configuration readers for path-mapping and bundler alias configs.

Two sources feed a ConfigSnapshot:
- Path mapping: compilerOptions.baseUrl/paths from the nearest tsconfig.json
  (or jsconfig.json), walking up from the requesting file to the project root.
- Bundler aliases: the literal resolve.alias object of a webpack/vite config at
  the project root, extracted by text matching. The config is never executed,
  so dynamic or conditional alias definitions are not supported.

Missing or malformed configs contribute nothing; errors never reach callers.
"""

import json
import logging
import os
import re
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from .cache import SnapshotCache
from .models import BUNDLER_CONFIG_FILES
from .models import PATH_MAPPING_FILES
from .models import ConfigSnapshot
from .normalize import normalize_path

logger = logging.getLogger(__name__)

# resolve: { ... alias: { <literal> } ... }
_ALIAS_BLOCK = re.compile(r"resolve\s*:\s*\{[\s\S]*?alias\s*:\s*(\{[\s\S]*?\})[\s\S]*?\}")

_COMMENT_TOKEN = re.compile(
    r"""
    "(?:[^"\\\n]|\\.)*"
    |'(?:[^'\\\n]|\\.)*'
    |`(?:[^`\\]|\\.)*`
    |//[^\n]*
    |/\*[\s\S]*?\*/
    """,
    re.VERBOSE,
)

_LITERAL_TOKEN = re.compile(
    r"""
    (?P<string>"(?:[^"\\\n]|\\.)*"|'(?:[^'\\\n]|\\.)*')
    |(?P<key>[A-Za-z_$][\w$-]*)(?=\s*:)
    |(?P<comma>,(?=\s*[}\]]))
    """,
    re.VERBOSE,
)


def strip_comments(text: str) -> str:
    """Remove // and /* */ comments outside of string literals."""
    return _COMMENT_TOKEN.sub(lambda m: "" if m.group(0).startswith("/") else m.group(0), text)


def js_literal_to_json(text: str, quote_keys: bool = True) -> str:
    """Best-effort conversion of a static JS/JSONC literal into strict JSON.

    Handles comments, single-quoted strings, unquoted identifier keys and
    trailing commas. Template literals and expressions are left alone, so the
    result fails to parse for anything dynamic.
    """

    def replace(match: re.Match[str]) -> str:
        token = match.group(0)
        if match.group("string") is not None:
            if token.startswith('"'):
                return token
            body = token[1:-1].replace("\\'", "'").replace('"', '\\"')
            return f'"{body}"'
        if match.group("key") is not None:
            return json.dumps(token) if quote_keys else token
        return ""

    return _LITERAL_TOKEN.sub(replace, strip_comments(text))


def _is_file(path: str | Path) -> bool:
    return os.path.isfile(path)


def parse_path_mapping(config_file: Path) -> tuple[Path | None, dict[str, tuple[str, ...]]]:
    """Read baseUrl and paths from a tsconfig-style file.

    Args:
        config_file: Absolute path of the config file

    Returns:
        Tuple of (absolute baseUrl or None, pattern -> replacement patterns)

    Raises:
        OSError: File unreadable
        ValueError: Not valid JSON (json.JSONDecodeError)
    """
    raw = config_file.read_text(encoding="utf-8-sig")
    config = json.loads(js_literal_to_json(raw, quote_keys=False))
    if not isinstance(config, dict):
        return None, {}

    # TODO: follow "extends" to inherit baseUrl/paths from a parent tsconfig
    compiler_options = config.get("compilerOptions")
    if not isinstance(compiler_options, dict):
        return None, {}

    base_url = None
    raw_base_url = compiler_options.get("baseUrl")
    if isinstance(raw_base_url, str):
        base_url = normalize_path(config_file.parent / raw_base_url)

    paths: dict[str, tuple[str, ...]] = {}
    raw_paths = compiler_options.get("paths")
    if isinstance(raw_paths, dict):
        for pattern, targets in raw_paths.items():
            if not isinstance(targets, list) or not all(isinstance(t, str) for t in targets):
                logger.debug(f"[config] ignoring malformed paths entry '{pattern}' in {config_file}")
                continue
            paths[pattern] = tuple(targets)

    return base_url, paths


def extract_alias_literal(text: str) -> dict[str, Any] | None:
    """Find and parse the literal resolve.alias object in bundler config source.

    Returns:
        Parsed alias object, or None if no literal block is found or it does not parse
    """
    match = _ALIAS_BLOCK.search(text)
    if not match:
        return None
    try:
        parsed = json.loads(js_literal_to_json(match.group(1)))
    except ValueError as e:
        logger.debug(f"[config] alias block is not a static literal: {e}")
        return None
    return parsed if isinstance(parsed, dict) else None


class ConfigLoader:
    """Loads ConfigSnapshots for resolution contexts, with TTL caching.

    The cache key is the path-mapping config chosen for the context (or the
    project root when there is none), so nested sub-projects sharing one
    workspace keep independent snapshots.
    """

    def __init__(
        self,
        cache: SnapshotCache | None = None,
        path_mapping_files: Sequence[str] = PATH_MAPPING_FILES,
        bundler_config_files: Sequence[str] = BUNDLER_CONFIG_FILES,
    ):
        self.cache = cache if cache is not None else SnapshotCache()
        self.path_mapping_files = tuple(path_mapping_files)
        self.bundler_config_files = tuple(bundler_config_files)

    def find_path_mapping_config(self, project_root: Path, requesting_file: Path | None = None) -> Path | None:
        """Find the nearest path-mapping config for a requesting file.

        Walks up from the file's directory to project_root (inclusive), then
        falls back to the config directly under project_root.

        Returns:
            Absolute config path, or None if no config applies
        """
        root = normalize_path(project_root)

        if requesting_file is not None:
            current = normalize_path(requesting_file).parent
            while current.is_relative_to(root):
                if found := self._config_in(current):
                    return found
                if current == root or current.parent == current:
                    break
                current = current.parent

        return self._config_in(root)

    def _config_in(self, directory: Path) -> Path | None:
        for name in self.path_mapping_files:
            candidate = directory / name
            if _is_file(candidate):
                return candidate
        return None

    def load(self, project_root: Path, requesting_file: Path | None = None) -> ConfigSnapshot:
        """Load (or reuse) the snapshot for a resolution context."""
        root = normalize_path(project_root)
        config_file = self.find_path_mapping_config(root, requesting_file)
        key = str(config_file or root)
        return self.cache.get_or_load(key, lambda: self._build_snapshot(root, config_file))

    def _build_snapshot(self, project_root: Path, config_file: Path | None) -> ConfigSnapshot:
        base_url = None
        paths: dict[str, tuple[str, ...]] = {}
        if config_file is not None:
            try:
                base_url, paths = parse_path_mapping(config_file)
            except (OSError, ValueError) as e:
                logger.debug(f"[config] failed to read {config_file}: {e}")

        aliases = self.load_bundler_aliases(project_root)

        logger.debug(
            f"[config] loaded snapshot for {config_file or project_root}: "
            f"{len(paths)} path mapping(s), {len(aliases)} bundler alias(es)"
        )
        return ConfigSnapshot(
            project_root=project_root,
            config_file=config_file,
            base_url=base_url,
            paths=paths,
            aliases=aliases,
        )

    def load_bundler_aliases(self, project_root: Path) -> dict[str, Path]:
        """Read resolve.alias from the first bundler config at the project root.

        Relative targets resolve against the project root; non-string values
        (e.g. ``false`` to ignore a module) are skipped.
        """
        config_path = next(
            (project_root / name for name in self.bundler_config_files if _is_file(project_root / name)),
            None,
        )
        if config_path is None:
            return {}

        try:
            text = config_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.debug(f"[config] failed to read {config_path}: {e}")
            return {}

        parsed = extract_alias_literal(text)
        if parsed is None:
            return {}

        aliases: dict[str, Path] = {}
        for key, value in parsed.items():
            if not isinstance(value, str):
                logger.debug(f"[config] skipping non-path alias '{key}' in {config_path.name}")
                continue
            aliases[key] = normalize_path(project_root / value)
        return aliases
