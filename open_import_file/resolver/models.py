"""Data models for import resolution.

- ConfigSnapshot: immutable view of a project's path-mapping and bundler aliases
- CacheEntry: a snapshot with the time it was built
- ResolverSettings: tunables for probing, caching and workspace search
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator

DEFAULT_EXTENSIONS: tuple[str, ...] = (
    "",
    ".ts",
    ".js",
    ".tsx",
    ".jsx",
    ".json",
    # image / asset extensions
    ".png",
    ".jpg",
    ".jpeg",
    ".svg",
    ".webp",
    ".gif",
    ".bmp",
    ".ico",
    "/index.ts",
    "/index.js",
    "/index.png",
    "/index.jpg",
    "/index.svg",
)

PATH_MAPPING_FILES: tuple[str, ...] = ("tsconfig.json", "jsconfig.json")

BUNDLER_CONFIG_FILES: tuple[str, ...] = (
    "webpack.config.js",
    "webpack.config.cjs",
    "webpack.config.mjs",
    "webpack.config.ts",
    "vite.config.js",
    "vite.config.ts",
)

DEFAULT_CACHE_TTL_SECONDS = 5 * 60


def _absolute(path: Path) -> Path:
    if not path.is_absolute():
        raise ValueError(f"Expected an absolute path, got '{path}'")
    return Path(os.path.normpath(path))


class ConfigSnapshot(BaseModel):
    """Alias configuration for one resolution context.

    Attributes:
        project_root: Workspace folder the snapshot was loaded for
        config_file: Path-mapping config used (tsconfig.json/jsconfig.json), if any
        base_url: compilerOptions.baseUrl resolved against the config directory
        paths: compilerOptions.paths, pattern -> replacement patterns (verbatim)
        aliases: Bundler resolve.alias, literal prefix -> absolute directory
    """

    model_config = ConfigDict(frozen=True)

    project_root: Path
    config_file: Path | None = None
    base_url: Path | None = None
    paths: dict[str, tuple[str, ...]] = Field(default_factory=dict)
    aliases: dict[str, Path] = Field(default_factory=dict)

    @field_validator("project_root", "config_file", "base_url")
    @classmethod
    def _check_absolute(cls, value: Path | None) -> Path | None:
        if value is None:
            return None
        return _absolute(value)

    @field_validator("aliases")
    @classmethod
    def _check_alias_targets(cls, value: dict[str, Path]) -> dict[str, Path]:
        return {key: _absolute(target) for key, target in value.items()}

    @property
    def paths_base(self) -> Path:
        """Directory that path-mapping replacement patterns resolve against."""
        if self.base_url is not None:
            return self.base_url
        if self.config_file is not None:
            return self.config_file.parent
        return self.project_root

    @property
    def is_empty(self) -> bool:
        return not self.paths and not self.aliases


@dataclass(frozen=True)
class CacheEntry:
    """Cached snapshot with its creation time (clock seconds)."""

    snapshot: ConfigSnapshot
    created_at: float


class ResolverSettings(BaseModel):
    """Tunables for the resolution engine."""

    cache_ttl_seconds: float = Field(DEFAULT_CACHE_TTL_SECONDS, ge=0, description="Config snapshot time-to-live")
    extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXTENSIONS), description="Suffixes probed in priority order"
    )
    path_mapping_files: list[str] = Field(
        default_factory=lambda: list(PATH_MAPPING_FILES), description="Path-mapping config names, per directory"
    )
    bundler_config_files: list[str] = Field(
        default_factory=lambda: list(BUNDLER_CONFIG_FILES), description="Bundler configs tried at the project root"
    )
    search_exclude: str | None = Field("**/node_modules/**", description="Glob excluded from workspace search")
    search_max_results: int = Field(10, ge=1, description="Workspace search result cap")
    debug: bool = Field(False, description="Verbose resolution trace logging")
