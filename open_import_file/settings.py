"""Settings manager for settings.yaml files.

Merges two scopes (later overrides earlier):
- User global (~/.open-import-file/settings.yaml)
- Project (<root>/.open-import-file/settings.yaml)

The ``resolver:`` section is validated into ResolverSettings. The
OPEN_IMPORT_FILE_DEBUG environment variable overrides ``resolver.debug``.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .resolver.models import ResolverSettings

logger = logging.getLogger(__name__)

SETTINGS_DIR_NAME = ".open-import-file"
DEBUG_ENV_VAR = "OPEN_IMPORT_FILE_DEBUG"

_TRUTHY = {"1", "true", "yes", "on"}


def debug_from_env() -> bool | None:
    """Debug flag from the environment, or None when unset."""
    value = os.environ.get(DEBUG_ENV_VAR)
    if value is None:
        return None
    return value.strip().lower() in _TRUTHY


class SettingsManager:
    """Reads resolver settings across user/project scopes."""

    def __init__(self, project_dir: Path | None = None, user_dir: Path | None = None):
        """Initialize settings manager with standard paths.

        Args:
            project_dir: Project root holding .open-import-file/ (default: cwd)
            user_dir: Directory holding user settings (default: ~/.open-import-file)
        """
        if project_dir is None:
            project_dir = Path.cwd()
        if user_dir is None:
            user_dir = Path.home() / SETTINGS_DIR_NAME

        self.user_settings_file = user_dir / "settings.yaml"
        self.project_settings_file = project_dir / SETTINGS_DIR_NAME / "settings.yaml"

    def get_merged_settings(self) -> dict[str, Any]:
        """Get merged settings from all scopes.

        Returns:
            Merged settings dictionary
        """
        merged: dict[str, Any] = {}
        for path in (self.user_settings_file, self.project_settings_file):
            settings = self._read_settings(path)
            if settings:
                merged = self._merge_scope(merged, settings)
        return merged

    def get_resolver_settings(self) -> ResolverSettings:
        """Validated resolver settings; defaults if the files are invalid."""
        section = self.get_merged_settings().get("resolver") or {}
        if not isinstance(section, dict):
            logger.warning(f"Ignoring non-mapping 'resolver' settings section: {section!r}")
            section = {}

        if (debug := debug_from_env()) is not None:
            section = {**section, "debug": debug}

        try:
            return ResolverSettings(**section)
        except ValidationError as e:
            logger.warning(f"Invalid resolver settings, using defaults: {e}")
            return ResolverSettings(debug=bool(section.get("debug", False)))

    def _read_settings(self, path: Path) -> dict[str, Any] | None:
        """Read settings from YAML file.

        Args:
            path: Path to settings file

        Returns:
            Settings dict or None if the file doesn't exist or can't be parsed
        """
        if not path.exists():
            return None

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to read settings from {path}: {e}")
            return None

        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring settings file {path}: top level is not a mapping")
            return None
        return data

    def _merge_scope(self, lower: dict[str, Any], higher: dict[str, Any]) -> dict[str, Any]:
        """Lay a higher-precedence scope (project over user) onto a lower one.

        Nested mappings such as ``resolver:`` merge key by key, so a project file
        can override one resolver option and inherit the rest from the user file.
        Lists and scalars from the higher scope replace the lower value outright.
        """
        merged = dict(lower)
        for key, value in higher.items():
            inherited = merged.get(key)
            if isinstance(inherited, dict) and isinstance(value, dict):
                value = self._merge_scope(inherited, value)
            merged[key] = value
        return merged
