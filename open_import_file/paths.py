"""CLI path policy and dependency injection helpers.

Library classes receive folders and settings via injection; this module
provides the CLI's choices.
"""

from collections.abc import Sequence
from pathlib import Path

from .resolver import ImportResolver
from .resolver import ResolverSettings
from .resolver import Workspace
from .resolver.normalize import normalize_path
from .settings import SettingsManager


def get_workspace_folders(roots: Sequence[str | Path] = (), requesting_file: Path | None = None) -> list[Path]:
    """Workspace folders for a CLI invocation.

    Explicit --root values win; otherwise the current directory when it
    contains the requesting file, else the requesting file's directory.
    """
    if roots:
        return [normalize_path(root) for root in roots]

    cwd = normalize_path(Path.cwd())
    if requesting_file is None or normalize_path(requesting_file).is_relative_to(cwd):
        return [cwd]
    return [normalize_path(requesting_file).parent]


def create_settings_manager(project_dir: Path | None = None) -> SettingsManager:
    return SettingsManager(project_dir=project_dir)


def create_resolver(
    roots: Sequence[str | Path] = (),
    requesting_file: Path | None = None,
    settings: ResolverSettings | None = None,
) -> ImportResolver:
    """Build an ImportResolver with CLI workspace and settings policy."""
    workspace = Workspace(get_workspace_folders(roots, requesting_file))
    if settings is None:
        settings = create_settings_manager(workspace.root_for(requesting_file)).get_resolver_settings()
    return ImportResolver(workspace=workspace, settings=settings)
