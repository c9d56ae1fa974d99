"""Import resolution orchestrator.

Resolution order (first match wins):
1. Relative specifiers ('./x', '../x') against the requesting file's directory.
   These never fall through: a missing relative target is a broken reference.
2. Bundler aliases, then tsconfig/jsconfig path mappings.
3. Workspace-wide search for a file named like the specifier's last segment.
4. Otherwise the specifier is an external package and is left unresolved.

Failures inside any phase are logged at debug level and treated as "no match";
callers only ever see a Path or None.
"""

import asyncio
import logging
import os
from pathlib import Path

from .alias import AliasMatcher
from .cache import SnapshotCache
from .config_loader import ConfigLoader
from .models import ResolverSettings
from .normalize import base_name_from_spec
from .normalize import is_relative_spec
from .normalize import normalize_import_spec
from .normalize import normalize_path
from .prober import ExtensionProber
from .uri import to_path
from .workspace import GlobFileSearch
from .workspace import Workspace
from .workspace import WorkspaceFileSearch

logger = logging.getLogger(__name__)

PACKAGE_LOGGER = "open_import_file"


class ImportResolver:
    """Resolves import specifiers to files on disk.

    Args:
        workspace: Workspace folders (default: current directory)
        settings: Resolver tunables (default: ResolverSettings())
        loader: Config loader; built from settings when omitted
        prober: Extension prober; built from settings when omitted
        file_search: Workspace search capability; GlobFileSearch by default
    """

    def __init__(
        self,
        workspace: Workspace | None = None,
        settings: ResolverSettings | None = None,
        loader: ConfigLoader | None = None,
        prober: ExtensionProber | None = None,
        file_search: WorkspaceFileSearch | None = None,
    ):
        self.workspace = workspace or Workspace()
        self.settings = settings or ResolverSettings()
        self.loader = loader or ConfigLoader(
            cache=SnapshotCache(ttl_seconds=self.settings.cache_ttl_seconds),
            path_mapping_files=self.settings.path_mapping_files,
            bundler_config_files=self.settings.bundler_config_files,
        )
        self.matcher = AliasMatcher(self.loader)
        self.prober = prober or ExtensionProber(self.settings.extensions)
        self.file_search = file_search or GlobFileSearch(self.workspace.folders)
        if self.settings.debug:
            logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG)

    async def resolve(self, spec: str, requesting_file: str | os.PathLike[str] | None = None) -> Path | None:
        """Resolve spec as imported from requesting_file.

        Returns:
            Absolute path of the imported file, or None if unresolved
        """
        try:
            return await self._resolve(spec, requesting_file)
        except Exception as e:
            logger.debug(f"[resolve] {spec!r} failed: {e}", exc_info=True)
            return None

    async def _resolve(self, spec: str, requesting_file: str | os.PathLike[str] | None) -> Path | None:
        source = normalize_path(requesting_file) if requesting_file is not None else None
        logger.debug(f"[resolve] spec={spec!r} from={source}")
        spec = normalize_import_spec(spec)
        if not spec:
            return None

        if is_relative_spec(spec):
            return await self._resolve_relative(spec, source)

        if found := await self._resolve_alias(spec, source):
            return found

        if found := await self._search_workspace(spec):
            return found

        logger.debug(f"[resolve] {spec} -> external package, not resolved")
        return None

    async def _resolve_relative(self, spec: str, source: Path | None) -> Path | None:
        if source is None:
            logger.debug(f"[resolve] relative spec {spec} without a requesting file")
            return None
        try:
            found = await self.prober.probe(normalize_path(source.parent / spec))
        except Exception as e:
            logger.debug(f"[resolve] relative probe failed for {spec}: {e}")
            return None
        logger.debug(f"[resolve] {spec} -> {found} (relative)")
        return found

    async def _resolve_alias(self, spec: str, source: Path | None) -> Path | None:
        try:
            root = self.workspace.root_for(source)
            candidates = await asyncio.to_thread(self.matcher.match, spec, root, source)
            for candidate in candidates:
                if found := await self.prober.probe(candidate):
                    logger.debug(f"[resolve] {spec} -> {found} (alias)")
                    return found
        except Exception as e:
            logger.debug(f"[resolve] alias phase failed for {spec}: {e}")
        return None

    async def _search_workspace(self, spec: str) -> Path | None:
        base_name = base_name_from_spec(spec)
        try:
            results = await self.file_search.find_files(
                f"**/{base_name}*",
                self.settings.search_exclude,
                self.settings.search_max_results,
            )
        except Exception as e:
            logger.debug(f"[resolve] workspace search failed for {spec}: {e}")
            return None
        if not results:
            return None
        found = normalize_path(results[0])
        logger.debug(f"[resolve] {spec} -> {found} (workspace search)")
        return found

    def __repr__(self) -> str:
        return f"ImportResolver({self.workspace!r})"


_default_resolver: ImportResolver | None = None


def get_default_resolver() -> ImportResolver:
    """Shared resolver for the current working directory.

    Settings come from the user/project settings.yaml and OPEN_IMPORT_FILE_DEBUG.
    """
    from ..settings import SettingsManager

    global _default_resolver
    if _default_resolver is None:
        _default_resolver = ImportResolver(settings=SettingsManager().get_resolver_settings())
    return _default_resolver


async def resolve_import(
    specifier: str,
    requesting_file_uri: str | os.PathLike[str] | None = None,
    resolver: ImportResolver | None = None,
) -> Path | None:
    """Resolve an import specifier; never raises.

    Args:
        specifier: Raw import target, quotes allowed
        requesting_file_uri: Importing file as a path or file:// URI
        resolver: Resolver to use (default: shared resolver for the cwd)

    Returns:
        Absolute file path, or None when unresolved (including external packages)
    """
    requesting_file = None
    if requesting_file_uri is not None:
        requesting_file = to_path(requesting_file_uri)
        if requesting_file is None:
            logger.debug(f"[resolve] unusable requesting file: {requesting_file_uri!r}")
    return await (resolver or get_default_resolver()).resolve(specifier, requesting_file)
