"""Import specifier resolution engine.

Resolves relative, aliased (bundler resolve.alias, tsconfig paths) and
workspace-searchable specifiers to files on disk. Bare package names that
match nothing are reported as unresolved.
"""

from .alias import AliasMatcher
from .cache import SnapshotCache
from .config_loader import ConfigLoader
from .models import CacheEntry
from .models import ConfigSnapshot
from .models import ResolverSettings
from .normalize import normalize_import_spec
from .orchestrator import ImportResolver
from .orchestrator import get_default_resolver
from .orchestrator import resolve_import
from .prober import ExtensionProber
from .uri import to_path
from .uri import to_uri
from .workspace import GlobFileSearch
from .workspace import Workspace

__all__ = [
    "AliasMatcher",
    "CacheEntry",
    "ConfigLoader",
    "ConfigSnapshot",
    "ExtensionProber",
    "GlobFileSearch",
    "ImportResolver",
    "ResolverSettings",
    "SnapshotCache",
    "Workspace",
    "get_default_resolver",
    "normalize_import_spec",
    "resolve_import",
    "to_path",
    "to_uri",
]
