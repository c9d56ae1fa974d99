"""open-import-file: resolve JavaScript/TypeScript import specifiers to files on disk."""

from .resolver import ImportResolver
from .resolver import resolve_import

__all__ = ["ImportResolver", "resolve_import"]
