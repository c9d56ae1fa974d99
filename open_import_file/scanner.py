"""Locate import specifiers in JavaScript/TypeScript source text.

Matches, with either quote style:
- import ... from 'spec' / export ... from 'spec'
- import 'spec' (side effects only)
- import('spec')
- require('spec')
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass

IMPORT_SPEC_PATTERN = re.compile(
    r"""(?:(?:import|export)\s.+?from\s+|import\s+|import\(|require\()\s*(['"])([^'")]+)\1"""
)


@dataclass(frozen=True)
class ImportSpan:
    """An import specifier and where it sits in the document.

    Attributes:
        spec: Specifier text without quotes
        line: Zero-based line number
        start: Zero-based column of the first specifier character
        end: Column just past the last specifier character
    """

    spec: str
    line: int
    start: int
    end: int

    def contains(self, line: int, column: int) -> bool:
        """True if the position is on the specifier (both ends inclusive)."""
        return line == self.line and self.start <= column <= self.end


def find_import_specs(line_text: str, line: int = 0) -> list[ImportSpan]:
    """All import specifiers in one line of source."""
    spans = []
    for match in IMPORT_SPEC_PATTERN.finditer(line_text):
        start = match.start(2)
        spans.append(ImportSpan(spec=match.group(2), line=line, start=start, end=start + len(match.group(2))))
    return spans


def iter_import_specs(text: str) -> Iterator[ImportSpan]:
    for line_no, line_text in enumerate(text.splitlines()):
        yield from find_import_specs(line_text, line_no)


def scan_imports(text: str) -> list[ImportSpan]:
    """All import specifiers in a document, in reading order."""
    return list(iter_import_specs(text))


def import_spec_at(text: str, line: int, column: int) -> ImportSpan | None:
    """The specifier under a zero-based (line, column) position, if any."""
    lines = text.splitlines()
    if not 0 <= line < len(lines):
        return None
    for span in find_import_specs(lines[line], line):
        if span.contains(line, column):
            return span
    return None
