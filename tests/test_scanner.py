"""Tests for locating import specifiers in source text."""

import pytest
from open_import_file.scanner import ImportSpan
from open_import_file.scanner import find_import_specs
from open_import_file.scanner import import_spec_at
from open_import_file.scanner import scan_imports

SOURCE = """\
import React from 'react';
import { Button } from "@/components/button";
import './styles.css';
export * from '../shared/types';

const lazy = import('./pages/Home');
const fs = require('fs');
const label = "import nothing";
"""


@pytest.mark.parametrize(
    ("line_text", "spec"),
    [
        ("import React from 'react';", "react"),
        ('import { a, b } from "./util";', "./util"),
        ("import * as path from 'node:path'", "node:path"),
        ("import './polyfills';", "./polyfills"),
        ("export { default } from './Button'", "./Button"),
        ("const m = await import('./lazy');", "./lazy"),
        ('const x = require("lodash/merge");', "lodash/merge"),
    ],
)
def test_find_import_specs(line_text, spec):
    assert [span.spec for span in find_import_specs(line_text)] == [spec]


def test_mismatched_quotes_ignored():
    assert find_import_specs("import x from './util\";") == []


def test_multiple_specs_on_one_line():
    spans = find_import_specs("const a = require('a'), b = require('b');")

    assert [span.spec for span in spans] == ["a", "b"]


def test_span_columns():
    (span,) = find_import_specs("import x from './util';", line=4)

    assert span == ImportSpan(spec="./util", line=4, start=15, end=21)


def test_scan_imports_in_reading_order():
    specs = [(span.line, span.spec) for span in scan_imports(SOURCE)]

    assert specs == [
        (0, "react"),
        (1, "@/components/button"),
        (2, "./styles.css"),
        (3, "../shared/types"),
        (5, "./pages/Home"),
        (6, "fs"),
    ]


class TestImportSpecAt:
    def test_position_inside_specifier(self):
        span = import_spec_at(SOURCE, 1, 30)

        assert span is not None
        assert span.spec == "@/components/button"

    def test_span_edges_inclusive(self):
        (span,) = find_import_specs("import x from './util';")
        text = "import x from './util';"

        assert import_spec_at(text, 0, span.start) == span
        assert import_spec_at(text, 0, span.end) == span
        assert import_spec_at(text, 0, span.start - 2) is None

    def test_position_on_keyword(self):
        assert import_spec_at(SOURCE, 0, 2) is None

    def test_line_out_of_range(self):
        assert import_spec_at(SOURCE, 99, 0) is None
        assert import_spec_at(SOURCE, -1, 0) is None
