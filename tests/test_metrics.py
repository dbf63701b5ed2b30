"""Tests for the lexical metrics extractor."""
import pytest

from companion.analyzers.languages import LanguageId, get_spec
from companion.analyzers.metrics import (
    count_comment_lines,
    count_lines,
    extract_dependencies,
    extract_metrics,
    split_lines,
)
from companion.analyzers.models import Metrics


class TestCountLines:
    @pytest.mark.parametrize("code,expected", [
        ("", 0),
        ("x", 1),
        ("a\n", 1),
        ("a\n\n", 2),
        ("a\nb", 2),
        ("a\r\nb\r\n", 2),
        ("a\rb", 2),
        ("  ", 1),
    ])
    def test_line_convention(self, code, expected):
        assert count_lines(code) == expected

    def test_split_lines_agrees_with_count(self):
        code = "a\n\nb\n"
        assert len(split_lines(code)) == count_lines(code) == 3


class TestExtractMetrics:
    def test_empty_input(self):
        metrics = extract_metrics("", LanguageId.TYPESCRIPT)
        assert metrics == Metrics()
        assert metrics.lines_of_code == 0
        assert metrics.cyclomatic_sketch == 1
        assert metrics.comment_density == 0.0
        assert metrics.external_dependencies == frozenset()

    def test_single_branch_typescript(self, ts_snippet):
        metrics = extract_metrics(ts_snippet, LanguageId.TYPESCRIPT)
        assert metrics.lines_of_code == 7
        assert metrics.branches == 1
        assert metrics.cyclomatic_sketch == 2
        assert metrics.comment_lines == 1
        assert metrics.comment_density == pytest.approx(1 / 7)

    def test_python_branches_include_boolean_operators(self):
        code = "if a and b:\n    pass\nelif c or d:\n    pass\n"
        metrics = extract_metrics(code, LanguageId.PYTHON)
        assert metrics.branches == 4
        assert metrics.cyclomatic_sketch == 5

    def test_commented_out_branches_still_count(self):
        metrics = extract_metrics("// if (x) { y(); }\n", LanguageId.JAVASCRIPT)
        assert metrics.branches == 1

    def test_async_operations_typescript(self):
        code = "await fetch(x);\nfoo().then(cb);\nsetTimeout(fn, 10);\n"
        assert extract_metrics(code, LanguageId.TYPESCRIPT).async_operations == 3

    def test_async_operations_go(self):
        code = "go worker(jobs)\nch := make(chan int)\nv := <-ch\n"
        # go worker(, chan, <-
        assert extract_metrics(code, LanguageId.GO).async_operations == 3

    def test_density_is_clamped_to_one(self):
        metrics = extract_metrics("// a\n// b\n", LanguageId.TYPESCRIPT)
        assert metrics.comment_density == 1.0

    def test_density_within_bounds_for_any_input(self):
        for code in ["x", "/*\n*/\n", "#!/bin\n", "\n\n\n"]:
            for lang in LanguageId:
                assert 0.0 <= extract_metrics(code, lang).comment_density <= 1.0

    def test_supplementary_counters(self):
        code = (
            "try {\n"
            "  console.log(x);\n"
            "} catch (e) {\n"
            "}\n"
            "it('works', () => expect(x).toBe(1));\n"
        )
        metrics = extract_metrics(code, LanguageId.JAVASCRIPT)
        assert metrics.error_handlers == 1
        assert metrics.debug_statements == 1
        assert metrics.test_markers == 2


class TestCommentLines:
    def test_python_docstring_block(self):
        code = (
            "def f():\n"
            '    """Doc line one.\n'
            "\n"
            "    More.\n"
            '    """\n'
            "    return 1\n"
        )
        spec = get_spec(LanguageId.PYTHON)
        assert count_comment_lines(split_lines(code), spec) == 4

    def test_single_line_block_comment(self):
        spec = get_spec(LanguageId.GO)
        assert count_comment_lines(["/* one */", "x := 1"], spec) == 1

    def test_ruby_begin_end_needs_column_zero(self):
        spec = get_spec(LanguageId.RUBY)
        lines = ["=begin", "notes", "=end", "puts 1", "  =begin"]
        assert count_comment_lines(lines, spec) == 3

    def test_ruby_end_needs_column_zero(self):
        spec = get_spec(LanguageId.RUBY)
        lines = ["=begin", "  =end is prose here", "notes", "=end", "puts 1"]
        assert count_comment_lines(lines, spec) == 4

    def test_python_string_opened_mid_line_is_not_a_comment(self):
        code = (
            'QUERY = """\n'
            "SELECT 1\n"
            '"""\n'
            "\n"
            "def load(path):\n"
            "    return path\n"
        )
        spec = get_spec(LanguageId.PYTHON)
        assert count_comment_lines(split_lines(code), spec) == 0

    def test_docstring_after_module_string_still_counts(self):
        code = (
            "TEMPLATE = '''\n"
            "{name}\n"
            "'''\n"
            "def render(name):\n"
            '    """Fill the template."""\n'
            "    return TEMPLATE.format(name=name)\n"
        )
        spec = get_spec(LanguageId.PYTHON)
        assert count_comment_lines(split_lines(code), spec) == 1

    def test_python_module_string_does_not_inflate_density(self):
        code = 'SQL = """\nSELECT 1\n"""\nx = 1\ny = 2\n'
        assert extract_metrics(code, LanguageId.PYTHON).comment_density == 0.0

    def test_trailing_comment_is_not_a_comment_line(self):
        spec = get_spec(LanguageId.TYPESCRIPT)
        assert count_comment_lines(["x = 1; // note"], spec) == 0


class TestDependencies:
    def test_javascript_import_forms(self):
        code = (
            "import React from 'react';\n"
            'import { z } from "zod";\n'
            "import type { Foo } from '@scope/pkg/sub';\n"
            "import './styles.css';\n"
            "const fs = require('fs');\n"
            "import local from './local';\n"
            "const lazy = import('lodash/fp');\n"
        )
        deps = extract_dependencies(code, get_spec(LanguageId.TYPESCRIPT))
        assert deps == frozenset({"react", "zod", "@scope/pkg", "fs", "lodash"})

    def test_dependency_set_ignores_import_order(self):
        first = "import axios from 'axios';\nimport { z } from 'zod';\n"
        swapped = "import { z } from 'zod';\nimport axios from 'axios';\n"
        deps = extract_metrics(first, LanguageId.TYPESCRIPT).external_dependencies
        assert len(deps) == 2
        assert extract_metrics(swapped, LanguageId.TYPESCRIPT).external_dependencies == deps

    def test_python_import_forms(self):
        code = (
            "import os, sys as system\n"
            "from collections.abc import Mapping\n"
            "from . import sibling\n"
            "from __future__ import annotations\n"
            "import numpy.linalg\n"
        )
        deps = extract_dependencies(code, get_spec(LanguageId.PYTHON))
        assert deps == frozenset({"os", "sys", "collections", "numpy"})

    def test_go_grouped_imports(self):
        code = 'package main\n\nimport (\n\t"fmt"\n\t"net/http"\n)\n'
        deps = extract_dependencies(code, get_spec(LanguageId.GO))
        assert deps == frozenset({"fmt", "net/http"})

    def test_go_single_import(self, go_snippet):
        assert extract_dependencies(go_snippet, get_spec(LanguageId.GO)) == frozenset({"fmt"})

    def test_ruby_require_skips_require_relative(self):
        code = "require 'json'\nrequire_relative 'helper'\n"
        deps = extract_dependencies(code, get_spec(LanguageId.RUBY))
        assert deps == frozenset({"json"})

    def test_metrics_to_dict_sorts_dependencies(self):
        metrics = Metrics(external_dependencies=frozenset({"zod", "axios"}))
        assert metrics.to_dict()["externalDependencies"] == ["axios", "zod"]
