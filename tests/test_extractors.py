"""Tests for regex symbol extraction."""

import time


class TestFunctions:

    def test_python_functions(self, sample_python_code):
        from mindhooks.extractors import extract_functions

        assert extract_functions(sample_python_code) == [
            "calculate_sum", "__init__", "add", "subtract", "main",
        ]

    def test_js_rust_go_functions(self):
        from mindhooks.extractors import extract_functions

        code = "\n".join([
            "function loadUser(id) {}",
            "const save = async (user) => {}",
            "  handleClick: (e) => setOpen(true),",
            "fn parse_args() -> Args {}",
            "func (s *Server) Serve() error {}",
        ])
        names = extract_functions(code)
        assert set(names) == {"loadUser", "save", "handleClick", "parse_args", "Serve"}

    def test_function_keyword_needs_word_boundary(self):
        from mindhooks.extractors import extract_functions

        assert extract_functions("const functionName = 1") == []

    def test_line_number_gutter(self):
        """File-read output carries `   12→` prefixes."""
        from mindhooks.extractors import extract_functions, extract_imports

        text = "     1→import os\n     2→def main():\n     3→    pass"
        assert extract_imports(text) == ["os"]
        assert extract_functions(text) == ["main"]


class TestImportsExports:

    def test_imports_across_languages(self):
        from mindhooks.extractors import extract_imports

        code = "\n".join([
            "import { useState } from 'react'",
            "from os import path",
            "import sys, json",
            "const fs = require('fs')",
            "use std::collections::HashMap;",
        ])
        assert set(extract_imports(code)) == {
            "react", "os", "sys", "json", "fs", "std::collections::HashMap",
        }

    def test_from_import_does_not_capture_imported_name(self):
        from mindhooks.extractors import extract_imports

        assert extract_imports("from collections import OrderedDict") == ["collections"]

    def test_exports(self):
        from mindhooks.extractors import extract_exports

        code = "\n".join([
            "export function foo() {}",
            "export const bar = 1",
            "export { a, b }",
            "pub fn run() {}",
            "pub struct Config {}",
        ])
        assert set(extract_exports(code)) == {"foo", "bar", "a", "b", "run", "Config"}


class TestTypes:

    def test_python_class(self, sample_python_code):
        from mindhooks.extractors import extract_types

        assert extract_types(sample_python_code) == ["Calculator"]

    def test_other_type_declarations(self):
        from mindhooks.extractors import extract_types

        code = "\n".join([
            "interface Props { id: string }",
            "type UserId = string",
            "struct Point { x: i32 }",
            "trait Shape {}",
            "type Server struct {",
        ])
        assert set(extract_types(code)) == {"Props", "UserId", "Point", "Shape", "Server"}


class TestMarkersAndLines:

    def test_markers(self):
        from mindhooks.extractors import extract_markers

        text = "# TODO: handle unicode\nx = 1\n    // FIXME later\n"
        assert extract_markers(text) == ["# TODO: handle unicode", "// FIXME later"]

    def test_markers_clipped(self):
        from mindhooks.extractors import MARKER_LINE_CHARS, extract_markers

        text = "# TODO " + "z" * 300
        assert len(extract_markers(text)[0]) == MARKER_LINE_CHARS

    def test_error_and_success_lines(self):
        from mindhooks.extractors import error_lines, success_lines

        lines = ["compiling", "ERROR: missing semicolon", "Warning: unused var", "Build done", "all passed"]
        assert error_lines(lines) == ["ERROR: missing semicolon", "Warning: unused var"]
        assert success_lines(lines) == ["Build done", "all passed"]


class TestSearchAggregation:

    def test_grep_files(self):
        from mindhooks.extractors import grep_files

        lines = ["src/a.py:1:x", "src/a.py:9:y", "src/b.py:3:z", "no prefix here"]
        assert grep_files(lines) == ["src/a.py", "src/b.py"]

    def test_group_by_directory(self):
        from mindhooks.extractors import group_by_directory

        grouped = group_by_directory(["src/a.py", "src/b.py", "setup.py"])
        assert grouped == {"src": ["a.py", "b.py"], "/": ["setup.py"]}


class TestRobustness:

    def test_idempotent(self, sample_python_code):
        from mindhooks.extractors import SymbolKind, extract

        for kind in SymbolKind:
            assert extract(sample_python_code, kind) == extract(sample_python_code, kind)

    def test_empty_and_non_text(self):
        from mindhooks.extractors import SymbolKind, extract, extract_markers

        for kind in SymbolKind:
            assert extract("", kind) == []
            assert extract(None, kind) == []
        assert extract_markers(None) == []

    def test_long_token_is_linear(self):
        """A base64 blob or minified bundle must not stall extraction."""
        from mindhooks.extractors import extract_functions

        start = time.perf_counter()
        assert extract_functions("A" * 60000) == []
        assert time.perf_counter() - start < 2.0

    def test_long_whitespace_run_is_linear(self):
        from mindhooks.extractors import extract_imports

        start = time.perf_counter()
        assert extract_imports("import x" + " " * 20000 + "y") == []
        assert time.perf_counter() - start < 2.0

    def test_import_list_stays_on_one_line(self):
        from mindhooks.extractors import extract_imports

        assert extract_imports("import os\n\nvalue = 1") == ["os"]

    def test_large_blob_file_read_compresses_quickly(self):
        from mindhooks.compressor import compress

        start = time.perf_counter()
        result = compress("Read", {"file_path": "data.b64"}, "\n".join(["Q" * 1990] * 200))
        assert result.was_compressed
        assert time.perf_counter() - start < 5.0

    def test_results_deduplicated(self):
        from mindhooks.extractors import extract_functions

        assert extract_functions("def a(): pass\ndef a(): pass") == ["a"]
