"""
Tests for the syntax tree parser and file statistics.
"""

import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from outrider.parsers import JavaScriptParser, extract_file_stats, get_parser, supported_extensions


SAMPLE = """import x from 'y';
const z = require('z');
// function commented() {}
export function f() {}
class A extends B {}
const g = () => 1;
"""


class TestParserRegistry:
    """Tests for parser lookup."""

    def test_javascript_extensions(self):
        assert isinstance(get_parser(".js"), JavaScriptParser)
        assert isinstance(get_parser("tsx"), JavaScriptParser)
        assert {"js", "jsx", "ts", "tsx"} <= set(supported_extensions())

    def test_unsupported_extension(self):
        assert get_parser(".py") is None


class TestJavaScriptParser:
    """Tests for the regex based JavaScript parser."""

    def test_parse(self):
        tree = JavaScriptParser().parse(SAMPLE, "app.js")

        assert tree.type == "module"
        assert tree.count("import") == 2
        assert tree.count("export") == 1
        assert tree.count("function_definition") == 2
        assert tree.count("class_definition") == 1

    def test_nodes_in_source_order(self):
        tree = JavaScriptParser().parse(SAMPLE, "app.js")
        lines = [child.start_line for child in tree.children]
        assert lines == sorted(lines)

    def test_class_details(self):
        tree = JavaScriptParser().parse(SAMPLE, "app.js")
        cls = next(tree.find_all("class_definition"))

        assert cls.value == "A"
        assert cls.attributes["extends"] == "B"
        assert cls.start_line == 5

    def test_language(self):
        parser = JavaScriptParser()
        parser.parse("", "app.ts")
        assert parser.language == "typescript"


class TestFileStats:
    """Tests for per-file statistics."""

    def test_line_counts(self):
        stats = extract_file_stats("// c\n\nfoo();\n")

        assert stats.total_lines == 4
        assert stats.blank_lines == 2
        assert stats.comment_lines == 1
        assert stats.code_lines == 1
        assert stats.functions == 0

    def test_with_tree(self):
        tree = JavaScriptParser().parse(SAMPLE, "app.js")
        stats = extract_file_stats(SAMPLE, tree)

        assert stats.functions == 2
        assert stats.classes == 1
        assert stats.imports == 2
        assert stats.exports == 1
        assert stats.comment_lines == 1
