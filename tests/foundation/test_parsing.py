"""
Parsing Layer Tests

Tests for SourceFile, ParserRegistry and AstTree.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from codegraph_relations.exceptions import UnsupportedLanguageError
from codegraph_relations.foundation.parsing import AstTree, ParserRegistry, SourceFile, get_registry


class TestSourceFile:
    """Test source unit representation."""

    def test_from_content(self):
        """Test in-memory units default to Java."""
        source = SourceFile.from_content("pkg/A.java", "class A {}\n")

        assert source.language == "java"
        assert source.encoded == b"class A {}\n"
        assert source.line_count == 1

    def test_get_line(self):
        """Test 1-indexed line access."""
        source = SourceFile.from_content("A.java", "class A {\n  int x;\n}\n")

        assert source.get_line(2) == "  int x;"
        assert source.get_line(0) == ""
        assert source.get_line(10) == ""

    def test_from_file_relative_to_root(self, tmp_path):
        """Test loading from disk stores a root-relative path."""
        path = tmp_path / "pkg" / "A.java"
        path.parent.mkdir()
        path.write_text("package pkg;\nclass A {}\n", encoding="utf-8")

        source = SourceFile.from_file(path, repo_root=tmp_path)

        assert source.file_path == str(Path("pkg") / "A.java")
        assert source.language == "java"
        assert source.content.startswith("package pkg;")

    def test_from_file_unknown_extension(self, tmp_path):
        """Test files with no registered language are rejected."""
        path = tmp_path / "notes.txt"
        path.write_text("hello", encoding="utf-8")

        with pytest.raises(UnsupportedLanguageError):
            SourceFile.from_file(path)


class TestParserRegistry:
    """Test language registration and detection."""

    @patch("codegraph_relations.foundation.parsing.parser_registry.get_language")
    def test_detect_java(self, mock_get_language):
        """Test Java file detection."""
        mock_get_language.return_value = MagicMock()
        registry = ParserRegistry()

        assert registry.detect_language("A.java") == "java"
        assert registry.detect_language(Path("src/A.JAVA")) == "java"
        assert registry.detect_language("a.py") is None

    @patch("codegraph_relations.foundation.parsing.parser_registry.get_language")
    def test_failed_grammar_load_is_unsupported(self, mock_get_language):
        """Test a grammar that fails to load leaves the language unsupported."""
        mock_get_language.side_effect = LookupError("missing")
        registry = ParserRegistry()

        assert registry.supports_language("java") is False
        assert registry.get_parser("java") is None

    def test_parsers_cached_but_new_parser_is_fresh(self):
        """Test get_parser is cached while new_parser always builds one."""
        registry = get_registry()

        assert registry.get_parser("java") is registry.get_parser("JAVA")
        assert registry.new_parser("java") is not registry.get_parser("java")
        assert registry.supported_languages == ["java"]


class TestAstTree:
    """Test the tree wrapper."""

    def test_parse_and_text(self, parse):
        """Test node text is sliced from the unit bytes."""
        ast = parse(
            """
            class A {
                void run() {}
            }
            """
        )

        methods = ast.find_by_type("method_declaration")

        assert ast.root.type == "program"
        assert len(methods) == 1
        assert ast.get_text(methods[0].child_by_field_name("name")) == "run"
        assert ast.get_text(None) == ""

    def test_span_is_one_based(self, parse):
        """Test spans use 1-indexed lines and 0-indexed columns."""
        ast = parse("class A {\n    int x;\n}")

        field = ast.find_by_type("field_declaration")[0]
        span = ast.get_span(field)

        assert span.start_line == 2
        assert span.start_col == 4
        assert span.end_line == 2

    def test_non_ascii_text(self, parse):
        """Test byte offsets are decoded with the unit encoding."""
        ast = parse('class A { String s = "héllo"; }')

        literal = ast.find_by_type("string_literal")[0]

        assert ast.get_text(literal) == '"héllo"'

    def test_errors_reported(self, parse):
        """Test malformed input is flagged."""
        ast = parse("class A { void run( { } }")

        assert ast.has_error()
        assert ast.get_errors()

    def test_clean_tree_has_no_errors(self, parse):
        """Test well-formed input has no error nodes."""
        ast = parse("class A { void run() {} }")

        assert not ast.has_error()
        assert ast.get_errors() == []

    def test_unsupported_language(self):
        """Test parsing without a parser raises."""
        source = SourceFile.from_content("A.cob", "IDENTIFICATION DIVISION.", language="cobol")

        with pytest.raises(UnsupportedLanguageError):
            AstTree.parse(source)
