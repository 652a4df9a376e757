"""
AST Tree wrapper for Tree-sitter
"""

from collections.abc import Iterator

try:
    from tree_sitter import Node as TSNode
    from tree_sitter import Parser
    from tree_sitter import Tree as TSTree
except ImportError as e:
    raise ImportError("tree-sitter is required. Install with: pip install tree-sitter") from e

from codegraph_relations.exceptions import ParseError, UnsupportedLanguageError

from ..ir.models import Span
from .parser_registry import get_registry
from .source_file import SourceFile


class AstTree:
    """
    Wrapper for a Tree-sitter syntax tree of one unit.

    Provides text and span helpers keyed on the unit's byte content.
    """

    def __init__(self, source: SourceFile, tree: TSTree):
        self.source = source
        self.tree = tree
        self._root = tree.root_node

    @classmethod
    def parse(cls, source: SourceFile, parser: Parser | None = None) -> "AstTree":
        """
        Parse source unit into a tree.

        Args:
            source: Unit to parse
            parser: Parser to use (defaults to the registry's shared parser)

        Raises:
            UnsupportedLanguageError: If no parser exists for the language
            ParseError: If tree-sitter returns no tree
        """
        if parser is None:
            parser = get_registry().get_parser(source.language)
        if parser is None:
            raise UnsupportedLanguageError(source.language)

        tree = parser.parse(source.encoded)
        if tree is None or tree.root_node is None:
            raise ParseError("Failed to parse unit", file_path=source.file_path)

        return cls(source, tree)

    @property
    def root(self) -> TSNode:
        """Get root node"""
        return self._root

    def walk(self, node: TSNode | None = None) -> Iterator[TSNode]:
        """Yield nodes in depth-first pre-order."""
        stack = [node if node is not None else self._root]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(current.children))

    def find_by_type(self, node_type: str, node: TSNode | None = None) -> list[TSNode]:
        """
        Find all nodes of specific type.

        Args:
            node_type: Node type to find (e.g., "method_declaration")
            node: Starting node (defaults to root)
        """
        return [n for n in self.walk(node) if n.type == node_type]

    def get_text(self, node: TSNode | None) -> str:
        """Get text content of a node ("" for None)."""
        if node is None:
            return ""
        return self.source.encoded[node.start_byte : node.end_byte].decode(self.source.encoding, errors="replace")

    def get_span(self, node: TSNode) -> Span:
        """
        Convert Tree-sitter node to Span (1-indexed lines, 0-indexed columns).
        """
        return Span(
            start_line=node.start_point[0] + 1,
            start_col=node.start_point[1],
            end_line=node.end_point[0] + 1,
            end_col=node.end_point[1],
        )

    def has_error(self, node: TSNode | None = None) -> bool:
        """Check if the (sub)tree contains ERROR or missing nodes."""
        if node is None:
            node = self._root
        return node.has_error

    def get_errors(self, node: TSNode | None = None) -> list[TSNode]:
        """
        Get all error nodes, outermost first.

        Error subtrees are not descended into.
        """
        if node is None:
            node = self._root

        errors = []
        stack = [node]
        while stack:
            current = stack.pop()
            if current.type == "ERROR" or current.is_missing:
                errors.append(current)
                continue
            if current.has_error:
                stack.extend(reversed(current.children))
        return errors

    def __repr__(self) -> str:
        return f"AstTree(file={self.source.file_path}, language={self.source.language})"
