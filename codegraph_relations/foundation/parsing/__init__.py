"""
Foundation: Parsing Layer

Tree-sitter based parsing infrastructure.

Components:
- parser_registry: Language parser management
- source_file: Source unit representation
- ast_tree: Tree wrapper with text/span helpers
"""

from .ast_tree import AstTree
from .parser_registry import ParserRegistry, get_registry
from .source_file import SourceFile

__all__ = [
    "ParserRegistry",
    "get_registry",
    "SourceFile",
    "AstTree",
]
