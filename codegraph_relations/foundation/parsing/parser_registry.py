"""
Parser Registry for Tree-sitter

Manages the Java parser and provides a unified interface.
"""

from pathlib import Path

try:
    from tree_sitter import Parser
    from tree_sitter_language_pack import get_language
except ImportError as e:
    raise ImportError(
        "tree-sitter-language-pack is required. " "Install with: pip install tree-sitter tree-sitter-language-pack"
    ) from e

from codegraph_relations.infra.observability import get_logger

logger = get_logger(__name__)


class ParserRegistry:
    """
    Registry for language parsers.

    Only Java carries a relation extractor today; the registry keeps the
    alias/extension plumbing so further grammars slot in the same way.
    """

    EXTENSIONS = {
        ".java": "java",
    }

    def __init__(self):
        self._parsers: dict[str, Parser] = {}
        self._languages: dict[str, object] = {}
        self._setup_languages()

    def _register_language(self, name: str, aliases: list[str] | None = None) -> None:
        """
        Register a language and its aliases.

        Args:
            name: Language name (e.g., "java")
            aliases: Optional list of aliases
        """
        try:
            lang = get_language(name)
        except (LookupError, ValueError, OSError) as e:
            logger.warning("parser_load_failed", language=name, error=str(e))
            return

        self._languages[name] = lang
        for alias in aliases or []:
            self._languages[alias] = lang
        logger.debug("parser_loaded", language=name, aliases=aliases or [])

    def _setup_languages(self):
        """Setup Tree-sitter languages"""
        self._register_language("java", ["jav"])

    def get_parser(self, language: str) -> Parser | None:
        """
        Get parser for the specified language.

        Parsers are not thread-safe; the batch processor creates its own
        per worker thread with `new_parser`.

        Args:
            language: Language name

        Returns:
            Parser instance or None if language not supported
        """
        language = language.lower()

        if language in self._parsers:
            return self._parsers[language]

        parser = self.new_parser(language)
        if parser is not None:
            self._parsers[language] = parser
        return parser

    def new_parser(self, language: str) -> Parser | None:
        """Create an uncached parser for the language."""
        lang = self._languages.get(language.lower())
        if not lang:
            return None
        return Parser(lang)

    def detect_language(self, file_path: str | Path) -> str | None:
        """
        Detect language from file extension.

        Args:
            file_path: Path to source file

        Returns:
            Language name or None if not supported
        """
        if isinstance(file_path, str):
            file_path = Path(file_path)
        return self.EXTENSIONS.get(file_path.suffix.lower())

    def supports_language(self, language: str) -> bool:
        """Check if language is supported"""
        return language.lower() in self._languages

    @property
    def supported_languages(self) -> list[str]:
        """Get list of supported languages (excluding aliases)"""
        return sorted(set(self.EXTENSIONS.values()) & set(self._languages))


# Global registry instance
_registry: ParserRegistry | None = None


def get_registry() -> ParserRegistry:
    """Get global parser registry instance"""
    global _registry
    if _registry is None:
        _registry = ParserRegistry()
    return _registry
