"""
Source unit representation
"""

from dataclasses import dataclass, field
from pathlib import Path

from codegraph_relations.exceptions import UnsupportedLanguageError


@dataclass
class SourceFile:
    """
    One compilation unit handed to the extractor.

    Attributes:
        file_path: Path relative to the project root (used for diagnostics only)
        content: Unit text
        language: Source language
        encoding: Text encoding used for byte offsets
    """

    file_path: str
    content: str
    language: str = "java"
    encoding: str = "utf-8"
    _encoded: bytes | None = field(default=None, init=False, repr=False, compare=False)

    @classmethod
    def from_file(
        cls,
        file_path: str | Path,
        repo_root: str | Path | None = None,
        language: str | None = None,
        encoding: str = "utf-8",
    ) -> "SourceFile":
        """
        Load a unit from disk.

        Args:
            file_path: Absolute or root-relative path
            repo_root: Project root; file_path is stored relative to it
            language: Language override (auto-detected if None)
            encoding: File encoding

        Raises:
            UnsupportedLanguageError: If the language cannot be detected
        """
        file_path = Path(file_path)
        if repo_root is not None:
            repo_root = Path(repo_root)
            relative_path = file_path.relative_to(repo_root) if file_path.is_absolute() else file_path
            abs_path = repo_root / relative_path
        else:
            relative_path = file_path
            abs_path = file_path

        content = abs_path.read_text(encoding=encoding)

        if language is None:
            from .parser_registry import get_registry

            language = get_registry().detect_language(abs_path)
            if language is None:
                raise UnsupportedLanguageError(abs_path.suffix or str(abs_path))

        return cls(file_path=str(relative_path), content=content, language=language, encoding=encoding)

    @classmethod
    def from_content(cls, file_path: str, content: str, language: str = "java") -> "SourceFile":
        """Create a unit from an in-memory string."""
        return cls(file_path=file_path, content=content, language=language)

    @property
    def encoded(self) -> bytes:
        """Unit content as bytes; tree-sitter offsets index into this."""
        if self._encoded is None:
            self._encoded = self.content.encode(self.encoding)
        return self._encoded

    def get_line(self, line_num: int) -> str:
        """Get a line (1-indexed) without its newline."""
        lines = self.content.splitlines()
        if 1 <= line_num <= len(lines):
            return lines[line_num - 1]
        return ""

    @property
    def line_count(self) -> int:
        """Get total number of lines"""
        return len(self.content.splitlines())
