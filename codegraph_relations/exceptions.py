"""
Custom exceptions for relation extraction.

Hierarchy:
- RelationExtractionError (base)
  - ParseError (unit could not be parsed)
  - UnsupportedLanguageError (no parser registered)
  - InternalContractError (engine invariant violated, always fatal)
    - ScopeContractError
  - ProjectIndexError (project index misuse)
    - IndexFrozenError
    - DuplicateSymbolError

Recoverable problems (skipped nodes, unresolved or denied references) are
never raised; they are recorded as Diagnostic entries on the unit result.
"""

from __future__ import annotations


class RelationExtractionError(Exception):
    """Base exception for all relation extraction errors."""

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message)
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{super().__str__()} [{ctx_str}]"
        return super().__str__()


# ============================================================================
# Parsing Errors
# ============================================================================


class ParseError(RelationExtractionError):
    """Source unit could not be turned into a syntax tree."""

    def __init__(self, message: str, file_path: str | None = None):
        context = {}
        if file_path:
            context["file_path"] = file_path
        super().__init__(message, context)
        self.file_path = file_path


class UnsupportedLanguageError(RelationExtractionError):
    """No parser is registered for the requested language."""

    def __init__(self, language: str):
        super().__init__(f"Language not supported: {language}", {"language": language})
        self.language = language


# ============================================================================
# Engine Contract Errors
# ============================================================================


class InternalContractError(RelationExtractionError):
    """An engine invariant was violated. Not user-facing."""

    pass


class ScopeContractError(InternalContractError):
    """A qualified name was requested for a scope that does not exist."""

    def __init__(self, message: str, scope_handle: int | None = None, name: str | None = None):
        context = {}
        if scope_handle is not None:
            context["scope"] = scope_handle
        if name:
            context["name"] = name
        super().__init__(message, context)
        self.scope_handle = scope_handle
        self.name = name


# ============================================================================
# Project Index Errors
# ============================================================================


class ProjectIndexError(RelationExtractionError):
    """Base class for project index misuse."""

    pass


class IndexFrozenError(ProjectIndexError):
    """A write was attempted after the index was frozen."""

    def __init__(self, qualified_name: str | None = None):
        context = {"qualified_name": qualified_name} if qualified_name else {}
        super().__init__("Project index is frozen; declaration passes are complete", context)
        self.qualified_name = qualified_name


class DuplicateSymbolError(ProjectIndexError):
    """Two units declared the same qualified name."""

    def __init__(self, qualified_name: str, file_path: str | None = None, existing_path: str | None = None):
        context = {"qualified_name": qualified_name}
        if file_path:
            context["file_path"] = file_path
        if existing_path:
            context["existing_path"] = existing_path
        super().__init__("Qualified name already declared by another unit", context)
        self.qualified_name = qualified_name
        self.file_path = file_path
        self.existing_path = existing_path
