"""
Foundation: Semantic Analysis

Two passes per unit, separated by the project-index barrier:

- declaration_pass: Scope Tree and Symbols
- relation_emitter: bound relations (with binder, type_resolver,
  member_resolver and capture)
"""

from .binder import Binder
from .capture import CaptureAnalyzer
from .declaration_pass import DeclarationPass
from .member_resolver import MemberMatch, MemberResolver
from .project_index import ProjectIndex
from .relation_emitter import RelationEmitter
from .type_resolver import TypeResolver, parse_type

__all__ = [
    "DeclarationPass",
    "ProjectIndex",
    "TypeResolver",
    "parse_type",
    "MemberResolver",
    "MemberMatch",
    "Binder",
    "CaptureAnalyzer",
    "RelationEmitter",
]
