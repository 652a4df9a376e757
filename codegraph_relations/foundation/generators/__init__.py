"""
Relation Generators

Language-specific orchestration of the declaration and expression passes.
"""

from .base import RelationGenerator
from .java_generator import JavaRelationGenerator

__all__ = [
    "RelationGenerator",
    "JavaRelationGenerator",
]
