"""
Base Relation Generator

Abstract base class for language-specific relation generators.
"""

from abc import ABC, abstractmethod

from tree_sitter import Parser

from codegraph_relations.infra.config import ExtractionConfig

from ..ir.models import UnitDeclarations, UnitResult
from ..parsing import SourceFile
from ..semantic.project_index import ProjectIndex


class RelationGenerator(ABC):
    """
    Abstract base class for relation generators.

    A unit goes through two calls separated by the project-index barrier:
    `declare()` for every unit, then `extract()` for every unit.
    """

    language: str = ""

    def __init__(self, config: ExtractionConfig | None = None):
        """
        Initialize generator.

        Args:
            config: Extraction behaviour (defaults to ExtractionConfig())
        """
        self.config = config or ExtractionConfig()

    @abstractmethod
    def declare(self, source: SourceFile, parser: Parser | None = None) -> UnitDeclarations:
        """
        Parse a unit and run its declaration pass.

        Args:
            source: Unit to process
            parser: Parser owned by the calling thread

        Returns:
            The unit's declarations (to be merged into the project index)
        """
        pass

    @abstractmethod
    def extract(self, declarations: UnitDeclarations, index: ProjectIndex) -> UnitResult:
        """
        Run the expression pass of a declared unit against the frozen index.

        Args:
            declarations: Output of declare()
            index: Frozen project index

        Returns:
            Unit result with ordered relations and diagnostics
        """
        pass

    def generate(self, source: SourceFile) -> UnitResult:
        """Single-unit shortcut: declare, index, freeze, extract."""
        declarations = self.declare(source)
        index = ProjectIndex(self.config.known_external_types)
        if declarations.tree is not None:
            index.merge(declarations)
        index.freeze()
        return self.extract(declarations, index)
