"""
Batch Processor

Runs a batch of units through both passes:

1. declaration passes on a thread pool (one parser per worker thread)
2. merge every unit into the ProjectIndex, then freeze it (the barrier)
3. expression passes on the same pool, against the frozen index

Results come back in input order. A failing unit never aborts the batch.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from codegraph_relations.exceptions import DuplicateSymbolError
from codegraph_relations.foundation.generators import JavaRelationGenerator, RelationGenerator
from codegraph_relations.foundation.ir.models import Diagnostic, Relation, UnitDeclarations, UnitResult
from codegraph_relations.foundation.parsing import SourceFile, get_registry
from codegraph_relations.foundation.semantic import ProjectIndex
from codegraph_relations.infra.config import ExtractionConfig, FilterConfig, ProcessingConfig, Settings, get_settings
from codegraph_relations.infra.observability import (
    LogPerformance,
    add_context,
    clear_context,
    configure_logging,
    get_logger,
)

from .noise_filter import NoiseFilter

logger = get_logger(__name__)


@dataclass
class BatchResult:
    """
    Outcome of one batch.

    Attributes:
        units: Per-unit results, in input order
        index: The frozen project index
    """

    units: list[UnitResult] = field(default_factory=list)
    index: ProjectIndex | None = None

    @property
    def relations(self) -> list[Relation]:
        return [relation for unit in self.units for relation in unit.relations]

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return [diagnostic for unit in self.units for diagnostic in unit.diagnostics]

    @property
    def failed(self) -> list[UnitResult]:
        return [unit for unit in self.units if not unit.ok]

    def stats(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for unit in self.units:
            for kind, count in unit.stats().items():
                counts[kind] = counts.get(kind, 0) + count
        return counts


class BatchProcessor:
    """
    Two-phase batch driver.

    Missing config groups come from get_settings().

    Example:
        ```python
        processor = BatchProcessor.from_settings()
        batch = processor.process([SourceFile.from_file(p) for p in paths])
        batch.relations
        ```
    """

    def __init__(
        self,
        config: ProcessingConfig | None = None,
        extraction: ExtractionConfig | None = None,
        generator: RelationGenerator | None = None,
        filter_config: FilterConfig | None = None,
    ):
        settings = get_settings()
        self.config = config or settings.processing
        self.extraction = extraction or settings.extraction
        self.generator = generator or JavaRelationGenerator(self.extraction)
        self.noise_filter = NoiseFilter((filter_config or settings.filter).noise_level)
        self._thread_local = threading.local()

    @classmethod
    def from_settings(cls, settings: Settings | None = None, setup_logs: bool = True) -> "BatchProcessor":
        """Build a processor from every settings group, configuring logging first."""
        settings = settings or get_settings()
        if setup_logs:
            configure_logging(settings.observability)
        return cls(settings.processing, settings.extraction, filter_config=settings.filter)

    def process(self, sources: list[SourceFile]) -> BatchResult:
        """
        Process a batch of units.

        Args:
            sources: Units of one project

        Returns:
            BatchResult with per-unit results in input order
        """
        index = ProjectIndex(self.extraction.known_external_types)

        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            with LogPerformance(logger, "declaration_phase", units=len(sources)):
                declarations = list(executor.map(self._declare, sources))

            barrier_diagnostics = self._merge(declarations, index)
            index.freeze()

            with LogPerformance(logger, "expression_phase", units=len(declarations)):
                results = list(executor.map(lambda unit: self._extract(unit, index), declarations))

        for result in results:
            result.diagnostics.extend(barrier_diagnostics.get(result.file_path, []))
            result.relations = self.noise_filter.apply(result.relations)

        batch = BatchResult(units=results, index=index)
        logger.info(
            "batch_processed",
            units=len(results),
            failed=len(batch.failed),
            relations=len(batch.relations),
        )
        return batch

    def _declare(self, source: SourceFile) -> UnitDeclarations:
        add_context(file_path=source.file_path)
        try:
            return self.generator.declare(source, self._parser(source.language))
        finally:
            clear_context("file_path")

    def _extract(self, unit: UnitDeclarations, index: ProjectIndex) -> UnitResult:
        add_context(file_path=unit.file_path)
        try:
            return self.generator.extract(unit, index)
        finally:
            clear_context("file_path")

    def _parser(self, language: str):
        """Parser owned by the calling worker thread."""
        parsers = getattr(self._thread_local, "parsers", None)
        if parsers is None:
            parsers = self._thread_local.parsers = {}
        if language not in parsers:
            parsers[language] = get_registry().new_parser(language)
        return parsers[language]

    def _merge(self, declarations: list[UnitDeclarations], index: ProjectIndex) -> dict[str, list[Diagnostic]]:
        """Merge every parsed unit; name collisions become diagnostics on the later unit."""
        diagnostics: dict[str, list[Diagnostic]] = {}
        for unit in declarations:
            if unit.tree is None:
                continue
            try:
                index.merge(unit)
            except DuplicateSymbolError as e:
                logger.warning("duplicate_symbol", **e.context)
                diagnostics.setdefault(unit.file_path, []).append(
                    Diagnostic(
                        code="duplicate_symbol",
                        message=str(e),
                        file_path=unit.file_path,
                        detail=dict(e.context),
                    )
                )
        return diagnostics


def process_sources(sources: list[SourceFile], config: ProcessingConfig | None = None) -> list[UnitResult]:
    """Convenience wrapper returning only the unit results."""
    return BatchProcessor(config).process(sources).units

