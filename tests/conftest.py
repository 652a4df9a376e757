"""
Global test configuration and fixtures
"""

import textwrap

import pytest

from codegraph_relations.foundation.generators import JavaRelationGenerator
from codegraph_relations.foundation.ir.models import RelationKind
from codegraph_relations.foundation.parsing import AstTree, SourceFile
from codegraph_relations.foundation.semantic import DeclarationPass
from codegraph_relations.pipeline import BatchProcessor


def java_source(code: str, file_path: str = "Test.java") -> SourceFile:
    return SourceFile.from_content(file_path=file_path, content=textwrap.dedent(code).strip() + "\n")


@pytest.fixture
def parse():
    """Parse a Java snippet into an AstTree."""

    def _parse(code: str, file_path: str = "Test.java") -> AstTree:
        return AstTree.parse(java_source(code, file_path))

    return _parse


@pytest.fixture
def declare(parse):
    """Run only the declaration pass over a snippet."""

    def _declare(code: str, file_path: str = "Test.java"):
        return DeclarationPass(parse(code, file_path)).run()

    return _declare


@pytest.fixture
def extract():
    """Run both passes over a single-unit snippet."""
    generator = JavaRelationGenerator()

    def _extract(code: str, file_path: str = "Test.java"):
        return generator.generate(java_source(code, file_path))

    return _extract


@pytest.fixture
def process():
    """Run a multi-unit batch: {file_path: code}."""

    def _process(units: dict[str, str], **kwargs):
        processor = BatchProcessor(**kwargs)
        return processor.process([java_source(code, path) for path, code in units.items()])

    return _process


@pytest.fixture
def select():
    """Filter a unit's relations by kind and, optionally, source/target."""

    def _select(result, kind: RelationKind, source: str | None = None, target: str | None = None):
        return [
            r
            for r in result.relations
            if r.kind == kind and (source is None or r.source == source) and (target is None or r.target == target)
        ]

    return _select


# Pytest hooks
def pytest_configure(config):
    """Register markers"""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (medium speed)")


def pytest_collection_modifyitems(config, items):
    """Path-based markers"""
    for item in items:
        if "pipeline" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)
