"""
Project Index

Shared, append-only index of every unit's declarations.

Lifecycle:
1. created once per run
2. `merge()` once per unit while declaration passes run (thread-safe)
3. `freeze()` at the barrier; further merges raise IndexFrozenError
4. read concurrently by every expression pass
"""

import threading

from codegraph_relations.exceptions import DuplicateSymbolError, IndexFrozenError
from codegraph_relations.infra.observability import get_logger

from ..ir.models import Symbol, TypeInfo, UnitDeclarations

logger = get_logger(__name__)


class ProjectIndex:
    """Cross-unit symbol and type index."""

    def __init__(self, known_external_types: list[str] | None = None):
        self._types: dict[str, TypeInfo] = {}
        self._symbols: dict[str, Symbol] = {}
        self._packages: dict[str, set[str]] = {}
        self._lock = threading.Lock()
        self._frozen = False
        self.known_external_types: dict[str, str] = {}
        for qualified_name in known_external_types or []:
            self.known_external_types.setdefault(qualified_name.rpartition(".")[2], qualified_name)

    # ============================================================
    # Write side (declaration passes)
    # ============================================================

    def merge(self, unit: UnitDeclarations) -> None:
        """
        Merge one unit's declarations.

        Types are merged atomically per unit: on a cross-unit qualified name
        collision nothing from the unit is merged.

        Raises:
            IndexFrozenError: After freeze()
            DuplicateSymbolError: If a type name is already owned by another unit
        """
        with self._lock:
            if self._frozen:
                raise IndexFrozenError(unit.file_path)

            for qualified_name in unit.types:
                existing = self._types.get(qualified_name)
                if existing is not None and existing.context.file_path != unit.file_path:
                    raise DuplicateSymbolError(qualified_name, unit.file_path, existing.context.file_path)

            self._types.update(unit.types)
            for qualified_name, symbol in unit.symbols.items():
                self._symbols.setdefault(qualified_name, symbol)
            for info in unit.types.values():
                if info.outer is None and info.symbol.kind.is_type:
                    self._packages.setdefault(info.package, set()).add(info.name)
            self._packages.setdefault(unit.context.package, set())

        logger.debug(
            "index_unit_merged",
            file_path=unit.file_path,
            types=len(unit.types),
            symbols=len(unit.symbols),
        )

    def freeze(self) -> None:
        with self._lock:
            self._frozen = True
        logger.info("index_frozen", types=len(self._types), symbols=len(self._symbols))

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ============================================================
    # Read side
    # ============================================================

    def get_type(self, qualified_name: str | None) -> TypeInfo | None:
        if qualified_name is None:
            return None
        return self._types.get(qualified_name)

    def get_symbol(self, qualified_name: str) -> Symbol | None:
        return self._symbols.get(qualified_name)

    def has_package(self, package: str) -> bool:
        return package in self._packages

    def type_in_package(self, package: str, name: str) -> TypeInfo | None:
        if name not in self._packages.get(package, ()):
            return None
        return self._types.get(f"{package}.{name}" if package else name)

    def external_type(self, name: str) -> str | None:
        """Qualified name of a known external type with this simple name."""
        return self.known_external_types.get(name)

    def __contains__(self, qualified_name: str) -> bool:
        return qualified_name in self._symbols or qualified_name in self._types

    def __len__(self) -> int:
        return len(self._symbols)
