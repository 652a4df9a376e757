"""
JSONL Exporter

Writes one JSON object per line:

    symbols.jsonl    every declared symbol, unit by unit
    relations.jsonl  every relation, in emission order
"""

import json
from pathlib import Path

from codegraph_relations.foundation.ir.models import UnitResult
from codegraph_relations.infra.observability import get_logger

logger = get_logger(__name__)

SYMBOLS_FILE = "symbols.jsonl"
RELATIONS_FILE = "relations.jsonl"


class JsonlExporter:
    """Exports unit results to a directory."""

    def __init__(self, output_dir: str | Path):
        self.output_dir = Path(output_dir)

    def export(self, units: list[UnitResult]) -> dict[str, int]:
        """
        Write symbols and relations of the given units.

        Args:
            units: Unit results, in processing order

        Returns:
            Number of records written per file
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        symbols = self.write_symbols(s for unit in units for s in unit.symbols.values())
        relations = self.write_relations(r for unit in units for r in unit.relations)
        logger.info("export_complete", output_dir=str(self.output_dir), symbols=symbols, relations=relations)
        return {SYMBOLS_FILE: symbols, RELATIONS_FILE: relations}

    def write_symbols(self, symbols) -> int:
        return self._write(self.output_dir / SYMBOLS_FILE, (symbol.to_dict() for symbol in symbols))

    def write_relations(self, relations) -> int:
        return self._write(self.output_dir / RELATIONS_FILE, (relation.to_dict() for relation in relations))

    @staticmethod
    def _write(path: Path, records) -> int:
        count = 0
        with open(path, "w", encoding="utf-8") as f:
            for record in records:
                f.write(json.dumps(record, ensure_ascii=False, default=str))
                f.write("\n")
                count += 1
        return count


def read_jsonl(path: str | Path) -> list[dict]:
    """Load a JSONL file written by the exporter."""
    with open(path, encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]
