"""
Noise Filter

Drops relations to targets outside the analysed sources, by level:

    RAW       keep everything
    BALANCED  drop external targets, except THROW and CAPTURE
    PURE      keep only relations between declared entities
"""

from enum import Enum

from codegraph_relations.foundation.ir.models import Relation, RelationKind
from codegraph_relations.infra.observability import get_logger

logger = get_logger(__name__)

BALANCED_KEPT_KINDS = frozenset({RelationKind.THROW, RelationKind.CAPTURE})


class NoiseLevel(str, Enum):
    RAW = "raw"
    BALANCED = "balanced"
    PURE = "pure"


class NoiseFilter:
    """
    Relation noise filter.

    Example:
        ```python
        noise_filter = NoiseFilter(NoiseLevel.BALANCED)
        kept = noise_filter.apply(result.relations)
        ```
    """

    def __init__(self, level: NoiseLevel | str = NoiseLevel.RAW):
        self.level = NoiseLevel(level)

    def is_noise(self, relation: Relation) -> bool:
        if self.level == NoiseLevel.RAW or not relation.is_external:
            return False
        if self.level == NoiseLevel.BALANCED:
            return relation.kind not in BALANCED_KEPT_KINDS
        return True

    def apply(self, relations: list[Relation]) -> list[Relation]:
        """Filtered relations, original order preserved."""
        if self.level == NoiseLevel.RAW:
            return list(relations)
        kept = [relation for relation in relations if not self.is_noise(relation)]
        logger.debug("noise_filtered", level=self.level.value, total=len(relations), dropped=len(relations) - len(kept))
        return kept
