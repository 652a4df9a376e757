from codegraph_relations.infra.config.groups import (
    ExtractionConfig,
    FilterConfig,
    ObservabilityConfig,
    ProcessingConfig,
)
from codegraph_relations.infra.config.settings import Settings, get_settings, settings

__all__ = [
    "Settings",
    "settings",
    "get_settings",
    "ExtractionConfig",
    "ProcessingConfig",
    "FilterConfig",
    "ObservabilityConfig",
]
