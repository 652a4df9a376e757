"""
Pipeline: batch processing, noise filtering, JSONL and Mermaid export.
"""

from .exporter import JsonlExporter, read_jsonl
from .mermaid import MermaidExporter, safe_id
from .noise_filter import NoiseFilter, NoiseLevel
from .processor import BatchProcessor, BatchResult, process_sources

__all__ = [
    "BatchProcessor",
    "BatchResult",
    "process_sources",
    "NoiseFilter",
    "NoiseLevel",
    "JsonlExporter",
    "read_jsonl",
    "MermaidExporter",
    "safe_id",
]
