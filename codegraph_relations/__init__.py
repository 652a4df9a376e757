"""
codegraph-relations

Scope-aware semantic relation extractor for Java sources.
"""

__version__ = "0.1.0"
