"""Processors for trace reconstruction and analysis."""

from .file_processor import EntryFileProcessor
from .correlation import CorrelationResolver
from .hierarchy_builder import HierarchyBuilder
from .critical_path import CriticalPathAnalyzer
from .aggregator import SpanFlattener, StatsAggregator

__all__ = [
    "EntryFileProcessor",
    "CorrelationResolver",
    "HierarchyBuilder",
    "CriticalPathAnalyzer",
    "SpanFlattener",
    "StatsAggregator",
]
