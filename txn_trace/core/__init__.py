"""Core components for trace analysis."""

from .analyzer import WaterfallAnalyzer
from .types import CorrelationType, LogEntry, LogType, SpanNode, TraceConfig, WaterfallResult

__all__ = [
    "WaterfallAnalyzer",
    "CorrelationType",
    "LogEntry",
    "LogType",
    "SpanNode",
    "TraceConfig",
    "WaterfallResult",
]
