"""
Transaction Trace Analyzer - waterfall and critical path analysis for rule engine logs
"""

__version__ = "1.0.0"

from .core.analyzer import WaterfallAnalyzer
from .core.types import CorrelationType, LogEntry, LogType, SpanNode, TraceConfig, WaterfallResult

__all__ = [
    "WaterfallAnalyzer",
    "CorrelationType",
    "LogEntry",
    "LogType",
    "SpanNode",
    "TraceConfig",
    "WaterfallResult",
]
