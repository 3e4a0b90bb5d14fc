"""
Main waterfall analyzer orchestrator.
"""

import time
from datetime import timedelta
from typing import Dict, List, Optional, Tuple

from ..core.types import LogEntry, TraceConfig, WaterfallResult
from ..processors import (
    EntryFileProcessor,
    CorrelationResolver,
    HierarchyBuilder,
    CriticalPathAnalyzer,
    SpanFlattener,
    StatsAggregator,
)
from ..formatters import format_time


class WaterfallAnalyzer:
    """Main orchestrator for transaction trace analysis."""

    def __init__(
        self,
        include_critical_path: bool = True,
        correlation_precedence: Tuple[str, ...] = ("trace_id", "rpc_id"),
        unknown_thread_id: str = "unknown"
    ):
        """
        Initialize the WaterfallAnalyzer.

        Args:
            include_critical_path: If True, computes and marks the critical path
            correlation_precedence: Identifier fields tried in order when grouping entries
            unknown_thread_id: Thread group key for entries without a thread_id
        """
        # Configuration
        self.config = TraceConfig(
            correlation_precedence=correlation_precedence,
            include_critical_path=include_critical_path,
            unknown_thread_id=unknown_thread_id
        )

        # Initialize components
        self.file_processor = EntryFileProcessor()
        self.correlation_resolver = CorrelationResolver(self.config)
        self.hierarchy_builder = HierarchyBuilder(self.config)
        self.critical_path_analyzer = CriticalPathAnalyzer()
        self.flattener = SpanFlattener()
        self.stats_aggregator = StatsAggregator()

    def analyze(self, entries: Optional[List[LogEntry]], trace_id: str = "") -> WaterfallResult:
        """
        Analyze the entries of one trace.

        Every call builds and owns its own forest, so separate traces can be
        analyzed concurrently with one analyzer.

        Args:
            entries: Log entries scoped to one correlation key (None is treated as empty)
            trace_id: Identifier to report; derived from the entries when empty

        Returns:
            WaterfallResult with the forest, critical path and aggregates
        """
        started = time.perf_counter()
        entries = list(entries or [])

        # Step 1: Decide how the entries were correlated
        correlation_type = self.correlation_resolver.resolve(entries)
        if not entries:
            return WaterfallResult(
                trace_id=trace_id,
                correlation_type=correlation_type,
                took_ms=(time.perf_counter() - started) * 1000.0
            )

        if not trace_id:
            trace_id = self.correlation_resolver.trace_key(entries, correlation_type)

        # Step 2: Build the span forest
        spans = self.hierarchy_builder.build(entries)
        flat_spans = self.flattener.flatten_spans(spans)

        trace_start = min(e.timestamp for e in entries)
        trace_end = max(e.timestamp for e in entries)
        total_duration_ms = (trace_end - trace_start) // timedelta(milliseconds=1)

        # Step 3: Critical path and per-span contribution
        critical_path: List[str] = []
        if self.config.include_critical_path:
            critical_path = self.critical_path_analyzer.compute_critical_path(spans)
            self.critical_path_analyzer.mark_critical_path(spans, critical_path)
        self.critical_path_analyzer.annotate_contributions(spans, total_duration_ms)

        # Step 4: Aggregates
        return WaterfallResult(
            trace_id=trace_id,
            correlation_type=correlation_type,
            total_duration_ms=total_duration_ms,
            trace_start=trace_start,
            trace_end=trace_end,
            spans=spans,
            flat_spans=flat_spans,
            critical_path=critical_path,
            type_breakdown=self.stats_aggregator.compute_type_breakdown(flat_spans),
            error_count=self.stats_aggregator.count_errors(flat_spans),
            primary_user=self.stats_aggregator.find_primary_user(flat_spans),
            primary_queue=self.stats_aggregator.find_primary_queue(flat_spans),
            took_ms=(time.perf_counter() - started) * 1000.0
        )

    def analyze_groups(self, entries: Optional[List[LogEntry]]) -> Dict[str, WaterfallResult]:
        """
        Split entries into traces by correlation key and analyze each one.

        Args:
            entries: Log entries possibly spanning several traces

        Returns:
            Dictionary mapping correlation key -> WaterfallResult
        """
        groups = self.correlation_resolver.group_entries(entries)
        return {key: self.analyze(group, trace_id=key) for key, group in groups.items()}

    def analyze_file(self, file_path: str) -> Dict[str, WaterfallResult]:
        """
        Load entries from a JSON file and analyze every trace in it.

        Args:
            file_path: Path to the entry JSON file

        Returns:
            Dictionary mapping correlation key -> WaterfallResult
        """
        # Step 1: Read entries
        entries = self.file_processor.process_file(file_path)

        # Step 2: Group and analyze
        results = self.analyze_groups(entries)

        # Step 3: Report summary
        correlation_type = self.correlation_resolver.resolve(entries)
        total_errors = sum(r.error_count for r in results.values())
        print(f"\nFound {len(results)} traces correlated by {correlation_type.value}")
        print(f"Found {sum(r.span_count for r in results.values())} spans with {total_errors} errors")

        return results

    def format_time(self, ms: float) -> str:
        """
        Format time in milliseconds to a human-readable string.

        Args:
            ms: Time in milliseconds

        Returns:
            Formatted time string
        """
        return format_time(ms)
