"""
Flat views and aggregate statistics over span forests.
"""

from collections import Counter
from typing import Dict, List

from ..core.types import SpanNode, log_type_value


class SpanFlattener:
    """Produces ordered flat views of a span forest."""

    @staticmethod
    def flatten_spans(spans: List[SpanNode]) -> List[SpanNode]:
        """
        Flatten a forest in pre-order: a root, its subtree, then the next root.

        Args:
            spans: Root spans of the forest

        Returns:
            All nodes in waterfall reading order
        """
        flat: List[SpanNode] = []
        pending = list(reversed(spans or []))
        while pending:
            node = pending.pop()
            flat.append(node)
            pending.extend(reversed(node.children))
        return flat


class StatsAggregator:
    """Derives summary statistics from flattened spans."""

    @staticmethod
    def compute_type_breakdown(flat_spans: List[SpanNode]) -> Dict[str, int]:
        """Count spans per log type."""
        breakdown: Dict[str, int] = {}
        for span in flat_spans:
            key = log_type_value(span.log_type)
            breakdown[key] = breakdown.get(key, 0) + 1
        return breakdown

    @staticmethod
    def count_errors(flat_spans: List[SpanNode]) -> int:
        """Count spans that failed or carry an error message."""
        return sum(1 for span in flat_spans if span.has_error)

    @staticmethod
    def _most_frequent(values: List[str]) -> str:
        # Counter keeps first-seen order, and max() returns the first maximum
        counts = Counter(value for value in values if value)
        if not counts:
            return ""
        return max(counts, key=counts.get)

    def find_primary_user(self, flat_spans: List[SpanNode]) -> str:
        """Most frequent non-empty user; ties go to the first seen."""
        return self._most_frequent([span.user for span in flat_spans])

    def find_primary_queue(self, flat_spans: List[SpanNode]) -> str:
        """Most frequent non-empty queue; ties go to the first seen."""
        return self._most_frequent([span.queue for span in flat_spans])

    @staticmethod
    def find_slowest_spans(flat_spans: List[SpanNode], limit: int = 5) -> List[SpanNode]:
        """Return the longest spans, keeping waterfall order among equal durations."""
        if limit <= 0:
            return []
        return sorted(flat_spans, key=lambda span: -span.duration_ms)[:limit]
