"""
Hierarchy builder for transaction trace entries.
"""

from collections import defaultdict
from datetime import timedelta
from typing import Dict, List, Optional, Tuple

from ..core.types import (
    LogEntry,
    LogType,
    SpanNode,
    SPAN_DETAIL_FIELDS,
    TraceConfig,
    log_type_value,
)

# Lower ranks sit closer to the root. Filters rank by their level.
NESTING_RANK: Dict[str, int] = {
    LogType.API.value: 0,
    LogType.ESCALATION.value: 0,
    LogType.SQL.value: 10,
}
DEFAULT_NESTING_RANK = 5

CALL_TYPES = (LogType.API.value, LogType.ESCALATION.value)


class HierarchyBuilder:
    """Builds a forest of span trees from a flat, time-ordered entry list."""

    def __init__(self, config: Optional[TraceConfig] = None):
        """
        Initialize with trace configuration.

        Args:
            config: TraceConfig instance (thread grouping fallback key)
        """
        self.config = config or TraceConfig()

    def build(self, entries: Optional[List[LogEntry]]) -> List[SpanNode]:
        """Build the forest and return its roots."""
        roots, _ = self.build_raw_hierarchy(entries)
        return roots

    def build_raw_hierarchy(
        self, entries: Optional[List[LogEntry]]
    ) -> Tuple[List[SpanNode], Dict[str, SpanNode]]:
        """
        Build a forest from a flat list of entries belonging to one trace.

        Entries are partitioned by thread first; nesting only happens within
        a thread. Each thread is linked with a single greedy pass over an
        explicit stack of open ancestor candidates.

        Args:
            entries: Log entries of one trace

        Returns:
            Tuple of (roots, span_nodes_dict)
            - roots: Root spans, thread groups ordered by first timestamp
            - span_nodes_dict: Flat mapping of span id -> node for lookups
        """
        if not entries:
            return [], {}

        ordered = sorted(entries, key=lambda e: (e.timestamp, e.line_number))
        trace_start = ordered[0].timestamp

        # Arena of nodes; the stack and thread groups hold indices into it
        arena: List[SpanNode] = []
        index_by_id: Dict[str, int] = {}
        thread_groups: Dict[str, List[int]] = defaultdict(list)

        for entry in ordered:
            index = len(arena)
            arena.append(self._entry_to_span(entry, trace_start))
            index_by_id.setdefault(entry.entry_id, index)
            thread_key = entry.thread_id or self.config.unknown_thread_id
            thread_groups[thread_key].append(index)

        root_indices: List[int] = []
        for indices in thread_groups.values():
            root_indices.extend(self._link_thread(arena, ordered, indices))

        roots = [arena[i] for i in root_indices]
        span_nodes = {span_id: arena[i] for span_id, i in index_by_id.items()}
        return roots, span_nodes

    def _link_thread(
        self, arena: List[SpanNode], entries: List[LogEntry], indices: List[int]
    ) -> List[int]:
        """
        Attach the entries of one thread to their causal parents.

        Args:
            arena: All nodes of the trace (children lists modified in-place)
            entries: Entries aligned with the arena
            indices: Arena indices of this thread, in arrival order

        Returns:
            Arena indices of the thread's root spans
        """
        roots: List[int] = []
        stack: List[int] = []

        for index in indices:
            node = arena[index]
            entry = entries[index]

            # Drop candidates whose window closed before this entry started
            while stack and arena[stack[-1]].end_offset_ms < node.start_offset_ms:
                stack.pop()

            if self._has_filter_level(entry):
                while stack and self._yields_to_filter(entries[stack[-1]], entry.filter_level):
                    stack.pop()
            else:
                while stack and not self._can_nest(
                    arena[stack[-1]], entries[stack[-1]], node, entry
                ):
                    stack.pop()

            if stack:
                parent = arena[stack[-1]]
                node.parent_id = parent.id
                node.depth = len(stack)
                parent.children.append(node)
            else:
                roots.append(index)

            stack.append(index)

        return roots

    @staticmethod
    def _has_filter_level(entry: LogEntry) -> bool:
        return (log_type_value(entry.log_type) == LogType.FILTER.value
                and bool(entry.filter_level) and entry.filter_level > 0)

    def _yields_to_filter(self, frame: LogEntry, filter_level: int) -> bool:
        """True if an open frame must close before a filter of this level attaches."""
        return self._nesting_rank(frame) >= filter_level

    def _can_nest(
        self, parent: SpanNode, parent_entry: LogEntry, child: SpanNode, child_entry: LogEntry
    ) -> bool:
        """
        Decide whether a child may attach under an open parent candidate.

        SQL statements never parent anything. A call (API/escalation) only nests
        when its window is strictly contained in the parent's. Other entries nest
        when they start inside the parent window and rank deeper than the parent.
        """
        if log_type_value(parent.log_type) == LogType.SQL.value:
            return False

        if log_type_value(child.log_type) in CALL_TYPES:
            return self._strictly_contains(parent, child)

        if not parent.start_offset_ms <= child.start_offset_ms <= parent.end_offset_ms:
            return False
        return self._nesting_rank(child_entry) > self._nesting_rank(parent_entry)

    @staticmethod
    def _strictly_contains(parent: SpanNode, child: SpanNode) -> bool:
        inside = (child.start_offset_ms >= parent.start_offset_ms
                  and child.end_offset_ms <= parent.end_offset_ms)
        identical = (child.start_offset_ms == parent.start_offset_ms
                     and child.end_offset_ms == parent.end_offset_ms)
        return inside and not identical

    @staticmethod
    def _nesting_rank(entry: LogEntry) -> int:
        log_type = log_type_value(entry.log_type)
        if log_type == LogType.FILTER.value:
            return entry.filter_level if entry.filter_level and entry.filter_level > 0 else 1
        return NESTING_RANK.get(log_type, DEFAULT_NESTING_RANK)

    @staticmethod
    def _entry_to_span(entry: LogEntry, trace_start) -> SpanNode:
        """Create an unlinked span node from an entry."""
        start_offset_ms = (entry.timestamp - trace_start) // timedelta(milliseconds=1)

        fields = {}
        for name in SPAN_DETAIL_FIELDS:
            value = getattr(entry, name)
            if value:
                fields[name] = value

        return SpanNode(
            id=entry.entry_id,
            log_type=entry.log_type,
            start_offset_ms=start_offset_ms,
            duration_ms=entry.duration_ms,
            success=entry.success,
            error_message=entry.error_message or "",
            user=entry.user,
            queue=entry.queue,
            thread_id=entry.thread_id,
            timestamp=entry.timestamp,
            fields=fields,
        )
