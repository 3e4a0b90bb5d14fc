"""
Correlation key resolution for log entries.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from ..core.types import CorrelationType, LogEntry, TraceConfig


class CorrelationResolver:
    """Chooses which identifier groups entries into one logical trace."""

    def __init__(self, config: Optional[TraceConfig] = None):
        """
        Initialize with trace configuration.

        Args:
            config: TraceConfig carrying the correlation precedence
        """
        self.config = config or TraceConfig()

    def resolve(self, entries: Optional[Iterable[LogEntry]]) -> CorrelationType:
        """
        Pick one correlation key type for the whole entry set.

        The first identifier in the configured precedence that any entry
        carries wins; thread_id is used when none of them is present.

        Args:
            entries: Log entries of one capture (may be None)

        Returns:
            CorrelationType tag naming the chosen key
        """
        entries = list(entries or [])
        for name in self.config.correlation_precedence:
            if any(getattr(e, name, '') for e in entries):
                return CorrelationType(name)
        return CorrelationType.THREAD_ID

    def correlation_key(self, entry: LogEntry, correlation_type: CorrelationType) -> str:
        """
        Return the grouping key of an entry for the chosen correlation type.

        Entries lacking the chosen identifier fall back to their thread_id.
        """
        key = getattr(entry, CorrelationType(correlation_type).value, '')
        return key or entry.thread_id or self.config.unknown_thread_id

    def trace_key(self, entries: List[LogEntry], correlation_type: CorrelationType) -> str:
        """
        Return the identifier that names a trace.

        Uses the first non-empty value of the chosen identifier, falling back
        to the first entry's thread key.
        """
        name = CorrelationType(correlation_type).value
        for entry in entries:
            value = getattr(entry, name, '')
            if value:
                return value
        if not entries:
            return ""
        return self.correlation_key(entries[0], correlation_type)

    def group_entries(self, entries: Optional[Iterable[LogEntry]]) -> Dict[str, List[LogEntry]]:
        """
        Group entries by the resolved correlation key.

        Args:
            entries: Log entries, possibly spanning several traces

        Returns:
            Dictionary mapping correlation key -> entries, in first-seen order
        """
        entries = list(entries or [])
        correlation_type = self.resolve(entries)

        groups = defaultdict(list)
        for entry in entries:
            groups[self.correlation_key(entry, correlation_type)].append(entry)
        return dict(groups)
