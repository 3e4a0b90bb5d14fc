"""
Type definitions for transaction trace analysis.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class LogType(str, Enum):
    """Kinds of entries emitted by the rule engine."""
    API = "API"
    SQL = "SQL"
    FILTER = "FLTR"
    ESCALATION = "ESCL"


class CorrelationType(str, Enum):
    """Identifier used to group entries into one trace."""
    TRACE_ID = "trace_id"
    RPC_ID = "rpc_id"
    THREAD_ID = "thread_id"


def log_type_value(log_type) -> str:
    """Return the plain string value of a LogType or an unknown kind."""
    if isinstance(log_type, LogType):
        return log_type.value
    return str(log_type or "")


def coerce_log_type(value):
    """Map a raw value onto LogType, keeping unknown kinds as strings."""
    if isinstance(value, LogType):
        return value
    try:
        return LogType(str(value).upper())
    except ValueError:
        return str(value or "")


def _as_utc(value: datetime) -> datetime:
    # Timestamps without an offset are taken as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def parse_timestamp(value) -> datetime:
    """
    Parse an entry timestamp.

    Args:
        value: datetime, ISO-8601 string or epoch milliseconds

    Returns:
        Timezone-aware datetime instance

    Raises:
        ValueError: If the value cannot be interpreted as a timestamp
    """
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, bool):
        raise ValueError(f"Invalid timestamp: {value!r}")
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
    if isinstance(value, str) and value:
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            return _as_utc(datetime.fromisoformat(text))
        except ValueError:
            pass
    raise ValueError(f"Invalid timestamp: {value!r}")


@dataclass(frozen=True)
class LogEntry:
    """A single captured log entry. Read-only input to the analysis."""
    entry_id: str
    timestamp: datetime
    log_type: Any
    duration_ms: float = 0
    thread_id: str = ""
    trace_id: str = ""
    rpc_id: str = ""
    filter_level: Optional[int] = None
    api_code: str = ""
    form: str = ""
    sql_table: str = ""
    user: str = ""
    queue: str = ""
    success: bool = True
    error_message: str = ""
    line_number: int = 0
    sql_statement: str = ""
    filter_name: str = ""
    operation: str = ""
    esc_name: str = ""
    esc_pool: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LogEntry':
        """
        Create a LogEntry from a JSON mapping.

        Raises:
            ValueError: If entry_id or timestamp is missing or invalid
        """
        if not isinstance(data, dict):
            raise ValueError(f"Entry must be an object, got {type(data).__name__}")

        entry_id = data.get('entry_id') or data.get('id')
        if not entry_id:
            raise ValueError("Entry is missing 'entry_id'")
        if data.get('timestamp') in (None, ''):
            raise ValueError(f"Entry {entry_id} is missing 'timestamp'")

        filter_level = data.get('filter_level')
        if filter_level in (None, ''):
            filter_level = None
        else:
            filter_level = int(filter_level)

        return cls(
            entry_id=str(entry_id),
            timestamp=parse_timestamp(data['timestamp']),
            log_type=coerce_log_type(data.get('log_type', '')),
            duration_ms=float(data.get('duration_ms') or 0),
            thread_id=str(data.get('thread_id') or ''),
            trace_id=str(data.get('trace_id') or ''),
            rpc_id=str(data.get('rpc_id') or ''),
            filter_level=filter_level,
            api_code=data.get('api_code') or '',
            form=data.get('form') or '',
            sql_table=data.get('sql_table') or '',
            user=data.get('user') or '',
            queue=data.get('queue') or '',
            success=bool(data.get('success', True)),
            error_message=data.get('error_message') or '',
            line_number=int(data.get('line_number') or 0),
            sql_statement=data.get('sql_statement') or '',
            filter_name=data.get('filter_name') or '',
            operation=data.get('operation') or '',
            esc_name=data.get('esc_name') or '',
            esc_pool=data.get('esc_pool') or '',
        )


# Type-specific entry fields copied onto a span when non-empty
SPAN_DETAIL_FIELDS: Tuple[str, ...] = (
    'api_code', 'form', 'sql_table', 'sql_statement', 'filter_name',
    'filter_level', 'operation', 'esc_name', 'esc_pool',
)


@dataclass
class SpanNode:
    """One entry placed into the causal tree."""
    id: str
    log_type: Any
    start_offset_ms: int
    duration_ms: float
    parent_id: Optional[str] = None
    depth: int = 0
    children: List['SpanNode'] = field(default_factory=list)
    on_critical_path: bool = False
    success: bool = True
    error_message: str = ""
    user: str = ""
    queue: str = ""
    thread_id: str = ""
    timestamp: Optional[datetime] = None
    fields: Dict[str, Any] = field(default_factory=dict)
    contribution_pct: float = 0.0

    @property
    def end_offset_ms(self) -> float:
        return self.start_offset_ms + self.duration_ms

    @property
    def has_error(self) -> bool:
        return not self.success or bool(self.error_message)

    def to_dict(self, include_children: bool = True) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = {
            'id': self.id,
            'parent_id': self.parent_id,
            'log_type': log_type_value(self.log_type),
            'start_offset_ms': self.start_offset_ms,
            'duration_ms': self.duration_ms,
            'depth': self.depth,
            'on_critical_path': self.on_critical_path,
            'contribution_pct': self.contribution_pct,
            'success': self.success,
            'has_error': self.has_error,
            'error_message': self.error_message,
            'user': self.user,
            'queue': self.queue,
            'thread_id': self.thread_id,
            'timestamp': self.timestamp.isoformat() if self.timestamp else None,
            'fields': dict(self.fields),
        }
        if include_children:
            data['children'] = [child.to_dict() for child in self.children]
        return data


class TraceConfig:
    """Configuration for trace analysis."""

    def __init__(
        self,
        correlation_precedence: Tuple[str, ...] = ("trace_id", "rpc_id"),
        include_critical_path: bool = True,
        unknown_thread_id: str = "unknown"
    ):
        """
        Initialize trace analysis configuration.

        Args:
            correlation_precedence: Identifier fields tried in order when choosing
                                    the correlation key. thread_id is always the
                                    final fallback.
                                    Default: ("trace_id", "rpc_id")

            include_critical_path: If True, computes and marks the critical path.
                                   Default: True

            unknown_thread_id: Group key used for entries without a thread_id.
                               Default: "unknown"
        """
        self.correlation_precedence = tuple(
            CorrelationType(name).value for name in correlation_precedence
        )
        self.include_critical_path = include_critical_path
        self.unknown_thread_id = unknown_thread_id


@dataclass
class WaterfallResult:
    """Outcome of analysing one trace."""
    trace_id: str = ""
    correlation_type: CorrelationType = CorrelationType.THREAD_ID
    total_duration_ms: int = 0
    trace_start: Optional[datetime] = None
    trace_end: Optional[datetime] = None
    spans: List[SpanNode] = field(default_factory=list)
    flat_spans: List[SpanNode] = field(default_factory=list)
    critical_path: List[str] = field(default_factory=list)
    type_breakdown: Dict[str, int] = field(default_factory=dict)
    error_count: int = 0
    primary_user: str = ""
    primary_queue: str = ""
    took_ms: float = 0.0

    @property
    def span_count(self) -> int:
        return len(self.flat_spans)
