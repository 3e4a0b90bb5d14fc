"""
Result builder for JSON output.
"""

from ..core.types import WaterfallResult
from ..formatters import format_offset, format_time


def _isoformat(value):
    return value.isoformat() if value else ""


def prepare_results(result: WaterfallResult):
    """
    Convert a waterfall result to a JSON-ready document.

    The nested span tree is kept for tree views; flat_spans carries the same
    nodes in waterfall order without children, linked by parent_id.

    Args:
        result: WaterfallResult from WaterfallAnalyzer.analyze

    Returns:
        Dictionary with structured results for rendering
    """
    flat_spans = []
    for span in result.flat_spans:
        item = span.to_dict(include_children=False)
        item['start_offset_formatted'] = format_offset(span.start_offset_ms)
        item['duration_formatted'] = format_time(span.duration_ms)
        flat_spans.append(item)

    return {
        'trace_id': result.trace_id,
        'correlation_type': result.correlation_type.value,
        'total_duration_ms': result.total_duration_ms,
        'total_duration_formatted': format_time(result.total_duration_ms),
        'span_count': result.span_count,
        'error_count': result.error_count,
        'primary_user': result.primary_user,
        'primary_queue': result.primary_queue,
        'type_breakdown': dict(result.type_breakdown),
        'trace_start': _isoformat(result.trace_start),
        'trace_end': _isoformat(result.trace_end),
        'spans': [span.to_dict() for span in result.spans],
        'flat_spans': flat_spans,
        'critical_path': list(result.critical_path),
        'took_ms': round(result.took_ms, 3),
    }
