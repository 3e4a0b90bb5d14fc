"""
Time formatting utilities for human-readable output.
"""


def format_time(ms: float) -> str:
    """
    Format a span or trace duration in milliseconds.

    Args:
        ms: Duration in milliseconds

    Returns:
        Formatted time string (e.g., "42 ms", "2.34 s", "1m 30.50s")
    """
    if ms < 1000:
        if float(ms).is_integer():
            return f"{int(ms)} ms"
        return f"{ms:.2f} ms"
    elif ms < 60000:
        return f"{ms/1000:.2f} s"
    else:
        minutes = int(ms // 60000)
        seconds = (ms % 60000) / 1000
        return f"{minutes}m {seconds:.2f}s"


def format_offset(ms: float) -> str:
    """Format a start offset relative to the trace start, e.g. "+1.20 s"."""
    return f"+{format_time(max(ms, 0))}"
