"""
Unit tests for txn_trace.formatters.time_formatter module.
"""
import pytest
from txn_trace.formatters.time_formatter import format_offset, format_time


class TestFormatTime:
    """Tests for the format_time() function."""

    def test_whole_milliseconds(self):
        """Log durations are usually whole milliseconds."""
        assert format_time(0) == "0 ms"
        assert format_time(42) == "42 ms"
        assert format_time(999.0) == "999 ms"

    def test_fractional_milliseconds(self):
        assert format_time(0.5) == "0.50 ms"
        assert format_time(10.25) == "10.25 ms"

    def test_format_seconds(self):
        assert format_time(1000) == "1.00 s"
        assert format_time(1500) == "1.50 s"

    def test_format_minutes(self):
        assert format_time(60000) == "1m 0.00s"
        assert format_time(90000) == "1m 30.00s"
        assert format_time(125500) == "2m 5.50s"

    def test_large_values(self):
        assert format_time(3600000) == "60m 0.00s"


class TestFormatOffset:
    """Tests for the format_offset() function."""

    def test_offsets(self):
        assert format_offset(0) == "+0 ms"
        assert format_offset(1200) == "+1.20 s"

    def test_negative_offset_clamped(self):
        assert format_offset(-5) == "+0 ms"
