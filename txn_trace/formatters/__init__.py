"""Formatting helpers for human-readable output."""

from .time_formatter import format_offset, format_time

__all__ = ["format_time", "format_offset"]
