"""Output builders for the HTTP and CLI layers."""

from .result_builder import prepare_results

__all__ = ["prepare_results"]
