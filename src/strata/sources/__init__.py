"""Concrete fetch functions for local data sources."""

from strata.sources.jsonl import JsonlSource

__all__ = ["JsonlSource"]
