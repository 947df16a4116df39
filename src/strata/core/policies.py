"""Cursor advance policies.

A policy runs after every fetch with the query and the batch it produced.
Exactly one layer of a composed stream may advance a given cursor:
- `advance_past_batch` is what plain streams use by default.
- `NO_ADVANCE` is used by derived streams (map, requery) whose source
  already advanced the cursor during its own fetch.
"""

from __future__ import annotations

from typing import Any

from strata.core.models import StreamQuery, StreamQueryBatch


def advance_past_batch(query: StreamQuery[Any], batch: StreamQueryBatch[Any]) -> None:
    """Default policy: move the query cursor past every item in the batch."""
    query.cursor.advance_past(batch.items)


class NoAdvance:
    """Advance policy that leaves the cursor untouched."""

    def __call__(self, query: StreamQuery[Any], batch: StreamQueryBatch[Any]) -> None:
        return None

    def __repr__(self) -> str:
        return "NO_ADVANCE"


NO_ADVANCE = NoAdvance()
