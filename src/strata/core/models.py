"""Query and batch value types.

This module defines:
- `StreamQuery`: one fetch request (cursor + optional batch size).
- `StreamQueryBatch`: one fetch result (items + cursor position at fetch time).

Design notes
------------
- Both are frozen; the cursor *inside* a query is mutated in place by the
  stream's advance policy, the query itself never changes.
- A batch stores the cursor's position value, not the cursor object, so the
  pre-fetch position survives whatever the advance policy does afterwards.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from strata.core.interfaces import ICursor
    from strata.core.streams import DataStream

T = TypeVar("T")


# === Query ===


@dataclass(frozen=True)
class StreamQuery(Generic[T]):
    """A request for the next batch after `cursor`."""

    cursor: ICursor[Any, Any]
    batch_size: int | None = None  # None = unbounded
    stream: DataStream[T] | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.batch_size is not None:
            if isinstance(self.batch_size, bool) or not isinstance(self.batch_size, int):
                raise ValueError(f"batch_size must be an int or None, got {self.batch_size!r}")
            if self.batch_size < 0:
                raise ValueError(f"batch_size must be >= 0, got {self.batch_size}")

    async def next_batch(self) -> StreamQueryBatch[T]:
        """Fetch from the stream that created this query."""
        if self.stream is None:
            raise ValueError("query is not bound to a stream; use stream.fetch(query)")
        return await self.stream.fetch(self)


# === Batch ===


@dataclass(frozen=True)
class StreamQueryBatch(Generic[T]):
    """Items returned by one fetch plus the cursor position it was made at."""

    items: tuple[T, ...]
    cursor_position: Any = None

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __bool__(self) -> bool:
        return bool(self.items)

    @staticmethod
    def empty(cursor_position: Any = None) -> StreamQueryBatch[Any]:
        """Return a batch with no items."""
        return StreamQueryBatch(items=(), cursor_position=cursor_position)
