"""Data streams: identified, cursor-driven sources of ordered batches.

This module provides:
- `DataStream`: fetch + advance policy + identity.
- `create(...)`: wrap any sync/async `query -> iterable` function as a stream.
- `from_collection(...)`: wrap a finite ordered collection as a stream.
- `new_stream_id()`: default identity factory.
"""

from __future__ import annotations

import inspect
import itertools
import logging
import uuid
from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import Any, Generic, TypeVar

from strata.core.cursors import Cursor, KeyCursor
from strata.core.interfaces import FetchFn, IAdvancePolicy, IdFactory
from strata.core.models import StreamQuery, StreamQueryBatch
from strata.core.policies import advance_past_batch

logger = logging.getLogger(__name__)

T = TypeVar("T")

BatchFetchFn = Callable[[StreamQuery[T]], Awaitable[StreamQueryBatch[T]]]
CursorFactory = Callable[[], Cursor[Any, Any]]


def new_stream_id() -> str:
    """Globally unique stream identity."""
    return str(uuid.uuid4())


def default_cursor() -> Cursor[Any, Any]:
    """Cursor that has reached nothing and orders items by identity."""
    return KeyCursor()


class DataStream(Generic[T]):
    """An identified asynchronous source of ordered batches.

    Parameters
    ----------
    id : str
        Caller-meaningful label, e.g. a persistence key.
    fetch_batch : callable
        Coroutine function `query -> StreamQueryBatch`.
    advance : callable, optional
        Advance policy override. When omitted the cursor is moved past the
        returned items after each fetch.
    cursor_factory : callable
        Builds the cursor used when a caller has none (`create_cursor`).
    """

    def __init__(
        self,
        id: str,
        fetch_batch: BatchFetchFn[T],
        advance: IAdvancePolicy | None = None,
        *,
        cursor_factory: CursorFactory = default_cursor,
    ) -> None:
        self._id = id
        self._fetch_batch = fetch_batch
        self._advance = advance
        self._cursor_factory = cursor_factory

    @property
    def id(self) -> str:
        return self._id

    @property
    def advance_policy(self) -> IAdvancePolicy:
        return self._advance if self._advance is not None else advance_past_batch

    def create_cursor(self) -> Cursor[Any, Any]:
        return self._cursor_factory()

    def create_query(
        self,
        cursor: Cursor[Any, Any] | None = None,
        batch_size: int | None = None,
    ) -> StreamQuery[T]:
        """Build a query bound to this stream (fresh cursor if none given)."""
        if cursor is None:
            cursor = self.create_cursor()
        return StreamQuery(cursor=cursor, batch_size=batch_size, stream=self)

    async def fetch(self, query: StreamQuery[T]) -> StreamQueryBatch[T]:
        """Fetch one batch, then run the advance policy on `query.cursor`.

        The returned batch carries the cursor position from before the
        policy ran. Errors from the underlying fetch propagate unchanged and
        leave the cursor untouched.
        """
        batch = await self._fetch_batch(query)
        logger.debug(
            "stream %s fetched %d item(s) at %r (batch_size=%s)",
            self._id,
            len(batch.items),
            batch.cursor_position,
            query.batch_size,
        )

        result = self.advance_policy(query, batch)
        if inspect.isawaitable(result):
            await result
        return batch

    def __repr__(self) -> str:
        return f"DataStream(id={self._id!r})"


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


def create(
    fetch: FetchFn[T],
    advance: IAdvancePolicy | None = None,
    *,
    id: str | None = None,
    id_factory: IdFactory = new_stream_id,
    cursor_factory: CursorFactory = default_cursor,
) -> DataStream[T]:
    """Wrap a sync or async `query -> iterable` function as a stream."""

    async def fetch_batch(query: StreamQuery[T]) -> StreamQueryBatch[T]:
        position = query.cursor.position
        result = fetch(query)
        if inspect.isawaitable(result):
            result = await result
        return StreamQueryBatch(items=tuple(result), cursor_position=position)

    return DataStream(
        id if id is not None else id_factory(),
        fetch_batch,
        advance,
        cursor_factory=cursor_factory,
    )


def from_collection(
    items: Iterable[T],
    *,
    id: str | None = None,
    id_factory: IdFactory = new_stream_id,
    cursor_factory: CursorFactory = default_cursor,
) -> DataStream[T]:
    """Stream over a finite ordered collection.

    Each fetch skips the leading items the cursor has reached, then returns
    up to `batch_size` of the rest. A `Sequence` is read live on every fetch,
    so appends to a list show up in later batches.
    """
    source: Sequence[T] = items if isinstance(items, Sequence) else tuple(items)

    def fetch(query: StreamQuery[T]) -> list[T]:
        remaining = itertools.dropwhile(query.cursor.has_reached, source)
        if query.batch_size is None:
            return list(remaining)
        return list(itertools.islice(remaining, query.batch_size))

    return create(fetch, id=id, id_factory=id_factory, cursor_factory=cursor_factory)
