"""Stream combinators: build new streams out of existing ones.

Derived streams never advance a cursor themselves. The source stream's own
policy already did so inside its `fetch`, so every derived stream carries
`NO_ADVANCE`; advancing twice would silently skip items.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar

from strata.core.interfaces import IdFactory
from strata.core.models import StreamQuery, StreamQueryBatch
from strata.core.policies import NO_ADVANCE
from strata.core.streams import DataStream, new_stream_id

TFrom = TypeVar("TFrom")
TTo = TypeVar("TTo")
TUp = TypeVar("TUp")
TDown = TypeVar("TDown")


def map_stream(
    source: DataStream[TFrom],
    transform: Callable[[Sequence[TFrom]], Iterable[TTo]],
    *,
    id: str | None = None,
) -> DataStream[TTo]:
    """Derive a stream whose batches are `transform(source_batch.items)`.

    `transform` sees the whole batch, so it may filter, flatten or reorder.
    The derived stream keeps the source's id unless `id` is given.
    """

    async def fetch_batch(query: StreamQuery[TTo]) -> StreamQueryBatch[TTo]:
        source_batch = await source.fetch(source.create_query(query.cursor, query.batch_size))
        return StreamQueryBatch(
            items=tuple(transform(source_batch.items)),
            cursor_position=source_batch.cursor_position,
        )

    return DataStream(
        id if id is not None else source.id,
        fetch_batch,
        NO_ADVANCE,
        cursor_factory=source.create_cursor,
    )


def map_items(
    source: DataStream[TFrom],
    func: Callable[[TFrom], TTo],
    *,
    id: str | None = None,
) -> DataStream[TTo]:
    """Elementwise `map_stream`."""
    return map_stream(source, lambda items: [func(x) for x in items], id=id)


def requery(
    upstream: DataStream[TUp],
    derive: Callable[[TUp], DataStream[TDown]],
    *,
    id: str | None = None,
    id_factory: IdFactory = new_stream_id,
) -> DataStream[DataStream[TDown]]:
    """Fan out: one independent downstream stream per upstream item.

    Each fetch pulls a single upstream batch (advancing the upstream cursor)
    and returns `derive(item)` for every item, in upstream order. The
    downstream streams manage their own, unrelated cursors.
    """

    async def fetch_batch(query: StreamQuery[DataStream[TDown]]) -> StreamQueryBatch[DataStream[TDown]]:
        upstream_batch = await upstream.fetch(upstream.create_query(query.cursor, query.batch_size))
        return StreamQueryBatch(
            items=tuple(derive(item) for item in upstream_batch.items),
            cursor_position=upstream_batch.cursor_position,
        )

    return DataStream(
        id if id is not None else id_factory(),
        fetch_batch,
        NO_ADVANCE,
        cursor_factory=upstream.create_cursor,
    )
