"""Single-step projection: fetch one batch and fold it into a projection.

`project_with` is deliberately one fetch-and-fold. Continuous projection is
achieved by calling it repeatedly from whatever scheduler the caller owns.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

from strata.core.cursors import Cursor
from strata.core.interfaces import IAggregator
from strata.core.models import StreamQueryBatch
from strata.core.streams import DataStream

logger = logging.getLogger(__name__)

TProjection = TypeVar("TProjection")
TData = TypeVar("TData")


class FunctionAggregator(Generic[TProjection, TData]):
    """Adapt a plain `(projection, batch) -> projection` function to `IAggregator`."""

    def __init__(
        self,
        fn: Callable[[TProjection | None, StreamQueryBatch[TData]], TProjection | Awaitable[TProjection]],
    ) -> None:
        self._fn = fn

    def aggregate(
        self,
        projection: TProjection | None,
        batch: StreamQueryBatch[TData],
    ) -> TProjection | Awaitable[TProjection]:
        return self._fn(projection, batch)


async def project_with(
    stream: DataStream[TData],
    aggregator: IAggregator[TProjection, TData],
    projection: TProjection | None = None,
    *,
    batch_size: int | None = None,
) -> TProjection | None:
    """Fetch one batch from `stream` and fold it into `projection`.

    Parameters
    ----------
    stream : DataStream
        Source of the batch.
    aggregator : IAggregator
        Fold applied when the batch is non-empty.
    projection : object, optional
        Current state. If it is a `Cursor` (its class subclasses one of the
        cursor classes) its own position is queried and advanced; otherwise
        a fresh cursor from the stream is used.
    batch_size : int | None
        Upper bound on items fetched; unbounded by default.

    Returns
    -------
    The aggregator's result, or `projection` itself (same object) when the
    batch is empty.
    """
    cursor: Cursor[Any, Any]
    if isinstance(projection, Cursor):
        cursor = projection
    else:
        cursor = stream.create_cursor()

    batch = await stream.fetch(stream.create_query(cursor, batch_size))
    if not batch:
        logger.debug("stream %s: empty batch, projection unchanged", stream.id)
        return projection

    result = aggregator.aggregate(projection, batch)
    if inspect.isawaitable(result):
        result = await result
    return result
