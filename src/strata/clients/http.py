"""Lightweight async client for cursor-paginated JSON feeds.

This module provides:
- `HttpFeedClient`: an async fetch function over `GET <url>?after=..&limit=..`
- `feed_params`: helper building the query-string for one stream query

The response body is either a JSON list of items or a JSON object holding
the list under `items_field`.
"""

from __future__ import annotations

from typing import Any

import httpx

from strata.core.cursors import Cursor, OffsetCursor, TokenCursor
from strata.core.interfaces import IdFactory
from strata.core.models import StreamQuery
from strata.core.streams import DataStream, create, new_stream_id


def feed_params(
    query: StreamQuery[Any],
    *,
    after_param: str = "after",
    limit_param: str = "limit",
) -> dict[str, str]:
    """Query-string for a stream query; unset values are omitted."""
    params: dict[str, str] = {}
    if query.cursor.position is not None:
        params[after_param] = str(query.cursor.position)
    if query.batch_size is not None:
        params[limit_param] = str(query.batch_size)
    return params


class HttpFeedClient:
    """Minimal async feed client.

    Parameters
    ----------
    url : str
        Feed endpoint URL.
    key_field : str
        Item field holding the ordering key (used by `new_cursor`).
    int_key : bool
        Compare keys as integers instead of strings.
    timeout_s : int
        Per-operation timeout in seconds (connect/read/write).
    items_field : str
        Field of an object response that holds the item list.
    transport : httpx.AsyncBaseTransport, optional
        Custom transport (tests use `httpx.MockTransport`).
    """

    def __init__(
        self,
        url: str,
        key_field: str,
        *,
        int_key: bool = False,
        timeout_s: int = 20,
        after_param: str = "after",
        limit_param: str = "limit",
        items_field: str = "items",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self.key_field = key_field
        self.int_key = int_key
        self.after_param = after_param
        self.limit_param = limit_param
        self.items_field = items_field
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(
                connect=timeout_s,
                read=timeout_s,
                write=timeout_s,
                pool=max(30, timeout_s * 3),
            ),
            transport=transport,
        )

    def key(self, item: dict[str, Any]) -> int | str:
        value = item[self.key_field]
        return int(value) if self.int_key else str(value)

    def new_cursor(self, position: int | str | None = None) -> Cursor[Any, Any]:
        """Cursor ordering items by `key_field`."""
        if self.int_key:
            return OffsetCursor(None if position is None else int(position), key=self.key)
        return TokenCursor(position, key=self.key)  # type: ignore[arg-type]

    async def __call__(self, query: StreamQuery[dict[str, Any]]) -> list[dict[str, Any]]:
        """Fetch the items after `query.cursor`, at most `query.batch_size`."""
        if query.batch_size == 0:
            return []
        params = feed_params(query, after_param=self.after_param, limit_param=self.limit_param)
        r = await self.client.get(self.url, params=params)
        r.raise_for_status()
        data = r.json()

        if isinstance(data, dict):
            data = data.get(self.items_field)
        if not isinstance(data, list):
            raise ValueError(f"feed response has no item list (expected list or '{self.items_field}')")

        items = [item for item in data if not query.cursor.has_reached(item)]
        if query.batch_size is not None:
            items = items[: query.batch_size]
        return items

    def stream(self, *, id: str | None = None, id_factory: IdFactory = new_stream_id) -> DataStream[dict[str, Any]]:
        """Wrap this client as a `DataStream` (id defaults to a fresh one)."""
        return create(self, id=id, id_factory=id_factory, cursor_factory=self.new_cursor)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> HttpFeedClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()
