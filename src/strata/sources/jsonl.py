"""JSON-lines file source.

One JSON object per line, ordered by `key_field`. Each fetch re-reads the
file, so lines appended between fetches are picked up by the next one.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from strata.core.cursors import Cursor, OffsetCursor, TokenCursor
from strata.core.interfaces import IdFactory
from strata.core.models import StreamQuery
from strata.core.streams import DataStream, create, new_stream_id

Record = dict[str, Any]


class JsonlSource:
    """Fetch function over an ordered JSONL file.

    Parameters
    ----------
    path : str | Path
        File to read.
    key_field : str
        Record field holding the ordering key.
    int_key : bool
        Compare keys as integers instead of strings.
    """

    def __init__(self, path: str | Path, key_field: str, *, int_key: bool = False) -> None:
        self.path = Path(path)
        self.key_field = key_field
        self.int_key = int_key

    def key(self, record: Record) -> int | str:
        value = record[self.key_field]
        return int(value) if self.int_key else str(value)

    def new_cursor(self, position: int | str | None = None) -> Cursor[Any, Any]:
        """Cursor ordering records by `key_field`."""
        if self.int_key:
            return OffsetCursor(position, key=self.key)  # type: ignore[arg-type]
        return TokenCursor(position, key=self.key)  # type: ignore[arg-type]

    async def __call__(self, query: StreamQuery[Record]) -> list[Record]:
        return await asyncio.to_thread(self._read_batch, query)

    def _read_batch(self, query: StreamQuery[Record]) -> list[Record]:
        out: list[Record] = []
        if query.batch_size == 0:
            return out
        with open(self.path, encoding="utf-8") as f:
            for lineno, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                try:
                    record = json.loads(line)
                except json.JSONDecodeError as e:
                    raise ValueError(f"{self.path}:{lineno}: invalid JSON ({e.msg})") from e
                if query.cursor.has_reached(record):
                    continue
                out.append(record)
                if query.batch_size is not None and len(out) >= query.batch_size:
                    break
        return out

    def stream(self, *, id: str | None = None, id_factory: IdFactory = new_stream_id) -> DataStream[Record]:
        """Wrap this source as a `DataStream` with key-aware cursors."""
        return create(self, id=id, id_factory=id_factory, cursor_factory=self.new_cursor)
