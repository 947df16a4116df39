"""Core stream abstraction.

This package provides:
- Cursors (ChronologicalCursor, OffsetCursor, KeyCursor, TokenCursor)
- Query / batch value types (StreamQuery, StreamQueryBatch)
- DataStream and its constructors (create, from_collection)
- Combinators (map_stream, map_items, requery) and the projection step
"""

from strata.core.combinators import map_items, map_stream, requery
from strata.core.config import FetchConfig
from strata.core.cursors import ChronologicalCursor, Cursor, KeyCursor, OffsetCursor, TokenCursor
from strata.core.interfaces import FetchFn, IAdvancePolicy, IAggregator, ICursor, IdFactory
from strata.core.models import StreamQuery, StreamQueryBatch
from strata.core.policies import NO_ADVANCE, advance_past_batch
from strata.core.projection import FunctionAggregator, project_with
from strata.core.streams import DataStream, create, default_cursor, from_collection, new_stream_id

__all__ = [
    "ChronologicalCursor",
    "Cursor",
    "OffsetCursor",
    "KeyCursor",
    "TokenCursor",
    "ICursor",
    "IAggregator",
    "IAdvancePolicy",
    "FetchFn",
    "IdFactory",
    "StreamQuery",
    "StreamQueryBatch",
    "NO_ADVANCE",
    "advance_past_batch",
    "DataStream",
    "create",
    "default_cursor",
    "from_collection",
    "new_stream_id",
    "map_stream",
    "map_items",
    "requery",
    "FunctionAggregator",
    "project_with",
    "FetchConfig",
]
