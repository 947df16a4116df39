from __future__ import annotations

import logging

from .core.combinators import map_items, map_stream, requery
from .core.cursors import ChronologicalCursor, Cursor, KeyCursor, OffsetCursor, TokenCursor
from .core.models import StreamQuery, StreamQueryBatch
from .core.policies import NO_ADVANCE
from .core.projection import FunctionAggregator, project_with
from .core.streams import DataStream, create, from_collection

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "ChronologicalCursor",
    "Cursor",
    "OffsetCursor",
    "KeyCursor",
    "TokenCursor",
    "StreamQuery",
    "StreamQueryBatch",
    "NO_ADVANCE",
    "DataStream",
    "create",
    "from_collection",
    "map_stream",
    "map_items",
    "requery",
    "FunctionAggregator",
    "project_with",
]
