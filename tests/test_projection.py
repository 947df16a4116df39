from dataclasses import dataclass, field
from unittest.mock import MagicMock

import pytest

from strata.core.cursors import OffsetCursor
from strata.core.models import StreamQueryBatch
from strata.core.projection import FunctionAggregator, project_with
from strata.core.streams import DataStream, from_collection


class RunningSum(OffsetCursor):
    """Projection that carries its own cursor."""

    def __init__(self) -> None:
        super().__init__(0)
        self.total = 0


class SumAggregator:
    def __init__(self) -> None:
        self.calls = 0

    def aggregate(self, projection: RunningSum | None, batch: StreamQueryBatch[int]) -> RunningSum:
        assert projection is not None
        self.calls += 1
        projection.total += sum(batch)
        return projection


@dataclass
class Tally:
    seen: list[int] = field(default_factory=list)


@pytest.mark.asyncio
async def test_running_sum_end_to_end(numbers: DataStream[int]) -> None:
    projection = RunningSum()
    aggregator = SumAggregator()

    expected = [(3, 2), (10, 4), (15, 5)]
    for total, position in expected:
        projection = await project_with(numbers, aggregator, projection, batch_size=2)
        assert projection.total == total
        assert projection.position == position

    # Source exhausted: same object back, no fold.
    final = await project_with(numbers, aggregator, projection, batch_size=2)
    assert final is projection
    assert (final.total, final.position) == (15, 5)
    assert aggregator.calls == 3


@pytest.mark.asyncio
async def test_empty_batch_returns_same_projection_without_aggregating() -> None:
    stream = from_collection([])
    aggregator = MagicMock()
    projection = Tally()

    result = await project_with(stream, aggregator, projection)

    assert result is projection
    aggregator.aggregate.assert_not_called()


@pytest.mark.asyncio
async def test_plain_projection_uses_fresh_cursor_each_step(numbers: DataStream[int]) -> None:
    def fold(tally: Tally | None, batch: StreamQueryBatch[int]) -> Tally:
        tally = tally or Tally()
        tally.seen.extend(batch)
        return tally

    aggregator = FunctionAggregator(fold)
    tally = await project_with(numbers, aggregator, batch_size=2)
    tally = await project_with(numbers, aggregator, tally, batch_size=2)

    assert tally is not None
    assert tally.seen == [1, 2, 1, 2]


@pytest.mark.asyncio
async def test_async_aggregator_is_awaited(numbers: DataStream[int]) -> None:
    async def fold(total: int | None, batch: StreamQueryBatch[int]) -> int:
        return (total or 0) + sum(batch)

    assert await project_with(numbers, FunctionAggregator(fold), 0) == 15


@pytest.mark.asyncio
async def test_aggregator_error_propagates(numbers: DataStream[int]) -> None:
    def fold(projection: object, batch: StreamQueryBatch[int]) -> object:
        raise RuntimeError("fold failed")

    with pytest.raises(RuntimeError, match="fold failed"):
        await project_with(numbers, FunctionAggregator(fold), Tally())
