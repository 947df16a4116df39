import itertools
from collections.abc import Callable

import pytest

from strata.core.streams import DataStream, from_collection


@pytest.fixture
def id_factory() -> Callable[[], str]:
    counter = itertools.count(1)
    return lambda: f"stream-{next(counter)}"


@pytest.fixture
def numbers(id_factory: Callable[[], str]) -> DataStream[int]:
    return from_collection([1, 2, 3, 4, 5], id_factory=id_factory)
