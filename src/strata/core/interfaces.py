from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import Any, Protocol, TypeVar, Union, runtime_checkable

from strata.core.models import StreamQuery, StreamQueryBatch

P = TypeVar("P")
I_contra = TypeVar("I_contra", contravariant=True)
T = TypeVar("T")
TProjection = TypeVar("TProjection")
TData_contra = TypeVar("TData_contra", contravariant=True)


# ---------------------------------------------------------------------------
# ICursor
# ---------------------------------------------------------------------------

@runtime_checkable
class ICursor(Protocol[P, I_contra]):
    """
    Ordered, resumable position marker.

    Domain expectations:
    - Ordinary advancement (`advance_by`, `advance_to`, `advance_past`) only
      ever moves the position forward in the cursor's direction.
    - `force_set` is the single escape hatch allowed to move it anywhere.
    """

    @property
    def position(self) -> P | None:
        ...

    @property
    def ascending(self) -> bool:
        ...

    def has_reached(self, item: Any) -> bool:
        """True if `item` is at or behind the current position."""
        ...

    def advance_by(self, increment: I_contra) -> None:
        """Move by a relative, domain-specific increment."""
        ...

    def advance_to(self, position: P) -> None:
        """Move to `position` if it is ahead; never move backward."""
        ...

    def force_set(self, position: P | None) -> None:
        """Overwrite the position unconditionally (reprocessing, rewinds)."""
        ...

    def advance_past(self, items: Sequence[Any]) -> None:
        """Position the cursor so `items` are not returned again."""
        ...


# ---------------------------------------------------------------------------
# IAggregator
# ---------------------------------------------------------------------------

@runtime_checkable
class IAggregator(Protocol[TProjection, TData_contra]):
    """
    Fold operation used by the projection step.

    Implementations may be synchronous or return an awaitable.
    """

    def aggregate(
        self,
        projection: TProjection | None,
        batch: StreamQueryBatch[TData_contra],
    ) -> TProjection | Awaitable[TProjection]:
        """Return the projection updated with every item of `batch`."""
        ...


# ---------------------------------------------------------------------------
# Callable seams
# ---------------------------------------------------------------------------

# Query -> items, sync or async. Must honour `query.batch_size`.
FetchFn = Callable[[StreamQuery[T]], Union[Iterable[T], Awaitable[Iterable[T]]]]

# Replaces the default "advance past consumed items" behaviour.
IAdvancePolicy = Callable[[StreamQuery[Any], StreamQueryBatch[Any]], Union[Awaitable[None], None]]

IdFactory = Callable[[], str]
