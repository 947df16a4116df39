"""Concrete cursors, one per position domain.

- `Cursor`: shared ordering / direction logic, generic in position `P`
  and increment `I`.
- `ChronologicalCursor`: `datetime` positions, `timedelta` increments.
- `OffsetCursor`: `int` positions and increments (offsets, sequence numbers).
- `KeyCursor`: any ordered position without arithmetic; the default cursor
  of streams built without a cursor factory.
- `TokenCursor`: opaque, lexicographically ordered `str` tokens.

A `None` position means "nothing reached yet". Items are mapped to positions
through the cursor's `key` function (identity by default).
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

P = TypeVar("P")
I = TypeVar("I")  # noqa: E741

KeyFn = Callable[[Any], Any]


def _identity(item: Any) -> Any:
    return item


class Cursor(ABC, Generic[P, I]):
    """Base cursor.

    Parameters
    ----------
    position : P | None
        Starting position; `None` means nothing has been reached.
    ascending : bool
        Direction in which ordinary advancement moves.
    key : callable, optional
        Maps an item to its ordering position. Defaults to identity.
    """

    # Nearest cursor class defined in this module; `copy()` builds one of these.
    _cursor_type: type[Cursor[Any, Any]]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.__module__ == __name__:
            cls._cursor_type = cls

    def __init__(
        self,
        position: P | None = None,
        *,
        ascending: bool = True,
        key: KeyFn | None = None,
    ) -> None:
        self._position = position
        self._ascending = ascending
        self._key = key or _identity

    @property
    def position(self) -> P | None:
        return self._position

    @property
    def ascending(self) -> bool:
        return self._ascending

    def key(self, item: Any) -> P:
        """Ordering position of `item`."""
        return self._key(item)

    def _is_behind_or_at(self, candidate: P, reference: P) -> bool:
        return candidate <= reference if self._ascending else candidate >= reference  # type: ignore[operator]

    def has_reached(self, item: Any) -> bool:
        if self._position is None:
            return False
        return self._is_behind_or_at(self.key(item), self._position)

    def advance_by(self, increment: I) -> None:
        self._position = self._shift(self._position, increment)

    def advance_to(self, position: P) -> None:
        if self._position is not None and self._is_behind_or_at(position, self._position):
            logger.debug("ignoring advance_to(%r): cursor already at %r", position, self._position)
            return
        self._position = position

    def force_set(self, position: P | None) -> None:
        self._position = position

    def advance_past(self, items: Sequence[Any]) -> None:
        if items:
            self.advance_to(self.key(items[-1]))

    def copy(self) -> Cursor[P, I]:
        """Detached cursor at the same position.

        Only cursor state (position, direction, key) is copied. For a
        projection that subclasses a cursor, the result is a plain instance
        of the library cursor class it derives from, without the
        projection's own attributes.
        """
        detached = object.__new__(self._cursor_type)
        detached._position = self._position
        detached._ascending = self._ascending
        detached._key = self._key
        return detached

    @abstractmethod
    def _shift(self, position: P | None, increment: I) -> P:
        """Return `position` moved by `increment` in the cursor's direction."""

    def __repr__(self) -> str:
        direction = "asc" if self._ascending else "desc"
        return f"{type(self).__name__}(position={self._position!r}, {direction})"


# === Time ===


class ChronologicalCursor(Cursor[datetime, timedelta]):
    """Cursor over points in time.

    Starts with no position, so it works with both naive and aware
    datetimes; `advance_by` needs a position to move from.
    """

    def _shift(self, position: datetime | None, increment: timedelta) -> datetime:
        if position is None:
            raise ValueError("cannot advance a chronological cursor with no position")
        return position + increment if self._ascending else position - increment


# === Offsets ===


class OffsetCursor(Cursor[int, int]):
    """Cursor over integer offsets or sequence numbers."""

    def __init__(
        self,
        position: int | None = 0,
        *,
        ascending: bool = True,
        key: KeyFn | None = None,
    ) -> None:
        super().__init__(position, ascending=ascending, key=key)

    def _shift(self, position: int | None, increment: int) -> int:
        base = position or 0
        return base + increment if self._ascending else base - increment


# === Ordered keys without arithmetic ===


class KeyCursor(Cursor[Any, Any]):
    """Cursor over any ordered key (ints, strings, tuples, dates...).

    Keys have no arithmetic: the "increment" is the next key itself, so
    `advance_by(key)` is a forward-only `advance_to(key)`.
    """

    def _shift(self, position: Any, increment: Any) -> Any:
        if position is not None and self._is_behind_or_at(increment, position):
            return position
        return increment


class TokenCursor(KeyCursor):
    """Cursor over opaque continuation tokens that sort lexicographically."""
