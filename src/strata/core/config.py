from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FetchConfig:
    """Configuration for a single CLI fetch (file or URL source)."""

    source: str  # JSONL path or feed URL
    key_field: str
    after: str | None = None  # cursor position; None = from the start
    limit: int | None = None
    int_key: bool = False  # compare key values as integers
    timeout_s: int = 20

    def __post_init__(self) -> None:
        if not self.key_field:
            raise ValueError("key_field must be a non-empty field name")
        if self.limit is not None and self.limit < 0:
            raise ValueError("limit must be >= 0")

    def start_position(self) -> int | str | None:
        """Parsed starting cursor position."""
        if self.after is None:
            return None
        return int(self.after) if self.int_key else self.after
