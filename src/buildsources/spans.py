"""Span value type over a text buffer's character index space."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Span:
    """A half-open interval ``[start, start + length)`` of char offsets.

    One physical line of a source file, including its terminator chars.

    Invariants (enforced in __post_init__):
        - start >= 0
        - length >= 0
    """

    start: int
    length: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"Span.start must be >= 0, got {self.start}")
        if self.length < 0:
            raise ValueError(f"Span.length must be >= 0, got {self.length}")

    @property
    def end(self) -> int:
        return self.start + self.length

    def contains(self, position: int) -> bool:
        """True when ``start <= position < end`` (never for empty spans)."""
        return self.start <= position < self.end
