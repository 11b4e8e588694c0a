"""Display helpers for individual source lines.

``SourceFileLine`` is one line of a resolved file as shown in a viewer.
``build_highlights`` splits a line into plain and highlighted segments
for property reads and writes found on it.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from buildsources.source_text import SourceText

LINE_NUMBER_WIDTH = 5


@dataclass(frozen=True, slots=True)
class SourceFileLine:
    line_number: int
    line_text: str | None = None

    def __str__(self) -> str:
        return str(self.line_number).ljust(LINE_NUMBER_WIDTH) + (self.line_text or "")


@dataclass(frozen=True, slots=True)
class PropertyUsage:
    """A property read or write at ``position`` within a line's text."""

    name: str
    position: int
    is_write: bool = False

    def __post_init__(self) -> None:
        if self.position < 0:
            raise ValueError(f"position must be >= 0, got {self.position}")


@dataclass(frozen=True, slots=True)
class HighlightedText:
    text: str
    style: Literal["read", "write"]


type HighlightSegment = str | HighlightedText


def build_highlights(
    line_text: str,
    usages: Iterable[PropertyUsage],
) -> list[HighlightSegment]:
    """Split ``line_text`` into plain runs and highlighted usages.

    Usages are applied in position order. A usage that overlaps an earlier
    one, or runs past the end of the line, is rejected with ValueError.
    Concatenating the segment texts reproduces ``line_text``.
    """
    segments: list[HighlightSegment] = []
    start = 0
    for usage in sorted(usages, key=lambda u: u.position):
        end = usage.position + len(usage.name)
        if usage.position < start or end > len(line_text):
            raise ValueError(
                f"usage {usage.name!r} at {usage.position} does not fit "
                f"line of length {len(line_text)}"
            )
        if start < usage.position:
            segments.append(line_text[start:usage.position])
        segments.append(HighlightedText(
            text=line_text[usage.position:end],
            style="write" if usage.is_write else "read",
        ))
        start = end

    if start < len(line_text):
        segments.append(line_text[start:])
    return segments


def source_lines_around(
    source: SourceText,
    line_number: int,
    context: int = 3,
) -> list[SourceFileLine]:
    """Lines ``[line_number - context, line_number + context]``, clamped.

    Raises LineOutOfRangeError if ``line_number`` itself is not a line.
    """
    source.get_line_span(line_number)
    if context < 0:
        raise ValueError(f"context must be >= 0, got {context}")
    first = max(0, line_number - context)
    last = min(source.line_count - 1, line_number + context)
    return [
        SourceFileLine(i, source.get_line_text(i)) for i in range(first, last + 1)
    ]
