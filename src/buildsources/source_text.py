"""Line-span index over an immutable block of source text.

Line spans are computed once at construction. A line ends at ``\\n``, at
``\\r\\n`` (one two-char terminator), or at a lone ``\\r``. For non-empty
text the list always closes with the trailing line after the last
terminator, which is zero-length when the text ends in a terminator, so
that the span lengths always sum to ``len(text)``.

Line lookup is O(log N) via ``bisect_right`` on the precomputed starts.
"""
from __future__ import annotations

import threading
from bisect import bisect_right
from typing import Any

from bs4 import BeautifulSoup

from buildsources.spans import Span


class LineOutOfRangeError(IndexError):
    """Raised when a line number or offset falls outside the text."""


def is_line_break_char(ch: str) -> bool:
    return ch == "\r" or ch == "\n"


def compute_line_spans(text: str) -> tuple[Span, ...]:
    """Split ``text`` into contiguous line spans.

    Empty text has zero lines. ``"a\\r\\nb\\n c\\r"`` yields
    ``a\\r\\n``, ``b\\n``, `` c\\r`` and a final zero-length span at 9.
    """
    if not text:
        return ()

    spans: list[Span] = []
    n = len(text)
    line_start = 0
    i = 0
    while i < n:
        ch = text[i]
        if ch == "\n" or (ch == "\r" and (i + 1 >= n or text[i + 1] != "\n")):
            spans.append(Span(line_start, i + 1 - line_start))
            line_start = i + 1
        i += 1

    spans.append(Span(line_start, n - line_start))
    return tuple(spans)


class SourceText:
    """Immutable text plus its line index.

    Instances are shared read-only between every caller that resolved the
    same file; nothing mutates them after construction. The only lazily
    computed state is ``markup_root``, built at most once under a lock.
    """

    __slots__ = ("_text", "_lines", "_starts", "_markup", "_markup_lock")

    def __init__(self, text: str) -> None:
        if text is None:
            raise TypeError("SourceText requires a str, got None")
        self._text = text
        self._lines = compute_line_spans(text)
        self._starts = [span.start for span in self._lines]
        self._markup: Any = None
        self._markup_lock = threading.Lock()

    @property
    def text(self) -> str:
        return self._text

    @property
    def lines(self) -> tuple[Span, ...]:
        return self._lines

    @property
    def line_count(self) -> int:
        return len(self._lines)

    @property
    def markup_root(self) -> BeautifulSoup:
        """The text parsed as markup (project files, props, targets).

        Computed on first access and reused; concurrent first accesses
        serialize on the lock so the tree is built once.
        """
        markup = self._markup
        if markup is not None:
            return markup
        with self._markup_lock:
            if self._markup is None:
                self._markup = BeautifulSoup(self._text, "html.parser")
            return self._markup

    def get_line_span(self, line_number: int) -> Span:
        if line_number < 0 or line_number >= len(self._lines):
            raise LineOutOfRangeError(
                f"line {line_number} out of range [0, {len(self._lines)})"
            )
        return self._lines[line_number]

    def get_line_text(self, line_number: int) -> str:
        """Return the line's content with its terminator chars stripped."""
        line = self.get_line_span(line_number)
        if line.length == 0:
            return ""

        end = line.end
        while end > line.start and is_line_break_char(self._text[end - 1]):
            end -= 1
        return self._text[line.start:end]

    def get_line_number_from_position(self, position: int) -> int:
        """Return the index of the line containing char offset ``position``.

        Offsets at or beyond the end of the text map to the last line.
        Negative offsets, and any offset into text with no lines, raise
        LineOutOfRangeError.
        """
        if position < 0:
            raise LineOutOfRangeError(f"negative offset {position}")
        if not self._lines:
            raise LineOutOfRangeError("text has no lines")
        if position >= len(self._text):
            return len(self._lines) - 1
        return bisect_right(self._starts, position) - 1

    def find(self, search_text: str) -> list[int]:
        """Line numbers whose span fully contains ``search_text``.

        Case-insensitive. A match may include terminator chars of its own
        line but never straddles two lines. An empty search matches nothing.
        """
        if not search_text:
            return []

        needle = search_text.lower()
        size = len(search_text)
        result: list[int] = []
        for i, line in enumerate(self._lines):
            if line.length < size:
                continue
            if needle in self._text[line.start:line.end].lower():
                result.append(i)
        return result

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"SourceText(len={len(self._text)}, lines={len(self._lines)})"
