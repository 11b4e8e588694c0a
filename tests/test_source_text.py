"""Tests for buildsources.spans and buildsources.source_text."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from buildsources.source_text import (
    LineOutOfRangeError,
    SourceText,
    compute_line_spans,
    is_line_break_char,
)
from buildsources.spans import Span

SAMPLE_TEXTS = [
    "",
    "a",
    "\n",
    "\r",
    "\r\n",
    "a\n",
    "a\r",
    "a\r\n",
    "\n\n\n",
    "\r\r\n\r",
    "a\r\nb\n c\r",
    "line one\nline two\r\nline three\rline four",
    "no terminator at all",
    "\r\n\r\n",
]


class TestSpan:
    def test_end(self) -> None:
        assert Span(3, 4).end == 7

    def test_rejects_negative_start(self) -> None:
        with pytest.raises(ValueError, match="start"):
            Span(-1, 0)

    def test_rejects_negative_length(self) -> None:
        with pytest.raises(ValueError, match="length"):
            Span(0, -1)

    def test_contains(self) -> None:
        span = Span(2, 3)
        assert not span.contains(1)
        assert span.contains(2)
        assert span.contains(4)
        assert not span.contains(5)

    def test_empty_span_contains_nothing(self) -> None:
        assert not Span(5, 0).contains(5)


class TestComputeLineSpans:
    def test_empty_text_has_no_lines(self) -> None:
        assert compute_line_spans("") == ()

    @pytest.mark.parametrize("text", SAMPLE_TEXTS)
    def test_lengths_sum_to_text_length(self, text: str) -> None:
        spans = compute_line_spans(text)
        assert sum(s.length for s in spans) == len(text)

    @pytest.mark.parametrize("text", SAMPLE_TEXTS)
    def test_contiguous_and_sorted(self, text: str) -> None:
        spans = compute_line_spans(text)
        for prev, cur in zip(spans, spans[1:]):
            assert prev.end == cur.start
        if text:
            assert spans[0].start == 0
            assert spans[-1].end == len(text)

    def test_mixed_terminators(self) -> None:
        text = "a\r\nb\n c\r"
        spans = compute_line_spans(text)
        pieces = [text[s.start:s.end] for s in spans]
        assert pieces[:3] == ["a\r\n", "b\n", " c\r"]
        assert spans[:3] == (Span(0, 3), Span(3, 2), Span(5, 3))
        # trailing empty line after the final bare CR
        assert spans[3] == Span(8, 0)
        assert len(spans) == 4

    def test_crlf_counts_one_line(self) -> None:
        spans = compute_line_spans("x\r\ny")
        assert spans == (Span(0, 3), Span(3, 1))

    def test_lone_cr_closes_line(self) -> None:
        spans = compute_line_spans("a\r\rb")
        assert spans == (Span(0, 2), Span(2, 1), Span(3, 1))

    def test_trailing_content_without_terminator(self) -> None:
        spans = compute_line_spans("a\nbc")
        assert spans == (Span(0, 2), Span(2, 2))

    def test_text_ending_in_newline_has_empty_last_line(self) -> None:
        assert compute_line_spans("a\n") == (Span(0, 2), Span(2, 0))

    def test_is_line_break_char(self) -> None:
        assert is_line_break_char("\r")
        assert is_line_break_char("\n")
        assert not is_line_break_char(" ")


class TestGetLineText:
    def test_strips_crlf_only(self) -> None:
        st = SourceText("foo\r\nbar")
        assert st.get_line_text(0) == "foo"
        assert st.get_line_text(1) == "bar"

    def test_keeps_other_whitespace(self) -> None:
        st = SourceText("  foo \t\n")
        assert st.get_line_text(0) == "  foo \t"

    def test_zero_length_line(self) -> None:
        st = SourceText("a\n")
        assert st.get_line_text(1) == ""

    def test_terminator_only_line(self) -> None:
        st = SourceText("\r\n\r\n")
        assert st.get_line_text(0) == ""
        assert st.get_line_text(1) == ""

    def test_mixed_lines(self) -> None:
        st = SourceText("a\r\nb\n c\r")
        assert [st.get_line_text(i) for i in range(st.line_count)] == [
            "a", "b", " c", "",
        ]

    def test_out_of_range_raises(self) -> None:
        st = SourceText("a\nb")
        with pytest.raises(LineOutOfRangeError):
            st.get_line_text(2)
        with pytest.raises(LineOutOfRangeError):
            st.get_line_text(-1)

    def test_empty_text_has_no_line_zero(self) -> None:
        with pytest.raises(IndexError):
            SourceText("").get_line_text(0)


class TestGetLineNumberFromPosition:
    @pytest.mark.parametrize("text", [t for t in SAMPLE_TEXTS if t])
    def test_every_offset_maps_to_containing_line(self, text: str) -> None:
        st = SourceText(text)
        for offset in range(len(text)):
            i = st.get_line_number_from_position(offset)
            line = st.lines[i]
            assert line.start <= offset < line.end

    def test_end_of_text_maps_to_last_line(self) -> None:
        st = SourceText("ab\ncd")
        assert st.get_line_number_from_position(5) == 1
        assert st.get_line_number_from_position(500) == 1

    def test_end_of_text_after_terminator(self) -> None:
        st = SourceText("ab\n")
        assert st.get_line_number_from_position(3) == 1

    def test_negative_offset_raises(self) -> None:
        with pytest.raises(LineOutOfRangeError):
            SourceText("abc").get_line_number_from_position(-1)

    def test_empty_text_raises(self) -> None:
        with pytest.raises(LineOutOfRangeError):
            SourceText("").get_line_number_from_position(0)


class TestFind:
    def test_matches_in_each_line(self) -> None:
        st = SourceText("xabcx\nabc\n")
        assert st.find("abc") == [0, 1]

    def test_case_insensitive(self) -> None:
        st = SourceText("xabcx\nabc\n")
        assert st.find("ABC") == [0, 1]

    def test_no_match_across_line_boundary(self) -> None:
        st = SourceText("xab\ncx\n")
        assert st.find("abc") == []
        assert st.find("ab\nc") == []

    def test_match_may_include_own_terminator(self) -> None:
        st = SourceText("ab\r\ncd")
        assert st.find("b\r\n") == [0]

    def test_match_at_very_end_of_text(self) -> None:
        st = SourceText("one\ntwo")
        assert st.find("two") == [1]

    def test_line_with_multiple_hits_listed_once(self) -> None:
        st = SourceText("aa aa\nb")
        assert st.find("aa") == [0]

    def test_empty_search_matches_nothing(self) -> None:
        assert SourceText("a\nb\n").find("") == []

    def test_needle_longer_than_every_line(self) -> None:
        assert SourceText("a\nb").find("abc") == []


class TestSourceText:
    def test_text_and_str(self) -> None:
        st = SourceText("x\ny")
        assert st.text == "x\ny"
        assert str(st) == "x\ny"
        assert st.line_count == 2

    def test_rejects_none(self) -> None:
        with pytest.raises(TypeError):
            SourceText(None)  # type: ignore[arg-type]

    def test_get_line_span(self) -> None:
        st = SourceText("ab\ncd")
        assert st.get_line_span(1) == Span(3, 2)

    def test_markup_root_parses_project_xml(self) -> None:
        st = SourceText(
            '<Project>\n  <Target Name="Build">\n  </Target>\n</Project>\n'
        )
        target = st.markup_root.find("target")
        assert target is not None
        assert target["name"] == "Build"

    def test_markup_root_computed_once(self) -> None:
        st = SourceText("<a><b/></a>")
        with ThreadPoolExecutor(max_workers=8) as pool:
            roots = list(pool.map(lambda _: st.markup_root, range(32)))
        assert all(r is roots[0] for r in roots)
        assert st.markup_root is roots[0]
