"""Tests for line_utils module."""

from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from jtexlint.utils.line_utils import (
    REMOVED_MARK,
    TaggedLine,
    build_line_number_map,
    drop_erased_lines,
    erase_span,
    find_line_tags,
    format_line_range,
    join_fragment,
    line_number_at,
    parse_tagged_text,
    render_tagged_text,
    strip_tags,
    tag_lines,
)


SIMPLE_TEXT = "一行目\n二行目\n\n四行目\n"


def test_tag_lines_numbers_every_line() -> None:
    tagged = tag_lines(SIMPLE_TEXT)

    tags = find_line_tags(tagged)
    assert [tag.line_number for tag in tags] == [1, 2, 3, 4]
    assert strip_tags(tagged) == SIMPLE_TEXT.rstrip("\n")


def test_tag_lines_empty_text() -> None:
    assert tag_lines("") == ""
    assert parse_tagged_text("") == []


def test_parse_tagged_text_round_trips_lines() -> None:
    lines = parse_tagged_text(tag_lines(SIMPLE_TEXT))

    assert lines == [
        TaggedLine(1, "一行目"),
        TaggedLine(2, "二行目"),
        TaggedLine(3, ""),
        TaggedLine(4, "四行目"),
    ]
    assert lines[2].is_blank()
    assert render_tagged_text(lines) == tag_lines(SIMPLE_TEXT)


def test_parse_tagged_text_untagged_line_inherits_number() -> None:
    lines = parse_tagged_text("\x1e7\x1fabc\ndef")

    assert lines == [TaggedLine(7, "abc"), TaggedLine(7, "def")]


def test_parse_tagged_text_strips_inner_tags() -> None:
    lines = parse_tagged_text("\x1e3\x1fabc\x1e4\x1fdef")

    assert lines == [TaggedLine(3, "abcdef")]


def test_line_number_at_bisects_tag_positions() -> None:
    tagged = tag_lines("aaa\nbbb\nccc")
    line_map = build_line_number_map(tagged)

    assert line_number_at(tagged.index("a"), line_map) == 1
    assert line_number_at(tagged.index("b"), line_map) == 2
    assert line_number_at(len(tagged) - 1, line_map) == 3
    assert line_number_at(-1, line_map) is None


def test_erase_span_keeps_inner_tags() -> None:
    tagged = tag_lines("before\n\\TODO{a\nb\nc}\nafter")
    start = tagged.index("\\TODO")
    end = tagged.index("}") + 1

    erased = tagged[:start] + erase_span(tagged[start:end]) + tagged[end:]

    assert "TODO" not in erased
    assert [tag.line_number for tag in find_line_tags(erased)] == [1, 2, 3, 4, 5]
    assert erased.count(REMOVED_MARK) == 3


def test_drop_erased_lines_keeps_source_blank_lines() -> None:
    text = "\x1e1\x1fa\n\x1e2\x1f\x1a\n\x1e3\x1f\n\x1e4\x1fb\x1a"

    assert drop_erased_lines(text) == "\x1e1\x1fa\n\x1e3\x1f\n\x1e4\x1fb"


def test_join_fragment_glues_japanese_and_spaces_ascii() -> None:
    assert join_fragment("日本", "語") == "日本語"
    assert join_fragment("word", "next") == "word next"
    assert join_fragment("日本", "word") == "日本 word"
    assert join_fragment("", "語") == "語"
    assert join_fragment("語", "") == "語"


def test_format_line_range() -> None:
    assert format_line_range(3, 3) == "3"
    assert format_line_range(3, 5) == "3..5"
