"""Tests for paragraph and sentence segmentation."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from jtexlint.style_check.segmenter import (
    Paragraph,
    Sentence,
    format_segmentation,
    split_paragraphs,
    split_sentences,
)
from jtexlint.utils.line_utils import TaggedLine, tag_lines


STRUCTURED_DOC = (
    "第一段落の\n"
    "文です．次の文．\n"
    "\n"
    "\\section{はじめに}本文の\n"
    "続き．\n"
    "\\begin{itemize}\n"
    "\\item 項目一．\n"
    "\\item 項目二．\n"
    "\\end{itemize}"
)


def test_split_paragraphs_at_blank_lines_and_structure() -> None:
    paragraphs = split_paragraphs(tag_lines(STRUCTURED_DOC))

    assert [p.text for p in paragraphs] == [
        "第一段落の文です．次の文．",
        "本文の続き．",
        "項目一．",
        "項目二．",
    ]
    assert [p.line_ref for p in paragraphs] == ["1..2", "4..5", "7", "8"]


def test_paragraph_lines_reconstruct_stripped_text() -> None:
    source = "一行目の\n二行目．\n\n三行目．"

    paragraphs = split_paragraphs(tag_lines(source))

    rebuilt = [line.text for p in paragraphs for line in p.lines]
    assert rebuilt == [line for line in source.split("\n") if line.strip()]


def test_line_break_command_splits_a_single_line() -> None:
    paragraphs = split_paragraphs(tag_lines("一行目\\\\二行目"))

    assert [p.lines for p in paragraphs] == [
        [TaggedLine(1, "一行目")],
        [TaggedLine(1, "二行目")],
    ]


def test_split_paragraphs_removes_floats() -> None:
    text = "前の文．\n\\begin{figure}\n\\caption{図}\n\\end{figure}\n後の文．"

    paragraphs = split_paragraphs(tag_lines(text))

    assert len(paragraphs) == 1
    assert paragraphs[0].text == "前の文．後の文．"
    assert [line.number for line in paragraphs[0].lines] == [1, 5]


def test_split_sentences_tracks_line_ranges() -> None:
    lines = [
        TaggedLine(1, "最初の文．次の"),
        TaggedLine(2, "文は長い．"),
        TaggedLine(3, "English text"),
        TaggedLine(4, "continues."),
    ]

    sentences = split_sentences(lines)

    assert sentences == [
        Sentence("最初の文．", 1, 1),
        Sentence("次の文は長い．", 1, 2),
        Sentence("English text continues.", 3, 4),
    ]
    starts = [s.start_line for s in sentences]
    assert starts == sorted(starts)
    assert all(s.start_line <= s.end_line for s in sentences)


def test_split_sentences_keeps_closing_brackets() -> None:
    sentences = split_sentences([TaggedLine(1, "（補足．）次の文？")])

    assert [s.text for s in sentences] == ["（補足．）", "次の文？"]


def test_paragraph_maps_offsets_to_lines() -> None:
    paragraph = Paragraph([TaggedLine(4, "abc"), TaggedLine(5, "def")])

    assert paragraph.text == "abc def"
    assert paragraph.line_at(0) == 4
    assert paragraph.line_at(3) == 4
    assert paragraph.line_at(4) == 5
    assert paragraph.lines_for_span(2, 5) == (4, 5)
    assert paragraph.raw_text() == "abc\ndef"


def test_paragraph_requires_lines() -> None:
    with pytest.raises(ValueError):
        Paragraph([])


def test_format_segmentation_lists_sentences() -> None:
    dump = format_segmentation(split_paragraphs(tag_lines(STRUCTURED_DOC)))

    assert dump.splitlines()[:3] == [
        "[paragraph 1] 1..2",
        "  1..2: 第一段落の文です．",
        "  2: 次の文．",
    ]


def test_section_title_with_nested_braces_is_discarded() -> None:
    paragraphs = split_paragraphs(tag_lines("\\section{\\textbf{重要} な点}\nこれは本文である．"))

    assert [(p.line_ref, p.text) for p in paragraphs] == [("2", "これは本文である．")]


def test_section_title_wrapped_onto_next_line_is_discarded() -> None:
    paragraphs = split_paragraphs(tag_lines("\\section{長い\n見出し}\nこれは本文である．"))

    assert [(p.line_ref, p.text) for p in paragraphs] == [("3", "これは本文である．")]


def test_environment_argument_is_part_of_the_boundary() -> None:
    text = (
        "\\begin{minipage}[t]{0.5\\linewidth}\n"
        "左側の文．\n"
        "\\end{minipage}\n"
        "\\begin{tabular}{ll}\n"
        "a & b\n"
        "\\end{tabular}"
    )

    paragraphs = split_paragraphs(tag_lines(text))

    assert [p.text for p in paragraphs] == ["左側の文．", "a & b"]


def test_unterminated_section_title_only_drops_the_command() -> None:
    paragraphs = split_paragraphs(tag_lines("\\section{閉じない見出し"))

    assert [p.text for p in paragraphs] == ["{閉じない見出し"]
