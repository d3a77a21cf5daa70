"""Tests for the figure and table checks."""

from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from jtexlint.style_check.figure_table import check_figure_table
from jtexlint.utils.line_utils import tag_lines


FIGURE = (
    "\\begin{figure}\n"
    "\\includegraphics{a.pdf}\n"
    "\\caption{図A}\n"
    "\\label{fig:x}\n"
    "\\end{figure}"
)


def _check(text: str) -> list[str]:
    return check_figure_table(tag_lines(text))


def test_well_formed_figure_referenced_after_definition() -> None:
    assert _check(FIGURE + "\n図\\ref{fig:x}に示す．") == []


def test_figref_without_prefix_counts_as_reference() -> None:
    assert _check(FIGURE + "\n\\figref{x}に示す．") == []


def test_unreferenced_label() -> None:
    assert _check(FIGURE) == ["4: 図表{fig:x}は本文から参照されていないようです"]


def test_referenced_before_definition() -> None:
    warnings = _check("図\\ref{fig:x}に示す．\n" + FIGURE)

    assert warnings == ["5: 図表{fig:x}は定義（5行目）より前の1行目でしか参照されていないようです"]


def test_missing_caption_and_label() -> None:
    text = "\\begin{table}\n\\begin{tabular}{c}\n\\end{tabular}\n\\end{table}"

    assert _check(text) == [
        "1..4: table環境に\\captionがない",
        "1..4: table環境に\\labelがない",
    ]


def test_table_caption_below_body() -> None:
    text = (
        "\\begin{table}\n"
        "\\begin{tabular}{c}\n"
        "\\end{tabular}\n"
        "\\caption{表}\n"
        "\\label{tab:t}\n"
        "\\end{table}\n"
        "表\\ref{tab:t}を見よ．"
    )

    assert _check(text) == ["1..6: 表のキャプションは表の上に置く（\\captionが表の本体より後にある）"]


def test_figure_caption_above_graphics() -> None:
    text = (
        "\\begin{figure}\n"
        "\\caption{図}\n"
        "\\includegraphics{a.pdf}\n"
        "\\label{fig:a}\n"
        "\\end{figure}\n"
        "図\\ref{fig:a}を見よ．"
    )

    assert _check(text) == ["1..5: 図のキャプションは図の下に置く（\\captionが\\includegraphicsより前にある）"]


def test_english_caption_needs_period() -> None:
    text = (
        "\\begin{figure}\n"
        "\\includegraphics{a.pdf}\n"
        "\\caption{図}\n"
        "\\ecaption{Figure A}\n"
        "\\label{fig:a}\n"
        "\\end{figure}\n"
        "図\\ref{fig:a}を見よ．"
    )

    assert _check(text) == ["4: 英語のキャプション(ecaption)の最後にはピリオドが必要 Figure A"]
