"""Tests for applying rules to paragraphs and sentences."""

from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from jtexlint.models import RuleScope
from jtexlint.style_check.analysis_context import AnalysisContext
from jtexlint.style_check.engine import _trim_context, analyse_paragraphs, evaluate
from jtexlint.style_check.segmenter import Sentence, split_paragraphs
from jtexlint.utils.line_utils import tag_lines


def test_sentence_issue_uses_sentence_line_range() -> None:
    context = AnalysisContext(filename="paper.tex")
    paragraphs = split_paragraphs(tag_lines("雨なので中止\nする．"))

    analyse_paragraphs(paragraphs, context)

    issues = context.buckets["NANODE_DAKARA"]
    assert len(issues) == 1
    issue = issues[0]
    assert issue.filename == "paper.tex"
    assert issue.scope is RuleScope.SENTENCE
    assert (issue.start_line, issue.end_line) == (1, 2)
    assert issue.context == "雨なので中止する．"
    assert issue.issue == "なので"
    assert issue.highlighted_context() == "雨>>>なので<<<中止する．"


def test_paragraph_issue_uses_match_line_range() -> None:
    context = AnalysisContext()
    paragraphs = split_paragraphs(tag_lines("前置き．\n（括弧が閉じない．"))

    analyse_paragraphs(paragraphs, context)

    issues = context.buckets["PAREN_FULL_UNCLOSED"]
    assert len(issues) == 1
    assert issues[0].scope is RuleScope.PARAGRAPH
    assert issues[0].line_ref == "2"
    assert issues[0].issue == "（"
    assert issues[0].offset == 4


def test_each_match_is_a_separate_issue() -> None:
    context = AnalysisContext()

    evaluate(Sentence("１と２．", 3, 3), context)

    assert [issue.issue for issue in context.buckets["FULLWIDTH_DIGIT"]] == ["１", "２"]


def test_disabled_rules_are_skipped() -> None:
    context = AnalysisContext()
    paragraphs = split_paragraphs(tag_lines("雨なので中止する．"))

    analyse_paragraphs(paragraphs, context, disabled_rules={"NANODE_DAKARA"})

    assert "NANODE_DAKARA" not in context.buckets


def test_trim_context_adds_ellipses() -> None:
    text = "a" * 50 + "X" + "b" * 50

    excerpt, offset = _trim_context(text, 50, 51, 40)

    assert excerpt == "…" + "a" * 40 + "X" + "b" * 40 + "…"
    assert excerpt[offset] == "X"


def test_trim_context_short_text_unchanged() -> None:
    assert _trim_context("短い（文", 2, 3, 40) == ("短い（文", 2)
