"""Apply the rule tables to paragraphs and sentences.

Every match becomes one :class:`StyleIssue` appended to the bucket of the
rule that produced it. Issues are appended in source order, so running
the same document twice yields the same buckets.
"""

from __future__ import annotations

import logging
from typing import Iterable

from jtexlint.models import RuleScope, StyleIssue

from .analysis_context import AnalysisContext
from .rules import Rule, rules_for_scope
from .segmenter import Paragraph, Sentence
from .style_check_config import PARAGRAPH_CONTEXT_RADIUS

LOGGER = logging.getLogger(__name__)

ELLIPSIS = "…"


def _trim_context(text: str, start: int, end: int, radius: int) -> tuple[str, int]:
    """Cut ``text`` down to ``radius`` characters around a match.

    Returns the excerpt and the new offset of the match inside it.
    """
    left = max(0, start - radius)
    right = min(len(text), end + radius)
    prefix = ELLIPSIS if left > 0 else ""
    suffix = ELLIPSIS if right < len(text) else ""
    excerpt = f"{prefix}{text[left:right]}{suffix}"
    return excerpt, start - left + len(prefix)


def _sentence_issue(rule: Rule, sentence: Sentence, start: int, end: int, filename: str) -> StyleIssue:
    return StyleIssue(
        filename=filename,
        rule_id=rule.rule_id,
        description=rule.description,
        scope=rule.scope,
        start_line=sentence.start_line,
        end_line=sentence.end_line,
        context=sentence.text,
        offset=start,
        length=end - start,
        issue=sentence.text[start:end],
    )


def _paragraph_issue(rule: Rule, paragraph: Paragraph, start: int, end: int, filename: str) -> StyleIssue:
    first, last = paragraph.lines_for_span(start, end)
    excerpt, offset = _trim_context(paragraph.text, start, end, PARAGRAPH_CONTEXT_RADIUS)
    return StyleIssue(
        filename=filename,
        rule_id=rule.rule_id,
        description=rule.description,
        scope=rule.scope,
        start_line=first,
        end_line=last,
        context=excerpt,
        offset=offset,
        length=end - start,
        issue=paragraph.text[start:end],
    )


def evaluate_sentence(sentence: Sentence, context: AnalysisContext, rules: Iterable[Rule]) -> None:
    for rule in rules:
        for start, end in rule.matcher.finditer(sentence.text):
            context.add_issue(_sentence_issue(rule, sentence, start, end, context.filename))


def evaluate_paragraph(paragraph: Paragraph, context: AnalysisContext, rules: Iterable[Rule]) -> None:
    for rule in rules:
        for start, end in rule.matcher.finditer(paragraph.text):
            context.add_issue(_paragraph_issue(rule, paragraph, start, end, context.filename))


def evaluate(
    unit: Paragraph | Sentence,
    context: AnalysisContext,
    *,
    disabled_rules: set[str] | None = None,
) -> None:
    """Run every enabled rule of the unit's granularity against ``unit``."""
    if isinstance(unit, Paragraph):
        evaluate_paragraph(unit, context, rules_for_scope(RuleScope.PARAGRAPH, disabled_rules))
    else:
        evaluate_sentence(unit, context, rules_for_scope(RuleScope.SENTENCE, disabled_rules))


def analyse_paragraphs(
    paragraphs: Iterable[Paragraph],
    context: AnalysisContext,
    *,
    disabled_rules: set[str] | None = None,
) -> AnalysisContext:
    """Evaluate paragraph rules on each paragraph and sentence rules on its sentences."""
    paragraph_rules = rules_for_scope(RuleScope.PARAGRAPH, disabled_rules)
    sentence_rules = rules_for_scope(RuleScope.SENTENCE, disabled_rules)
    for paragraph in paragraphs:
        evaluate_paragraph(paragraph, context, paragraph_rules)
        for sentence in paragraph.sentences:
            evaluate_sentence(sentence, context, sentence_rules)
    LOGGER.debug("Rule evaluation produced %d issue(s)", context.total_issues())
    return context
