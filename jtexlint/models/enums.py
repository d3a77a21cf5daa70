"""Enumerations shared by the style check models and renderers."""

from __future__ import annotations

from enum import Enum


class RuleScope(str, Enum):
    """Granularity at which a rule is evaluated.

    Values:
        PARAGRAPH: the rule sees a whole paragraph (e.g. bracket pairing)
        SENTENCE: the rule sees one sentence at a time
    """

    PARAGRAPH = "paragraph"
    SENTENCE = "sentence"

    @classmethod
    def all_values(cls) -> list[str]:
        return [m.value for m in cls]


class HighlightStyle(str, Enum):
    """How a matched span is delimited inside an excerpt."""

    PLAIN = "plain"
    ANSI = "ansi"

    @property
    def markers(self) -> tuple[str, str]:
        if self is HighlightStyle.ANSI:
            return ("\x1b[1;31m", "\x1b[0m")
        return (">>>", "<<<")


class PunctuationStyle(str, Enum):
    """The two competing Japanese punctuation conventions."""

    PERIOD_COMMA = "．，"
    KUTEN_TOUTEN = "。、"

    @property
    def label(self) -> str:
        if self is PunctuationStyle.PERIOD_COMMA:
            return "全角ピリオドあるいはカンマ（．，）"
        return "句読点（。、）"
