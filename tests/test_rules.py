"""Tests for the rule tables."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from jtexlint.models import RuleScope
from jtexlint.style_check.rules import (
    ALL_RULES,
    PARAGRAPH_RULES,
    SENTENCE_RULES,
    get_rule,
    rules_for_scope,
)


def _spans(rule_id: str, text: str) -> list[tuple[int, int]]:
    return list(get_rule(rule_id).matcher.finditer(text))


def _hits(rule_id: str, text: str) -> list[str]:
    return [text[start:end] for start, end in _spans(rule_id, text)]


def test_rule_ids_are_unique() -> None:
    ids = [rule.rule_id for rule in ALL_RULES]

    assert len(ids) == len(set(ids))


def test_rule_tables_have_matching_scopes() -> None:
    assert all(rule.scope is RuleScope.PARAGRAPH for rule in PARAGRAPH_RULES)
    assert all(rule.scope is RuleScope.SENTENCE for rule in SENTENCE_RULES)
    assert ALL_RULES[: len(PARAGRAPH_RULES)] == PARAGRAPH_RULES


def test_rules_for_scope_skips_disabled_rules() -> None:
    rules = rules_for_scope(RuleScope.SENTENCE, {"FULLWIDTH_DIGIT"})

    assert "FULLWIDTH_DIGIT" not in {rule.rule_id for rule in rules}
    assert len(rules) == len(SENTENCE_RULES) - 1


def test_get_rule_unknown_id() -> None:
    with pytest.raises(KeyError):
        get_rule("NO_SUCH_RULE")


def test_kana_preferred_kanji_skips_compounds() -> None:
    assert _hits("KANA_PREFERRED_KANJI", "その事について") == ["事"]
    assert _hits("KANA_PREFERRED_KANJI", "事実と仕事を") == []


def test_kana_preferred_nado() -> None:
    assert _hits("KANA_PREFERRED_NADO", "りんご等を使う") == ["等"]
    assert _hits("KANA_PREFERRED_NADO", "平等に扱う") == []


def test_fullwidth_digits_each_flagged() -> None:
    assert _hits("FULLWIDTH_DIGIT", "１２個") == ["１", "２"]


def test_colloquial_nanode() -> None:
    assert _hits("NANODE_DAKARA", "雨なので中止する．") == ["なので"]


def test_hardcoded_numbers() -> None:
    assert _hits("HARDCODED_NUMBER", "3章で述べたように図1に示す．") == ["3章", "図1"]
    assert _hits("HARDCODED_NUMBER", "\\ref{sec:a}章で述べた．") == []


def test_ref_without_noun() -> None:
    assert _hits("REF_WITHOUT_NOUN", "\\ref{a}を参照．") == ["\\ref{a}"]
    assert _hits("REF_WITHOUT_NOUN", "図\\ref{a}と\\ref{b}節を参照．") == []


def test_large_number_needs_separator() -> None:
    assert _hits("LARGE_NUMBER", "10000個と2023年と1,000個") == ["10000"]


def test_desu_masu() -> None:
    assert _hits("DESU_MASU", "これはペンです。") == ["です。"]


def test_no_terminal_punctuation_is_zero_width_at_end() -> None:
    assert _spans("NO_TERMINAL_PUNCTUATION", "終わらない文") == [(6, 6)]
    assert _spans("NO_TERMINAL_PUNCTUATION", "終わる．") == []
    assert _spans("NO_TERMINAL_PUNCTUATION", "（補足．）") == []


def test_repeated_sentence_ending_in_paragraph() -> None:
    text = "これはペンである．それは本である．あれは机である．"

    assert len(_spans("REPEATED_SENTENCE_ENDING", text)) == 1
    assert _spans("REPEATED_SENTENCE_ENDING", "これはペンである．それは本だ．") == []


def test_math_rules_only_fire_in_math() -> None:
    assert _hits("MATH_MULTILETTER_WORD", "$log x$ と log") == ["log"]
    assert _hits("MATH_THOUSANDS_SEPARATOR", "$1,000$ と 2,000") == [",000"]


def test_no_space_after_comma_ignores_reference_keys() -> None:
    assert _hits("NO_SPACE_AFTER_COMMA", "図\\cref{fig:a,fig:b}を参照．") == []
    assert _hits("NO_SPACE_AFTER_COMMA", "a,b を比べる．") == [",b"]
