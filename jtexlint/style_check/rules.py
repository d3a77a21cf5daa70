"""Ordered rule tables for paragraph and sentence checks.

Each rule is a plain record: a stable id, the description shown to the
author, the granularity it runs at and the matcher that finds its spans.
Patterns are compiled when this module is imported, so a broken pattern
fails at start-up instead of in the middle of a document.

Descriptions ending in ``(?)`` flag constructions that are often fine;
the author is expected to judge each hit.
"""

from __future__ import annotations

from dataclasses import dataclass

from jtexlint.models import RuleScope

from .matchers import DelimiterMatcher, DelimiterProblem, MathSpanMatcher, Matcher, PatternMatcher
from .style_check_config import KANA_PREFERRED_KANJI, REFERENCE_COMMANDS

IEICE_GUIDE = "http://www.ieice.org/jpn/shiori/pdf/furoku_e.pdf"

# Commas inside the key list of \cref{a,b} or \label{..} separate keys
_KEY_ARGUMENT = r"\\(?:" + "|".join(REFERENCE_COMMANDS) + r"|label)\{[^}]*"


@dataclass(frozen=True)
class Rule:
    rule_id: str
    description: str
    scope: RuleScope
    matcher: Matcher


def _sentence(rule_id: str, pattern: str, description: str) -> Rule:
    return Rule(rule_id, description, RuleScope.SENTENCE, PatternMatcher(pattern))


def _math(rule_id: str, pattern: str, description: str) -> Rule:
    return Rule(rule_id, description, RuleScope.SENTENCE, MathSpanMatcher(pattern))


def _paragraph(rule_id: str, pattern: str, description: str) -> Rule:
    return Rule(rule_id, description, RuleScope.PARAGRAPH, PatternMatcher(pattern))


def _delimiter(rule_id: str, problem: DelimiterProblem, description: str) -> Rule:
    return Rule(rule_id, description, RuleScope.PARAGRAPH, DelimiterMatcher(problem))


SENTENCE_RULES: tuple[Rule, ...] = (
    # Notation
    _sentence("FULLWIDTH_DIGIT", r"[０-９]", "全角数字は使わない"),
    _sentence("FULLWIDTH_LATIN", r"[Ａ-Ｚａ-ｚ]", "全角英文字は使わない"),
    _sentence(
        "NO_SPACE_AFTER_COMMA",
        r"(?<![\\{])(?<!" + _KEY_ARGUMENT + r"),[^\d\s}]",
        ",の後に空白がない",
    ),
    _sentence("FULLWIDTH_PAREN_ASCII_ONLY", r"（\p{ASCII}*）", "全角括弧の中が半角文字だけ（半角括弧にする?）"),
    _sentence(
        "NO_TERMINAL_PUNCTUATION",
        r"(?<![\s。．.}?？]|[。．.?？][）)」』]+|\\hline|\\\\)$",
        "文末に句点やピリオドがない(?)",
    ),
    _sentence("LEADING_COMMA", r"^[，、]", "文頭がカンマや読点から始まっている"),
    _sentence("SPACE_BETWEEN_JAPANESE", r"(?<=\P{ASCII})[ \t]+(?=\P{ASCII})", "日本語文字の間に不要な半角スペース(?)"),
    _sentence("SPACE_AFTER_JAPANESE_PUNCT", r"(?<=[．。、，])[ \t]+(?=\p{ASCII})", "句読点の後に不要な半角スペース(?)"),
    _sentence("SPACE_BEFORE_JAPANESE_PUNCT", r"(?<=\p{ASCII})[ \t]+(?=[．。、，])", "句読点の前に不要な半角スペース(?)"),
    _sentence(
        "HALFWIDTH_PUNCT_AFTER_JAPANESE",
        r"(?<=\P{ASCII})[.,]",
        "日本語文字の後に半角のカンマやピリオドがある（原則は全角）",
    ),
    _sentence(
        "DOUBLE_QUOTE",
        r"[“”\"]",
        "ダブルクォーテーション（LaTeXでは``と''を使う．プログラムリストなどでは\"でよい）",
    ),
    # Cross references
    _sentence(
        "REF_WITHOUT_NOUN",
        r"(?<![図表式(（])\\ref\{[^}]*\}(?![節章項)）])",
        "\\refの前後に図・表あるいは章・節・項がない",
    ),
    _sentence(
        "HARDCODED_NUMBER",
        r"(?<![\d.])\d[.\d]*[章節項]|[図表]\d+",
        "章や節，図表の番号を直接書いている?（\\refを使うべき）",
    ),
    _sentence(
        "HARDCODED_SECTION_MENTION",
        r"\d[.\d]*で(?:前|後)?述",
        "章や節の番号を直接書いている?（「\\ref{..}章」のように書くべき）",
    ),
    # Kanji and kana
    _sentence(
        "KANA_PREFERRED_KANJI",
        r"(?<!\p{Han})[" + KANA_PREFERRED_KANJI + r"](?!\p{Han})",
        f"原則として平仮名で書く語句（{KANA_PREFERRED_KANJI}） {IEICE_GUIDE}",
    ),
    _sentence(
        "KANA_PREFERRED_WORD",
        r"全て|出来(?=[るなたずま])|無い|(?<=の)時(?![点間刻代系期])",
        f"原則として平仮名で書く語句（全て，出来る，無い，の時など） {IEICE_GUIDE}",
    ),
    _sentence("KANA_PREFERRED_TOKORO", r"(?<![カ\p{Han}])所(?!\p{Han})", f"原則として平仮名で書く語句（所） {IEICE_GUIDE}"),
    _sentence("KANA_PREFERRED_NADO", r"(?<![均同冪平対])等(?![し\p{Han}])", "原則として平仮名で書く語句（等）"),
    _sentence(
        "KANJI_NUMERAL_COUNT",
        r"[一二三四五六七八九]つ",
        "一つ，二つなどが数を表すならアラビア数字を使う（言い回しならばよい）",
    ),
    _sentence("DOUSHI", r"同士", "同士→どうし"),
    _sentence("WAKARU", r"わかる", "わかる→分かる"),
    _sentence("UEDE", r"上で", "上で→うえで（「うえで」と読む場合）"),
    _sentence("OSAE", r"押さえ", "押さえ→おさえ"),
    _sentence("TATOE", r"例え", "例え→たとえ"),
    _sentence("OKONA", r"行な", "行な→行（「な」は送らない）"),
    _sentence("OVER", r"オーバー", "オーバー→オーバ"),
    _sentence("TIMER", r"タイマー", "タイマー→タイマ"),
    _sentence("INTERFACE", r"インターフェイス", "インターフェイス→インタフェース"),
    # Register
    _sentence("SOSHITE", r"そして", "原則として避ける語句（そして）"),
    _sentence("NANODE_DAKARA", r"なので|だから", "口語表現「なので」「だから」→「であるため」「ので」"),
    _sentence("IKENAI", r"いけない", "口語表現（いけない）"),
    _sentence("KARA_REASON", r"から[,，、]", "口語表現「から」（理由を表す場合）→「ため」"),
    _sentence(
        "DESU_MASU",
        r"(?:です|ます|でしょう)[.．。]",
        "「です・ます」調は使わず「だ・である」調にする（謝辞の中はよい）",
    ),
    _sentence("II", r"いい", "口語表現「いい」→「よい」"),
    _sentence("KEDO", r"けど", "口語表現「けど」→「が」"),
    _sentence("TARA", r"っ?たら", "口語表現「たら」→「ると」「れば」「る場合」「た場合」など"),
    _sentence("WO_SURU", r"をする", "「をする」→「する」か「を行う」(?)"),
    _sentence("WO_SHITE", r"をして", "「をして」→「して」か「を行って」(?)"),
    _sentence("SURUKOTOGA_DEKIRU", r"することができ(?:る|ない)", "「することができる（ない）」→「できる（ない）」(?)"),
    _sentence("SURUKOTOGA_KANOU", r"することが可能", "「することが可能」→「できる」(?)"),
    _sentence("LARGE_NUMBER", r"(?<![\d.,])\d{4,}(?![\d年])", "大きな数には3桁ごとにカンマを入れる(?)"),
    # Likely typos
    _sentence("GUN", r"郡", "群の間違い?"),
    _sentence("JIRITSU", r"自立", "自律の間違い?"),
    _sentence("TAIKOSHOUSEI", r"対故障性", "耐故障性の間違い?"),
    _sentence("AGERARERU", r"上げられる", "挙げられるの間違い?"),
    _sentence("OKONAWARERU", r"(?<![にてでがり])行われる", "「行われる」の前が変?"),
    _sentence("OKONAU", r"(?<![\p{Han}にてでがらをり])行う", "「行う」の前が変?"),
    _sentence("WOHA", r"をは", "をは（書き間違い?）"),
    _sentence("SHIYOUNI", r"しように", "しように（書き間違い?）"),
    # Repetition, often acceptable
    _sentence(
        "REPEATED_SURU_VERB",
        r"(\p{Han}\p{Han})する[^、。，．]*\1",
        "「検索するために検索」のように同じサ変動詞が2回現れている(?)",
    ),
    _sentence("REPEATED_DE", r"で[，、].*で[，、]", "「で，」が連続している"),
    _sentence("REPEATED_HA", r"(?<![にで])は[，、].*(?<![にで])は[，、]", "「は，」が連続している"),
    _sentence("REPEATED_GA", r"(?<![いる])が[，、].*(?<![いる])が[，、]", "「が，」が連続している"),
    _sentence("REPEATED_SAINI", r"際に.*際に", "「際に」が連続している"),
    _sentence("REPEATED_BAAI", r"場合.*場合", "「場合」が連続している"),
    _sentence("REPEATED_TAISHI", r"対し.*対し", "「対し」が連続している"),
    # Inline math
    _math(
        "MATH_MULTILETTER_WORD",
        r"(?<![\\{\w])[A-Za-z]{2,}",
        "$log$と書くとl*o*gの意味になる．関数ならば\\log，イタリックの語ならば\\textit{abc}を使う",
    ),
    _math(
        "MATH_THOUSANDS_SEPARATOR",
        r"(?<=\d),\d{3}(?!\d)",
        "数式モードの中で大きな数の桁区切りには{,}を使う",
    ),
)

PARAGRAPH_RULES: tuple[Rule, ...] = (
    _delimiter("PAREN_HALF_UNCLOSED", DelimiterProblem.UNCLOSED_HALF_PAREN, "半角の閉じ括弧 ) がない"),
    _delimiter("PAREN_FULL_UNCLOSED", DelimiterProblem.UNCLOSED_FULL_PAREN, "全角の閉じ括弧 ） がない"),
    _delimiter("PAREN_HALF_UNOPENED", DelimiterProblem.UNOPENED_HALF_PAREN, "対応する半角の開き括弧 ( がない"),
    _delimiter("PAREN_FULL_UNOPENED", DelimiterProblem.UNOPENED_FULL_PAREN, "対応する全角の開き括弧 （ がない"),
    _delimiter("PAREN_WIDTH_MISMATCH", DelimiterProblem.MIXED_WIDTH_PAREN, "全角と半角の括弧が組になっている（どちらかに揃える）"),
    _delimiter("QUOTE_UNCLOSED", DelimiterProblem.UNCLOSED_QUOTE, "閉じ鉤括弧や閉じ引用符（」』”''）がない"),
    _delimiter("QUOTE_UNOPENED", DelimiterProblem.UNOPENED_QUOTE, "対応する開き鉤括弧や開き引用符（「『“``）がない"),
    _paragraph(
        "REPEATED_SENTENCE_ENDING",
        r"(\p{Hiragana}{2,4}[．。])[^．。]+\1[^．。]+\1",
        "同じ文末表現が3文続いている(?)",
    ),
)

ALL_RULES: tuple[Rule, ...] = PARAGRAPH_RULES + SENTENCE_RULES


def rules_for_scope(scope: RuleScope, disabled_rules: set[str] | None = None) -> list[Rule]:
    """Return the rule table for ``scope`` without the disabled rule ids."""
    table = PARAGRAPH_RULES if scope is RuleScope.PARAGRAPH else SENTENCE_RULES
    if not disabled_rules:
        return list(table)
    return [rule for rule in table if rule.rule_id not in disabled_rules]


def get_rule(rule_id: str) -> Rule:
    for rule in ALL_RULES:
        if rule.rule_id == rule_id:
            return rule
    raise KeyError(rule_id)
