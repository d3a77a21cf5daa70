"""Matchers used by the rule tables.

A matcher turns a unit of text into the ``(start, end)`` spans that a
rule flags. Three kinds exist:

- :class:`PatternMatcher` wraps a compiled ``regex`` pattern (Unicode
  script classes and variable-width lookbehind are needed, which the
  standard library ``re`` lacks);
- :class:`MathSpanMatcher` walks inline ``$...$`` spans left to right,
  each search resuming where the previous span ended, and only looks for
  its pattern inside the current span;
- :class:`DelimiterMatcher` reports one kind of bracket/quote pairing
  problem found by a stack-based scan.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Iterator, Protocol

import regex

Span = tuple[int, int]


class Matcher(Protocol):
    def finditer(self, text: str) -> Iterator[Span]: ...


@dataclass(frozen=True)
class PatternMatcher:
    """Flag every non-overlapping match of ``pattern``."""

    pattern: str
    flags: int = 0
    compiled: regex.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # Compile once, when the rule table is built
        object.__setattr__(self, "compiled", regex.compile(self.pattern, self.flags))

    def finditer(self, text: str) -> Iterator[Span]:
        for match in self.compiled.finditer(text):
            yield match.span()


def iter_math_spans(text: str) -> Iterator[Span]:
    """Yield the ``(start, end)`` of each inline math body in ``text``.

    ``$`` and ``$$`` delimiters are paired left to right. Each search for
    the next opening delimiter starts at the end of the previous closing
    one, so a closing ``$`` is never mistaken for an opening one. Escaped
    ``\\$`` is ignored. An unterminated span ends the walk.
    """
    position = 0
    length = len(text)
    while position < length:
        opening = _find_dollar(text, position)
        if opening is None:
            return
        delimiter = "$$" if text.startswith("$$", opening) else "$"
        body_start = opening + len(delimiter)
        closing = _find_dollar(text, body_start, delimiter)
        if closing is None:
            return
        yield body_start, closing
        position = closing + len(delimiter)


def _find_dollar(text: str, start: int, delimiter: str = "$") -> int | None:
    index = start
    while True:
        index = text.find(delimiter, index)
        if index < 0:
            return None
        backslashes = 0
        probe = index - 1
        while probe >= 0 and text[probe] == "\\":
            backslashes += 1
            probe -= 1
        if backslashes % 2 == 0:
            return index
        index += 1


@dataclass(frozen=True)
class MathSpanMatcher:
    """Flag matches of ``pattern`` that lie inside inline math."""

    pattern: str
    compiled: regex.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "compiled", regex.compile(self.pattern))

    def finditer(self, text: str) -> Iterator[Span]:
        for body_start, body_end in iter_math_spans(text):
            for match in self.compiled.finditer(text, body_start, body_end):
                yield match.span()


class DelimiterProblem(str, Enum):
    """Kinds of bracket and quote pairing problems."""

    UNCLOSED_HALF_PAREN = "unclosed_half_paren"
    UNCLOSED_FULL_PAREN = "unclosed_full_paren"
    UNOPENED_HALF_PAREN = "unopened_half_paren"
    UNOPENED_FULL_PAREN = "unopened_full_paren"
    MIXED_WIDTH_PAREN = "mixed_width_paren"
    UNCLOSED_QUOTE = "unclosed_quote"
    UNOPENED_QUOTE = "unopened_quote"


# opener -> closer
DELIMITER_PAIRS: dict[str, str] = {
    "(": ")",
    "（": "）",
    "「": "」",
    "『": "』",
    "“": "”",
    "``": "''",
}
_CLOSERS = {closer: opener for opener, closer in DELIMITER_PAIRS.items()}
_PARENS = {"(", ")", "（", "）"}
_WIDTH_PARTNER = {"(": "（", "（": "("}


@dataclass(frozen=True)
class DelimiterIssue:
    problem: DelimiterProblem
    start: int
    end: int


def _unclosed_problem(opener: str) -> DelimiterProblem:
    if opener == "(":
        return DelimiterProblem.UNCLOSED_HALF_PAREN
    if opener == "（":
        return DelimiterProblem.UNCLOSED_FULL_PAREN
    return DelimiterProblem.UNCLOSED_QUOTE


def _unopened_problem(closer: str) -> DelimiterProblem:
    if closer == ")":
        return DelimiterProblem.UNOPENED_HALF_PAREN
    if closer == "）":
        return DelimiterProblem.UNOPENED_FULL_PAREN
    return DelimiterProblem.UNOPENED_QUOTE


def _tokenise(text: str) -> Iterator[tuple[str, int]]:
    """Yield delimiter tokens and their offsets outside math and escapes."""
    math = list(iter_math_spans(text))
    math_index = 0
    index = 0
    length = len(text)
    while index < length:
        while math_index < len(math) and math[math_index][1] <= index:
            math_index += 1
        if math_index < len(math) and math[math_index][0] <= index < math[math_index][1]:
            index = math[math_index][1]
            continue
        char = text[index]
        if char == "\\":
            # \( \) and friends are markup, not brackets
            index += 2
            continue
        pair = text[index : index + 2]
        if pair in ("``", "''"):
            yield pair, index
            index += 2
            continue
        if char in DELIMITER_PAIRS or char in _CLOSERS:
            yield char, index
        index += 1


@lru_cache(maxsize=256)
def scan_delimiters(text: str) -> tuple[DelimiterIssue, ...]:
    """Check bracket and quote pairing with an explicit stack.

    Nesting depth is unbounded and half-width/full-width parentheses and
    quotes may be mixed freely. A closer that matches an opener deeper in
    the stack closes it and reports the unclosed openers above it. A
    parenthesis closed by the other width is reported as a width mismatch.
    """
    issues: list[DelimiterIssue] = []
    stack: list[tuple[str, int]] = []

    for token, offset in _tokenise(text):
        if token in DELIMITER_PAIRS:
            stack.append((token, offset))
            continue
        opener = _CLOSERS.get(token)
        if opener is None:
            continue
        if stack and stack[-1][0] == opener:
            stack.pop()
            continue
        if token in _PARENS and stack and stack[-1][0] == _WIDTH_PARTNER.get(opener):
            start = stack.pop()[1]
            issues.append(DelimiterIssue(DelimiterProblem.MIXED_WIDTH_PAREN, start, offset + len(token)))
            continue
        depth = next(
            (i for i in range(len(stack) - 1, -1, -1) if stack[i][0] == opener),
            None,
        )
        if depth is None:
            issues.append(DelimiterIssue(_unopened_problem(token), offset, offset + len(token)))
            continue
        while len(stack) > depth + 1:
            unclosed, start = stack.pop()
            issues.append(DelimiterIssue(_unclosed_problem(unclosed), start, start + len(unclosed)))
        stack.pop()

    for unclosed, start in stack:
        issues.append(DelimiterIssue(_unclosed_problem(unclosed), start, start + len(unclosed)))

    issues.sort(key=lambda issue: issue.start)
    return tuple(issues)


@dataclass(frozen=True)
class DelimiterMatcher:
    """Flag one kind of pairing problem found by :func:`scan_delimiters`."""

    problem: DelimiterProblem

    def finditer(self, text: str) -> Iterator[Span]:
        for issue in scan_delimiters(text):
            if issue.problem is self.problem:
                yield issue.start, issue.end
