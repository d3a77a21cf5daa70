"""Per-document mutable state for a style check run.

A fresh :class:`AnalysisContext` is created for every document so match
buckets and punctuation counters can never leak from one file into the
next.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from jtexlint.models import PunctuationStyle, StyleIssue


@dataclass
class PunctuationCounters:
    """Lines using each of the two Japanese punctuation conventions."""

    period_count: int = 0
    kuten_count: int = 0
    period_lines: list[str] = field(default_factory=list)
    kuten_lines: list[str] = field(default_factory=list)

    def record_period(self, line: str) -> None:
        self.period_count += 1
        self.period_lines.append(line)

    def record_kuten(self, line: str) -> None:
        self.kuten_count += 1
        self.kuten_lines.append(line)

    def is_mixed(self) -> bool:
        return self.period_count > 0 and self.kuten_count > 0

    def dominant_style(self) -> PunctuationStyle:
        # A tie counts as period/comma style, the convention of most journals
        if self.kuten_count <= self.period_count:
            return PunctuationStyle.PERIOD_COMMA
        return PunctuationStyle.KUTEN_TOUTEN

    def minority_lines(self) -> list[str]:
        if self.dominant_style() is PunctuationStyle.PERIOD_COMMA:
            return list(self.kuten_lines)
        return list(self.period_lines)


@dataclass
class AnalysisContext:
    """Accumulators for one document.

    ``buckets`` maps rule ids to the issues found for that rule, in the
    order the issues were found.
    """

    filename: str = ""
    buckets: dict[str, list[StyleIssue]] = field(default_factory=dict)
    punctuation: PunctuationCounters = field(default_factory=PunctuationCounters)
    document_start_found: bool = True

    def add_issue(self, issue: StyleIssue) -> None:
        self.buckets.setdefault(issue.rule_id, []).append(issue)

    def total_issues(self) -> int:
        return sum(len(issues) for issues in self.buckets.values())
