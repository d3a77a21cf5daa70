"""Utilities for rendering style check reports.

The plain-text renderer produces the console report (banner, one block
per rule, punctuation consistency, figures and tables). The Markdown and
CSV builders persist the same findings for later review. Keeping this
logic separate from the checking routines makes it easy to test on its
own.
"""

from __future__ import annotations

from typing import Iterable, TYPE_CHECKING

from jtexlint import __version__
from jtexlint.models import HighlightStyle, PunctuationStyle

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .style_check import DocumentReport

BANNER_RULE = "=" * 53
PUNCTUATION_HEADING = "句読点（。、）と全角のコンマやピリオド（．，）を混ぜて使わないこと"
FIGURE_TABLE_HEADING = "図表"
PUNCTUATION_RULE_ID = "PUNCTUATION_MIX"
FIGURE_TABLE_RULE_ID = "FIGURE_TABLE"


def render_banner(program: str = "jtexlint") -> str:
    return "\n".join(
        [
            BANNER_RULE,
            " 間違った指摘をする可能性が十分あるので注意すること!",
            " (may be a false flag: every hit is a heuristic)",
            f" checked by {program} {__version__}",
            BANNER_RULE,
            "",
        ]
    )


def _minority_style(report: "DocumentReport") -> PunctuationStyle:
    if report.punctuation.dominant_style() is PunctuationStyle.PERIOD_COMMA:
        return PunctuationStyle.KUTEN_TOUTEN
    return PunctuationStyle.PERIOD_COMMA


def render_punctuation_block(report: "DocumentReport", *, with_filename: bool = False) -> list[str]:
    counters = report.punctuation
    if not counters.is_mixed():
        return []
    dominant = counters.dominant_style()
    prefix = f"{report.filename}:" if with_filename and report.filename else ""
    lines = [
        f"=== {PUNCTUATION_HEADING} ===",
        f"  # 全角ピリオドあるいはカンマを含む行数: {counters.period_count}",
        f"  # 句読点を含む行数: {counters.kuten_count}",
        f"  # 主に使われているのは{dominant.label}",
        "",
        f"  === {_minority_style(report).label}が使われている行 ===",
    ]
    lines.extend(f"{prefix}{entry}" for entry in counters.minority_lines())
    lines.append("")
    return lines


def render_figure_table_block(report: "DocumentReport", *, with_filename: bool = False) -> list[str]:
    if not report.figure_table_warnings:
        return []
    prefix = f"{report.filename}:" if with_filename and report.filename else ""
    lines = [f"=== {FIGURE_TABLE_HEADING} ==="]
    lines.extend(f"{prefix}{warning}" for warning in report.figure_table_warnings)
    lines.append("")
    return lines


def render_report(
    report: "DocumentReport",
    style: HighlightStyle = HighlightStyle.PLAIN,
    *,
    with_filename: bool = False,
) -> str:
    """Render one document's findings as the console report body."""
    lines: list[str] = []
    for issues in report.matches.values():
        lines.append(f"=== {issues[0].description} ===")
        lines.extend(issue.to_line(style, with_filename=with_filename) for issue in issues)
        lines.append("")
    lines.extend(render_punctuation_block(report, with_filename=with_filename))
    lines.extend(render_figure_table_block(report, with_filename=with_filename))
    return "\n".join(lines)


def render_reports(
    reports: Iterable["DocumentReport"],
    style: HighlightStyle = HighlightStyle.PLAIN,
) -> str:
    """Render several documents, prefixing lines with filenames when needed."""
    report_list = list(reports)
    with_filename = len(report_list) > 1
    parts = [render_banner()]
    parts.extend(render_report(report, style, with_filename=with_filename) for report in report_list)
    return "\n".join(part for part in parts if part)


def _escape(value: str) -> str:
    return value.replace("|", "\\|")


def build_report_markdown(reports: Iterable["DocumentReport"]) -> str:
    """Convert the collected document reports into Markdown output."""

    report_list = list(reports)
    total_documents = len(report_list)
    total_issues = sum(report.total_issues() for report in report_list)

    lines: list[str] = []
    lines.append("# Style Check Report")
    lines.append("")
    lines.append(f"- Checked {total_documents} document(s)")
    lines.append(f"- Total issues found: {total_issues}")
    lines.append("- Every finding is heuristic and may be a false flag.")

    lines.append("")
    lines.append("---")
    lines.append("")
    lines.append("## Document Details")
    if not report_list:
        lines.append("")
        lines.append("_No documents found for checking._")
        return "\n".join(lines)

    for report in report_list:
        lines.append("")
        lines.append(f"### {report.filename or '(input)'}")
        lines.append("")
        if not report.total_issues():
            lines.append("_No issues found._")
            continue

        lines.append(f"Found {report.total_issues()} issue(s).")
        if report.matches:
            lines.append("")
            lines.append("| Line | Rule | Scope | Description | Issue | Context |")
            lines.append("| --- | --- | --- | --- | --- | --- |")
            for issues in report.matches.values():
                for issue in issues:
                    lines.append(
                        f"| {issue.line_ref} | `{issue.rule_id}` | {issue.scope.value} | "
                        f"{_escape(issue.description)} | {_escape(issue.issue) or '—'} | "
                        f"{_escape(issue.highlighted_context(HighlightStyle.PLAIN))} |"
                    )

        if report.punctuation.is_mixed():
            lines.append("")
            lines.append(f"#### {PUNCTUATION_HEADING}")
            lines.append("")
            for entry in report.punctuation.minority_lines():
                lines.append(f"- {_escape(entry)}")

        if report.figure_table_warnings:
            lines.append("")
            lines.append(f"#### {FIGURE_TABLE_HEADING}")
            lines.append("")
            for warning in report.figure_table_warnings:
                lines.append(f"- {_escape(warning)}")

    return "\n".join(lines)


def build_report_csv(reports: Iterable["DocumentReport"]) -> list[list[str]]:
    """Convert the collected document reports into CSV data.

    Returns a list of rows, where each row is a list of string values.
    The first row contains the column headers. Punctuation and
    figure/table findings use the pseudo rule ids ``PUNCTUATION_MIX`` and
    ``FIGURE_TABLE``.
    """

    rows: list[list[str]] = []

    rows.append([
        "Filename",
        "Line",
        "Rule ID",
        "Scope",
        "Description",
        "Issue",
        "Highlighted Context",
    ])

    for report in reports:
        for issues in report.matches.values():
            for issue in issues:
                rows.append([
                    report.filename,
                    issue.line_ref,
                    issue.rule_id,
                    issue.scope.value,
                    issue.description,
                    issue.issue,
                    issue.highlighted_context(HighlightStyle.PLAIN),
                ])
        if report.punctuation.is_mixed():
            for entry in report.punctuation.minority_lines():
                line, _, text = entry.partition(": ")
                rows.append([report.filename, line, PUNCTUATION_RULE_ID, "", PUNCTUATION_HEADING, "", text])
        for warning in report.figure_table_warnings:
            line, _, text = warning.partition(": ")
            rows.append([report.filename, line, FIGURE_TABLE_RULE_ID, "", FIGURE_TABLE_HEADING, "", text])

    return rows
