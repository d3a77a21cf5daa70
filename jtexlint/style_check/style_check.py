"""Style checks for Japanese LaTeX manuscripts.

This module wires the pipeline together: the preprocessor turns a
manuscript into line-tagged text, the segmenters cut it into paragraphs
and sentences, the rule engine fills per-rule buckets and the figure and
table checker runs over the tagged text on its own. Results for each
document are collected in a :class:`DocumentReport`.
"""

from __future__ import annotations

import argparse
import csv
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from jtexlint.models import HighlightStyle, StyleIssue

from .analysis_context import AnalysisContext, PunctuationCounters
from .engine import analyse_paragraphs
from .exceptions import DocumentReadError, DocumentStartNotFoundError
from .figure_table import check_figure_table
from .preprocess import prepare
from .report_utils import build_report_csv, build_report_markdown, render_reports
from .rules import ALL_RULES
from .segmenter import Paragraph, format_segmentation, split_paragraphs
from .style_check_config import load_settings

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NO_DOCUMENT_START = 1
EXIT_UNREADABLE = 2


@dataclass
class DocumentReport:
    """Compilation of findings for a specific document."""

    filename: str
    matches: dict[str, list[StyleIssue]]
    punctuation: PunctuationCounters
    figure_table_warnings: list[str] = field(default_factory=list)
    paragraphs: list[Paragraph] = field(default_factory=list, repr=False)

    def total_issues(self) -> int:
        total = sum(len(issues) for issues in self.matches.values())
        total += len(self.figure_table_warnings)
        if self.punctuation.is_mixed():
            total += 1
        return total


def _ordered_matches(context: AnalysisContext) -> dict[str, list[StyleIssue]]:
    """Return the non-empty buckets in rule table order."""
    return {
        rule.rule_id: list(context.buckets[rule.rule_id])
        for rule in ALL_RULES
        if context.buckets.get(rule.rule_id)
    }


def check_file(
    text: str,
    filename: str = "",
    *,
    disabled_rules: set[str] | None = None,
) -> DocumentReport:
    """Run every check on the manuscript ``text``.

    Raises:
        DocumentStartNotFoundError: the text has no ``\\begin{document}``
    """
    context = AnalysisContext(filename=filename)
    tagged_text = prepare(text, context)
    if not context.document_start_found:
        raise DocumentStartNotFoundError(filename)

    paragraphs = split_paragraphs(tagged_text)
    analyse_paragraphs(paragraphs, context, disabled_rules=disabled_rules)
    figure_table_warnings = check_figure_table(tagged_text)

    return DocumentReport(
        filename=filename,
        matches=_ordered_matches(context),
        punctuation=context.punctuation,
        figure_table_warnings=figure_table_warnings,
        paragraphs=paragraphs,
    )


def read_document(document_path: Path) -> str:
    """Read a manuscript as UTF-8 text with LF line endings."""
    try:
        raw = document_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentReadError(document_path, str(exc)) from exc
    return raw.replace("\r\n", "\n").replace("\r", "\n")


def check_document(
    document_path: Path,
    *,
    disabled_rules: set[str] | None = None,
) -> DocumentReport:
    """Read and check a single manuscript file."""
    text = read_document(document_path)
    return check_file(text, document_path.name, disabled_rules=disabled_rules)


def run_style_checks(
    documents: Iterable[Path],
    *,
    disabled_rules: set[str] | None = None,
    report_path: Optional[Path] = None,
) -> list[DocumentReport]:
    """Check each document in turn and optionally write Markdown/CSV reports.

    Each document gets its own analysis context, so nothing carries over
    from one file to the next.
    """
    reports: list[DocumentReport] = []
    running_total = 0
    for document_path in documents:
        LOGGER.info("Checking %s", document_path)
        report = check_document(document_path, disabled_rules=disabled_rules)
        running_total += report.total_issues()
        LOGGER.info(
            "Completed %s: %d issue(s) (running total: %d)",
            document_path.name,
            report.total_issues(),
            running_total,
        )
        reports.append(report)

    if report_path is not None:
        write_reports(reports, report_path)
    return reports


def write_reports(reports: list[DocumentReport], report_path: Path) -> Path:
    """Write the Markdown report and a CSV file next to it."""
    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text(build_report_markdown(reports), encoding="utf-8")

    csv_path = report_path.with_suffix(".csv")
    with csv_path.open("w", encoding="utf-8", newline="") as csv_file:
        writer = csv.writer(csv_file)
        writer.writerows(build_report_csv(reports))
    return report_path


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Check Japanese LaTeX manuscripts for likely violations of technical-writing "
            "conventions. Every finding is heuristic and may be a false flag."
        )
    )
    parser.add_argument(
        "files",
        nargs="*",
        type=Path,
        metavar="FILE",
        help="LaTeX source file(s) to check.",
    )
    marker = parser.add_mutually_exclusive_group()
    marker.add_argument(
        "--plain",
        action="store_true",
        help="Delimit matches with >>> and <<< instead of terminal colours.",
    )
    marker.add_argument(
        "--color",
        action="store_true",
        help="Always highlight matches with terminal colours.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Dump the paragraph and sentence segmentation to the log.",
    )
    parser.add_argument(
        "--disable-rule",
        action="append",
        dest="disabled_rules",
        metavar="RULE_ID",
        help="Skip a rule (can be specified multiple times). See --list-rules.",
    )
    parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Also write a Markdown report to this path (and a CSV next to it).",
    )
    parser.add_argument(
        "--list-rules",
        action="store_true",
        help="List rule ids and descriptions and exit.",
    )
    return parser.parse_args(list(argv) if argv is not None else None)


def _resolve_style(args: argparse.Namespace, plain_default: bool) -> HighlightStyle:
    if args.color:
        return HighlightStyle.ANSI
    if args.plain or plain_default or not sys.stdout.isatty():
        return HighlightStyle.PLAIN
    return HighlightStyle.ANSI


def main(argv: Optional[Iterable[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(levelname)s:%(name)s:%(message)s",
        stream=sys.stderr,
    )
    settings = load_settings()

    if args.list_rules:
        for rule in ALL_RULES:
            print(f"{rule.rule_id}\t{rule.scope.value}\t{rule.description}")
        return EXIT_OK

    if not args.files:
        LOGGER.error("No input files given")
        return EXIT_UNREADABLE

    disabled_rules = set(settings.disabled_rules)
    if args.disabled_rules:
        disabled_rules.update(args.disabled_rules)
    unknown = disabled_rules - {rule.rule_id for rule in ALL_RULES}
    for rule_id in sorted(unknown):
        LOGGER.warning("Unknown rule id ignored: %s", rule_id)

    try:
        reports = run_style_checks(
            args.files,
            disabled_rules=disabled_rules,
            report_path=args.report,
        )
    except DocumentReadError as exc:
        LOGGER.error("%s", exc)
        return EXIT_UNREADABLE
    except DocumentStartNotFoundError as exc:
        LOGGER.error("%s", exc)
        return EXIT_NO_DOCUMENT_START

    if args.debug:
        for report in reports:
            LOGGER.debug("Segmentation of %s:\n%s", report.filename, format_segmentation(report.paragraphs))

    print(render_reports(reports, _resolve_style(args, settings.plain)))
    if args.report is not None:
        print(f"Style check report written to {args.report.resolve()}")
        print(f"CSV report written to {args.report.with_suffix('.csv').resolve()}")
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
