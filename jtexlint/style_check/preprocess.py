"""Normalise a LaTeX manuscript into line-tagged text.

The preprocessor tags each line with its source line number and then
rewrites the tagged stream step by step: comments, the preamble,
definitions, verbatim-like regions and editorial notes are removed and
citation keys are masked. Removed regions keep their line tags so every
later unit can still report the lines it came from.
"""

from __future__ import annotations

import logging
import re

from jtexlint.utils.line_utils import (
    LINE_TAG_PATTERN,
    REMOVED_MARK,
    drop_erased_lines,
    erase_span,
    parse_tagged_text,
    tag_lines,
)

from .analysis_context import AnalysisContext
from .style_check_config import (
    CITATION_PLACEHOLDER,
    COMMENT_COMMAND,
    DEFINITION_COMMANDS,
    TODO_COMMAND,
    VERBATIM_ENVIRONMENTS,
)

LOGGER = logging.getLogger(__name__)

# A % preceded by an even number of backslashes starts a comment
_COMMENT_PATTERN = re.compile(r"(?<!\\)((?:\\\\)*)%.*$", re.MULTILINE)
_DOCUMENT_BEGIN_PATTERN = re.compile(r"\\begin\{document\}")
_DOCUMENT_END_PATTERN = re.compile(r"\\end\{document\}")
_DEFINITION_PATTERN = re.compile(
    r"\\(?:" + "|".join(DEFINITION_COMMANDS) + r")(?![A-Za-z]).*$",
    re.MULTILINE,
)
_VERBATIM_PATTERN = re.compile(
    r"\\begin\{(" + "|".join(re.escape(env) for env in VERBATIM_ENVIRONMENTS) + r")\}"
    r".*?\\end\{\1\}",
    re.DOTALL,
)
_CITATION_PATTERN = re.compile(
    r"\\((?:no)?cite[A-Za-z]*\*?)((?:\s*\[[^\]\n]*\]){0,2})\s*\{([^}]*)\}"
)

PUNCTUATION_PERIOD_PATTERN = re.compile(r"[．，]")
PUNCTUATION_KUTEN_PATTERN = re.compile(r"[。、]")


def strip_comments(text: str) -> str:
    return _COMMENT_PATTERN.sub(lambda m: m.group(1) + REMOVED_MARK, text)


def _line_start(text: str, position: int) -> int:
    return text.rfind("\n", 0, position) + 1


def extract_document_body(text: str) -> str | None:
    """Keep only the text between ``\\begin{document}`` and ``\\end{document}``.

    Returns None when there is no start marker. The line holding the start
    marker keeps its tag so text following the marker stays addressable.
    """
    begin = _DOCUMENT_BEGIN_PATTERN.search(text)
    if begin is None:
        return None

    line_start = _line_start(text, begin.start())
    tag = LINE_TAG_PATTERN.match(text, line_start)
    prefix = tag.group(0) if tag else ""
    body = prefix + REMOVED_MARK + text[begin.end():]

    end = _DOCUMENT_END_PATTERN.search(body)
    if end is not None:
        body = body[: end.start()] + REMOVED_MARK
    return body


def remove_definitions(text: str) -> str:
    """Drop macro definitions up to the end of their line.

    Definitions whose bodies continue on following lines are only removed
    from their first line; the rest is analysed as ordinary text.
    """
    return _DEFINITION_PATTERN.sub(REMOVED_MARK, text)


def remove_verbatim_regions(text: str) -> str:
    text = _VERBATIM_PATTERN.sub(lambda m: erase_span(m.group(0)), text)
    return remove_macro_spans(text, COMMENT_COMMAND)


def find_closing_brace(text: str, open_position: int) -> int | None:
    """Return the index of the brace closing the one at ``open_position``.

    Escaped braces (``\\{`` and ``\\}``) do not count.
    """
    depth = 0
    index = open_position
    while index < len(text):
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
        index += 1
    return None


def remove_macro_spans(text: str, command: str) -> str:
    """Remove every ``\\command{...}`` span, including nested braces."""
    pattern = re.compile(r"\\" + re.escape(command) + r"\{")
    pieces: list[str] = []
    position = 0
    while True:
        match = pattern.search(text, position)
        if match is None:
            break
        close = find_closing_brace(text, match.end() - 1)
        if close is None:
            LOGGER.debug("Unclosed \\%s{ at offset %d; left in place", command, match.start())
            pieces.append(text[position : match.end()])
            position = match.end()
            continue
        pieces.append(text[position : match.start()])
        pieces.append(erase_span(text[match.start() : close + 1]))
        position = close + 1
    pieces.append(text[position:])
    return "".join(pieces)


def remove_todo_annotations(text: str) -> str:
    return remove_macro_spans(text, TODO_COMMAND)


def mask_citations(text: str) -> str:
    """Replace the keys of citation commands with an opaque placeholder.

    ``\\cite{foo2023}`` becomes ``\\cite{*}``: the command stays visible to
    the rules, its keys do not.
    """

    def _mask(match: re.Match[str]) -> str:
        command, options, keys = match.group(1), match.group(2), match.group(3)
        # Keys wrapped onto following lines leave their line tags behind
        continuation = erase_span(keys)[len(REMOVED_MARK):]
        return f"\\{command}{options}{{{CITATION_PLACEHOLDER}}}{continuation}"

    return _CITATION_PATTERN.sub(_mask, text)


def count_punctuation(tagged_text: str, context: AnalysisContext) -> None:
    """Record which lines use ．， and which use 。、."""
    counters = context.punctuation
    for line in parse_tagged_text(tagged_text):
        entry = f"{line.number}: {line.text.strip()}"
        if PUNCTUATION_PERIOD_PATTERN.search(line.text):
            counters.record_period(entry)
        if PUNCTUATION_KUTEN_PATTERN.search(line.text):
            counters.record_kuten(entry)


def prepare(raw_text: str, context: AnalysisContext) -> str:
    """Turn raw manuscript text into tagged text ready for segmentation.

    Sets ``context.document_start_found`` and fills
    ``context.punctuation``. Returns an empty string when the document has
    no ``\\begin{document}``.
    """
    text = tag_lines(raw_text)
    text = strip_comments(text)

    body = extract_document_body(text)
    if body is None:
        context.document_start_found = False
        LOGGER.debug("No \\begin{document} in %s", context.filename or "input")
        return ""
    context.document_start_found = True

    text = remove_definitions(body)
    text = remove_verbatim_regions(text)
    text = remove_todo_annotations(text)
    text = mask_citations(text)
    text = drop_erased_lines(text)

    count_punctuation(text, context)
    LOGGER.debug(
        "Prepared %s: %d line(s), %d period/comma line(s), %d kuten line(s)",
        context.filename or "input",
        text.count("\n") + 1 if text else 0,
        context.punctuation.period_count,
        context.punctuation.kuten_count,
    )
    return text
