"""Split tagged text into paragraphs and sentences.

Paragraphs end at blank lines and at structural commands (sectioning with
its title, ``\\item``, explicit breaks, environment delimiters). Sentences end at
terminal marks. Both keep the source line numbers of the lines they were
built from, including lines that were split or joined along the way.
"""

from __future__ import annotations

import bisect
import logging
import re
from dataclasses import dataclass, field
from typing import Iterator

from jtexlint.utils.line_utils import (
    TaggedLine,
    drop_erased_lines,
    erase_span,
    format_line_range,
    join_fragment,
    parse_tagged_text,
)

from .preprocess import find_closing_brace
from .style_check_config import (
    BREAK_COMMANDS,
    FLOAT_ENVIRONMENTS,
    SECTIONING_COMMANDS,
    TERMINAL_MARKS,
    TRAILING_CLOSERS,
)

LOGGER = logging.getLogger(__name__)

_FLOAT_PATTERN = re.compile(
    r"\\begin\{(" + "|".join(FLOAT_ENVIRONMENTS) + r")(\*?)\}.*?\\end\{\1\2\}",
    re.DOTALL,
)

# Brace groups of sectioning titles and environment arguments may nest or
# wrap onto the next line, so they are consumed with find_closing_brace.
STRUCTURAL_BOUNDARY_PATTERN = re.compile(
    r"(?P<section>\\(?:" + "|".join(SECTIONING_COMMANDS) + r")\*?\s*(?:\[[^\]]*\])?\s*)(?=\{)"
    r"|\\item(?![A-Za-z])(?:\s*\[[^\]]*\])?"
    r"|\\(?:" + "|".join(BREAK_COMMANDS) + r")(?![A-Za-z])"
    r"|(?P<environment>\\begin\{[^}]*\}(?:\s*\[[^\]]*\])?)"
    r"|\\end\{[^}]*\}"
    r"|\\\\(?:\[[^\]]*\])?"
)

SENTENCE_END_PATTERN = re.compile(
    "[" + re.escape(TERMINAL_MARKS) + "][" + re.escape(TRAILING_CLOSERS) + "]*"
)


@dataclass(frozen=True)
class Sentence:
    """A span of text ending at a terminal mark or at the paragraph end."""

    text: str
    start_line: int
    end_line: int

    @property
    def line_ref(self) -> str:
        return format_line_range(self.start_line, self.end_line)

    def __str__(self) -> str:
        return f"{self.line_ref}: {self.text}"


def split_sentences(lines: list[TaggedLine]) -> list[Sentence]:
    """Cut the joined text of ``lines`` into sentences.

    Lines are stripped and appended to a remainder buffer with
    :func:`join_fragment`. Every terminal mark in the buffer closes a
    sentence spanning from the line its first character came from to the
    line currently being read.
    """
    sentences: list[Sentence] = []
    buffer = ""
    start_line: int | None = None
    last_line: int | None = None

    for line in lines:
        fragment = line.text.strip()
        if not fragment:
            continue
        if not buffer:
            start_line = line.number
        buffer = join_fragment(buffer, fragment)
        last_line = line.number

        while True:
            match = SENTENCE_END_PATTERN.search(buffer)
            if match is None:
                break
            text = buffer[: match.end()].strip()
            buffer = buffer[match.end():].lstrip()
            if text:
                assert start_line is not None  # for type checkers
                sentences.append(Sentence(text=text, start_line=start_line, end_line=line.number))
            start_line = line.number if buffer else None

    if buffer.strip():
        assert start_line is not None and last_line is not None  # for type checkers
        sentences.append(Sentence(text=buffer.strip(), start_line=start_line, end_line=last_line))
    return sentences


@dataclass
class Paragraph:
    """An ordered run of tagged lines forming one logical paragraph."""

    lines: list[TaggedLine]
    text: str = field(init=False)
    sentences: list[Sentence] = field(init=False)
    _offsets: list[int] = field(init=False, repr=False)
    _numbers: list[int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.lines:
            raise ValueError("a paragraph needs at least one line")
        text = ""
        offsets: list[int] = []
        numbers: list[int] = []
        for line in self.lines:
            fragment = line.text.strip()
            if not fragment:
                continue
            joined = join_fragment(text, fragment)
            offsets.append(len(joined) - len(fragment))
            numbers.append(line.number)
            text = joined
        self.text = text
        self._offsets = offsets
        self._numbers = numbers
        self.sentences = split_sentences(self.lines)

    @property
    def start_line(self) -> int:
        return self.lines[0].number

    @property
    def end_line(self) -> int:
        return self.lines[-1].number

    @property
    def line_ref(self) -> str:
        return format_line_range(self.start_line, self.end_line)

    def line_at(self, offset: int) -> int:
        """Source line of the character at ``offset`` in :attr:`text`."""
        index = bisect.bisect_right(self._offsets, offset) - 1
        return self._numbers[max(index, 0)]

    def lines_for_span(self, start: int, end: int) -> tuple[int, int]:
        """Source line range covering ``text[start:end]``."""
        first = self.line_at(start)
        last = self.line_at(max(start, end - 1))
        return first, last

    def raw_text(self) -> str:
        return "\n".join(line.text for line in self.lines)


def remove_float_environments(tagged_text: str) -> str:
    """Remove figure and table environments; they are checked separately."""
    return drop_erased_lines(_FLOAT_PATTERN.sub(lambda m: erase_span(m.group(0)), tagged_text))


def split_chunks(lines: list[TaggedLine]) -> list[list[TaggedLine]]:
    """Split lines into chunks separated by runs of blank lines."""
    chunks: list[list[TaggedLine]] = []
    current: list[TaggedLine] = []
    for line in lines:
        if line.is_blank():
            if current:
                chunks.append(current)
                current = []
            continue
        current.append(line)
    if current:
        chunks.append(current)
    return chunks


def iter_structural_boundaries(text: str) -> Iterator[tuple[int, int]]:
    """Yield the ``(start, end)`` of each structural command in ``text``.

    A sectioning command spans its whole title. An environment opener
    also spans one brace group written directly after it (the width of a
    ``minipage``, the column spec of a ``tabular``). An unterminated
    title leaves the boundary at the command itself.
    """
    position = 0
    while True:
        match = STRUCTURAL_BOUNDARY_PATTERN.search(text, position)
        if match is None:
            return
        end = match.end()
        if match.group("section") is not None or (
            match.group("environment") is not None and text.startswith("{", end)
        ):
            close = find_closing_brace(text, end)
            if close is not None:
                end = close + 1
        yield match.start(), end
        position = end


def _slice_lines(chunk: list[TaggedLine], starts: list[int], start: int, end: int) -> list[TaggedLine]:
    """Cut ``[start, end)`` of the joined chunk text back into tagged lines."""
    pieces: list[TaggedLine] = []
    for line, line_start in zip(chunk, starts):
        left = max(start, line_start)
        right = min(end, line_start + len(line.text))
        if left >= right:
            continue
        piece = line.text[left - line_start : right - line_start]
        if piece.strip():
            pieces.append(TaggedLine(line.number, piece))
    return pieces


def _split_chunk(chunk: list[TaggedLine]) -> list[list[TaggedLine]]:
    # Boundaries are searched over the joined chunk so a title may span lines
    text = "\n".join(line.text for line in chunk)
    starts: list[int] = []
    offset = 0
    for line in chunk:
        starts.append(offset)
        offset += len(line.text) + 1

    groups: list[list[TaggedLine]] = []
    position = 0
    for start, end in iter_structural_boundaries(text):
        group = _slice_lines(chunk, starts, position, start)
        if group:
            groups.append(group)
        position = end
    group = _slice_lines(chunk, starts, position, len(text))
    if group:
        groups.append(group)
    return groups


def split_paragraphs(tagged_text: str) -> list[Paragraph]:
    """Split preprocessed tagged text into paragraphs."""
    lines = parse_tagged_text(remove_float_environments(tagged_text))
    paragraphs: list[Paragraph] = []
    for chunk in split_chunks(lines):
        paragraphs.extend(Paragraph(group) for group in _split_chunk(chunk))
    LOGGER.debug("Split text into %d paragraph(s)", len(paragraphs))
    return paragraphs


def format_segmentation(paragraphs: list[Paragraph]) -> str:
    """Render paragraphs and their sentences for the debug dump."""
    out: list[str] = []
    for index, paragraph in enumerate(paragraphs, start=1):
        out.append(f"[paragraph {index}] {paragraph.line_ref}")
        for sentence in paragraph.sentences:
            out.append(f"  {sentence}")
    return "\n".join(out)
