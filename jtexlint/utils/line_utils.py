"""Utilities for working with line-tagged text.

Every line of a manuscript is prefixed with a tag recording its original
1-based line number, in the format ``\\x1e<N>\\x1f``. The tags survive the
destructive rewrites of the preprocessor so that paragraphs and sentences
built later can always report where they came from.

Functions:
    - tag_lines: Prefix every line of raw text with its line tag
    - parse_tagged_text: Split tagged text back into TaggedLine objects
    - render_tagged_text: Inverse of parse_tagged_text
    - find_line_tags: Find all line tags in tagged text
    - erase_span: Replacement for a removed region that keeps its line tags
    - drop_erased_lines: Delete lines emptied by erase_span
    - build_line_number_map: Map tag positions to line numbers
    - line_number_at: Line number for a character position in tagged text
    - strip_tags: Remove every tag from tagged text
    - join_fragment: CJK-aware concatenation of two text fragments
    - format_line_range: Render ``N`` or ``N..M``
"""

from __future__ import annotations

import bisect
import re
from dataclasses import dataclass
from typing import Iterable

TAG_OPEN = "\x1e"
TAG_CLOSE = "\x1f"

# Left behind where a region was deleted; lines holding nothing else are
# dropped so they do not turn into blank-line paragraph boundaries.
REMOVED_MARK = "\x1a"

# Line tag pattern: \x1e<N>\x1f
LINE_TAG_PATTERN = re.compile(r"\x1e(\d+)\x1f")


@dataclass(frozen=True)
class TaggedLine:
    """A line of text together with its original source line number."""

    number: int
    text: str

    def tagged(self) -> str:
        return f"{make_tag(self.number)}{self.text}"

    def is_blank(self) -> bool:
        return not self.text.strip()


@dataclass
class LineTag:
    """Represents a line tag found in tagged text."""

    line_number: int
    position: int  # Character position in text where the tag starts
    end: int  # Character position just after the tag


def make_tag(number: int) -> str:
    return f"{TAG_OPEN}{number}{TAG_CLOSE}"


def tag_lines(text: str) -> str:
    """Prefix every line of ``text`` with its 1-based line tag.

    A trailing newline does not produce an extra empty line.

    Example:
        >>> tag_lines("a\\nb\\n") == "\\x1e1\\x1fa\\n\\x1e2\\x1fb"
        True
    """
    if not text:
        return ""
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return "\n".join(make_tag(number) + line for number, line in enumerate(lines, start=1))


def find_line_tags(text: str) -> list[LineTag]:
    """Find all line tags in the text, sorted by position."""
    return [
        LineTag(line_number=int(match.group(1)), position=match.start(), end=match.end())
        for match in LINE_TAG_PATTERN.finditer(text)
    ]


def parse_tagged_text(text: str) -> list[TaggedLine]:
    """Split tagged text into TaggedLine objects.

    A physical line without a tag (which only happens if a rewrite
    swallowed it) inherits the number of the previous tagged line.
    """
    lines: list[TaggedLine] = []
    if not text:
        return lines
    last_number = 0
    for raw_line in text.split("\n"):
        match = LINE_TAG_PATTERN.match(raw_line)
        if match:
            last_number = int(match.group(1))
            body = raw_line[match.end():]
        else:
            body = raw_line
        # Tags left inside a line by span removal carry no text of their own
        lines.append(TaggedLine(number=last_number, text=strip_tags(body)))
    return lines


def render_tagged_text(lines: Iterable[TaggedLine]) -> str:
    return "\n".join(line.tagged() for line in lines)


def build_line_number_map(text: str) -> tuple[list[int], list[int]]:
    """Build parallel lists of tag positions and their line numbers.

    The result is suitable for :func:`line_number_at`, which bisects the
    positions rather than storing one entry per character.
    """
    tags = find_line_tags(text)
    return [tag.position for tag in tags], [tag.line_number for tag in tags]


def line_number_at(position: int, line_map: tuple[list[int], list[int]]) -> int | None:
    """Get the line number for a character position in tagged text.

    Returns None when the position lies before the first tag.
    """
    positions, numbers = line_map
    index = bisect.bisect_right(positions, position) - 1
    if index < 0:
        return None
    return numbers[index]


def strip_tags(text: str) -> str:
    return LINE_TAG_PATTERN.sub("", text)


def erase_span(span: str) -> str:
    """Return the replacement for a removed region of tagged text.

    Only the line tags inside ``span`` survive, each followed by
    :data:`REMOVED_MARK`, so the surrounding lines keep their numbers and
    :func:`drop_erased_lines` can later tell an emptied line from a line
    that was blank in the source.
    """
    kept = [REMOVED_MARK]
    for part in span.split("\n")[1:]:
        match = LINE_TAG_PATTERN.match(part)
        kept.append((match.group(0) if match else "") + REMOVED_MARK)
    return "\n".join(kept)


def drop_erased_lines(text: str) -> str:
    """Delete lines emptied by :func:`erase_span` and clear the removal marks."""
    if not text:
        return text
    kept: list[str] = []
    for line in text.split("\n"):
        if REMOVED_MARK in line:
            remainder = strip_tags(line).replace(REMOVED_MARK, "")
            if not remainder.strip():
                continue
            line = line.replace(REMOVED_MARK, "")
        kept.append(line)
    return "\n".join(kept)


def join_fragment(buffer: str, fragment: str) -> str:
    """Append ``fragment`` to ``buffer`` the way wrapped lines are read.

    Two non-ASCII characters meeting at the boundary (a wrapped Japanese
    sentence) are glued together; anything else gets a single space so an
    English word is not fused with the next token.
    """
    if not buffer:
        return fragment
    if not fragment:
        return buffer
    if not buffer[-1].isascii() and not fragment[0].isascii():
        return buffer + fragment
    return f"{buffer} {fragment}"


def format_line_range(start: int, end: int) -> str:
    """Render a line reference as ``N`` or ``N..M``."""
    if start == end:
        return str(start)
    return f"{start}..{end}"
