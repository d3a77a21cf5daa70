"""Model for a single rule match found in a manuscript.

A StyleIssue records which rule fired, where in the source it fired
(a line or a line range) and the unit text it fired in, together with
the offset and length of the match so that the excerpt can be rendered
with whichever highlight markers the caller prefers.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from jtexlint.utils.line_utils import format_line_range

from .enums import HighlightStyle, RuleScope


class StyleIssue(BaseModel):
    """One excerpt accumulated in a rule's match bucket.

    Fields:
    - filename: Document filename ("" when checking in-memory text)
    - rule_id: Stable identifier of the rule that fired
    - description: Human-readable (Japanese) rule description
    - scope: Whether the rule ran on a paragraph or a sentence
    - start_line / end_line: Source line range of the excerpt
    - context: The excerpt text the match was found in
    - offset / length: Position of the match inside ``context``
    - issue: The matched text itself (may be empty for zero-width matches)
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    filename: str = ""
    rule_id: str
    description: str
    scope: RuleScope
    start_line: int
    end_line: int
    context: str
    offset: int = 0
    length: int = 0
    issue: str = ""

    @field_validator("rule_id", "description", "filename", mode="before")
    def _strip_strings(cls, value: object) -> str:
        return str(value or "").strip()

    @field_validator("offset", "length")
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("offset and length must not be negative")
        return value

    @model_validator(mode="after")
    def final_checks(self) -> "StyleIssue":
        if not self.rule_id:
            raise ValueError("rule_id must not be empty")
        if not self.description:
            raise ValueError("description must not be empty")
        if self.start_line < 1:
            raise ValueError("start_line must be a 1-based line number")
        if self.end_line < self.start_line:
            raise ValueError("end_line must not precede start_line")
        if self.offset + self.length > len(self.context):
            raise ValueError("match span lies outside the context")
        return self

    @property
    def line_ref(self) -> str:
        return format_line_range(self.start_line, self.end_line)

    def highlighted_context(self, style: HighlightStyle = HighlightStyle.PLAIN) -> str:
        """Return the context with the match wrapped in ``style`` markers."""
        open_marker, close_marker = style.markers
        start = self.offset
        end = start + self.length
        return f"{self.context[:start]}{open_marker}{self.context[start:end]}{close_marker}{self.context[end:]}"

    def to_line(self, style: HighlightStyle = HighlightStyle.PLAIN, *, with_filename: bool = False) -> str:
        prefix = f"{self.filename}:" if with_filename and self.filename else ""
        return f"{prefix}{self.line_ref}: {self.highlighted_context(style)}"
