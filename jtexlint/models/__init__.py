"""Public model exports for the project.

Keep the :mod:`jtexlint` namespace clean; tests and other modules should import
``from jtexlint.models import StyleIssue, RuleScope``.
"""

from __future__ import annotations

from .enums import HighlightStyle, PunctuationStyle, RuleScope
from .style_issue import StyleIssue

__all__ = ["StyleIssue", "RuleScope", "HighlightStyle", "PunctuationStyle"]
