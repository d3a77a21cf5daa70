"""Exceptions raised by the style check workflow.

Rule matches are never errors. Only problems that stop a document from
being analysed at all are raised.
"""

from __future__ import annotations

from pathlib import Path


class StyleCheckError(Exception):
    """Base class for style check failures."""


class DocumentReadError(StyleCheckError):
    """The document could not be read from disk."""

    def __init__(self, path: Path | str, reason: str = ""):
        self.path = Path(path)
        self.reason = reason
        message = f"Cannot read {self.path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class DocumentStartNotFoundError(StyleCheckError):
    """No ``\\begin{document}`` marker, so the analysable region is unknown."""

    def __init__(self, filename: str = ""):
        self.filename = filename
        target = filename or "input"
        super().__init__(f"\\begin{{document}} not found in {target}")
