"""Utility modules for jtexlint."""

from __future__ import annotations

from . import line_utils

__all__ = [
    "line_utils",
]
