"""Heuristic style checker for Japanese LaTeX manuscripts."""

from __future__ import annotations

__version__ = "0.2.0"

__all__ = [
    "models",
    "style_check",
    "utils",
]
