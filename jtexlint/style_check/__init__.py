"""Style check package exports.

This package exposes the key helpers used by other parts of the project
so callers can import from ``jtexlint.style_check``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .exceptions import DocumentReadError, DocumentStartNotFoundError, StyleCheckError
    from .report_utils import build_report_csv, build_report_markdown, render_reports
    from .rules import ALL_RULES, PARAGRAPH_RULES, SENTENCE_RULES
    from .style_check import DocumentReport, check_document, check_file, run_style_checks
    from .style_check_config import DEFAULT_DISABLED_RULES, load_settings

__all__ = [
    "ALL_RULES",
    "PARAGRAPH_RULES",
    "SENTENCE_RULES",
    "DocumentReport",
    "check_document",
    "check_file",
    "run_style_checks",
    "build_report_csv",
    "build_report_markdown",
    "render_reports",
    "load_settings",
    "DEFAULT_DISABLED_RULES",
    "StyleCheckError",
    "DocumentReadError",
    "DocumentStartNotFoundError",
]

_LAZY_EXPORTS = {
    # attribute -> (module, attribute)
    "ALL_RULES": (".rules", "ALL_RULES"),
    "PARAGRAPH_RULES": (".rules", "PARAGRAPH_RULES"),
    "SENTENCE_RULES": (".rules", "SENTENCE_RULES"),
    "DocumentReport": (".style_check", "DocumentReport"),
    "check_document": (".style_check", "check_document"),
    "check_file": (".style_check", "check_file"),
    "run_style_checks": (".style_check", "run_style_checks"),
    "build_report_csv": (".report_utils", "build_report_csv"),
    "build_report_markdown": (".report_utils", "build_report_markdown"),
    "render_reports": (".report_utils", "render_reports"),
    "load_settings": (".style_check_config", "load_settings"),
    "DEFAULT_DISABLED_RULES": (".style_check_config", "DEFAULT_DISABLED_RULES"),
    "StyleCheckError": (".exceptions", "StyleCheckError"),
    "DocumentReadError": (".exceptions", "DocumentReadError"),
    "DocumentStartNotFoundError": (".exceptions", "DocumentStartNotFoundError"),
}


def __getattr__(name: str):
    """Lazily import and return exported attributes.

    Submodules are only imported when first used, so importing
    ``jtexlint.style_check`` does not compile the rule table.
    """

    if name in _LAZY_EXPORTS:
        module_name, attr = _LAZY_EXPORTS[name]
        from importlib import import_module

        mod = import_module(f"jtexlint.style_check{module_name}")
        value = getattr(mod, attr)
        globals()[name] = value
        return value
    raise AttributeError(name)


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(_LAZY_EXPORTS.keys()))
