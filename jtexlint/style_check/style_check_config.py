"""Configuration for the Japanese manuscript style checks.

This module defines the markup the preprocessor and segmenters treat
specially, the words the rule table checks, and the defaults that can be
overridden from the command line or from a ``.env`` file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Words that are normally written in hiragana in technical writing.
# See http://www.ieice.org/jpn/shiori/pdf/furoku_e.pdf
KANA_PREFERRED_KANJI = "事又之為共訳故挙"

# Sentence terminal marks. Closing brackets directly after a mark stay
# with the sentence they close.
TERMINAL_MARKS = "。．?？"
TRAILING_CLOSERS = "）)」』"

# Environments whose contents are never analysed
VERBATIM_ENVIRONMENTS = (
    "verbatim",
    "verbatim*",
    "lstlisting",
    "minted",
    "alltt",
    "comment",
)

# Environments checked by the figure/table checker and removed before
# paragraph segmentation
FLOAT_ENVIRONMENTS = ("figure", "table")

TABULAR_ENVIRONMENTS = ("tabular", "tabular*", "tabularx", "longtable", "tabulary")

# Definition commands whose (single-line) bodies are dropped
DEFINITION_COMMANDS = (
    "newcommand",
    "renewcommand",
    "providecommand",
    "newenvironment",
    "renewenvironment",
    "def",
    "let",
)

# Commands that end a paragraph without contributing sentence text
SECTIONING_COMMANDS = (
    "part",
    "chapter",
    "section",
    "subsection",
    "subsubsection",
    "paragraph",
    "subparagraph",
)
BREAK_COMMANDS = ("par", "newpage", "clearpage", "cleardoublepage", "maketitle", "noindent")

# Commands whose argument is masked (citation keys never reach the rules)
CITATION_PLACEHOLDER = "*"

# Editorial annotation macros removed before analysis
TODO_COMMAND = "TODO"
COMMENT_COMMAND = "COM"

# Reference commands that may point at a figure/table label
REFERENCE_COMMANDS = ("ref", "figref", "tabref", "autoref", "cref", "Cref")

# Rules to disable by default (can be extended via CLI or JTEXLINT_DISABLED_RULES)
DEFAULT_DISABLED_RULES: set[str] = set()

# Characters of context kept on either side of a paragraph-level match
PARAGRAPH_CONTEXT_RADIUS = 40

DISABLED_RULES_ENV = "JTEXLINT_DISABLED_RULES"
PLAIN_ENV = "JTEXLINT_PLAIN"


@dataclass
class StyleCheckSettings:
    """Defaults resolved from the environment before CLI flags apply."""

    disabled_rules: set[str] = field(default_factory=set)
    plain: bool = False


def _parse_flag(value: str | None) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


def load_settings(dotenv_path: str | Path | None = None) -> StyleCheckSettings:
    """Load settings from ``.env`` and the process environment.

    Existing environment variables win over values in the dotenv file.
    """
    if dotenv_path is not None:
        load_dotenv(dotenv_path=Path(dotenv_path))
    else:
        load_dotenv()

    disabled = set(DEFAULT_DISABLED_RULES)
    raw_rules = os.environ.get(DISABLED_RULES_ENV, "")
    disabled.update(rule.strip() for rule in raw_rules.split(",") if rule.strip())

    return StyleCheckSettings(
        disabled_rules=disabled,
        plain=_parse_flag(os.environ.get(PLAIN_ENV)),
    )
