"""Checks for figure and table environments.

Runs over the preprocessed, line-tagged text (not over paragraphs) and
reports missing captions and labels, captions on the wrong side of the
figure or table body, English captions without a final period, and
labels that are never referenced or only referenced before they are
defined.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from jtexlint.utils.line_utils import build_line_number_map, format_line_range, line_number_at

from .style_check_config import FLOAT_ENVIRONMENTS, REFERENCE_COMMANDS, TABULAR_ENVIRONMENTS

LOGGER = logging.getLogger(__name__)

_ENVIRONMENT_PATTERN = re.compile(
    r"\\begin\{(" + "|".join(FLOAT_ENVIRONMENTS) + r")(\*?)\}(?:\[[^\]]*\])?(.*?)\\end\{\1\2\}",
    re.DOTALL,
)
_CAPTION_PATTERN = re.compile(r"\\caption(?![A-Za-z])")
_ECAPTION_PATTERN = re.compile(r"\\ecaption\{([^}]*)\}")
_LABEL_PATTERN = re.compile(r"\\label\{([^}]*)\}")
_GRAPHICS_PATTERN = re.compile(r"\\includegraphics(?![A-Za-z])")
_TABULAR_PATTERN = re.compile(
    r"\\begin\{(?:" + "|".join(re.escape(env) for env in TABULAR_ENVIRONMENTS) + r")\}"
)
_LABEL_PREFIX_PATTERN = re.compile(r"^(?:fig|tab):")


@dataclass
class FloatLabel:
    key: str
    environment: str
    line: int


def _reference_pattern(key: str) -> re.Pattern[str]:
    # \figref and \tabref add the fig:/tab: prefix themselves
    keys = {key, _LABEL_PREFIX_PATTERN.sub("", key)}
    alternatives = "|".join(re.escape(k) for k in sorted(keys))
    commands = "|".join(REFERENCE_COMMANDS)
    return re.compile(r"\\(?:" + commands + r")\{(?:[^}]*,)?(?:" + alternatives + r")(?:,[^}]*)?\}")


def check_figure_table(tagged_text: str) -> list[str]:
    """Return warnings for the figure and table environments in ``tagged_text``."""
    warnings: list[str] = []
    labels: dict[str, FloatLabel] = {}
    line_map = build_line_number_map(tagged_text)

    def _line(position: int) -> int:
        return line_number_at(position, line_map) or 0

    for match in _ENVIRONMENT_PATTERN.finditer(tagged_text):
        environment = match.group(1) + match.group(2)
        body = match.group(3)
        body_start = match.start(3)
        where = format_line_range(_line(match.start()), _line(match.end() - 1))

        caption = _CAPTION_PATTERN.search(body)
        if caption is None:
            warnings.append(f"{where}: {environment}環境に\\captionがない")
        elif match.group(1) == "figure":
            graphics = _GRAPHICS_PATTERN.search(body)
            if graphics is not None and caption.start() < graphics.start():
                warnings.append(f"{where}: 図のキャプションは図の下に置く（\\captionが\\includegraphicsより前にある）")
        else:
            tabular = _TABULAR_PATTERN.search(body)
            if tabular is not None and caption.start() > tabular.start():
                warnings.append(f"{where}: 表のキャプションは表の上に置く（\\captionが表の本体より後にある）")

        for ecaption in _ECAPTION_PATTERN.finditer(body):
            text = ecaption.group(1).strip()
            if not text.endswith("."):
                warnings.append(
                    f"{_line(body_start + ecaption.start())}: 英語のキャプション(ecaption)の最後にはピリオドが必要 {text}"
                )

        label = _LABEL_PATTERN.search(body)
        if label is None:
            warnings.append(f"{where}: {environment}環境に\\labelがない")
            continue
        key = label.group(1).strip()
        labels.setdefault(key, FloatLabel(key, environment, _line(body_start + label.start())))

    for key, label in labels.items():
        references = [m.start() for m in _reference_pattern(key).finditer(tagged_text)]
        if not references:
            warnings.append(f"{label.line}: 図表{{{key}}}は本文から参照されていないようです")
            continue
        definition = re.search(r"\\label\{" + re.escape(key) + r"\}", tagged_text)
        if definition is not None and all(position < definition.start() for position in references):
            first = _line(references[0])
            warnings.append(
                f"{label.line}: 図表{{{key}}}は定義（{label.line}行目）より前の{first}行目でしか参照されていないようです"
            )

    LOGGER.debug("Figure/table check: %d label(s), %d warning(s)", len(labels), len(warnings))
    return warnings
