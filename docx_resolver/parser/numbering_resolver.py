"""List counters and label rendering for numbered paragraphs."""
from __future__ import annotations

import re
from dataclasses import replace
from typing import Dict, Optional

from docx_resolver.model.elements import NumberingReference
from docx_resolver.model.numbering_model import NumberingCatalog
from docx_resolver.utils.logger import get_logger

LOGGER = get_logger(__name__)

BULLET = "•"
_PLACEHOLDER = re.compile(r"%([1-9])")
_ENCLOSED_CHINESE = "㈠㈡㈢㈣㈤㈥㈦㈧㈨㈩"
_ROMAN_NUMERALS = (
    (1000, "M"), (900, "CM"), (500, "D"), (400, "CD"),
    (100, "C"), (90, "XC"), (50, "L"), (40, "XL"),
    (10, "X"), (9, "IX"), (5, "V"), (4, "IV"), (1, "I"),
)


class NumberingCounters:
    """Last issued value per ``(num_id, level)`` for a single parse.

    A level that has never been used (or was reset by a shallower level)
    has no value; its next ``advance`` returns the level's start value.
    """

    def __init__(self) -> None:
        self._values: Dict[int, Dict[int, int]] = {}

    def advance(self, num_id: int, ilvl: int, start: int = 1) -> int:
        levels = self._values.setdefault(num_id, {})
        value = levels[ilvl] + 1 if ilvl in levels else start
        levels[ilvl] = value
        for deeper in [level for level in levels if level > ilvl]:
            del levels[deeper]
        return value

    def current(self, num_id: int, ilvl: int) -> Optional[int]:
        return self._values.get(num_id, {}).get(ilvl)

    def reset(self, num_id: Optional[int] = None) -> None:
        if num_id is None:
            self._values.clear()
        else:
            self._values.pop(num_id, None)


def to_roman(value: int) -> str:
    parts = []
    for amount, numeral in _ROMAN_NUMERALS:
        count, value = divmod(value, amount)
        parts.append(numeral * count)
    return "".join(parts)


def format_number(value: int, fmt: Optional[str]) -> str:
    """Render ``value`` in a Word ``numFmt``; unknown formats fall back to decimal."""
    if fmt in ("lowerLetter", "upperLetter") and value > 0:
        letter = chr(ord("a") + (value - 1) % 26) * ((value - 1) // 26 + 1)
        return letter if fmt == "lowerLetter" else letter.upper()
    if fmt in ("lowerRoman", "upperRoman") and value > 0:
        roman = to_roman(value)
        return roman.lower() if fmt == "lowerRoman" else roman
    if fmt == "bullet":
        return BULLET
    if fmt == "decimalEnclosedCircle" and 1 <= value <= 20:
        return chr(0x245F + value)
    if fmt == "decimalEnclosedCircleChinese" and 1 <= value <= len(_ENCLOSED_CHINESE):
        return _ENCLOSED_CHINESE[value - 1]
    if fmt == "decimalEnclosedParen":
        return f"({value})"
    if fmt == "decimalFullstop":
        return f"{value}."
    return str(value)


def render_label(catalog: NumberingCatalog, counters: NumberingCounters, num_id: int, ilvl: int) -> Optional[str]:
    """Advance the counter for ``(num_id, ilvl)`` and return the rendered level text.

    Returns ``None`` without touching the counters when the level is unknown.
    """
    level = catalog.get_level(num_id, ilvl)
    if level is None:
        return None
    value = counters.advance(num_id, ilvl, level.start)

    def substitute(match: re.Match) -> str:
        index = int(match.group(1)) - 1
        if index == ilvl:
            return format_number(value, level.num_format)
        other = catalog.get_level(num_id, index)
        current = counters.current(num_id, index)
        fmt = other.num_format if other else "decimal"
        if level.is_legal:
            fmt = "decimal"
        return format_number(current if current is not None else 1, fmt)

    return _PLACEHOLDER.sub(substitute, level.label_template)


def resolve_numbering(
    catalog: NumberingCatalog, counters: NumberingCounters, reference: Optional[NumberingReference]
) -> Optional[NumberingReference]:
    """Attach the level definition and rendered label to a raw ``w:numPr`` reference.

    ``numId`` 0 comes back unchanged so the caller can cancel inherited
    numbering; unknown ids keep only the raw ids.
    """
    if reference is None or reference.num_id is None or reference.is_cancelled:
        return reference
    ilvl = reference.level if reference.level is not None else 0
    instance = catalog.get_instance(reference.num_id)
    level = catalog.get_level(reference.num_id, ilvl)
    if instance is None or level is None:
        LOGGER.debug("No numbering definition for numId=%s ilvl=%s", reference.num_id, ilvl)
        return replace(reference, level=ilvl)
    return NumberingReference(
        num_id=reference.num_id,
        level=ilvl,
        abstract_num_id=instance.abstract_num_id,
        definition=level,
        label=render_label(catalog, counters, reference.num_id, ilvl),
    )
