"""Unit helpers for WordprocessingML and VML measurements.

The model keeps OOXML native units (dxa, EMU, 60000ths of a degree); these
helpers only normalise foreign units found in legacy markup into EMU.
"""
from __future__ import annotations

import re
from typing import Optional

EMU_PER_INCH = 914400
EMU_PER_POINT = 12700
EMU_PER_PIXEL = 9525
EMU_PER_CM = 360000
EMU_PER_MM = 36000

_EMU_PER_UNIT = {
    "pt": EMU_PER_POINT,
    "in": EMU_PER_INCH,
    "px": EMU_PER_PIXEL,
    "cm": EMU_PER_CM,
    "mm": EMU_PER_MM,
}

_LENGTH_PATTERN = re.compile(r"^\s*(-?[\d.]+)\s*(pt|in|px|cm|mm)?\s*$")


def css_length_to_emu(value: str) -> Optional[int]:
    """Convert a VML/CSS length such as ``72pt`` or ``1.5in`` into EMU.

    Unitless numbers are treated as pixels; unknown units return ``None``.
    """
    match = _LENGTH_PATTERN.match(value)
    if match is None:
        return None
    try:
        number = float(match.group(1))
    except ValueError:
        return None
    unit = match.group(2) or "px"
    return int(round(number * _EMU_PER_UNIT[unit]))
