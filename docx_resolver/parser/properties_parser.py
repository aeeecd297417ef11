"""Translate ``w:rPr``/``w:pPr``/border XML blocks into typed property groups."""
from __future__ import annotations

from typing import Optional
from xml.etree import ElementTree as ET

from docx_resolver.model.elements import (
    Border,
    CellBorders,
    CellMargins,
    Indent,
    NumberingReference,
    ParagraphBorders,
    ParagraphProperties,
    RunProperties,
    Spacing,
    TableBorders,
)
from docx_resolver.utils.xml_utils import Namespaces, get_attr, get_int_attr, qualify

_FALSE_VALUES = {"0", "false", "off", "none"}


def _find(element: ET.Element, name: str) -> Optional[ET.Element]:
    return element.find(name, Namespaces.WORD)


def parse_toggle(element: ET.Element, name: str) -> Optional[bool]:
    """``<w:b/>`` is on, ``<w:b w:val="0"/>`` is off, absence is unspecified."""
    child = _find(element, name)
    if child is None:
        return None
    value = child.attrib.get(qualify("w:val"))
    if value is None:
        return True
    return value.lower() not in _FALSE_VALUES


def parse_shading(element: ET.Element) -> Optional[str]:
    """Return the ``w:shd`` fill colour, ignoring ``auto``."""
    fill = get_attr(element, "w:shd", "w:fill")
    if fill is None or fill.lower() == "auto":
        return None
    return fill


def parse_border(element: Optional[ET.Element]) -> Optional[Border]:
    if element is None:
        return None
    return Border(
        style=element.attrib.get(qualify("w:val")),
        size=get_int_attr(element, None, "w:sz"),
        color=element.attrib.get(qualify("w:color")),
        space=get_int_attr(element, None, "w:space"),
    )


def _side(container: ET.Element, *names: str) -> Optional[Border]:
    for name in names:
        border = parse_border(_find(container, name))
        if border is not None:
            return border
    return None


def parse_run_properties(r_pr: Optional[ET.Element]) -> Optional[RunProperties]:
    if r_pr is None:
        return None

    strike = parse_toggle(r_pr, "w:strike")
    double_strike = parse_toggle(r_pr, "w:dstrike")
    if double_strike:
        strike = True
    elif strike is None:
        strike = double_strike

    underline = None
    u_el = _find(r_pr, "w:u")
    if u_el is not None:
        underline = u_el.attrib.get(qualify("w:val"), "single")

    font = None
    fonts_el = _find(r_pr, "w:rFonts")
    if fonts_el is not None:
        font = (
            fonts_el.attrib.get(qualify("w:ascii"))
            or fonts_el.attrib.get(qualify("w:hAnsi"))
            or fonts_el.attrib.get(qualify("w:eastAsia"))
        )

    return RunProperties(
        bold=parse_toggle(r_pr, "w:b"),
        italic=parse_toggle(r_pr, "w:i"),
        underline=underline,
        strike=strike,
        color=get_attr(r_pr, "w:color", "w:val"),
        highlight=get_attr(r_pr, "w:highlight", "w:val"),
        shading=parse_shading(r_pr),
        size=get_int_attr(r_pr, "w:sz", "w:val"),
        font=font,
        vertical_align=get_attr(r_pr, "w:vertAlign", "w:val"),
    )


def parse_indent(p_pr: ET.Element) -> Optional[Indent]:
    ind = _find(p_pr, "w:ind")
    if ind is None:
        return None
    left = get_int_attr(ind, None, "w:left")
    if left is None:
        left = get_int_attr(ind, None, "w:start")
    right = get_int_attr(ind, None, "w:right")
    if right is None:
        right = get_int_attr(ind, None, "w:end")
    return Indent(
        left=left,
        right=right,
        first_line=get_int_attr(ind, None, "w:firstLine"),
        hanging=get_int_attr(ind, None, "w:hanging"),
    )


def parse_spacing(p_pr: ET.Element) -> Optional[Spacing]:
    spacing = _find(p_pr, "w:spacing")
    if spacing is None:
        return None
    return Spacing(
        before=get_int_attr(spacing, None, "w:before"),
        after=get_int_attr(spacing, None, "w:after"),
        before_lines=get_int_attr(spacing, None, "w:beforeLines"),
        after_lines=get_int_attr(spacing, None, "w:afterLines"),
        line=get_int_attr(spacing, None, "w:line"),
        line_rule=spacing.attrib.get(qualify("w:lineRule")),
    )


def parse_paragraph_borders(p_pr: ET.Element) -> Optional[ParagraphBorders]:
    p_bdr = _find(p_pr, "w:pBdr")
    if p_bdr is None:
        return None
    return ParagraphBorders(
        top=_side(p_bdr, "w:top"),
        left=_side(p_bdr, "w:left", "w:start"),
        bottom=_side(p_bdr, "w:bottom"),
        right=_side(p_bdr, "w:right", "w:end"),
        between=_side(p_bdr, "w:between"),
    )


def parse_numbering_reference(p_pr: ET.Element) -> Optional[NumberingReference]:
    """Raw ``w:numPr``: ids only, resolution happens in the numbering engine."""
    num_pr = _find(p_pr, "w:numPr")
    if num_pr is None:
        return None
    num_id = get_int_attr(num_pr, "w:numId", "w:val")
    level = get_int_attr(num_pr, "w:ilvl", "w:val")
    if num_id is None and level is None:
        return None
    return NumberingReference(num_id=num_id, level=level)


def parse_paragraph_properties(p_pr: Optional[ET.Element]) -> Optional[ParagraphProperties]:
    if p_pr is None:
        return None
    return ParagraphProperties(
        style_id=get_attr(p_pr, "w:pStyle", "w:val"),
        alignment=get_attr(p_pr, "w:jc", "w:val"),
        indent=parse_indent(p_pr),
        spacing=parse_spacing(p_pr),
        shading=parse_shading(p_pr),
        borders=parse_paragraph_borders(p_pr),
        numbering=parse_numbering_reference(p_pr),
        outline_level=get_int_attr(p_pr, "w:outlineLvl", "w:val"),
        keep_next=parse_toggle(p_pr, "w:keepNext"),
        keep_lines=parse_toggle(p_pr, "w:keepLines"),
        page_break_before=parse_toggle(p_pr, "w:pageBreakBefore"),
        run_properties=parse_run_properties(_find(p_pr, "w:rPr")),
    )


def parse_table_borders(container: Optional[ET.Element]) -> Optional[TableBorders]:
    if container is None:
        return None
    return TableBorders(
        top=_side(container, "w:top"),
        left=_side(container, "w:left", "w:start"),
        bottom=_side(container, "w:bottom"),
        right=_side(container, "w:right", "w:end"),
        inside_h=_side(container, "w:insideH"),
        inside_v=_side(container, "w:insideV"),
    )


def parse_cell_borders(container: Optional[ET.Element]) -> Optional[CellBorders]:
    if container is None:
        return None
    return CellBorders(
        top=_side(container, "w:top"),
        left=_side(container, "w:left", "w:start"),
        bottom=_side(container, "w:bottom"),
        right=_side(container, "w:right", "w:end"),
        tl2br=_side(container, "w:tl2br"),
        tr2bl=_side(container, "w:tr2bl"),
    )


def _margin(container: ET.Element, *names: str) -> Optional[int]:
    for name in names:
        value = get_int_attr(container, name, "w:w")
        if value is not None:
            return value
    return None


def parse_cell_margins(container: Optional[ET.Element]) -> Optional[CellMargins]:
    if container is None:
        return None
    return CellMargins(
        top=_margin(container, "w:top"),
        left=_margin(container, "w:left", "w:start"),
        bottom=_margin(container, "w:bottom"),
        right=_margin(container, "w:right", "w:end"),
    )
