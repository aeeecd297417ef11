"""Parse numbering.xml into numbering model definitions."""
from __future__ import annotations

from typing import Dict, Optional
from xml.etree import ElementTree as ET

from docx_resolver.model.numbering_model import (
    AbstractNumberingDefinition,
    NumberingCatalog,
    NumberingInstance,
    NumberingLevel,
    NumberingOverride,
)
from docx_resolver.parser.properties_parser import parse_indent, parse_toggle
from docx_resolver.utils.logger import get_logger
from docx_resolver.utils.xml_utils import Namespaces, get_attr, get_int_attr

LOGGER = get_logger(__name__)


class NumberingParser:
    """Parser for numbering definitions defined in numbering.xml."""

    def __init__(self, numbering_xml: Optional[ET.ElementTree]) -> None:
        self._numbering_xml = numbering_xml

    def parse(self) -> NumberingCatalog:
        if self._numbering_xml is None:
            return NumberingCatalog(abstracts={}, instances={})

        root = self._numbering_xml.getroot()
        abstracts = self._parse_abstract_nums(root)
        instances = self._parse_nums(root, abstracts)
        LOGGER.debug("Parsed %d abstract numberings and %d instances", len(abstracts), len(instances))
        return NumberingCatalog(abstracts=abstracts, instances=instances)

    # ------------------------------------------------------------------
    def _parse_abstract_nums(self, root: ET.Element) -> Dict[int, AbstractNumberingDefinition]:
        abstracts: Dict[int, AbstractNumberingDefinition] = {}
        for abstract_el in root.findall("w:abstractNum", Namespaces.WORD):
            abstract_id = get_int_attr(abstract_el, None, "w:abstractNumId")
            if abstract_id is None:
                continue
            abstracts[abstract_id] = AbstractNumberingDefinition(
                abstract_num_id=abstract_id,
                multi_level_type=get_attr(abstract_el, "w:multiLevelType", "w:val"),
                name=get_attr(abstract_el, "w:name", "w:val"),
                style_link=get_attr(abstract_el, "w:styleLink", "w:val"),
                levels=self._parse_levels(abstract_el),
            )
        return abstracts

    def _parse_levels(self, container: ET.Element) -> Dict[int, NumberingLevel]:
        levels: Dict[int, NumberingLevel] = {}
        for lvl_el in container.findall("w:lvl", Namespaces.WORD):
            level = self._parse_level(lvl_el)
            if level is not None:
                levels[level.level_index] = level
        return levels

    def _parse_level(self, lvl_el: ET.Element, fallback_index: Optional[int] = None) -> Optional[NumberingLevel]:
        level_index = get_int_attr(lvl_el, None, "w:ilvl")
        if level_index is None:
            level_index = fallback_index
        if level_index is None:
            return None

        start = get_int_attr(lvl_el, "w:start", "w:val")
        fonts = lvl_el.find("w:rPr/w:rFonts", Namespaces.WORD)
        font = None
        if fonts is not None:
            font = get_attr(fonts, None, "w:ascii") or get_attr(fonts, None, "w:hAnsi")

        p_pr = lvl_el.find("w:pPr", Namespaces.WORD)
        indent = parse_indent(p_pr) if p_pr is not None else None

        return NumberingLevel(
            level_index=level_index,
            start=start if start is not None else 1,
            num_format=get_attr(lvl_el, "w:numFmt", "w:val") or "decimal",
            level_text=get_attr(lvl_el, "w:lvlText", "w:val"),
            alignment=get_attr(lvl_el, "w:lvlJc", "w:val"),
            indent=(indent.left if indent else None) or 0,
            hanging=(indent.hanging if indent else None) or 0,
            font=font,
            is_legal=bool(parse_toggle(lvl_el, "w:isLgl")),
        )

    def _parse_nums(
        self,
        root: ET.Element,
        abstracts: Dict[int, AbstractNumberingDefinition],
    ) -> Dict[int, NumberingInstance]:
        instances: Dict[int, NumberingInstance] = {}
        for num_el in root.findall("w:num", Namespaces.WORD):
            num_id = get_int_attr(num_el, None, "w:numId")
            if num_id is None:
                continue
            abstract_num_id = get_int_attr(num_el, "w:abstractNumId", "w:val")
            if abstract_num_id is None:
                continue
            if abstract_num_id not in abstracts:
                LOGGER.debug("Numbering %s points at unknown abstractNum %s", num_id, abstract_num_id)
            instances[num_id] = NumberingInstance(
                num_id=num_id,
                abstract_num_id=abstract_num_id,
                overrides=self._parse_overrides(num_el),
            )
        return instances

    def _parse_overrides(self, num_el: ET.Element) -> Dict[int, NumberingOverride]:
        overrides: Dict[int, NumberingOverride] = {}
        for override_el in num_el.findall("w:lvlOverride", Namespaces.WORD):
            level_index = get_int_attr(override_el, None, "w:ilvl")
            if level_index is None:
                continue
            lvl_el = override_el.find("w:lvl", Namespaces.WORD)
            overrides[level_index] = NumberingOverride(
                level_index=level_index,
                start_override=get_int_attr(override_el, "w:startOverride", "w:val"),
                level=self._parse_level(lvl_el, level_index) if lvl_el is not None else None,
            )
        return overrides
