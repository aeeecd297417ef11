"""Extract style definitions from styles.xml and produce a catalog."""
from __future__ import annotations

from dataclasses import replace
from typing import Dict, Optional
from xml.etree import ElementTree as ET

from docx_resolver.model.style_model import StyleDefinition, StylesCatalog
from docx_resolver.parser.properties_parser import parse_paragraph_properties, parse_run_properties
from docx_resolver.utils.logger import get_logger
from docx_resolver.utils.xml_utils import Namespaces, get_attr, qualify

LOGGER = get_logger(__name__)

STYLE_TYPES = ("paragraph", "character", "table", "numbering")


class StylesParser:
    """Parse Word styles into direct (uninherited) definitions.

    Inheritance is applied lazily by :class:`StyleResolver`, so the catalog
    keeps each style exactly as written.
    """

    def __init__(self, styles_xml: Optional[ET.ElementTree]) -> None:
        self._styles_xml = styles_xml

    def parse(self) -> StylesCatalog:
        """Parse the XML tree and return a catalog; no tree yields an empty one."""
        if self._styles_xml is None:
            LOGGER.debug("No styles part; using an empty catalog")
            return StylesCatalog({})
        root = self._styles_xml.getroot()
        default_run, default_paragraph = self._parse_doc_defaults(root)
        styles = self._collect_styles(root)
        LOGGER.debug("Parsed %d styles", len(styles))
        return StylesCatalog(styles, default_run, default_paragraph)

    def _parse_doc_defaults(self, root: ET.Element):
        doc_defaults = root.find("w:docDefaults", Namespaces.WORD)
        if doc_defaults is None:
            return None, None
        run_defaults = parse_run_properties(doc_defaults.find("w:rPrDefault/w:rPr", Namespaces.WORD))
        paragraph_defaults = parse_paragraph_properties(doc_defaults.find("w:pPrDefault/w:pPr", Namespaces.WORD))
        return run_defaults, paragraph_defaults

    def _collect_styles(self, root: ET.Element) -> Dict[str, StyleDefinition]:
        styles: Dict[str, StyleDefinition] = {}
        for style_el in root.findall("w:style", Namespaces.WORD):
            style_id = style_el.attrib.get(qualify("w:styleId"))
            if not style_id:
                continue
            style_type = style_el.attrib.get(qualify("w:type"), "paragraph")
            if style_type not in STYLE_TYPES:
                LOGGER.debug("Style %s has unknown type %s", style_id, style_type)

            paragraph_properties = parse_paragraph_properties(style_el.find("w:pPr", Namespaces.WORD))
            if paragraph_properties is not None:
                paragraph_properties = self._strip_style_fields(paragraph_properties)

            styles[style_id] = StyleDefinition(
                style_id=style_id,
                style_type=style_type,
                name=get_attr(style_el, "w:name", "w:val"),
                based_on=get_attr(style_el, "w:basedOn", "w:val"),
                next_style=get_attr(style_el, "w:next", "w:val"),
                linked_style=get_attr(style_el, "w:link", "w:val"),
                is_default=style_el.attrib.get(qualify("w:default")) in ("1", "true", "on"),
                run_properties=parse_run_properties(style_el.find("w:rPr", Namespaces.WORD)),
                paragraph_properties=paragraph_properties,
            )
        return styles

    @staticmethod
    def _strip_style_fields(properties):
        """A style's own pPr never names a paragraph style."""
        return replace(properties, style_id=None)
