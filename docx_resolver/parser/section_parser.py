"""Parser for section properties and the header/footer references they carry."""
from __future__ import annotations

from typing import List, Optional
from xml.etree import ElementTree as ET

from docx_resolver.model.elements import HeaderFooterReference, SectionProperties
from docx_resolver.parser.properties_parser import parse_toggle
from docx_resolver.utils.logger import get_logger
from docx_resolver.utils.xml_utils import Namespaces, get_attr, get_int_attr, local_name

LOGGER = get_logger(__name__)

HEADER = "header"
FOOTER = "footer"
REFERENCE_KINDS = ("default", "first", "even")


class SectionParser:
    """Read a ``w:sectPr`` element: page setup plus header/footer references."""

    def parse_section_properties(self, sect_pr: Optional[ET.Element]) -> SectionProperties:
        """Parse page size, margins, columns and section type; ``None`` yields defaults."""
        if sect_pr is None:
            return SectionProperties()

        pg_sz = sect_pr.find("w:pgSz", Namespaces.WORD)
        pg_mar = sect_pr.find("w:pgMar", Namespaces.WORD)

        return SectionProperties(
            page_width=get_int_attr(pg_sz, None, "w:w"),
            page_height=get_int_attr(pg_sz, None, "w:h"),
            orientation=get_attr(pg_sz, None, "w:orient"),
            margin_top=get_int_attr(pg_mar, None, "w:top"),
            margin_right=get_int_attr(pg_mar, None, "w:right"),
            margin_bottom=get_int_attr(pg_mar, None, "w:bottom"),
            margin_left=get_int_attr(pg_mar, None, "w:left"),
            margin_header=get_int_attr(pg_mar, None, "w:header"),
            margin_footer=get_int_attr(pg_mar, None, "w:footer"),
            margin_gutter=get_int_attr(pg_mar, None, "w:gutter"),
            title_page=bool(parse_toggle(sect_pr, "w:titlePg")),
            section_type=get_attr(sect_pr, "w:type", "w:val"),
            columns=get_int_attr(sect_pr, "w:cols", "w:num"),
        )

    def parse_references(self, sect_pr: Optional[ET.Element]) -> List[HeaderFooterReference]:
        """Collect header and footer references in document order."""
        if sect_pr is None:
            return []
        references: List[HeaderFooterReference] = []
        for ref_el in list(sect_pr):
            tag = local_name(ref_el.tag)
            if tag == "headerReference":
                part_type = HEADER
            elif tag == "footerReference":
                part_type = FOOTER
            else:
                continue
            r_id = get_attr(ref_el, None, "r:id")
            if not r_id:
                LOGGER.debug("%s without r:id skipped", tag)
                continue
            kind = get_attr(ref_el, None, "w:type") or "default"
            if kind not in REFERENCE_KINDS:
                LOGGER.debug("Unknown %s kind %s", tag, kind)
            references.append(HeaderFooterReference(part_type=part_type, kind=kind, relationship_id=r_id))
        return references
