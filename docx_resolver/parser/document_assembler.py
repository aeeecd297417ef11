"""Attach section properties and header/footer content to parsed body sections."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional
from xml.etree import ElementTree as ET

from docx_resolver.model.elements import BlockElement, Document, HeaderFooter, Section
from docx_resolver.parser.document_parser import DocumentParser, RawSection
from docx_resolver.parser.package_context import PackageContext
from docx_resolver.parser.rels_parser import MAIN_DOCUMENT_PART
from docx_resolver.parser.section_parser import HEADER, SectionParser
from docx_resolver.utils.logger import get_logger

LOGGER = get_logger(__name__)


class DocumentAssembler:
    """Build the final :class:`Document` from raw body sections.

    All referenced header/footer parts are loaded and parsed as XML
    concurrently; their content is then parsed sequentially so that list
    counters advance in a deterministic order. A part referenced by several
    sections is parsed once and its blocks are shared.
    """

    def __init__(self, context: PackageContext, parser: DocumentParser) -> None:
        self._context = context
        self._parser = parser
        self._sections = SectionParser()

    def assemble(self, raw_sections: List[RawSection]) -> Document:
        plans = []
        wanted: List[str] = []
        for raw in raw_sections:
            references = self._sections.parse_references(raw.sect_pr)
            resolved = []
            for reference in references:
                part_name = self._resolve_part(reference.relationship_id)
                if part_name is None:
                    continue
                resolved.append((reference, part_name))
                wanted.append(part_name)
            plans.append((raw, references, resolved))

        trees = self._load_parts(wanted)
        contents: Dict[str, List[BlockElement]] = {}
        for part_name in dict.fromkeys(wanted):
            contents[part_name] = self._parse_part(part_name, trees.get(part_name))

        sections: List[Section] = []
        for raw, references, resolved in plans:
            section = Section(
                blocks=raw.blocks,
                properties=self._sections.parse_section_properties(raw.sect_pr),
                references=references,
            )
            for reference, part_name in resolved:
                item = HeaderFooter(
                    kind=reference.kind,
                    relationship_id=reference.relationship_id,
                    part_name=part_name,
                    content=contents[part_name],
                )
                (section.headers if reference.part_type == HEADER else section.footers).append(item)
            sections.append(section)

        LOGGER.debug("Assembled %d sections with %d header/footer parts", len(sections), len(contents))
        return Document(sections=sections)

    def _resolve_part(self, r_id: str) -> Optional[str]:
        rel = self._context.get_relationship(r_id, MAIN_DOCUMENT_PART)
        if rel is None or rel.is_external or not rel.resolved_target:
            LOGGER.warning("Header/footer reference %s does not resolve; omitted", r_id)
            return None
        return rel.resolved_target

    def _load_parts(self, part_names: List[str]) -> Dict[str, Optional[ET.ElementTree]]:
        unique = list(dict.fromkeys(part_names))
        if not unique:
            return {}
        package = self._context.package
        with ThreadPoolExecutor(max_workers=self._context.max_workers) as executor:
            trees = list(executor.map(package.get_optional_xml_part, unique))
        return dict(zip(unique, trees))

    def _parse_part(self, part_name: str, tree: Optional[ET.ElementTree]) -> List[BlockElement]:
        if tree is None:
            if not self._context.package.has_part(part_name):
                LOGGER.warning("Header/footer part %s is missing; using empty content", part_name)
            return []
        return self._parser.parse_blocks(tree.getroot(), part_name)
