"""Parse document.xml into structured content blocks."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterator, List, Optional, Tuple
from xml.etree import ElementTree as ET

from docx_resolver.model.elements import (
    BlockElement,
    BreakContent,
    BreakKind,
    CellProperties,
    FieldContent,
    Paragraph,
    ParagraphProperties,
    Run,
    RunContent,
    TabContent,
    Table,
    TableCell,
    TableProperties,
    TableRow,
    TextContent,
    merge_groups,
)
from docx_resolver.model.numbering_model import NumberingCatalog
from docx_resolver.parser.docx_loader import DOCUMENT_XML_PATH
from docx_resolver.parser.drawing_parser import DrawingParser
from docx_resolver.parser.numbering_resolver import NumberingCounters, resolve_numbering
from docx_resolver.parser.package_context import PackageContext
from docx_resolver.parser.properties_parser import (
    parse_cell_borders,
    parse_cell_margins,
    parse_paragraph_properties,
    parse_run_properties,
    parse_shading,
    parse_table_borders,
    parse_toggle,
)
from docx_resolver.parser.style_resolver import StyleResolver
from docx_resolver.parser.table_merge import TableMergeProcessor
from docx_resolver.utils.exceptions import MissingRequiredPart
from docx_resolver.utils.logger import get_logger
from docx_resolver.utils.xml_utils import Namespaces, get_attr, get_int_attr, iter_blocks, local_name, qualify

LOGGER = get_logger(__name__)

NO_BREAK_HYPHEN = "‑"

# Inline containers whose runs are parsed as if they sat directly in the paragraph
_INLINE_WRAPPERS = {"smartTag", "ins", "sdt", "sdtContent", "customXml", "moveTo", "dir", "bdo"}
_INLINE_SKIPPED = {"del", "moveFrom"}
_SILENT = {
    "pPr", "rPr", "sectPr", "bookmarkStart", "bookmarkEnd", "proofErr", "permStart", "permEnd",
    "commentRangeStart", "commentRangeEnd", "fldChar", "lastRenderedPageBreak", "sdtPr", "sdtEndPr",
}

Hyperlink = Tuple[Optional[str], Optional[str]]


@dataclass(slots=True)
class RawSection:
    """Body blocks up to a section break plus the ``w:sectPr`` that closed them."""

    blocks: List[BlockElement] = field(default_factory=list)
    sect_pr: Optional[ET.Element] = None


class DocumentParser:
    """Transforms WordprocessingML body (and header/footer) XML into model elements."""

    def __init__(
        self,
        context: PackageContext,
        styles: StyleResolver,
        numbering: NumberingCatalog,
        counters: Optional[NumberingCounters] = None,
    ) -> None:
        self._context = context
        self._styles = styles
        self._numbering = numbering
        self._counters = counters or NumberingCounters()
        self._drawings = DrawingParser(context, self.parse_paragraph)
        self._merger = TableMergeProcessor()

    @property
    def context(self) -> PackageContext:
        return self._context

    def parse_body(self) -> List[RawSection]:
        """Parse the document body into blocks grouped by section break."""
        root = self._context.package.require_document_xml().getroot()
        body = root.find("w:body", Namespaces.WORD)
        if body is None:
            raise MissingRequiredPart("document.xml has no w:body element", DOCUMENT_XML_PATH)

        sections: List[RawSection] = []
        current = RawSection()
        for child in iter_blocks(body):
            tag = local_name(child.tag)
            if tag == "p":
                current.blocks.append(self.parse_paragraph(child, DOCUMENT_XML_PATH))
                sect_pr = child.find("w:pPr/w:sectPr", Namespaces.WORD)
                if sect_pr is not None:
                    current.sect_pr = sect_pr
                    sections.append(current)
                    current = RawSection()
            elif tag == "tbl":
                current.blocks.append(self.parse_table(child, DOCUMENT_XML_PATH))
            elif tag == "sectPr":
                current.sect_pr = child
                sections.append(current)
                current = RawSection()
            else:
                LOGGER.debug("Skipping unsupported body element: %s", tag)

        if current.blocks or not sections:
            sections.append(current)
        LOGGER.debug("Parsed body into %d sections", len(sections))
        return sections

    def parse_blocks(self, root: ET.Element, part_name: str) -> List[BlockElement]:
        """Parse block-level children of a header, footer or table cell."""
        blocks: List[BlockElement] = []
        for child in iter_blocks(root):
            tag = local_name(child.tag)
            if tag == "p":
                blocks.append(self.parse_paragraph(child, part_name))
            elif tag == "tbl":
                blocks.append(self.parse_table(child, part_name))
            elif tag not in ("tcPr", "sectPr"):
                LOGGER.debug("Skipping block element: %s", tag)
        return blocks

    # ------------------------------------------------------------------
    # Paragraphs and runs
    def parse_paragraph(self, paragraph_el: ET.Element, part_name: str = DOCUMENT_XML_PATH) -> Paragraph:
        local = parse_paragraph_properties(paragraph_el.find("w:pPr", Namespaces.WORD)) or ParagraphProperties()
        style_id = self._styles.paragraph_style_id(local.style_id)

        reference = merge_groups(self._styles.numbering_for_style(style_id), local.numbering)
        if reference is not None:
            local = replace(local, numbering=resolve_numbering(self._numbering, self._counters, reference))

        properties = self._styles.resolve_paragraph_properties(local, style_id)
        runs = self._parse_inline(paragraph_el, properties.style_id, part_name, (None, None))
        return Paragraph(properties=properties, runs=runs)

    def parse_run(
        self,
        run_el: ET.Element,
        paragraph_style_id: Optional[str] = None,
        part_name: str = DOCUMENT_XML_PATH,
        hyperlink: Hyperlink = (None, None),
    ) -> Run:
        r_pr = run_el.find("w:rPr", Namespaces.WORD)
        run_style_id = get_attr(r_pr, "w:rStyle", "w:val")
        properties = self._styles.resolve_run_properties(parse_run_properties(r_pr), run_style_id, paragraph_style_id)

        children: List[RunContent] = []
        for child in list(run_el):
            tag = local_name(child.tag)
            if tag == "t":
                if child.text:
                    children.append(TextContent(child.text))
            elif tag == "instrText":
                if child.text and child.text.strip():
                    children.append(FieldContent(instruction=child.text.strip()))
            elif tag == "br":
                children.append(BreakContent(BreakKind.from_xml(child.attrib.get(qualify("w:type")))))
            elif tag == "cr":
                children.append(BreakContent(BreakKind.LINE))
            elif tag == "tab":
                children.append(TabContent())
            elif tag == "space":
                children.append(TextContent(" "))
            elif tag == "noBreakHyphen":
                children.append(TextContent(NO_BREAK_HYPHEN))
            elif tag == "drawing":
                children.extend(self._drawings.parse_drawing(child, part_name))
            elif tag == "AlternateContent":
                children.extend(self._drawings.parse_alternate_content(child, part_name))
            elif tag == "pict":
                shape = self._drawings.parse_vml_shape(child)
                if shape is not None:
                    children.append(shape)
            elif tag not in _SILENT:
                LOGGER.debug("Skipping run child element: %s", tag)

        target, anchor = hyperlink
        return Run(
            properties=properties,
            children=children,
            style_id=run_style_id,
            hyperlink_target=target,
            hyperlink_anchor=anchor,
        )

    def _parse_inline(
        self, container: ET.Element, style_id: Optional[str], part_name: str, hyperlink: Hyperlink
    ) -> List[Run]:
        runs: List[Run] = []
        for child in list(container):
            tag = local_name(child.tag)
            if tag == "r":
                runs.append(self.parse_run(child, style_id, part_name, hyperlink))
            elif tag == "hyperlink":
                runs.extend(self._parse_inline(child, style_id, part_name, self._hyperlink_of(child, part_name)))
            elif tag == "fldSimple":
                runs.append(self._parse_simple_field(child, style_id, part_name, hyperlink))
            elif tag in _INLINE_WRAPPERS:
                runs.extend(self._parse_inline(child, style_id, part_name, hyperlink))
            elif tag in _INLINE_SKIPPED:
                continue
            elif tag not in _SILENT:
                LOGGER.debug("Skipping paragraph child element: %s", tag)
        return runs

    def _parse_simple_field(
        self, field_el: ET.Element, style_id: Optional[str], part_name: str, hyperlink: Hyperlink
    ) -> Run:
        """``w:fldSimple`` becomes one run holding the instruction and its cached result."""
        inner = self._parse_inline(field_el, style_id, part_name, hyperlink)
        result = "".join(run.text for run in inner)
        if inner:
            properties = inner[0].properties
        else:
            properties = self._styles.resolve_run_properties(None, None, style_id)
        instruction = (field_el.attrib.get(qualify("w:instr")) or "").strip()
        children: List[RunContent] = [FieldContent(instruction=instruction, result=result or None)]
        if result:
            children.append(TextContent(result))
        target, anchor = hyperlink
        return Run(properties=properties, children=children, hyperlink_target=target, hyperlink_anchor=anchor)

    def _hyperlink_of(self, hyperlink_el: ET.Element, part_name: str) -> Hyperlink:
        anchor = hyperlink_el.attrib.get(qualify("w:anchor"))
        r_id = hyperlink_el.attrib.get(qualify("r:id"))
        target = None
        if r_id:
            rel = self._context.get_relationship(r_id, part_name)
            if rel is None:
                LOGGER.warning("Hyperlink relationship %s not found in %s", r_id, part_name)
            else:
                target = rel.target if rel.is_external else (rel.resolved_target or rel.target)
        return target, anchor

    # ------------------------------------------------------------------
    # Tables
    def parse_table(self, table_el: ET.Element, part_name: str = DOCUMENT_XML_PATH) -> Table:
        tbl_pr = table_el.find("w:tblPr", Namespaces.WORD)
        properties = TableProperties(
            style_id=get_attr(tbl_pr, "w:tblStyle", "w:val"),
            width=get_int_attr(tbl_pr, "w:tblW", "w:w"),
            borders=parse_table_borders(tbl_pr.find("w:tblBorders", Namespaces.WORD)) if tbl_pr is not None else None,
            grid=[
                get_int_attr(col, None, "w:w") or 0
                for col in table_el.findall("w:tblGrid/w:gridCol", Namespaces.WORD)
            ],
        )

        rows: List[TableRow] = []
        for row_el in self._walk_children(table_el, "tr"):
            tr_pr = row_el.find("w:trPr", Namespaces.WORD)
            cells = [self._parse_cell(cell_el, part_name) for cell_el in self._walk_children(row_el, "tc")]
            rows.append(
                TableRow(
                    cells=cells,
                    height=get_int_attr(tr_pr, "w:trHeight", "w:val"),
                    is_header=bool(parse_toggle(tr_pr, "w:tblHeader")) if tr_pr is not None else False,
                )
            )

        return self._merger.process(Table(rows=rows, properties=properties))

    def _parse_cell(self, cell_el: ET.Element, part_name: str) -> TableCell:
        tc_pr = cell_el.find("w:tcPr", Namespaces.WORD)
        properties = CellProperties()
        if tc_pr is not None:
            v_merge = tc_pr.find("w:vMerge", Namespaces.WORD)
            properties = CellProperties(
                col_span=get_int_attr(tc_pr, "w:gridSpan", "w:val") or 1,
                width=get_int_attr(tc_pr, "w:tcW", "w:w"),
                shading=parse_shading(tc_pr),
                borders=parse_cell_borders(tc_pr.find("w:tcBorders", Namespaces.WORD)),
                margins=parse_cell_margins(tc_pr.find("w:tcMar", Namespaces.WORD)),
                v_merge=(v_merge.attrib.get(qualify("w:val")) or "continue") if v_merge is not None else None,
            )
        return TableCell(content=self.parse_blocks(cell_el, part_name), properties=properties)

    # ------------------------------------------------------------------
    @staticmethod
    def _walk_children(container: ET.Element, wanted: str) -> Iterator[ET.Element]:
        for child in iter_blocks(container):
            if local_name(child.tag) == wanted:
                yield child
