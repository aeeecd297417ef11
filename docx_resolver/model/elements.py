"""In-memory representation of parsed document content with resolved formatting.

Every property group uses optional fields: ``None`` means "not specified at
this layer". Groups merge field-wise through ``merged_with`` so that a later
layer only overrides the fields it actually sets.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass, replace
from enum import Enum
from typing import Any, List, Optional, TypeVar, Union

from docx_resolver.model.numbering_model import NumberingLevel

_Group = TypeVar("_Group")


def merge_groups(base: Optional[_Group], overlay: Optional[_Group]) -> Optional[_Group]:
    """Field-wise last-writer-wins merge of two property groups of the same type."""
    if overlay is None:
        return base
    if base is None:
        return overlay
    changes = {}
    for item in fields(overlay):  # type: ignore[arg-type]
        value = getattr(overlay, item.name)
        if value is None:
            continue
        current = getattr(base, item.name)
        if is_dataclass(value) and current is not None:
            value = merge_groups(current, value)
        changes[item.name] = value
    return replace(base, **changes) if changes else base  # type: ignore[type-var]


class _Mergeable:
    """Mixin adding ``merged_with`` to property dataclasses."""

    __slots__ = ()

    def merged_with(self, overlay):
        return merge_groups(self, overlay)


# ---------------------------------------------------------------------------
# Property groups


@dataclass(frozen=True, slots=True)
class Border(_Mergeable):
    """One border edge: line style, width in eighths of a point, colour, spacing in points."""

    style: Optional[str] = None
    size: Optional[int] = None
    color: Optional[str] = None
    space: Optional[int] = None


@dataclass(frozen=True, slots=True)
class RunProperties(_Mergeable):
    """Character formatting; ``size`` is in half-points."""

    bold: Optional[bool] = None
    italic: Optional[bool] = None
    underline: Optional[str] = None
    strike: Optional[bool] = None
    color: Optional[str] = None
    highlight: Optional[str] = None
    shading: Optional[str] = None
    size: Optional[int] = None
    font: Optional[str] = None
    vertical_align: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Indent(_Mergeable):
    left: Optional[int] = None
    right: Optional[int] = None
    first_line: Optional[int] = None
    hanging: Optional[int] = None


@dataclass(frozen=True, slots=True)
class Spacing(_Mergeable):
    before: Optional[int] = None
    after: Optional[int] = None
    before_lines: Optional[int] = None
    after_lines: Optional[int] = None
    line: Optional[int] = None
    line_rule: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ParagraphBorders(_Mergeable):
    top: Optional[Border] = None
    left: Optional[Border] = None
    bottom: Optional[Border] = None
    right: Optional[Border] = None
    between: Optional[Border] = None


@dataclass(frozen=True, slots=True)
class NumberingReference(_Mergeable):
    """A paragraph's list membership, resolved against the numbering catalog.

    ``definition`` and ``label`` stay ``None`` when the list id is unknown.
    """

    num_id: Optional[int] = None
    level: Optional[int] = None
    abstract_num_id: Optional[int] = None
    definition: Optional[NumberingLevel] = None
    label: Optional[str] = None

    @property
    def is_cancelled(self) -> bool:
        return self.num_id == 0


@dataclass(frozen=True, slots=True)
class ParagraphProperties(_Mergeable):
    """Paragraph formatting. Lengths are in dxa (twentieths of a point)."""

    style_id: Optional[str] = None
    alignment: Optional[str] = None
    indent: Optional[Indent] = None
    spacing: Optional[Spacing] = None
    shading: Optional[str] = None
    borders: Optional[ParagraphBorders] = None
    numbering: Optional[NumberingReference] = None
    outline_level: Optional[int] = None
    keep_next: Optional[bool] = None
    keep_lines: Optional[bool] = None
    page_break_before: Optional[bool] = None
    run_properties: Optional[RunProperties] = None


@dataclass(frozen=True, slots=True)
class TableBorders(_Mergeable):
    top: Optional[Border] = None
    left: Optional[Border] = None
    bottom: Optional[Border] = None
    right: Optional[Border] = None
    inside_h: Optional[Border] = None
    inside_v: Optional[Border] = None


@dataclass(frozen=True, slots=True)
class CellBorders(_Mergeable):
    top: Optional[Border] = None
    left: Optional[Border] = None
    bottom: Optional[Border] = None
    right: Optional[Border] = None
    tl2br: Optional[Border] = None
    tr2bl: Optional[Border] = None


@dataclass(frozen=True, slots=True)
class CellMargins(_Mergeable):
    top: Optional[int] = None
    left: Optional[int] = None
    bottom: Optional[int] = None
    right: Optional[int] = None


# ---------------------------------------------------------------------------
# Run content


class BreakKind(str, Enum):
    LINE = "textWrapping"
    PAGE = "page"
    COLUMN = "column"

    @classmethod
    def from_xml(cls, value: Optional[str]) -> "BreakKind":
        for kind in cls:
            if kind.value == value:
                return kind
        return cls.LINE


@dataclass(slots=True)
class TextContent:
    text: str


@dataclass(slots=True)
class FieldContent:
    """Field instruction text such as ``PAGE`` or ``HYPERLINK "..."``."""

    instruction: str
    result: Optional[str] = None


@dataclass(slots=True)
class BreakContent:
    kind: BreakKind = BreakKind.LINE


@dataclass(slots=True)
class TabContent:
    pass


@dataclass(frozen=True, slots=True)
class Extent:
    """Drawing size in EMU."""

    cx: int = 0
    cy: int = 0


@dataclass(frozen=True, slots=True)
class AnchorPosition:
    relative_from: Optional[str] = None
    offset: Optional[int] = None
    align: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Positioning:
    """Inline or floating placement; offsets and distances in EMU."""

    mode: str = "inline"
    horizontal: Optional[AnchorPosition] = None
    vertical: Optional[AnchorPosition] = None
    distance_top: Optional[int] = None
    distance_bottom: Optional[int] = None
    distance_left: Optional[int] = None
    distance_right: Optional[int] = None
    behind_text: bool = False

    @property
    def is_inline(self) -> bool:
        return self.mode == "inline"


@dataclass(frozen=True, slots=True)
class ImageHandle:
    """Binary payload of an internal image part, keyed by relationship id."""

    relationship_id: str
    part_name: str
    media_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(slots=True)
class ImageDrawing:
    relationship_id: str
    image: ImageHandle
    extent: Extent = field(default_factory=Extent)
    positioning: Positioning = field(default_factory=Positioning)
    description: Optional[str] = None
    name: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Stroke:
    """Shape outline; ``width`` in EMU."""

    color: str = "#333333"
    width: int = 12700
    dash: str = "solid"


@dataclass(slots=True)
class ShapeDrawing:
    """Vector shape; ``rotation`` is in 60000ths of a degree."""

    preset: str = "rect"
    extent: Extent = field(default_factory=Extent)
    fill: str = "#4F81BD"
    stroke: Stroke = field(default_factory=Stroke)
    rotation: int = 0
    flip_h: bool = False
    flip_v: bool = False
    positioning: Positioning = field(default_factory=Positioning)
    content: List["Paragraph"] = field(default_factory=list)


Drawing = Union[ImageDrawing, ShapeDrawing]
RunContent = Union[TextContent, FieldContent, BreakContent, TabContent, ImageDrawing, ShapeDrawing]


# ---------------------------------------------------------------------------
# Block structure


@dataclass(slots=True)
class Run:
    """Contiguous content sharing one effective set of character formatting."""

    properties: RunProperties
    children: List[RunContent] = field(default_factory=list)
    style_id: Optional[str] = None
    hyperlink_target: Optional[str] = None
    hyperlink_anchor: Optional[str] = None

    @property
    def text(self) -> str:
        parts: List[str] = []
        for child in self.children:
            if isinstance(child, TextContent):
                parts.append(child.text)
            elif isinstance(child, TabContent):
                parts.append("\t")
            elif isinstance(child, BreakContent):
                parts.append("\n")
            elif isinstance(child, (FieldContent, ImageDrawing, ShapeDrawing)):
                continue
        return "".join(parts)


@dataclass(slots=True)
class Paragraph:
    properties: ParagraphProperties
    runs: List[Run] = field(default_factory=list)

    @property
    def style_id(self) -> Optional[str]:
        return self.properties.style_id

    @property
    def numbering(self) -> Optional[NumberingReference]:
        return self.properties.numbering

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)


@dataclass(slots=True)
class CellProperties:
    col_span: int = 1
    row_span: Optional[int] = None
    width: Optional[int] = None
    shading: Optional[str] = None
    borders: Optional[CellBorders] = None
    margins: Optional[CellMargins] = None
    v_merge: Optional[str] = None
    merged: bool = False


@dataclass(slots=True)
class TableCell:
    content: List["BlockElement"] = field(default_factory=list)
    properties: CellProperties = field(default_factory=CellProperties)


@dataclass(slots=True)
class TableRow:
    cells: List[TableCell] = field(default_factory=list)
    height: Optional[int] = None
    is_header: bool = False


@dataclass(slots=True)
class TableProperties:
    style_id: Optional[str] = None
    width: Optional[int] = None
    borders: Optional[TableBorders] = None
    grid: List[int] = field(default_factory=list)


@dataclass(slots=True)
class Table:
    rows: List[TableRow] = field(default_factory=list)
    properties: TableProperties = field(default_factory=TableProperties)


BlockElement = Union[Paragraph, Table]


@dataclass(slots=True)
class HeaderFooterReference:
    """A ``w:headerReference``/``w:footerReference`` as found in section properties."""

    part_type: str
    kind: str
    relationship_id: str


@dataclass(slots=True)
class HeaderFooter:
    kind: str
    relationship_id: str
    part_name: Optional[str]
    content: List[BlockElement] = field(default_factory=list)


@dataclass(slots=True)
class SectionProperties:
    """Section-level page setup; lengths in dxa."""

    page_width: Optional[int] = None
    page_height: Optional[int] = None
    orientation: Optional[str] = None
    margin_top: Optional[int] = None
    margin_right: Optional[int] = None
    margin_bottom: Optional[int] = None
    margin_left: Optional[int] = None
    margin_header: Optional[int] = None
    margin_footer: Optional[int] = None
    margin_gutter: Optional[int] = None
    title_page: bool = False
    section_type: Optional[str] = None
    columns: Optional[int] = None


@dataclass(slots=True)
class Section:
    blocks: List[BlockElement] = field(default_factory=list)
    properties: SectionProperties = field(default_factory=SectionProperties)
    headers: List[HeaderFooter] = field(default_factory=list)
    footers: List[HeaderFooter] = field(default_factory=list)
    references: List[HeaderFooterReference] = field(default_factory=list)

    def header(self, kind: str = "default") -> Optional[HeaderFooter]:
        return next((item for item in self.headers if item.kind == kind), None)

    def footer(self, kind: str = "default") -> Optional[HeaderFooter]:
        return next((item for item in self.footers if item.kind == kind), None)


@dataclass(slots=True)
class Document:
    """Fully resolved document tree."""

    sections: List[Section] = field(default_factory=list)

    @property
    def blocks(self) -> List[BlockElement]:
        """All blocks from all sections in source order."""
        all_blocks: List[BlockElement] = []
        for section in self.sections:
            all_blocks.extend(section.blocks)
        return all_blocks

    def iter_paragraphs(self) -> List[Paragraph]:
        """Every paragraph in body order, including those nested in tables."""
        collected: List[Paragraph] = []
        stack: List[Any] = list(reversed(self.blocks))
        while stack:
            block = stack.pop()
            if isinstance(block, Paragraph):
                collected.append(block)
            elif isinstance(block, Table):
                nested: List[BlockElement] = []
                for row in block.rows:
                    for cell in row.cells:
                        nested.extend(cell.content)
                stack.extend(reversed(nested))
        return collected
