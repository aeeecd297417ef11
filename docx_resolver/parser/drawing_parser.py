"""Turn ``w:drawing`` and ``mc:AlternateContent`` markup into image and shape drawings."""
from __future__ import annotations

from typing import Callable, Dict, List, Optional
from xml.etree import ElementTree as ET

from docx_resolver.model.elements import (
    AnchorPosition,
    Drawing,
    Extent,
    ImageDrawing,
    Paragraph,
    Positioning,
    ShapeDrawing,
    Stroke,
)
from docx_resolver.parser.package_context import PackageContext
from docx_resolver.utils.logger import get_logger
from docx_resolver.utils.units import EMU_PER_PIXEL, css_length_to_emu
from docx_resolver.utils.xml_utils import Namespaces, get_int_attr, iter_blocks, local_name, qualify

LOGGER = get_logger(__name__)

DEFAULT_SHAPE_FILL = "#4F81BD"
DEFAULT_STROKE_COLOR = "#333333"
DEFAULT_STROKE_WIDTH = 12700
DEFAULT_SHAPE_SIZE = 100 * EMU_PER_PIXEL
TRANSPARENT = "transparent"

# Office 2007 default theme; documents rarely override these for shapes.
THEME_COLORS: Dict[str, str] = {
    "accent1": "#4F81BD",
    "accent2": "#C0504D",
    "accent3": "#9BBB59",
    "accent4": "#8064A2",
    "accent5": "#4BACC6",
    "accent6": "#F79646",
    "tx1": "#000000",
    "tx2": "#1F497D",
    "bg1": "#FFFFFF",
    "bg2": "#EEECE1",
}

NS = Namespaces.DRAWING
ParagraphCallback = Callable[[ET.Element, str], Paragraph]


class DrawingParser:
    """Parse DrawingML and legacy VML fallbacks found inside runs.

    Text box content is handed back to ``parse_paragraph`` so it goes through
    the same style and numbering resolution as body paragraphs.
    """

    def __init__(self, context: PackageContext, parse_paragraph: ParagraphCallback) -> None:
        self._context = context
        self._parse_paragraph = parse_paragraph

    def parse_alternate_content(self, element: ET.Element, part_name: str) -> List[Drawing]:
        """Prefer the ``mc:Choice`` drawings; otherwise degrade VML in ``mc:Fallback``."""
        drawings: List[Drawing] = []
        choice = element.find("mc:Choice", NS)
        choice_drawings = list(choice.iter(qualify("w:drawing"))) if choice is not None else []
        if choice_drawings:
            for drawing_el in choice_drawings:
                drawings.extend(self.parse_drawing(drawing_el, part_name))
            return drawings

        fallback = element.find("mc:Fallback", NS)
        if fallback is None:
            return drawings
        for pict in fallback.iter(qualify("w:pict")):
            shape = self.parse_vml_shape(pict)
            if shape is not None:
                drawings.append(shape)
        return drawings

    def parse_drawing(self, drawing_el: ET.Element, part_name: str) -> List[Drawing]:
        container = drawing_el.find("wp:anchor", NS)
        if container is None:
            container = drawing_el.find("wp:inline", NS)
        if container is None:
            LOGGER.debug("Drawing without wp:inline or wp:anchor skipped")
            return []

        positioning = self._parse_positioning(container)
        extent = self._parse_extent(container.find("wp:extent", NS))
        doc_pr = container.find("wp:docPr", NS)

        # A blip under wps:spPr is a picture fill, not a picture
        picture = container.find("a:graphic/a:graphicData/pic:pic", NS)
        if picture is not None:
            blip = picture.find("pic:blipFill/a:blip", NS)
            if blip is None:
                LOGGER.debug("Picture without a:blip skipped in %s", part_name)
                return []
            image = self._parse_image(blip, part_name, extent, positioning, doc_pr)
            return [image] if image is not None else []

        return [
            self._parse_shape(wsp, part_name, extent, positioning)
            for wsp in container.iter(qualify("wps:wsp"))
        ]

    # ------------------------------------------------------------------
    # Images
    def _parse_image(
        self,
        blip: ET.Element,
        part_name: str,
        extent: Extent,
        positioning: Positioning,
        doc_pr: Optional[ET.Element],
    ) -> Optional[ImageDrawing]:
        r_id = blip.attrib.get(qualify("r:embed"))
        if not r_id:
            LOGGER.debug("Linked (non-embedded) image skipped in %s", part_name)
            return None
        handle = self._context.get_image_handle(r_id, part_name)
        if handle is None:
            LOGGER.warning("Image relationship %s in %s did not resolve; drawing omitted", r_id, part_name)
            return None
        return ImageDrawing(
            relationship_id=r_id,
            image=handle,
            extent=extent,
            positioning=positioning,
            description=doc_pr.attrib.get("descr") if doc_pr is not None else None,
            name=doc_pr.attrib.get("name") if doc_pr is not None else None,
        )

    # ------------------------------------------------------------------
    # Shapes
    def _parse_shape(self, wsp: ET.Element, part_name: str, extent: Extent, positioning: Positioning) -> ShapeDrawing:
        sp_pr = wsp.find("wps:spPr", NS)
        rotation, flip_h, flip_v = 0, False, False
        xfrm = sp_pr.find("a:xfrm", NS) if sp_pr is not None else None
        if xfrm is not None:
            ext = self._parse_extent(xfrm.find("a:ext", NS))
            if ext.cx or ext.cy:
                extent = ext
            rotation = get_int_attr(xfrm, None, "rot") or 0
            flip_h = xfrm.attrib.get("flipH") in ("1", "true")
            flip_v = xfrm.attrib.get("flipV") in ("1", "true")
        if not extent.cx and not extent.cy:
            extent = Extent(DEFAULT_SHAPE_SIZE, DEFAULT_SHAPE_SIZE)

        preset = "rect"
        geometry = sp_pr.find("a:prstGeom", NS) if sp_pr is not None else None
        if geometry is not None:
            preset = geometry.attrib.get("prst", "rect")

        return ShapeDrawing(
            preset=preset,
            extent=extent,
            fill=self._resolve_fill(sp_pr, wsp.find("wps:style", NS)),
            stroke=self._resolve_stroke(sp_pr),
            rotation=rotation,
            flip_h=flip_h,
            flip_v=flip_v,
            positioning=positioning,
            content=self._parse_text_box(wsp, part_name),
        )

    def _resolve_fill(self, sp_pr: Optional[ET.Element], style: Optional[ET.Element]) -> str:
        if sp_pr is not None:
            solid = sp_pr.find("a:solidFill", NS)
            if solid is not None:
                color = _color_of(solid)
                if color:
                    return color
            elif sp_pr.find("a:noFill", NS) is not None:
                return TRANSPARENT
        if style is not None:
            fill_ref = style.find("a:fillRef", NS)
            if fill_ref is not None:
                color = _color_of(fill_ref)
                if color:
                    return color
        return DEFAULT_SHAPE_FILL

    def _resolve_stroke(self, sp_pr: Optional[ET.Element]) -> Stroke:
        line = sp_pr.find("a:ln", NS) if sp_pr is not None else None
        if line is None:
            return Stroke()
        color = DEFAULT_STROKE_COLOR
        solid = line.find("a:solidFill", NS)
        if solid is not None:
            color = _color_of(solid) or color
        if line.find("a:noFill", NS) is not None:
            color = TRANSPARENT
        dash = line.find("a:prstDash", NS)
        return Stroke(
            color=color,
            width=get_int_attr(line, None, "w") or DEFAULT_STROKE_WIDTH,
            dash=dash.attrib.get("val", "solid") if dash is not None else "solid",
        )

    def _parse_text_box(self, wsp: ET.Element, part_name: str) -> List[Paragraph]:
        content = wsp.find("wps:txbx/w:txbxContent", NS)
        if content is None:
            return []
        paragraphs: List[Paragraph] = []
        for child in iter_blocks(content):
            if child.tag == qualify("w:p"):
                paragraphs.append(self._parse_paragraph(child, part_name))
            else:
                LOGGER.debug("Skipping text box element: %s", local_name(child.tag))
        return paragraphs

    # ------------------------------------------------------------------
    # Legacy VML
    def parse_vml_shape(self, pict: ET.Element) -> Optional[ShapeDrawing]:
        """Reduce a ``v:rect``/``v:shape`` to a rectangle sized from its inline style."""
        shape = pict.find("v:rect", NS)
        if shape is None:
            shape = pict.find("v:shape", NS)
        if shape is None:
            return None

        style = _parse_inline_style(shape.attrib.get("style", ""))
        width = css_length_to_emu(style["width"]) if "width" in style else None
        height = css_length_to_emu(style["height"]) if "height" in style else None
        stroke_color = _vml_color(shape.attrib.get("strokecolor"))
        return ShapeDrawing(
            preset="rect",
            extent=Extent(width or DEFAULT_SHAPE_SIZE, height or DEFAULT_SHAPE_SIZE),
            fill=_vml_color(shape.attrib.get("fillcolor")) or DEFAULT_SHAPE_FILL,
            stroke=Stroke(color=stroke_color or DEFAULT_STROKE_COLOR),
        )

    # ------------------------------------------------------------------
    # Placement
    def _parse_positioning(self, container: ET.Element) -> Positioning:
        if container.tag != qualify("wp:anchor"):
            return Positioning()
        return Positioning(
            mode="anchor",
            horizontal=self._parse_anchor_position(container.find("wp:positionH", NS)),
            vertical=self._parse_anchor_position(container.find("wp:positionV", NS)),
            distance_top=get_int_attr(container, None, "distT"),
            distance_bottom=get_int_attr(container, None, "distB"),
            distance_left=get_int_attr(container, None, "distL"),
            distance_right=get_int_attr(container, None, "distR"),
            behind_text=container.attrib.get("behindDoc") in ("1", "true"),
        )

    @staticmethod
    def _parse_anchor_position(element: Optional[ET.Element]) -> Optional[AnchorPosition]:
        if element is None:
            return None
        offset_el = element.find("wp:posOffset", NS)
        align_el = element.find("wp:align", NS)
        offset = None
        if offset_el is not None and offset_el.text:
            try:
                offset = int(offset_el.text.strip())
            except ValueError:
                LOGGER.debug("Bad posOffset %r", offset_el.text)
        return AnchorPosition(
            relative_from=element.attrib.get("relativeFrom"),
            offset=offset,
            align=align_el.text.strip() if align_el is not None and align_el.text else None,
        )

    @staticmethod
    def _parse_extent(element: Optional[ET.Element]) -> Extent:
        if element is None:
            return Extent()
        return Extent(get_int_attr(element, None, "cx") or 0, get_int_attr(element, None, "cy") or 0)


def _color_of(element: ET.Element) -> Optional[str]:
    """Read an ``a:srgbClr`` or ``a:schemeClr`` child as ``#RRGGBB``."""
    srgb = element.find("a:srgbClr", NS)
    if srgb is not None and srgb.attrib.get("val"):
        return f"#{srgb.attrib['val'].upper()}"
    scheme = element.find("a:schemeClr", NS)
    if scheme is not None:
        return THEME_COLORS.get(scheme.attrib.get("val", ""))
    return None


def _vml_color(value: Optional[str]) -> Optional[str]:
    """``#f00 [3204]`` style VML colours keep their first token."""
    if not value:
        return None
    return value.split()[0]


def _parse_inline_style(style: str) -> Dict[str, str]:
    declarations: Dict[str, str] = {}
    for declaration in style.split(";"):
        if ":" not in declaration:
            continue
        key, value = declaration.split(":", 1)
        declarations[key.strip().lower()] = value.strip()
    return declarations
