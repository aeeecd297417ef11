"""In-memory DOCX packages for tests."""
from __future__ import annotations

import io
import zipfile
from typing import Mapping, Optional, Union

from docx_resolver.model.numbering_model import NumberingCatalog
from docx_resolver.model.style_model import StylesCatalog
from docx_resolver.parser.document_parser import DocumentParser
from docx_resolver.parser.docx_loader import DocxPackage
from docx_resolver.parser.numbering_parser import NumberingParser
from docx_resolver.parser.package_context import PackageContext
from docx_resolver.parser.style_resolver import StyleResolver
from docx_resolver.parser.styles_parser import StylesParser
from docx_resolver.utils.xml_utils import parse_xml

W = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
R = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
NAMESPACES = (
    f'xmlns:w="{W}" xmlns:r="{R}" '
    'xmlns:wp="http://schemas.openxmlformats.org/drawingml/2006/wordprocessingDrawing" '
    'xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main" '
    'xmlns:pic="http://schemas.openxmlformats.org/drawingml/2006/picture" '
    'xmlns:wps="http://schemas.microsoft.com/office/word/2010/wordprocessingShape" '
    'xmlns:mc="http://schemas.openxmlformats.org/markup-compatibility/2006" '
    'xmlns:v="urn:schemas-microsoft-com:vml"'
)
REL_PREFIX = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16

Part = Union[str, bytes]


def document_xml(body: str) -> str:
    return f"<w:document {NAMESPACES}><w:body>{body}</w:body></w:document>"


def part_xml(root_tag: str, content: str) -> str:
    """Header/footer style root such as ``w:hdr``."""
    return f"<{root_tag} {NAMESPACES}>{content}</{root_tag}>"


def styles_xml(content: str) -> str:
    return f'<w:styles xmlns:w="{W}">{content}</w:styles>'


def numbering_xml(content: str) -> str:
    return f'<w:numbering xmlns:w="{W}">{content}</w:numbering>'


def rels_xml(*entries: tuple) -> str:
    """Build a .rels part from ``(r_id, type_suffix, target[, mode])`` tuples."""
    items = []
    for entry in entries:
        r_id, rel_type, target = entry[:3]
        mode = f' TargetMode="{entry[3]}"' if len(entry) > 3 else ""
        items.append(f'<Relationship Id="{r_id}" Type="{REL_PREFIX}/{rel_type}" Target="{target}"{mode}/>')
    return (
        '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
        + "".join(items)
        + "</Relationships>"
    )


def _encode(parts: Mapping[str, Part]) -> dict:
    return {name: data.encode("utf-8") if isinstance(data, str) else data for name, data in parts.items()}


def build_package(parts: Mapping[str, Part]) -> DocxPackage:
    return DocxPackage(raw_parts=_encode(parts))


def build_docx_bytes(parts: Mapping[str, Part]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, data in _encode(parts).items():
            archive.writestr(name, data)
    return buffer.getvalue()


def build_context(parts: Mapping[str, Part], resolve_images: bool = True) -> PackageContext:
    context = PackageContext(build_package(parts), max_workers=2)
    context.load_relationships()
    if resolve_images:
        context.resolve_images()
    return context


def build_parser(
    parts: Mapping[str, Part],
    styles: Optional[str] = None,
    numbering: Optional[str] = None,
) -> DocumentParser:
    """Document parser over an in-memory package with optional styles/numbering XML."""
    context = build_context(parts)
    catalog = StylesParser(parse_xml(styles.encode("utf-8"))).parse() if styles else StylesCatalog({})
    numbering_catalog = (
        NumberingParser(parse_xml(numbering.encode("utf-8"))).parse() if numbering else NumberingCatalog()
    )
    return DocumentParser(context, StyleResolver(catalog), numbering_catalog)
