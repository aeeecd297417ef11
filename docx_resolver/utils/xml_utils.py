"""Helper functions to work with XML namespaces and parsing."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Optional
from xml.etree import ElementTree as ET

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
R_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
A_NS = "http://schemas.openxmlformats.org/drawingml/2006/main"
WP_NS = "http://schemas.openxmlformats.org/drawingml/2006/wordprocessingDrawing"
WPS_NS = "http://schemas.microsoft.com/office/word/2010/wordprocessingShape"
MC_NS = "http://schemas.openxmlformats.org/markup-compatibility/2006"
V_NS = "urn:schemas-microsoft-com:vml"
PIC_NS = "http://schemas.openxmlformats.org/drawingml/2006/picture"
PKG_REL_NS = "http://schemas.openxmlformats.org/package/2006/relationships"


@dataclass(frozen=True)
class Namespaces:
    """Common OpenXML namespace prefixes used across parsers."""

    WORD: Dict[str, str] = None  # type: ignore[assignment]
    RELS: Dict[str, str] = None  # type: ignore[assignment]
    DRAWING: Dict[str, str] = None  # type: ignore[assignment]
    PROPERTIES: Dict[str, str] = None  # type: ignore[assignment]

    def __post_init__(self) -> None:  # pragma: no cover
        raise RuntimeError("Namespaces should not be instantiated")


Namespaces.WORD = {  # type: ignore[attr-defined]
    "w": W_NS,
    "r": R_NS,
}
Namespaces.RELS = {  # type: ignore[attr-defined]
    "rel": PKG_REL_NS,
}
Namespaces.DRAWING = {  # type: ignore[attr-defined]
    "w": W_NS,
    "a": A_NS,
    "wp": WP_NS,
    "wps": WPS_NS,
    "pic": PIC_NS,
    "mc": MC_NS,
    "v": V_NS,
}
Namespaces.PROPERTIES = {  # type: ignore[attr-defined]
    "cp": "http://schemas.openxmlformats.org/package/2006/metadata/core-properties",
    "dc": "http://purl.org/dc/elements/1.1/",
    "dcterms": "http://purl.org/dc/terms/",
    "ep": "http://schemas.openxmlformats.org/officeDocument/2006/extended-properties",
}

_PREFIXES: Dict[str, str] = {
    **Namespaces.WORD,
    **Namespaces.DRAWING,
}


def parse_xml(data: bytes) -> ET.ElementTree:
    """Parse XML from raw bytes with sane defaults."""
    return ET.ElementTree(ET.fromstring(data))


def find_text(element: ET.Element, xpath: str, namespaces: Optional[Dict[str, str]] = None) -> Optional[str]:
    """Return trimmed text from the first element that matches the xpath."""
    found = element.find(xpath, namespaces or {})
    if found is None or found.text is None:
        return None
    return found.text.strip()


def qualify(name: str) -> str:
    """Expand ``prefix:local`` into Clark notation; bare names pass through."""
    if ":" not in name:
        return name
    prefix, local = name.split(":", 1)
    namespace = _PREFIXES.get(prefix)
    if namespace is None:
        return name
    return f"{{{namespace}}}{local}"


def local_name(tag: str) -> str:
    return tag.split("}", 1)[-1]


def get_attr(element: Optional[ET.Element], child_name: Optional[str], attr_name: str) -> Optional[str]:
    """Get an attribute value from ``element`` or from its first ``child_name`` child."""
    if element is None:
        return None
    target = element.find(child_name, _PREFIXES) if child_name else element
    if target is None:
        return None
    return target.attrib.get(qualify(attr_name))


def get_int_attr(element: Optional[ET.Element], child_name: Optional[str], attr_name: str) -> Optional[int]:
    value = get_attr(element, child_name, attr_name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        try:
            return int(float(value))
        except ValueError:
            return None


# Containers whose children are parsed as if they sat directly in the parent
BLOCK_WRAPPERS = {"sdt", "sdtContent", "customXml"}


def iter_blocks(container: ET.Element) -> Iterator[ET.Element]:
    """Yield block children, looking through content controls and custom XML."""
    for child in list(container):
        tag = local_name(child.tag)
        if tag in BLOCK_WRAPPERS:
            yield from iter_blocks(child)
        elif tag in ("sdtPr", "sdtEndPr"):
            continue
        else:
            yield child
