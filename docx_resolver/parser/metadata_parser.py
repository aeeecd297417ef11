"""Read document properties from docProps/core.xml and docProps/app.xml."""
from __future__ import annotations

import re
from datetime import datetime
from typing import List, Optional
from xml.etree import ElementTree as ET

from docx_resolver.model.document_model import DocumentMetadata
from docx_resolver.parser.docx_loader import APP_PROPS_PATH, CORE_PROPS_PATH, DocxPackage
from docx_resolver.utils.logger import get_logger
from docx_resolver.utils.xml_utils import Namespaces, find_text

LOGGER = get_logger(__name__)

_KEYWORD_SEPARATORS = re.compile(r"[,;]")


def parse_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        LOGGER.debug("Ignoring non-numeric property value %r", value)
        return None


def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse a W3CDTF timestamp; a trailing ``Z`` means UTC."""
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        LOGGER.debug("Ignoring unparseable date %r", value)
        return None


def split_keywords(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [keyword.strip() for keyword in _KEYWORD_SEPARATORS.split(value) if keyword.strip()]


class MetadataParser:
    """Best-effort metadata: missing parts, fields or bad values are simply left unset."""

    def __init__(self, package: DocxPackage) -> None:
        self._package = package

    def parse(self) -> DocumentMetadata:
        metadata = DocumentMetadata()
        core = self._package.get_optional_xml_part(CORE_PROPS_PATH)
        if core is not None:
            self._apply_core(metadata, core.getroot())
        app = self._package.get_optional_xml_part(APP_PROPS_PATH)
        if app is not None:
            self._apply_app(metadata, app.getroot())
        return metadata

    @staticmethod
    def _apply_core(metadata: DocumentMetadata, root: ET.Element) -> None:
        ns = Namespaces.PROPERTIES
        metadata.title = find_text(root, "dc:title", ns)
        metadata.subject = find_text(root, "dc:subject", ns)
        metadata.description = find_text(root, "dc:description", ns)
        metadata.creator = find_text(root, "dc:creator", ns)
        metadata.keywords = split_keywords(find_text(root, "cp:keywords", ns))
        metadata.category = find_text(root, "cp:category", ns)
        metadata.last_modified_by = find_text(root, "cp:lastModifiedBy", ns)
        metadata.revision = parse_int(find_text(root, "cp:revision", ns))
        metadata.created = parse_datetime(find_text(root, "dcterms:created", ns))
        metadata.modified = parse_datetime(find_text(root, "dcterms:modified", ns))

    @staticmethod
    def _apply_app(metadata: DocumentMetadata, root: ET.Element) -> None:
        ns = Namespaces.PROPERTIES
        metadata.pages = parse_int(find_text(root, "ep:Pages", ns))
        metadata.words = parse_int(find_text(root, "ep:Words", ns))
        metadata.characters = parse_int(find_text(root, "ep:Characters", ns))
        metadata.application = find_text(root, "ep:Application", ns)
