"""DOCX package loader responsible for unpacking XML parts and media."""
from __future__ import annotations

import io
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Dict, Iterable, Mapping, Optional, Union
from xml.etree import ElementTree as ET

from docx_resolver.utils.exceptions import InvalidPackage, MalformedXml, MissingRequiredPart
from docx_resolver.utils.logger import get_logger
from docx_resolver.utils.xml_utils import parse_xml

LOGGER = get_logger(__name__)

DOCUMENT_XML_PATH = "word/document.xml"
STYLES_XML_PATH = "word/styles.xml"
NUMBERING_XML_PATH = "word/numbering.xml"
CORE_PROPS_PATH = "docProps/core.xml"
APP_PROPS_PATH = "docProps/app.xml"

PackageSource = Union[str, Path, bytes, bytearray, BinaryIO]


@dataclass(slots=True)
class DocxPackage:
    """Container for the raw parts of a DOCX archive with a parsed-XML cache."""

    raw_parts: Mapping[str, bytes]
    xml_cache: Dict[str, ET.ElementTree] = field(default_factory=dict)

    @classmethod
    def load(cls, source: PackageSource) -> "DocxPackage":
        """Open a DOCX archive from a path, raw bytes or a binary file object."""
        if isinstance(source, (bytes, bytearray)):
            handle: Union[str, Path, BinaryIO] = io.BytesIO(bytes(source))
            label = "<bytes>"
        elif isinstance(source, (str, Path)):
            handle = Path(source)
            label = Path(source).name
        else:
            handle = source
            label = getattr(source, "name", "<stream>")

        try:
            with zipfile.ZipFile(handle) as docx_zip:
                parts = {
                    info.filename: docx_zip.read(info.filename)
                    for info in docx_zip.infolist()
                    if not info.is_dir()
                }
        except zipfile.BadZipFile as exc:
            raise InvalidPackage(f"Not a DOCX archive: {exc}", str(label)) from exc

        LOGGER.debug("Loaded %d parts from %s", len(parts), label)
        return cls(raw_parts=parts)

    # ------------------------------------------------------------------
    # Raw access
    def part_names(self) -> Iterable[str]:
        return self.raw_parts.keys()

    def has_part(self, name: str) -> bool:
        return self._normalize(name) in self.raw_parts

    def load_part(self, name: str) -> Optional[bytes]:
        """Return the bytes of a part, or ``None`` when the package lacks it."""
        return self.raw_parts.get(self._normalize(name))

    def load_text(self, name: str, encoding: str = "utf-8") -> Optional[str]:
        data = self.load_part(name)
        if data is None:
            return None
        if encoding.lower() in ("utf-8", "utf8"):
            encoding = "utf-8-sig"
        return data.decode(encoding, errors="replace")

    # ------------------------------------------------------------------
    # XML access
    def get_xml_part(self, name: str) -> Optional[ET.ElementTree]:
        """Parse and cache an XML part; malformed XML raises ``MalformedXml``."""
        name = self._normalize(name)
        if name in self.xml_cache:
            return self.xml_cache[name]
        data = self.raw_parts.get(name)
        if data is None:
            return None
        try:
            tree = parse_xml(data)
        except ET.ParseError as exc:
            raise MalformedXml(f"Malformed XML: {exc}", name) from exc
        self.xml_cache[name] = tree
        return tree

    def get_optional_xml_part(self, name: str) -> Optional[ET.ElementTree]:
        """Like ``get_xml_part`` but treats a malformed optional part as absent."""
        try:
            return self.get_xml_part(name)
        except MalformedXml as exc:
            LOGGER.warning("Ignoring optional part: %s", exc)
            return None

    def require_xml_part(self, name: str) -> ET.ElementTree:
        tree = self.get_xml_part(name)
        if tree is None:
            raise MissingRequiredPart("Required DOCX part missing", self._normalize(name))
        return tree

    def require_document_xml(self) -> ET.ElementTree:
        return self.require_xml_part(DOCUMENT_XML_PATH)

    @staticmethod
    def _normalize(name: str) -> str:
        return name.lstrip("/")
