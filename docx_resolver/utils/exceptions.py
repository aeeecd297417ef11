"""Exception hierarchy raised while turning a DOCX package into a document model."""
from __future__ import annotations

from typing import Optional


class DocxParseError(Exception):
    """Base class for fatal parsing errors."""

    def __init__(self, message: str, part_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.part_name = part_name

    def __str__(self) -> str:
        if self.part_name:
            return f"{self.message} ({self.part_name})"
        return self.message


class InvalidPackage(DocxParseError):
    """The input is not a readable zip archive."""


class MissingRequiredPart(DocxParseError):
    """A part (or element) the document cannot be parsed without is absent."""


class MalformedXml(DocxParseError):
    """A required part contains XML that does not parse."""
