"""Aggregate model handed to consumers: the resolved tree plus package metadata."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from docx_resolver.model.elements import Document


@dataclass(slots=True)
class DocumentMetadata:
    """Best-effort values from ``docProps/core.xml`` and ``docProps/app.xml``."""

    title: Optional[str] = None
    subject: Optional[str] = None
    description: Optional[str] = None
    creator: Optional[str] = None
    keywords: List[str] = field(default_factory=list)
    category: Optional[str] = None
    last_modified_by: Optional[str] = None
    revision: Optional[int] = None
    created: Optional[datetime] = None
    modified: Optional[datetime] = None
    pages: Optional[int] = None
    words: Optional[int] = None
    characters: Optional[int] = None
    application: Optional[str] = None


@dataclass(slots=True)
class DocumentModel:
    """Flattened document representation that renderers consume."""

    document: Document
    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)

    @property
    def sections(self):
        return self.document.sections
