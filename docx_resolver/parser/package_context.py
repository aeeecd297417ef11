"""Shared access to package parts, relationships and image payloads."""
from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Dict, Iterable, List, Optional, Tuple

from docx_resolver.model.elements import ImageHandle
from docx_resolver.parser.docx_loader import DocxPackage
from docx_resolver.parser.media_extractor import build_image_handle
from docx_resolver.parser.rels_parser import MAIN_DOCUMENT_PART, Relationship, Relationships
from docx_resolver.utils.logger import get_logger

LOGGER = get_logger(__name__)

DEFAULT_MAX_WORKERS = 4


class PackageContext:
    """Read-only view of a loaded package used by every parser stage.

    Image handles are keyed by ``(source_part, relationship_id)`` so that a
    header's ``rId1`` never collides with the body's ``rId1``.
    """

    def __init__(self, package: DocxPackage, max_workers: int = DEFAULT_MAX_WORKERS) -> None:
        self.package = package
        self.max_workers = max(1, max_workers)
        self.relationships = Relationships()
        self._images: Dict[Tuple[str, str], ImageHandle] = {}
        self._lock = threading.Lock()

    def load_part(self, name: str) -> Optional[bytes]:
        return self.package.load_part(name)

    def load_text(self, name: str) -> Optional[str]:
        return self.package.load_text(name)

    def load_relationships(self) -> Relationships:
        """Read every relationship part; a package without them gets an empty table."""
        self.relationships = Relationships.from_package(self.package.raw_parts)
        if not self.relationships.for_source(MAIN_DOCUMENT_PART):
            LOGGER.debug("No relationships for %s", MAIN_DOCUMENT_PART)
        return self.relationships

    def get_relationship(self, r_id: str, part: str = MAIN_DOCUMENT_PART) -> Optional[Relationship]:
        return self.relationships.find(part, r_id)

    def get_image_handle(self, r_id: str, part: str = MAIN_DOCUMENT_PART) -> Optional[ImageHandle]:
        return self._images.get((part, r_id))

    @property
    def image_count(self) -> int:
        return len(self._images)

    # ------------------------------------------------------------------
    # Concurrent loading
    def image_relationships(self) -> List[Relationship]:
        return [rel for rel in self.relationships.iter_all() if rel.is_image and not rel.is_external]

    def resolve_images(self) -> int:
        """Load every internal image relationship; returns the number of handles stored."""
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(self._resolve_image, rel) for rel in self.image_relationships()]
            for future in as_completed(futures):
                future.result()
        LOGGER.debug("Resolved %d image handles", len(self._images))
        return len(self._images)

    def prefetch(self, optional_parts: Iterable[str] = ()) -> None:
        """Parse optional XML parts and resolve images concurrently, then wait for all of them."""
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures: List[Future] = [
                executor.submit(self.package.get_optional_xml_part, name) for name in optional_parts
            ]
            futures.extend(executor.submit(self._resolve_image, rel) for rel in self.image_relationships())
            for future in as_completed(futures):
                future.result()
        LOGGER.debug("Prefetch complete: %d image handles", len(self._images))

    def load_parts(self, names: Iterable[str]) -> Dict[str, Optional[bytes]]:
        """Fetch several parts concurrently; absent parts map to ``None``."""
        unique = list(dict.fromkeys(names))
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {executor.submit(self.package.load_part, name): name for name in unique}
            return {futures[future]: future.result() for future in as_completed(futures)}

    def _resolve_image(self, relationship: Relationship) -> None:
        handle = build_image_handle(relationship, self.package.load_part(relationship.resolved_target or ""))
        if handle is None:
            return
        with self._lock:
            self._images[(relationship.source_part, relationship.r_id)] = handle
