"""Relationship tables for every part of an Open Packaging Convention archive."""
from __future__ import annotations

import posixpath
from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Optional, Tuple
from xml.etree import ElementTree as ET

from docx_resolver.utils.logger import get_logger
from docx_resolver.utils.xml_utils import Namespaces, parse_xml

LOGGER = get_logger(__name__)

OFFICE_REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"

RELTYPE_IMAGE = f"{OFFICE_REL_NS}/image"
RELTYPE_HYPERLINK = f"{OFFICE_REL_NS}/hyperlink"
RELTYPE_HEADER = f"{OFFICE_REL_NS}/header"
RELTYPE_FOOTER = f"{OFFICE_REL_NS}/footer"
RELTYPE_NUMBERING = f"{OFFICE_REL_NS}/numbering"

MAIN_DOCUMENT_PART = "word/document.xml"
EXTERNAL_MODE = "External"

RelationshipTable = Dict[str, "Relationship"]


@dataclass(frozen=True)
class Relationship:
    """One ``Relationship`` entry; ``resolved_target`` is a package path (or the URL when external)."""

    source_part: str
    r_id: str
    target: str
    rel_type: str
    target_mode: Optional[str] = None
    resolved_target: Optional[str] = None

    @property
    def is_external(self) -> bool:
        return self.target_mode == EXTERNAL_MODE

    @property
    def is_image(self) -> bool:
        return self.rel_type == RELTYPE_IMAGE or self.rel_type.endswith("/image")


@dataclass(frozen=True)
class DocumentRelationshipSummary:
    """Main document relationships grouped by what they point at."""

    media: RelationshipTable
    headers: RelationshipTable
    footers: RelationshipTable
    numbering: RelationshipTable
    hyperlinks: RelationshipTable


def split_rels_name(rels_name: str) -> Tuple[str, str]:
    """``word/_rels/document.xml.rels`` -> (``word/document.xml``, ``word``).

    The second item is the folder the source part lives in, which is what
    relative targets are resolved against.
    """
    folder, _, file_name = rels_name.rpartition("/")
    if posixpath.basename(folder) == "_rels":
        folder = posixpath.dirname(folder)
    source = file_name[: -len(".rels")]
    if not source:
        return "", folder
    return (f"{folder}/{source}" if folder else source), folder


def resolve_target(folder: str, target: str, external: bool) -> Optional[str]:
    if not target:
        return None
    if external:
        return target
    if target.startswith("/"):
        return posixpath.normpath(target[1:])
    return posixpath.normpath(posixpath.join(folder, target))


class Relationships:
    """Relationships of all parts, indexed by source part and then by id."""

    def __init__(self, tables: Optional[Dict[str, RelationshipTable]] = None) -> None:
        self._tables: Dict[str, RelationshipTable] = tables or {}

    @classmethod
    def from_package(cls, parts: Mapping[str, bytes]) -> "Relationships":
        """Read every ``*.rels`` part; malformed ones are logged and skipped."""
        tables: Dict[str, RelationshipTable] = {}
        for name in parts:
            if not name.endswith(".rels"):
                continue
            try:
                root = parse_xml(parts[name]).getroot()
            except ET.ParseError as exc:
                LOGGER.warning("Skipping malformed relationship part %s: %s", name, exc)
                continue
            source, folder = split_rels_name(name)
            table = cls._read_table(root, source, folder)
            if table:
                tables[source] = table
        return cls(tables)

    @staticmethod
    def _read_table(root: ET.Element, source: str, folder: str) -> RelationshipTable:
        table: RelationshipTable = {}
        for entry in root.iter(f"{{{Namespaces.RELS['rel']}}}Relationship"):
            r_id = entry.get("Id")
            if not r_id:
                continue
            if r_id in table:
                LOGGER.warning("Duplicate relationship id %s in %s; keeping the first", r_id, source)
                continue
            target = entry.get("Target", "")
            mode = entry.get("TargetMode")
            table[r_id] = Relationship(
                source_part=source,
                r_id=r_id,
                target=target,
                rel_type=entry.get("Type", ""),
                target_mode=mode,
                resolved_target=resolve_target(folder, target, mode == EXTERNAL_MODE),
            )
        return table

    def __len__(self) -> int:
        return sum(map(len, self._tables.values()))

    def find(self, part_name: str, r_id: str) -> Optional[Relationship]:
        return self._table(part_name).get(r_id)

    def for_source(self, part_name: str) -> RelationshipTable:
        """Copy of the relationships declared by one part (a ``.rels`` name also works)."""
        return dict(self._table(part_name))

    def iter_all(self) -> Iterator[Relationship]:
        for table in self._tables.values():
            yield from table.values()

    def document_summary(self) -> DocumentRelationshipSummary:
        table = self._table(MAIN_DOCUMENT_PART)

        def of_type(rel_type: str) -> RelationshipTable:
            return {r_id: rel for r_id, rel in table.items() if rel.rel_type == rel_type}

        return DocumentRelationshipSummary(
            media=of_type(RELTYPE_IMAGE),
            headers=of_type(RELTYPE_HEADER),
            footers=of_type(RELTYPE_FOOTER),
            numbering=of_type(RELTYPE_NUMBERING),
            hyperlinks=of_type(RELTYPE_HYPERLINK),
        )

    def get_targets_by_type(self, rel_types: List[str], part_name: str = MAIN_DOCUMENT_PART) -> Dict[str, str]:
        """Map relationship id to its resolved target for the given types within one part."""
        return {
            rel.r_id: rel.resolved_target or rel.target
            for rel in self._table(part_name).values()
            if rel.rel_type in rel_types
        }

    def _table(self, part_name: str) -> RelationshipTable:
        if part_name.endswith(".rels"):
            part_name = split_rels_name(part_name)[0]
        return self._tables.get(part_name.lstrip("/"), {})
