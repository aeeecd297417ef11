"""Apply docDefaults, style inheritance and direct formatting in Word's order."""
from __future__ import annotations

from dataclasses import replace
from typing import Dict, List, Optional, Tuple

from docx_resolver.model.elements import (
    Indent,
    NumberingReference,
    ParagraphBorders,
    ParagraphProperties,
    RunProperties,
    Spacing,
    merge_groups,
)
from docx_resolver.model.style_model import StyleDefinition, StylesCatalog
from docx_resolver.utils.logger import get_logger

LOGGER = get_logger(__name__)


class StyleResolver:
    """Compute effective paragraph and run properties against a styles catalog.

    The resolver holds no per-document state besides a cache of style chains,
    so resolving the same inputs twice gives equal results.
    """

    def __init__(self, catalog: StylesCatalog) -> None:
        self.catalog = catalog
        self._chains: Dict[str, Tuple[StyleDefinition, ...]] = {}

    def style_chain(self, style_id: Optional[str]) -> List[StyleDefinition]:
        """Return ``style_id`` and its ``basedOn`` ancestors, most-derived first.

        Stops at the first unknown id or at any id already visited, so cyclic
        ``basedOn`` links still terminate.
        """
        if not style_id:
            return []
        cached = self._chains.get(style_id)
        if cached is not None:
            return list(cached)

        chain: List[StyleDefinition] = []
        visited = set()
        current = style_id
        while current and current not in visited:
            visited.add(current)
            style = self.catalog.get(current)
            if style is None:
                if current == style_id:
                    LOGGER.debug("Unknown style %s", style_id)
                break
            chain.append(style)
            current = style.based_on
        if current and current in visited:
            LOGGER.debug("Cyclic basedOn chain at style %s", current)

        self._chains[style_id] = tuple(chain)
        return chain

    def paragraph_style_id(self, style_id: Optional[str]) -> Optional[str]:
        """The style a paragraph actually uses: its own, else the default paragraph style."""
        if style_id:
            return style_id
        default = self.catalog.default_for("paragraph")
        return default.style_id if default else None

    def numbering_for_style(self, style_id: Optional[str]) -> Optional[NumberingReference]:
        """``w:numPr`` inherited through the paragraph style chain, if any."""
        numbering: Optional[NumberingReference] = None
        for style in reversed(self.style_chain(self.paragraph_style_id(style_id))):
            if style.paragraph_properties is not None:
                numbering = merge_groups(numbering, style.paragraph_properties.numbering)
        return numbering

    def resolve_paragraph_properties(
        self, local: Optional[ParagraphProperties], style_id: Optional[str] = None
    ) -> ParagraphProperties:
        """Effective paragraph properties: defaults, then style chain base to derived, then ``local``."""
        local = local or ParagraphProperties()
        effective_style = self.paragraph_style_id(style_id or local.style_id)

        effective = self.catalog.default_paragraph_properties
        run_properties = merge_groups(self.catalog.default_run_properties, effective.run_properties)

        for style in reversed(self.style_chain(effective_style)):
            run_properties = merge_groups(run_properties, style.run_properties)
            paragraph = style.paragraph_properties
            if paragraph is None:
                continue
            effective = merge_groups(effective, replace(paragraph, run_properties=None))
            run_properties = merge_groups(run_properties, paragraph.run_properties)

        effective = merge_groups(effective, replace(local, run_properties=None))
        run_properties = merge_groups(run_properties, local.run_properties)

        numbering = effective.numbering
        if numbering is not None and (numbering.is_cancelled or numbering.num_id is None):
            numbering = None

        return replace(
            effective,
            style_id=effective_style,
            indent=effective.indent or Indent(),
            spacing=effective.spacing or Spacing(),
            borders=effective.borders or ParagraphBorders(),
            numbering=numbering,
            run_properties=run_properties or RunProperties(),
        )

    def resolve_run_properties(
        self,
        local: Optional[RunProperties],
        run_style_id: Optional[str] = None,
        paragraph_style_id: Optional[str] = None,
    ) -> RunProperties:
        """Effective run properties: defaults, paragraph style chain, character style chain, ``local``."""
        effective = self.catalog.default_run_properties
        for style in reversed(self.style_chain(self.paragraph_style_id(paragraph_style_id))):
            effective = merge_groups(effective, style.run_properties)
            if style.paragraph_properties is not None:
                effective = merge_groups(effective, style.paragraph_properties.run_properties)
        for style in reversed(self.style_chain(run_style_id)):
            effective = merge_groups(effective, style.run_properties)
        return merge_groups(effective, local) or RunProperties()
