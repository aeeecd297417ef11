"""Style model captures Word style definitions in a typed, normalized form."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from docx_resolver.model.elements import ParagraphProperties, RunProperties


@dataclass(frozen=True, slots=True)
class StyleDefinition:
    """Direct (not yet inherited) information for one ``w:style``."""

    style_id: str
    style_type: str
    name: Optional[str] = None
    based_on: Optional[str] = None
    next_style: Optional[str] = None
    linked_style: Optional[str] = None
    is_default: bool = False
    run_properties: Optional[RunProperties] = None
    paragraph_properties: Optional[ParagraphProperties] = None


class StylesCatalog:
    """Collection of style definitions keyed by identifier, plus document defaults."""

    def __init__(
        self,
        styles: Mapping[str, StyleDefinition],
        default_run_properties: Optional[RunProperties] = None,
        default_paragraph_properties: Optional[ParagraphProperties] = None,
    ) -> None:
        self._styles: Dict[str, StyleDefinition] = dict(styles)
        self.default_run_properties = default_run_properties or RunProperties()
        self.default_paragraph_properties = default_paragraph_properties or ParagraphProperties()

    def get(self, style_id: Optional[str]) -> Optional[StyleDefinition]:
        """Return the style definition given its identifier."""
        if style_id is None:
            return None
        return self._styles.get(style_id)

    def all(self) -> Mapping[str, StyleDefinition]:
        """Return read-only view of the styles."""
        return dict(self._styles)

    def default_for(self, style_type: str) -> Optional[StyleDefinition]:
        """Return the default style for the given style type if defined."""
        for style in self._styles.values():
            if style.style_type == style_type and style.is_default:
                return style
        return None

    def __len__(self) -> int:
        return len(self._styles)
