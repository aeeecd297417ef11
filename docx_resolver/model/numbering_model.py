"""Numbering model captures list definitions extracted from numbering.xml."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Optional


@dataclass(frozen=True, slots=True)
class NumberingLevel:
    """Defines numbering behavior for a specific indentation level."""

    level_index: int
    start: int = 1
    num_format: str = "decimal"
    level_text: Optional[str] = None
    alignment: Optional[str] = None
    indent: int = 0
    hanging: int = 0
    font: Optional[str] = None
    is_legal: bool = False

    @property
    def label_template(self) -> str:
        """Level text, defaulting to ``%N.`` for this level."""
        if self.level_text is None:
            return f"%{self.level_index + 1}."
        return self.level_text


@dataclass(frozen=True, slots=True)
class NumberingOverride:
    """Overrides applied to a numbering instance for specific levels."""

    level_index: int
    start_override: Optional[int] = None
    level: Optional[NumberingLevel] = None


@dataclass(slots=True)
class AbstractNumberingDefinition:
    """Template describing multi-level numbering behavior."""

    abstract_num_id: int
    multi_level_type: Optional[str] = None
    name: Optional[str] = None
    style_link: Optional[str] = None
    levels: Dict[int, NumberingLevel] = field(default_factory=dict)


@dataclass(slots=True)
class NumberingInstance:
    """Concrete numbering instance bound to an abstract definition."""

    num_id: int
    abstract_num_id: int
    overrides: Dict[int, NumberingOverride] = field(default_factory=dict)


@dataclass(slots=True)
class NumberingCatalog:
    """Collection of abstract definitions and concrete numbering instances."""

    abstracts: Dict[int, AbstractNumberingDefinition] = field(default_factory=dict)
    instances: Dict[int, NumberingInstance] = field(default_factory=dict)

    def get_abstract(self, abstract_num_id: Optional[int]) -> Optional[AbstractNumberingDefinition]:
        if abstract_num_id is None:
            return None
        return self.abstracts.get(abstract_num_id)

    def get_instance(self, num_id: Optional[int]) -> Optional[NumberingInstance]:
        if num_id is None:
            return None
        return self.instances.get(num_id)

    def get_definition(self, num_id: Optional[int]) -> Optional[AbstractNumberingDefinition]:
        """Return the abstract definition a list instance points at."""
        instance = self.get_instance(num_id)
        if instance is None:
            return None
        return self.get_abstract(instance.abstract_num_id)

    def get_level(self, num_id: Optional[int], level_index: int) -> Optional[NumberingLevel]:
        """Return the effective level definition with instance overrides applied."""
        instance = self.get_instance(num_id)
        if instance is None:
            return None
        abstract = self.get_abstract(instance.abstract_num_id)
        level = abstract.levels.get(level_index) if abstract else None

        override = instance.overrides.get(level_index)
        if override is None:
            return level
        if override.level is not None:
            level = override.level
        if level is not None and override.start_override is not None:
            level = replace(level, start=override.start_override)
        return level
