"""
Typed representation of the parsed schema.

These nodes hold the definitions exactly as declared, before any
reference resolution or backend-specific processing.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class DefinitionKind(str, Enum):
    """Kind of a top-level schema definition."""

    OBJECT = "object"
    ENUM = "enum"


@dataclass(frozen=True)
class ArrayItems:
    """Element description of an array property."""

    schema_type: str | None = None  # Primitive item type
    type_qualifier: str | None = None
    ref: str | None = None  # Id of the referenced definition
    item_can_be_null_object: bool = True


@dataclass(frozen=True)
class PropertyDefinition:
    """A property of an object definition."""

    name: str = ""  # Key in the schema (and in parsed dictionaries)
    schema_type: str | None = None
    mapped_property: str | None = None
    mapped_type: str | None = None
    ref: str | None = None
    type_qualifier: str | None = None
    type_converter: str | None = None
    type_resolver: str | None = None
    can_be_null_object: bool = True
    items: ArrayItems | None = None

    # Raw schema entry (for error messages)
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def accessor_name(self) -> str:
        """Output accessor name, defaults to the property key."""
        return self.mapped_property or self.name


@dataclass(frozen=True)
class Definition(ABC):
    """Base class for top-level definitions."""

    id: str = ""
    mapped_type: str | None = None

    @property
    @abstractmethod
    def kind(self) -> DefinitionKind:
        """Kind of the definition."""

    @property
    def output_type(self) -> str:
        """Output class/enum name, defaults to the id."""
        return self.mapped_type or self.id


@dataclass(frozen=True)
class ObjectDefinition(Definition):
    """An object (class) definition."""

    extends: str | None = None  # Id of the parent definition
    has_extends: bool = False  # "extends" was declared, even without $ref
    properties: dict[str, PropertyDefinition] = field(default_factory=dict)

    @property
    def kind(self) -> DefinitionKind:
        return DefinitionKind.OBJECT

    def sorted_properties(self) -> list[PropertyDefinition]:
        """Properties in lexicographic key order."""
        return [self.properties[name] for name in sorted(self.properties)]


@dataclass(frozen=True)
class EnumDefinition(Definition):
    """An enumeration definition."""

    values: tuple[tuple[str, Any], ...] = ()

    @property
    def kind(self) -> DefinitionKind:
        return DefinitionKind.ENUM


@dataclass
class SchemaIndex:
    """Id -> definition lookup table, in first-declaration order."""

    definitions: dict[str, Definition] = field(default_factory=dict)

    def __getitem__(self, definition_id: str) -> Definition:
        return self.definitions[definition_id]

    def __contains__(self, definition_id: object) -> bool:
        return definition_id in self.definitions

    def __iter__(self):
        return iter(self.definitions.values())

    def __len__(self) -> int:
        return len(self.definitions)

    def get(self, definition_id: str | None) -> Definition | None:
        if definition_id is None:
            return None
        return self.definitions.get(definition_id)
