"""
Schema AST module.

Contains the typed schema model and the parser that indexes it.
"""

from __future__ import annotations

from .nodes import (
    ArrayItems,
    Definition,
    DefinitionKind,
    EnumDefinition,
    ObjectDefinition,
    PropertyDefinition,
    SchemaIndex,
)
from .parser import SchemaParser

__all__ = [
    "ArrayItems",
    "Definition",
    "DefinitionKind",
    "EnumDefinition",
    "ObjectDefinition",
    "PropertyDefinition",
    "SchemaIndex",
    "SchemaParser",
]
