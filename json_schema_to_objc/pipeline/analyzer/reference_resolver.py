"""
Reference resolver for $ref resolution.

Resolves $ref and extends ids to their definitions in the schema index.
"""

from __future__ import annotations

from ..errors import SchemaError, UnresolvedReference
from ..schema_ast.nodes import Definition, ObjectDefinition, SchemaIndex


class ReferenceResolver:
    """Resolves references against a SchemaIndex."""

    def __init__(self, index: SchemaIndex):
        self.index = index

    def resolve(self, ref: str, context: str = "") -> Definition:
        """
        Resolve a reference id to its definition.

        Raises:
            UnresolvedReference: If the id is not in the index
        """
        definition = self.index.get(ref)
        if definition is None:
            raise UnresolvedReference(ref, context)
        return definition

    def parent_of(self, definition: ObjectDefinition) -> Definition | None:
        """Resolve the extends target of a definition, if any."""
        if not definition.has_extends:
            return None
        if not definition.extends:
            raise SchemaError(f"Missing $ref in extends of {definition.id}")
        return self.resolve(definition.extends, definition.id)

    def check_references(self) -> None:
        """
        Verify that every extends and array items $ref in the schema resolves.

        Runs before any generation so that no file is written for a schema
        with dangling references. Object property $refs are left to the
        property rules, since a mappedType or typeResolver can stand in for
        the referenced class.
        """
        for definition in self.index:
            if not isinstance(definition, ObjectDefinition):
                continue
            self.parent_of(definition)
            for prop in definition.sorted_properties():
                context = f"{definition.id}.{prop.name}"
                if prop.items is not None and prop.items.ref:
                    self.resolve(prop.items.ref, context)
