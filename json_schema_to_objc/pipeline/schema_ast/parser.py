"""
Schema parser that builds the schema index.

Phase 1 of the pipeline: convert the raw JSON document into typed
definitions without resolving references.
"""

from __future__ import annotations

import logging
from typing import Any

from ..errors import MissingIdentifier, SchemaError, UnknownDefinitionKind
from .nodes import (
    ArrayItems,
    Definition,
    DefinitionKind,
    EnumDefinition,
    ObjectDefinition,
    PropertyDefinition,
    SchemaIndex,
)

logger = logging.getLogger(__name__)


class SchemaParser:
    """Parses a schema document into a SchemaIndex."""

    DEFINITION_KINDS = {kind.value for kind in DefinitionKind}

    def parse(self, schema: Any) -> SchemaIndex:
        """
        Parse a schema document.

        Args:
            schema: The decoded JSON document, a list of definitions

        Returns:
            SchemaIndex keyed by definition id

        Raises:
            UnknownDefinitionKind: If a definition type is not object/enum
            MissingIdentifier: If a definition has no id
        """
        if not isinstance(schema, list):
            raise SchemaError("Schema document must be a list of definitions")

        index = SchemaIndex()
        for position, raw in enumerate(schema):
            definition = self._parse_definition(raw, position)
            if definition.id in index:
                logger.warning("Duplicate definition id %r at index %d replaces the earlier one", definition.id, position)
            index.definitions[definition.id] = definition
        return index

    def _parse_definition(self, raw: Any, position: int) -> Definition:
        if not isinstance(raw, dict):
            raise UnknownDefinitionKind(position, None)

        kind = raw.get("type")
        if kind not in self.DEFINITION_KINDS:
            raise UnknownDefinitionKind(position, kind)

        definition_id = raw.get("id")
        if not isinstance(definition_id, str) or not definition_id:
            raise MissingIdentifier(position)

        if kind == DefinitionKind.ENUM.value:
            return self._parse_enum(raw, definition_id)
        return self._parse_object(raw, definition_id)

    def _parse_enum(self, raw: dict[str, Any], definition_id: str) -> EnumDefinition:
        values = []
        for entry in raw.get("values") or []:
            # Each value is a single-key map: {"Key": value}
            for key, value in entry.items():
                values.append((key, value))
        return EnumDefinition(
            id=definition_id,
            mapped_type=raw.get("mappedType"),
            values=tuple(values),
        )

    def _parse_object(self, raw: dict[str, Any], definition_id: str) -> ObjectDefinition:
        extends = raw.get("extends")
        properties = {}
        for name, prop_schema in (raw.get("properties") or {}).items():
            properties[name] = self._parse_property(name, prop_schema)

        return ObjectDefinition(
            id=definition_id,
            mapped_type=raw.get("mappedType"),
            extends=extends.get("$ref") if isinstance(extends, dict) else None,
            has_extends=bool(extends),
            properties=properties,
        )

    def _parse_property(self, name: str, schema: dict[str, Any]) -> PropertyDefinition:
        """Parse a property descriptor."""
        schema_type = schema.get("type")
        ref = schema.get("$ref")

        # A bare $ref property is an object property
        if schema_type is None and ref:
            schema_type = "object"

        can_be_null = schema.get("canBeNullObject", schema.get("propertyCanBeNullObject", True))

        items = None
        if "items" in schema:
            items = self._parse_items(schema["items"] or {})

        return PropertyDefinition(
            name=name,
            schema_type=schema_type,
            mapped_property=schema.get("mappedProperty") or None,
            mapped_type=schema.get("mappedType") or None,
            ref=ref,
            type_qualifier=schema.get("typeQualifier"),
            type_converter=schema.get("typeConverter") or None,
            type_resolver=schema.get("typeResolver") or None,
            can_be_null_object=bool(can_be_null),
            items=items,
            raw=schema,
        )

    def _parse_items(self, schema: dict[str, Any]) -> ArrayItems:
        return ArrayItems(
            schema_type=schema.get("type"),
            type_qualifier=schema.get("typeQualifier"),
            ref=schema.get("$ref"),
            item_can_be_null_object=bool(schema.get("itemCanBeNullObject", True)),
        )
