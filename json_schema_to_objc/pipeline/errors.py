"""
Input errors raised while indexing and generating from a schema.

All of them are fatal: the run stops before any further file is written.
"""

from __future__ import annotations


class SchemaError(Exception):
    """Base class for malformed schema input."""

    pass


class UnknownDefinitionKind(SchemaError):
    """A top-level definition has a type other than "object" or "enum"."""

    def __init__(self, index: int, kind):
        self.index = index
        self.kind = kind
        super().__init__(f"Object definition at index {index} has unknown type {kind!r}")


class MissingIdentifier(SchemaError):
    """A top-level definition has no (or an empty) id."""

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Object definition at index {index} is missing a unique id")


class UnresolvedReference(SchemaError):
    """A $ref or extends points outside the schema index."""

    def __init__(self, ref: str, context: str = ""):
        self.ref = ref
        self.context = context
        where = f" in {context}" if context else ""
        super().__init__(f"Unknown referenced type {ref!r}{where}")


class MalformedArrayProperty(SchemaError):
    """An array property declares neither a primitive item type nor a $ref."""

    def __init__(self, property_name: str, class_name: str):
        self.property_name = property_name
        self.class_name = class_name
        super().__init__(
            f'Invalid array declaration for {property_name} in {class_name}. It MUST contain either a "type" or a "$ref".'
        )


class UnresolvedPropertyType(SchemaError):
    """An object property has no class to instantiate."""

    def __init__(self, property_name: str, class_name: str):
        self.property_name = property_name
        self.class_name = class_name
        super().__init__(
            f"Object property {property_name} in {class_name} needs a resolvable $ref, a mappedType or a typeResolver"
        )


class UnsupportedType(SchemaError):
    """A property type the selected backend cannot generate."""

    def __init__(self, schema_type, context: str = "", reason: str = ""):
        self.schema_type = schema_type
        self.context = context
        where = f" in {context}" if context else ""
        detail = f": {reason}" if reason else ""
        super().__init__(f"Unsupported property type {schema_type!r}{where}{detail}")
