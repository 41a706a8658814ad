"""
Type resolver mapping schema types to Objective-C types.

Each backend has its own table; the managed-persistence backend stores
everything as objects because Core Data attributes cannot hold raw
scalars in this model.
"""

from __future__ import annotations

from ..config import Backend
from ..errors import UnsupportedType
from .ir_nodes import Ownership, TypeResolution

PLAIN_TYPE_MAP: dict[str, TypeResolution] = {
    "array": TypeResolution("NSArray *", Ownership.OWNED),
    "string": TypeResolution("NSString *", Ownership.OWNED),
    "number": TypeResolution("NSNumber *", Ownership.OWNED),
    "integer": TypeResolution("NSInteger ", Ownership.VALUE),
    "unsigned-integer": TypeResolution("NSUInteger ", Ownership.VALUE),
    "boolean": TypeResolution("BOOL ", Ownership.VALUE),
    "date": TypeResolution("NSDate *", Ownership.OWNED),
    "date-time": TypeResolution("NSDate *", Ownership.OWNED),
    "map": TypeResolution("NSDictionary *", Ownership.OWNED),
}

MANAGED_TYPE_MAP: dict[str, TypeResolution] = {
    "array": TypeResolution("NSSet *", Ownership.DYNAMIC),
    "string": TypeResolution("NSString *", Ownership.DYNAMIC),
    "number": TypeResolution("NSNumber *", Ownership.DYNAMIC),
    "integer": TypeResolution("NSNumber *", Ownership.DYNAMIC),
    "unsigned-integer": TypeResolution("NSNumber *", Ownership.DYNAMIC),
    "boolean": TypeResolution("NSNumber *", Ownership.DYNAMIC),
    "date": TypeResolution("NSDate *", Ownership.DYNAMIC),
    "date-time": TypeResolution("NSDate *", Ownership.DYNAMIC),
    "map": TypeResolution("NSDictionary *", Ownership.DYNAMIC),
}

SUPPORTED_TYPES = frozenset(PLAIN_TYPE_MAP) | {"object"}


class TypeResolver:
    """Resolves schema types for one backend."""

    BASE_CLASSES = {
        Backend.PLAIN: "NSObject",
        Backend.MANAGED_PERSISTENCE: "NSManagedObject",
    }

    def __init__(self, backend: Backend):
        self.backend = backend
        self.type_map = MANAGED_TYPE_MAP if backend == Backend.MANAGED_PERSISTENCE else PLAIN_TYPE_MAP

    @property
    def base_class(self) -> str:
        """Root class of generated classes."""
        return self.BASE_CLASSES[self.backend]

    @property
    def object_ownership(self) -> Ownership:
        if self.backend == Backend.MANAGED_PERSISTENCE:
            return Ownership.DYNAMIC
        return Ownership.OWNED

    def resolve(self, schema_type: str | None, context: str = "") -> TypeResolution:
        """
        Resolve a schema type to its Objective-C type and ownership.

        Object types need a class name: use resolve_object() for them.

        Raises:
            UnsupportedType: If the schema type is unknown
        """
        if schema_type == "object":
            return self.resolve_object(self.base_class)
        resolution = self.type_map.get(schema_type)
        if resolution is None:
            raise UnsupportedType(schema_type, context)
        return resolution

    def resolve_object(self, class_name: str) -> TypeResolution:
        return TypeResolution(f"{class_name} *", self.object_ownership)

    def resolve_scalar_override(self, mapped_type: str, schema_type: str) -> TypeResolution:
        """Integer properties with a mappedType (an enum) keep value storage."""
        base = self.resolve(schema_type)
        if base.is_value:
            return TypeResolution(f"{mapped_type} ", Ownership.VALUE)
        return base

    @staticmethod
    def storage_attribute(ownership: Ownership) -> str:
        """Objective-C @property storage attribute for an ownership class."""
        return "assign" if ownership == Ownership.VALUE else "retain"
