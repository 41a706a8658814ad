"""
Tests for schema type resolution per backend.
"""

from __future__ import annotations

import pytest

from json_schema_to_objc.pipeline.analyzer import SUPPORTED_TYPES, Ownership, TypeResolver
from json_schema_to_objc.pipeline.config import Backend
from json_schema_to_objc.pipeline.errors import UnsupportedType


@pytest.mark.parametrize("backend", list(Backend))
@pytest.mark.parametrize("schema_type", sorted(SUPPORTED_TYPES))
def test_every_supported_type_resolves(backend, schema_type):
    resolution = TypeResolver(backend).resolve(schema_type)

    assert resolution.type_name
    if backend == Backend.MANAGED_PERSISTENCE:
        assert resolution.ownership == Ownership.DYNAMIC


@pytest.mark.parametrize(
    "schema_type,type_name,ownership",
    [
        ("array", "NSArray *", Ownership.OWNED),
        ("string", "NSString *", Ownership.OWNED),
        ("integer", "NSInteger ", Ownership.VALUE),
        ("unsigned-integer", "NSUInteger ", Ownership.VALUE),
        ("boolean", "BOOL ", Ownership.VALUE),
        ("date-time", "NSDate *", Ownership.OWNED),
        ("object", "NSObject *", Ownership.OWNED),
    ],
)
def test_plain_mapping(schema_type, type_name, ownership):
    resolution = TypeResolver(Backend.PLAIN).resolve(schema_type)

    assert resolution.type_name == type_name
    assert resolution.ownership == ownership


@pytest.mark.parametrize(
    "schema_type,type_name",
    [
        ("array", "NSSet *"),
        ("boolean", "NSNumber *"),
        ("integer", "NSNumber *"),
        ("object", "NSManagedObject *"),
    ],
)
def test_managed_mapping(schema_type, type_name):
    assert TypeResolver(Backend.MANAGED_PERSISTENCE).resolve(schema_type).type_name == type_name


@pytest.mark.parametrize("backend", list(Backend))
def test_unknown_type_raises(backend):
    with pytest.raises(UnsupportedType) as excinfo:
        TypeResolver(backend).resolve("tuple", "Person.pair")

    assert "Person.pair" in str(excinfo.value)


def test_base_classes():
    assert TypeResolver(Backend.PLAIN).base_class == "NSObject"
    assert TypeResolver(Backend.MANAGED_PERSISTENCE).base_class == "NSManagedObject"


def test_resolve_object():
    assert TypeResolver(Backend.PLAIN).resolve_object("Person").type_name == "Person *"
    assert TypeResolver(Backend.MANAGED_PERSISTENCE).resolve_object("Person").ownership == Ownership.DYNAMIC


def test_scalar_override_keeps_value_storage():
    plain = TypeResolver(Backend.PLAIN).resolve_scalar_override("Color", "integer")
    managed = TypeResolver(Backend.MANAGED_PERSISTENCE).resolve_scalar_override("Color", "integer")

    assert plain.type_name == "Color "
    assert plain.is_value
    assert managed.type_name == "NSNumber *"


def test_storage_attribute():
    assert TypeResolver.storage_attribute(Ownership.VALUE) == "assign"
    assert TypeResolver.storage_attribute(Ownership.OWNED) == "retain"
    assert TypeResolver.storage_attribute(Ownership.DYNAMIC) == "retain"
