"""
Tests for the per-property code generation rules.
"""

from __future__ import annotations

import logging

import pytest

from json_schema_to_objc.pipeline.analyzer import (
    PropertyRules,
    ReferenceResolver,
    TypeResolver,
    date_formatter_for,
)
from json_schema_to_objc.pipeline.config import Backend, CodeGeneratorConfig
from json_schema_to_objc.pipeline.errors import MalformedArrayProperty, UnresolvedPropertyType, UnsupportedType
from json_schema_to_objc.pipeline.schema_ast import SchemaParser

WHEEL = {"type": "object", "id": "Wheel", "properties": {"size": {"type": "integer"}}}
COLOR = {"type": "enum", "id": "Color", "values": [{"Red": 0}, {"Blue": 1}]}


def apply_rules(prop_schema, backend=Backend.PLAIN, extra=(), name="value", **config):
    schema = [{"type": "object", "id": "Owner", "properties": {name: prop_schema}}, *extra]
    index = SchemaParser().parse(schema)
    rules = PropertyRules(
        CodeGeneratorConfig(backend=backend, **config),
        TypeResolver(backend),
        ReferenceResolver(index),
    )
    owner = index["Owner"]
    return rules.apply(owner, owner.properties[name])


def text(lines):
    return "\n".join(lines)


class TestPassthrough:
    def test_plain_string(self):
        fragments = apply_rules({"type": "string"}, name="name")

        assert fragments.property_declaration == "@property (nonatomic, retain) NSString *name;"
        assert fragments.ivar == "NSString *name;"
        assert fragments.implementation_directive == "@synthesize name;"
        assert fragments.dealloc == ["self.name = nil;"]
        assert fragments.parser == ['name = [[dict objectForKey:@"name"] retain];']
        assert 'if (self.name) {' in fragments.exporter
        assert '\t[bufferDict setObject:self.name forKey:@"name"];' in fragments.exporter

    def test_managed_string(self):
        fragments = apply_rules({"type": "string"}, Backend.MANAGED_PERSISTENCE, name="name")

        assert fragments.implementation_directive == "@dynamic name;"
        assert fragments.ivar is None
        assert fragments.dealloc == []
        assert fragments.decoder == []
        assert fragments.parser == ['self.name = [dict objectForKey:@"name"];']

    def test_mapped_property_is_the_accessor(self):
        fragments = apply_rules({"type": "string", "mappedProperty": "identifier"}, name="id")

        assert fragments.parser == ['identifier = [[dict objectForKey:@"id"] retain];']
        assert '\t[bufferDict setObject:self.identifier forKey:@"id"];' in fragments.exporter

    @pytest.mark.parametrize(
        "prop_schema,config",
        [
            ({"type": "string", "canBeNullObject": False}, {}),
            ({"type": "string"}, {"force_non_null_objects": True}),
        ],
    )
    def test_non_null_lookup(self, prop_schema, config):
        fragments = apply_rules(prop_schema, name="name", **config)

        assert "nonNullObjectForKey:" in text(fragments.parser)

    def test_map_is_skipped_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            fragments = apply_rules({"type": "map"}, name="extra")

        assert fragments is None
        assert "Owner.extra" in caplog.text

    def test_unknown_type_raises(self):
        with pytest.raises(UnsupportedType):
            apply_rules({"type": "tuple"})


class TestScalars:
    def test_plain_integer(self):
        fragments = apply_rules({"type": "integer"}, name="age")

        assert fragments.property_declaration == "@property (nonatomic, assign) NSInteger age;"
        assert fragments.dealloc == []
        assert fragments.parser == ['age = [[dict objectForKey:@"age"] integerValue];']
        assert '\t[bufferDict setObject:[NSNumber numberWithInteger:self.age] forKey:@"age"];' in fragments.exporter
        assert fragments.decoder == ['self.age = [decoder decodeIntegerForKey:@"age"];']
        assert fragments.encoder == ['[encoder encodeInteger:age forKey:@"age"];']
        assert fragments.copier == ["copy.age = age;"]

    def test_plain_unsigned_integer(self):
        fragments = apply_rules({"type": "unsigned-integer"}, name="count")

        assert fragments.property_declaration == "@property (nonatomic, assign) NSUInteger count;"
        assert fragments.parser == ['count = [[dict objectForKey:@"count"] unsignedIntegerValue];']
        assert "numberWithUnsignedInteger:self.count" in text(fragments.exporter)

    def test_integer_mapped_to_enum(self):
        fragments = apply_rules({"type": "integer", "mappedType": "Color"}, extra=[COLOR], name="color")

        assert fragments.property_declaration == "@property (nonatomic, assign) Color color;"
        assert fragments.parser == ['color = (Color)[[dict objectForKey:@"color"] integerValue];']
        assert fragments.header_imports == {"Color"}

    def test_plain_boolean(self):
        fragments = apply_rules({"type": "boolean"}, name="active")

        assert fragments.property_declaration == "@property (nonatomic, assign) BOOL active;"
        assert fragments.parser == ['active = [[dict objectForKey:@"active"] boolValue];']
        assert "[NSNumber numberWithBool:self.active]" in text(fragments.exporter)
        assert fragments.decoder == ['self.active = [decoder decodeBoolForKey:@"active"];']
        assert fragments.encoder == ['[encoder encodeBool:active forKey:@"active"];']

    def test_managed_boolean_is_a_number(self):
        fragments = apply_rules({"type": "boolean"}, Backend.MANAGED_PERSISTENCE, name="active")

        assert fragments.property_declaration == "@property (nonatomic, retain) NSNumber *active;"
        assert fragments.uses_raw_variable
        assert "self.active = [NSNumber numberWithBool:[tempRawPropertyVar boolValue]];" in text(fragments.parser)


class TestDates:
    @pytest.mark.parametrize(
        "schema_type,qualifier,formatter",
        [
            ("date", None, "ISO8601SimpleDateFormatter"),
            ("date", "implicit-timezone", "ISO8601SimpleDateFormatter"),
            ("date-time", None, "ISO8601DateFormatter"),
            ("date-time", "implicit-timezone", "ISO8601DateFormatterWithImplicitTimeZone"),
            ("date-time", "without-fractional-seconds", "ISO8601DateFormatterWithoutFractionalSeconds"),
            ("date-time", "unknown-qualifier", "ISO8601DateFormatter"),
            ("time", None, "ISO8601DateFormatterWithoutFractionalSeconds"),
        ],
    )
    def test_formatter_table(self, schema_type, qualifier, formatter):
        assert date_formatter_for(schema_type, qualifier) == formatter

    @pytest.mark.parametrize(
        "schema_type,qualifier,formatter",
        [
            ("date", None, "ISO8601SimpleDateFormatter"),
            ("date-time", None, "ISO8601DateFormatterWithoutFractionalSeconds"),
            ("date-time", "implicit-timezone", "ISO8601DateFormatterWithImplicitTimeZone"),
            ("date-time", "without-fractional-seconds", "ISO8601DateFormatterWithoutFractionalSeconds"),
            ("time", None, "ISO8601DateFormatterWithoutFractionalSeconds"),
        ],
    )
    def test_item_formatter_table(self, schema_type, qualifier, formatter):
        assert date_formatter_for(schema_type, qualifier, item=True) == formatter

    def test_plain_date_time(self):
        fragments = apply_rules({"type": "date-time"}, name="created")

        assert fragments.property_declaration == "@property (nonatomic, retain) NSDate *created;"
        assert fragments.referenced_classes == {"BkDateFormatter"}
        assert fragments.parser == [
            'if ((tempRawPropertyVar = [dict objectForKey:@"created"])) {',
            "\tcreated = [[[BkDateFormatter ISO8601DateFormatter] dateFromString:tempRawPropertyVar] retain];",
            "}",
        ]
        assert "[[BkDateFormatter ISO8601DateFormatter] stringFromDate:self.created]" in text(fragments.exporter)


class TestObjects:
    def test_ref_object(self):
        fragments = apply_rules({"$ref": "Wheel"}, extra=[WHEEL], name="spare")

        assert fragments.property_declaration == "@property (nonatomic, retain) Wheel *spare;"
        assert fragments.forward_classes == {"Wheel"}
        assert fragments.referenced_classes == {"Wheel"}
        assert "\tspare = [[Wheel alloc] initWithDictionary:tempRawPropertyVar];" in fragments.parser
        assert "[self.spare dictionaryRepresentation]" in text(fragments.exporter)

    def test_managed_object_releases_init_variable(self):
        fragments = apply_rules({"$ref": "Wheel"}, Backend.MANAGED_PERSISTENCE, extra=[WHEEL], name="spare")

        assert fragments.uses_init_variable
        assert fragments.parser == [
            'if ((tempRawPropertyVar = [dict objectForKey:@"spare"])) {',
            "\ttempInitPropertyVar = [[Wheel alloc] initWithDictionary:tempRawPropertyVar inManagedObjectContext:moc];",
            "\tself.spare = tempInitPropertyVar;",
            "\t[tempInitPropertyVar release];",
            "}",
        ]

    def test_type_resolver_without_ref(self):
        fragments = apply_rules({"type": "object", "typeResolver": "ShapeResolver"}, name="shape")

        assert fragments.property_declaration == "@property (nonatomic, retain) NSObject *shape;"
        assert fragments.type_resolvers == {"ShapeResolver"}
        assert fragments.forward_classes == set()
        assert (
            '\tshape = [[[ShapeResolver classForPropertyName:@"shape" withObject:tempRawPropertyVar] alloc] '
            "initWithDictionary:tempRawPropertyVar];" in fragments.parser
        )

    def test_unresolvable_object_raises(self):
        with pytest.raises(UnresolvedPropertyType):
            apply_rules({"type": "object"}, name="thing")

    def test_mapped_type_wins_over_unknown_ref(self):
        fragments = apply_rules({"type": "object", "$ref": "Missing", "mappedType": "Bee"}, name="bee")

        assert fragments.property_declaration == "@property (nonatomic, retain) Bee *bee;"
        assert fragments.forward_classes == {"Bee"}
        assert "\tbee = [[Bee alloc] initWithDictionary:tempRawPropertyVar];" in fragments.parser

    def test_unknown_ref_raises_unresolved_property_type(self):
        with pytest.raises(UnresolvedPropertyType):
            apply_rules({"type": "object", "$ref": "Missing"}, name="bee")

    def test_type_resolver_with_unknown_ref(self):
        fragments = apply_rules({"$ref": "Missing", "typeResolver": "BeeResolver"}, name="bee")

        assert fragments.property_declaration == "@property (nonatomic, retain) NSObject *bee;"
        assert fragments.type_resolvers == {"BeeResolver"}


class TestConverters:
    def test_type_converter_replaces_the_type_rule(self):
        fragments = apply_rules({"type": "string", "typeConverter": "DurationConverter"}, name="duration")

        assert fragments.type_converters == {"DurationConverter"}
        assert fragments.parser == [
            'duration = [[DurationConverter convertedObjectFromString:[dict objectForKey:@"duration"]] retain];'
        ]
        assert "[DurationConverter stringFromConvertedObject:self.duration]" in text(fragments.exporter)

    def test_backend_provided_converter_is_not_registered(self):
        fragments = apply_rules({"type": "string", "typeConverter": "BkISO8601DurationConverter"}, name="duration")

        assert fragments.type_converters == set()
        assert "BkISO8601DurationConverter convertedObjectFromString:" in text(fragments.parser)


class TestArrays:
    def test_plain_ref_array(self):
        fragments = apply_rules({"type": "array", "items": {"$ref": "Wheel"}}, extra=[WHEEL], name="wheels")

        assert fragments.property_declaration == "@property (nonatomic, retain) NSArray *wheels; // List of (Wheel *) objects"
        assert fragments.referenced_classes == {"Wheel"}
        assert fragments.relationship_accessors == []
        parser = text(fragments.parser)
        assert 'id jsonWheelsList = [dict objectForKey:@"wheels"];' in parser
        assert "Wheel *wheelsElement = [[Wheel alloc] initWithDictionary:jsonWheelsElement];" in parser
        assert "wheels = [[NSArray alloc] initWithArray:wheelsBuffer];" in parser
        assert "isKindOfClass:[NSNull class]" not in parser
        assert "[innerList addObject:[innerObject dictionaryRepresentation]];" in text(fragments.exporter)

    def test_null_filter(self):
        fragments = apply_rules(
            {"type": "array", "items": {"$ref": "Wheel", "itemCanBeNullObject": False}},
            extra=[WHEEL],
            name="wheels",
        )

        assert "if (jsonWheelsElement && ![jsonWheelsElement isKindOfClass:[NSNull class]]) {" in text(fragments.parser)

    def test_primitive_array(self):
        fragments = apply_rules({"type": "array", "items": {"type": "string"}}, name="tags")

        assert fragments.property_declaration.endswith("// List of (NSString *) objects")
        assert "[tagsBuffer addObject:jsonTagsElement];" in text(fragments.parser)
        assert '[bufferDict setObject:self.tags forKey:@"tags"];' in text(fragments.exporter)

    def test_date_array(self):
        fragments = apply_rules({"type": "array", "items": {"type": "date"}}, name="days")

        assert "[daysBuffer addObject:[[BkDateFormatter ISO8601SimpleDateFormatter] dateFromString:jsonDaysElement]];" in text(
            fragments.parser
        )
        assert "for (NSDate *innerDate in self.days) {" in text(fragments.exporter)
        assert fragments.referenced_classes == {"BkDateFormatter"}

    def test_date_time_array_items_skip_fractional_seconds(self):
        fragments = apply_rules({"type": "array", "items": {"type": "date-time"}}, name="stamps")

        formatter = "[BkDateFormatter ISO8601DateFormatterWithoutFractionalSeconds]"
        assert f"[stampsBuffer addObject:[{formatter} dateFromString:jsonStampsElement]];" in text(fragments.parser)
        assert f"[innerList addObject:[{formatter} stringFromDate:innerDate]];" in text(fragments.exporter)
        assert "ISO8601DateFormatter]" not in text(fragments.parser)

    def test_implicit_timezone_array_items(self):
        fragments = apply_rules(
            {"type": "array", "items": {"type": "date-time", "typeQualifier": "implicit-timezone"}}, name="stamps"
        )

        assert "[BkDateFormatter ISO8601DateFormatterWithImplicitTimeZone] dateFromString:jsonStampsElement]" in text(
            fragments.parser
        )

    def test_enum_ref_array_uses_enum_type(self):
        fragments = apply_rules({"type": "array", "items": {"$ref": "Color"}}, extra=[COLOR], name="colors")

        assert fragments.property_declaration.endswith("// List of (Color) objects")
        assert "[colorsBuffer addObject:jsonColorsElement];" in text(fragments.parser)
        assert "initWithDictionary" not in text(fragments.parser)

    def test_managed_ref_array(self):
        fragments = apply_rules(
            {"type": "array", "items": {"$ref": "Wheel"}},
            Backend.MANAGED_PERSISTENCE,
            extra=[WHEEL],
            name="wheels",
        )

        assert fragments.property_declaration == "@property (nonatomic, retain) NSSet *wheels; // List of (Wheel *) objects"
        assert fragments.forward_classes == {"Wheel"}
        assert "self.wheels = wheelsBuffer;" in text(fragments.parser)
        assert "NSMutableSet *wheelsBuffer = [[NSMutableSet alloc] init];" in text(fragments.parser)
        assert fragments.relationship_accessors == [
            "- (void) addWheelsObject:(Wheel *)value;",
            "- (void) removeWheelsObject:(Wheel *)value;",
            "- (void) addWheels:(NSSet *)value;",
            "- (void) removeWheels:(NSSet *)value;",
        ]

    @pytest.mark.parametrize(
        "items,extra",
        [({"type": "string"}, []), ({"$ref": "Color"}, [COLOR])],
    )
    def test_managed_non_entity_array_raises(self, items, extra):
        with pytest.raises(UnsupportedType):
            apply_rules({"type": "array", "items": items}, Backend.MANAGED_PERSISTENCE, extra=extra)

    @pytest.mark.parametrize("prop_schema", [{"type": "array"}, {"type": "array", "items": {}}])
    def test_malformed_array_raises(self, prop_schema):
        with pytest.raises(MalformedArrayProperty):
            apply_rules(prop_schema, name="things")

    def test_type_resolver_items(self):
        fragments = apply_rules(
            {"type": "array", "typeResolver": "WheelResolver", "items": {"$ref": "Wheel"}},
            extra=[WHEEL],
            name="wheels",
        )

        parser = text(fragments.parser)
        assert fragments.type_resolvers == {"WheelResolver"}
        assert '[[WheelResolver classForPropertyName:@"wheels" withObject:jsonWheelsElement] alloc]' in parser
        assert "if (wheelsElement) {" in parser
