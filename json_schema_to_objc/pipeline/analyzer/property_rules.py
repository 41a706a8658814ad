"""
Per-property code generation rules.

Each schema type has a rule producing the parse and export statements of
one property; the common parts (declarations, NSCoding, NSCopying,
dealloc) are derived from the resolved type and its ownership class.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from ...utils import capitalize_first, objc_string_literal
from ..ast_backends.objc_ast_nodes import CodeBlock
from ..config import CodeGeneratorConfig
from ..errors import MalformedArrayProperty, UnresolvedPropertyType, UnsupportedType
from ..schema_ast.nodes import EnumDefinition, ObjectDefinition, PropertyDefinition
from .ir_nodes import BACKEND_PROVIDED_CLASSES, CodeFragments, Ownership, TypeResolution
from .reference_resolver import ReferenceResolver
from .type_resolver import TypeResolver

logger = logging.getLogger(__name__)

DATE_FORMATTER_CLASS = "BkDateFormatter"

# (schema type, type qualifier) -> BkDateFormatter factory selector
DATE_FORMATTERS: dict[tuple[str, str | None], str] = {
    ("date", None): "ISO8601SimpleDateFormatter",
    ("date-time", None): "ISO8601DateFormatter",
    ("date-time", "implicit-timezone"): "ISO8601DateFormatterWithImplicitTimeZone",
    ("date-time", "without-fractional-seconds"): "ISO8601DateFormatterWithoutFractionalSeconds",
    ("time", None): "ISO8601DateFormatterWithoutFractionalSeconds",
}

# Array items: date-time elements default to no fractional seconds
ITEM_DATE_FORMATTERS: dict[tuple[str, str | None], str] = {
    ("date", None): "ISO8601SimpleDateFormatter",
    ("date-time", None): "ISO8601DateFormatterWithoutFractionalSeconds",
    ("date-time", "implicit-timezone"): "ISO8601DateFormatterWithImplicitTimeZone",
    ("time", None): "ISO8601DateFormatterWithoutFractionalSeconds",
}

DATE_TYPES = frozenset({"date", "date-time", "time"})

# Object type held in a collection for each primitive item type
ITEM_OBJECT_TYPES: dict[str, str] = {
    "string": "NSString *",
    "number": "NSNumber *",
    "integer": "NSNumber *",
    "unsigned-integer": "NSNumber *",
    "boolean": "NSNumber *",
    "date": "NSDate *",
    "date-time": "NSDate *",
    "time": "NSDate *",
    "map": "NSDictionary *",
}

RAW_VAR = "tempRawPropertyVar"
INIT_VAR = "tempInitPropertyVar"


def date_formatter_for(schema_type: str, type_qualifier: str | None = None, item: bool = False) -> str:
    """Select the date formatter for a date-like schema type (of a property or an array item)."""
    table = ITEM_DATE_FORMATTERS if item else DATE_FORMATTERS
    formatter = table.get((schema_type, type_qualifier))
    if formatter is None:
        formatter = table[(schema_type, None)]
    return formatter


@dataclass
class PropertyContext:
    """State shared by the rules while generating one property."""

    owner: ObjectDefinition
    prop: PropertyDefinition
    lookup: str  # "objectForKey:" or "nonNullObjectForKey:"
    managed: bool
    fragments: CodeFragments
    parser: CodeBlock
    exporter: CodeBlock

    @property
    def key(self) -> str:
        return objc_string_literal(self.prop.name)

    @property
    def accessor(self) -> str:
        return self.prop.accessor_name

    @property
    def raw_value(self) -> str:
        return f"[dict {self.lookup}{self.key}]"

    @property
    def init_arguments(self) -> str:
        """Arguments of the generated initializer."""
        if self.managed:
            return "initWithDictionary:{} inManagedObjectContext:moc"
        return "initWithDictionary:{}"

    def init_call(self, receiver: str, source: str) -> str:
        return f"[{receiver} {self.init_arguments.format(source)}]"

    def assign_retained(self, expr: str) -> None:
        """Assign an autoreleased object to the property."""
        if self.managed:
            self.parser.line(f"self.{self.accessor} = {expr};")
        else:
            self.parser.line(f"{self.accessor} = [{expr} retain];")

    def assign_value(self, expr: str) -> None:
        if self.managed:
            self.parser.line(f"self.{self.accessor} = {expr};")
        else:
            self.parser.line(f"{self.accessor} = {expr};")

    def assign_allocated(self, expr: str) -> None:
        """Assign an object returned by alloc/init (already retained)."""
        if self.managed:
            self.fragments.uses_init_variable = True
            self.parser.line(f"{INIT_VAR} = {expr};")
            self.parser.line(f"self.{self.accessor} = {INIT_VAR};")
            self.parser.line(f"[{INIT_VAR} release];")
        else:
            self.parser.line(f"{self.accessor} = {expr};")

    def export(self, expr: str) -> None:
        """Export a value when the property is set."""
        with self.exporter.block(f"if (self.{self.accessor})"):
            self.exporter.line(f"[bufferDict setObject:{expr} forKey:{self.key}];")


class PropertyRules:
    """Generates CodeFragments for the properties of object definitions."""

    def __init__(self, config: CodeGeneratorConfig, types: TypeResolver, references: ReferenceResolver):
        self.config = config
        self.types = types
        self.references = references
        self._rules: dict[str, Callable[[PropertyContext], TypeResolution]] = {
            "string": self._passthrough_rule,
            "number": self._passthrough_rule,
            "integer": self._integer_rule,
            "unsigned-integer": self._integer_rule,
            "boolean": self._boolean_rule,
            "date": self._date_rule,
            "date-time": self._date_rule,
            "object": self._object_rule,
            "array": self._array_rule,
        }

    def apply(self, owner: ObjectDefinition, prop: PropertyDefinition) -> CodeFragments | None:
        """
        Generate the code fragments of one property.

        Returns:
            CodeFragments, or None when the property is skipped (map type)

        Raises:
            UnsupportedType: For unknown schema types
        """
        context_name = f"{owner.id}.{prop.name}"
        if prop.schema_type == "map":
            logger.warning("Unimplemented map type support. Skipping property %s", context_name)
            return None
        if prop.schema_type not in self._rules:
            raise UnsupportedType(prop.schema_type, context_name)

        ctx = PropertyContext(
            owner=owner,
            prop=prop,
            lookup=self._lookup_method(prop),
            managed=self.config.is_managed,
            fragments=CodeFragments(property_name=prop.name, accessor_name=prop.accessor_name),
            parser=CodeBlock(),
            exporter=CodeBlock(),
        )

        if prop.type_converter:
            logger.debug("Will use type converter %s for %s", prop.type_converter, context_name)
            resolution = self._converter_rule(ctx)
        else:
            resolution = self._rules[prop.schema_type](ctx)

        fragments = ctx.fragments
        fragments.resolution = resolution
        fragments.parser = ctx.parser.lines
        fragments.exporter = ctx.exporter.lines
        self._add_declarations(ctx, resolution)
        if not ctx.managed:
            self._add_coding(ctx, resolution)
        return fragments

    def _lookup_method(self, prop: PropertyDefinition) -> str:
        if self.config.force_non_null_objects or not prop.can_be_null_object:
            return "nonNullObjectForKey:"
        return "objectForKey:"

    # ------------------------------------------------------------------
    # Common parts
    # ------------------------------------------------------------------

    def _add_declarations(self, ctx: PropertyContext, resolution: TypeResolution) -> None:
        fragments = ctx.fragments
        attribute = self.types.storage_attribute(resolution.ownership)
        declaration = f"@property (nonatomic, {attribute}) {resolution.type_name}{ctx.accessor};"
        if fragments.declaration_comment:
            declaration = f"{declaration} {fragments.declaration_comment}"
        fragments.property_declaration = declaration

        if ctx.managed:
            fragments.implementation_directive = f"@dynamic {ctx.accessor};"
        else:
            fragments.ivar = f"{resolution.type_name}{ctx.accessor};"
            fragments.implementation_directive = f"@synthesize {ctx.accessor};"
            if resolution.ownership == Ownership.OWNED:
                fragments.dealloc.append(f"self.{ctx.accessor} = nil;")

    def _add_coding(self, ctx: PropertyContext, resolution: TypeResolution) -> None:
        """NSCoding and NSCopying statements (plain backend)."""
        fragments = ctx.fragments
        name = ctx.accessor
        coder_key = objc_string_literal(name)
        if resolution.is_value and ctx.prop.schema_type == "boolean":
            fragments.decoder.append(f"self.{name} = [decoder decodeBoolForKey:{coder_key}];")
            fragments.encoder.append(f"[encoder encodeBool:{name} forKey:{coder_key}];")
        elif resolution.is_value:
            fragments.decoder.append(f"self.{name} = [decoder decodeIntegerForKey:{coder_key}];")
            fragments.encoder.append(f"[encoder encodeInteger:{name} forKey:{coder_key}];")
        else:
            fragments.decoder.append(f"self.{name} = [decoder decodeObjectForKey:{coder_key}];")
            fragments.encoder.append(f"[encoder encodeObject:{name} forKey:{coder_key}];")

        if resolution.is_value:
            fragments.copier.append(f"copy.{name} = {name};")
        else:
            fragments.copier.append(f"copy.{name} = [[{name} copy] autorelease];")

    def _register_helper(self, names: set[str], class_name: str) -> bool:
        """Track a helper class unless the runtime library provides it."""
        if class_name in BACKEND_PROVIDED_CLASSES:
            return False
        names.add(class_name)
        return True

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def _converter_rule(self, ctx: PropertyContext) -> TypeResolution:
        converter = ctx.prop.type_converter
        self._register_helper(ctx.fragments.type_converters, converter)
        resolution = self._declared_resolution(ctx)

        converted = f"[{converter} convertedObjectFromString:{ctx.raw_value}]"
        if resolution.is_value:
            ctx.assign_value(converted)
        else:
            ctx.assign_retained(converted)
        ctx.export(f"[{converter} stringFromConvertedObject:self.{ctx.accessor}]")
        return resolution

    def _declared_resolution(self, ctx: PropertyContext) -> TypeResolution:
        """Declared type of a property, honoring mappedType overrides."""
        prop = ctx.prop
        context_name = f"{ctx.owner.id}.{prop.name}"
        if prop.schema_type == "object":
            class_name = self._object_class(ctx)
            if class_name != self.types.base_class:
                ctx.fragments.forward_classes.add(class_name)
            return self.types.resolve_object(class_name)
        if prop.mapped_type and prop.schema_type in ("integer", "unsigned-integer"):
            resolution = self.types.resolve_scalar_override(prop.mapped_type, prop.schema_type)
            ctx.fragments.header_imports.add(prop.mapped_type)
            return resolution
        return self.types.resolve(prop.schema_type, context_name)

    def _passthrough_rule(self, ctx: PropertyContext) -> TypeResolution:
        ctx.assign_retained(ctx.raw_value)
        ctx.export(f"self.{ctx.accessor}")
        return self._declared_resolution(ctx)

    def _integer_rule(self, ctx: PropertyContext) -> TypeResolution:
        resolution = self._declared_resolution(ctx)
        unsigned = ctx.prop.schema_type == "unsigned-integer"
        if ctx.managed:
            ctx.assign_value(ctx.raw_value)
            ctx.export(f"self.{ctx.accessor}")
            return resolution

        selector = "unsignedIntegerValue" if unsigned else "integerValue"
        cast = f"({ctx.prop.mapped_type})" if ctx.prop.mapped_type else ""
        ctx.assign_value(f"{cast}[{ctx.raw_value} {selector}]")
        factory = "numberWithUnsignedInteger" if unsigned else "numberWithInteger"
        ctx.export(f"[NSNumber {factory}:self.{ctx.accessor}]")
        return resolution

    def _boolean_rule(self, ctx: PropertyContext) -> TypeResolution:
        if ctx.managed:
            ctx.fragments.uses_raw_variable = True
            with ctx.parser.block(f"if (({RAW_VAR} = {ctx.raw_value}))"):
                ctx.assign_value(f"[NSNumber numberWithBool:[{RAW_VAR} boolValue]]")
            ctx.export(f"[NSNumber numberWithBool:[self.{ctx.accessor} boolValue]]")
        else:
            ctx.assign_value(f"[{ctx.raw_value} boolValue]")
            ctx.export(f"[NSNumber numberWithBool:self.{ctx.accessor}]")
        return self._declared_resolution(ctx)

    def _date_rule(self, ctx: PropertyContext) -> TypeResolution:
        formatter = f"[{DATE_FORMATTER_CLASS} {date_formatter_for(ctx.prop.schema_type, ctx.prop.type_qualifier)}]"
        ctx.fragments.referenced_classes.add(DATE_FORMATTER_CLASS)
        ctx.fragments.uses_raw_variable = True
        with ctx.parser.block(f"if (({RAW_VAR} = {ctx.raw_value}))"):
            ctx.assign_retained(f"[{formatter} dateFromString:{RAW_VAR}]")
        ctx.export(f"[{formatter} stringFromDate:self.{ctx.accessor}]")
        return self._declared_resolution(ctx)

    def _object_class(self, ctx: PropertyContext) -> str:
        """Class instantiated for an object property."""
        prop = ctx.prop
        if prop.mapped_type:
            return prop.mapped_type
        target = self.references.index.get(prop.ref)
        if target is not None:
            return target.output_type
        if prop.type_resolver:
            return self.types.base_class
        raise UnresolvedPropertyType(prop.name, ctx.owner.output_type)

    def _object_rule(self, ctx: PropertyContext) -> TypeResolution:
        prop = ctx.prop
        resolution = self._declared_resolution(ctx)
        class_name = self._object_class(ctx)
        fragments = ctx.fragments
        if class_name != self.types.base_class:
            fragments.referenced_classes.add(class_name)

        if prop.type_resolver:
            logger.debug("Will use type resolver %s for %s.%s", prop.type_resolver, ctx.owner.id, prop.name)
            self._register_helper(fragments.type_resolvers, prop.type_resolver)
            receiver = f"[[{prop.type_resolver} classForPropertyName:{ctx.key} withObject:{RAW_VAR}] alloc]"
        else:
            receiver = f"[{class_name} alloc]"

        fragments.uses_raw_variable = True
        with ctx.parser.block(f"if (({RAW_VAR} = {ctx.raw_value}))"):
            ctx.assign_allocated(ctx.init_call(receiver, RAW_VAR))
        ctx.export(f"[self.{ctx.accessor} dictionaryRepresentation]")
        return resolution

    def _array_rule(self, ctx: PropertyContext) -> TypeResolution:
        prop = ctx.prop
        items = prop.items
        context_name = f"{ctx.owner.id}.{prop.name}"
        if items is None or not (items.ref or items.schema_type):
            raise MalformedArrayProperty(prop.name, ctx.owner.output_type)

        element_class = None  # Generated class of $ref object items
        if items.ref:
            target = self.references.resolve(items.ref, context_name)
            element_type = f"{target.output_type} *"
            ctx.fragments.referenced_classes.add(target.output_type)
            if isinstance(target, EnumDefinition):
                # Enum constants are stored boxed, like primitive items
                element_type = target.output_type
            else:
                element_class = target.output_type
        elif items.schema_type in ITEM_OBJECT_TYPES:
            element_type = ITEM_OBJECT_TYPES[items.schema_type]
        elif items.schema_type == "object":
            raise MalformedArrayProperty(prop.name, ctx.owner.output_type)
        else:
            raise UnsupportedType(items.schema_type, context_name)

        if ctx.managed and element_class is None:
            raise UnsupportedType(
                "array",
                context_name,
                "managed-persistence relationships can only hold object definitions",
            )

        ctx.fragments.declaration_comment = f"// List of ({element_type}) objects"

        list_var = f"json{capitalize_first(ctx.accessor)}List"
        element_var = f"json{capitalize_first(ctx.accessor)}Element"
        buffer_var = f"{ctx.accessor}Buffer"
        buffer_class = "NSMutableSet" if ctx.managed else "NSMutableArray"

        parser = ctx.parser
        parser.line(f"id {list_var} = {ctx.raw_value};")
        with parser.block(f"if ({list_var})"):
            parser.line(f"{buffer_class} *{buffer_var} = [[{buffer_class} alloc] init];")
            with parser.block(f"for (id {element_var} in {list_var})"):
                if items.item_can_be_null_object:
                    self._array_element(ctx, element_var, buffer_var, element_class)
                else:
                    with parser.block(f"if ({element_var} && ![{element_var} isKindOfClass:[NSNull class]])"):
                        self._array_element(ctx, element_var, buffer_var, element_class)
            if ctx.managed:
                parser.line(f"self.{ctx.accessor} = {buffer_var};")
            else:
                parser.line(f"{ctx.accessor} = [[NSArray alloc] initWithArray:{buffer_var}];")
            parser.line(f"[{buffer_var} release];")

        if element_class is not None:
            self._export_list(ctx, "id innerObject", "[innerObject dictionaryRepresentation]")
            if ctx.managed:
                ctx.fragments.forward_classes.add(element_class)
                self._add_relationship_accessors(ctx, element_class)
        elif items.schema_type in DATE_TYPES:
            formatter = date_formatter_for(items.schema_type, items.type_qualifier, item=True)
            self._export_list(
                ctx,
                "NSDate *innerDate",
                f"[[{DATE_FORMATTER_CLASS} {formatter}] stringFromDate:innerDate]",
            )
        else:
            # Primitive items are exported as they are stored
            ctx.export(f"self.{ctx.accessor}")

        return self.types.resolve("array", context_name)

    def _array_element(self, ctx: PropertyContext, element_var: str, buffer_var: str, element_class: str | None) -> None:
        """Statements adding one parsed element to the buffer."""
        parser = ctx.parser
        prop = ctx.prop
        items = prop.items

        if element_class is None:
            if items.schema_type in DATE_TYPES:
                formatter = date_formatter_for(items.schema_type, items.type_qualifier, item=True)
                ctx.fragments.referenced_classes.add(DATE_FORMATTER_CLASS)
                parser.line(f"[{buffer_var} addObject:[[{DATE_FORMATTER_CLASS} {formatter}] dateFromString:{element_var}]];")
            else:
                parser.line(f"[{buffer_var} addObject:{element_var}];")
            return

        item_var = f"{ctx.accessor}Element"
        if prop.type_resolver:
            logger.debug("(array) Will use type resolver %s for items of %s.%s", prop.type_resolver, ctx.owner.id, prop.name)
            self._register_helper(ctx.fragments.type_resolvers, prop.type_resolver)
            receiver = f"[[{prop.type_resolver} classForPropertyName:{ctx.key} withObject:{element_var}] alloc]"
            parser.line(f"{element_class} *{item_var} = {ctx.init_call(receiver, element_var)};")
            # The resolver may decline the element
            with parser.block(f"if ({item_var})"):
                parser.line(f"[{buffer_var} addObject:{item_var}];")
                parser.line(f"[{item_var} release];")
        else:
            parser.line(f"{element_class} *{item_var} = {ctx.init_call(f'[{element_class} alloc]', element_var)};")
            parser.line(f"[{buffer_var} addObject:{item_var}];")
            parser.line(f"[{item_var} release];")

    def _export_list(self, ctx: PropertyContext, loop_variable: str, element_expr: str) -> None:
        exporter = ctx.exporter
        with exporter.block(f"if (self.{ctx.accessor})"):
            exporter.line("NSMutableArray *innerList = [[NSMutableArray alloc] init];")
            with exporter.block(f"for ({loop_variable} in self.{ctx.accessor})"):
                exporter.line(f"[innerList addObject:{element_expr}];")
            exporter.line(f"[bufferDict setObject:innerList forKey:{ctx.key}];")
            exporter.line("[innerList release];")

    def _add_relationship_accessors(self, ctx: PropertyContext, element_class: str) -> None:
        """Core Data generated to-many relationship accessors."""
        name = capitalize_first(ctx.accessor)
        ctx.fragments.relationship_accessors.extend(
            [
                f"- (void) add{name}Object:({element_class} *)value;",
                f"- (void) remove{name}Object:({element_class} *)value;",
                f"- (void) add{name}:(NSSet *)value;",
                f"- (void) remove{name}:(NSSet *)value;",
            ]
        )
