"""
Class generation backend.

Assembles the per-property fragments of an object definition into a
header and an implementation file.
"""

from __future__ import annotations

import logging

from ..analyzer.ir_nodes import BACKEND_PROVIDED_CLASSES, CodeFragments, GeneratedFile, ReferencedClassSet
from ..analyzer.property_rules import INIT_VAR, RAW_VAR, PropertyRules
from ..analyzer.reference_resolver import ReferenceResolver
from ..analyzer.type_resolver import TypeResolver
from ..ast_backends.objc_ast_nodes import (
    CodeBlock,
    ImportGroup,
    ObjCImplementation,
    ObjCInterface,
    ObjCMethod,
    PragmaMark,
)
from ..ast_backends.objc_serializer import ObjCSerializer
from ..config import CodeGeneratorConfig
from ..errors import SchemaError
from ..schema_ast.nodes import ObjectDefinition
from .base import ObjCBackend
from .stub_generator import StubRegistry

logger = logging.getLogger(__name__)

GENERATED_ACCESSORS_CATEGORY = "JsonSchema2ObjcGeneratedAccessors"


class ClassGenerator(ObjCBackend):
    """Generates the files of an object definition."""

    def __init__(
        self,
        config: CodeGeneratorConfig,
        types: TypeResolver,
        references: ReferenceResolver,
        stubs: StubRegistry,
        serializer: ObjCSerializer | None = None,
    ):
        super().__init__(config, serializer)
        self.types = types
        self.references = references
        self.stubs = stubs
        self.rules = PropertyRules(config, types, references)

    def generate(self, definition: ObjectDefinition) -> list[GeneratedFile]:
        """Generate the header and implementation of a class."""
        class_name = definition.output_type
        logger.info("Generating files for class %s", class_name)

        parent = self.references.parent_of(definition)
        if parent is not None and not isinstance(parent, ObjectDefinition):
            raise SchemaError(f"{definition.id} extends {parent.id}, which is not an object definition")
        superclass = parent.output_type if parent is not None else self.types.base_class

        fragments = []
        for prop in definition.sorted_properties():
            logger.debug(" --> Mapping %s to %s", prop.name, prop.accessor_name)
            property_fragments = self.rules.apply(definition, prop)
            if property_fragments is not None:
                fragments.append(property_fragments)

        resolvers = ReferencedClassSet(excluded=BACKEND_PROVIDED_CLASSES)
        converters = ReferencedClassSet(excluded=BACKEND_PROVIDED_CLASSES)
        for f in fragments:
            resolvers.update(f.type_resolvers)
            converters.update(f.type_converters)
        for name in resolvers:
            self.stubs.register_type_resolver(name)
        for name in converters:
            self.stubs.register_type_converter(name)

        interface = self._build_interface(definition, class_name, superclass, parent is not None, fragments)
        implementation = self._build_implementation(
            definition, class_name, parent is not None, fragments, resolvers, converters
        )

        return [
            GeneratedFile(self.header_filename(class_name), self.serializer.serialize_interface(interface)),
            GeneratedFile(
                self.implementation_filename(class_name),
                self.serializer.serialize_implementation(implementation),
            ),
        ]

    def _build_interface(
        self,
        definition: ObjectDefinition,
        class_name: str,
        superclass: str,
        has_parent: bool,
        fragments: list[CodeFragments],
    ) -> ObjCInterface:
        managed = self.config.is_managed

        imports = ReferencedClassSet()
        if has_parent:
            imports.add(superclass)
        forward_classes = ReferencedClassSet()
        for f in fragments:
            imports.update(f.header_imports)
            forward_classes.update(f.forward_classes)

        interface = ObjCInterface(
            banner=self.banner(self.header_filename(class_name)),
            framework_import="CoreData/CoreData.h" if managed else "Foundation/Foundation.h",
            imports=list(imports),
            forward_classes=list(forward_classes),
            name=class_name,
            superclass=superclass,
            properties=[f.property_declaration for f in fragments],
        )

        if managed:
            interface.class_methods = [
                "+ (NSEntityDescription *) entityForClassInManagedObjectContext:(NSManagedObjectContext *)moc;"
            ]
            interface.instance_methods.append(
                "- (id) initWithDictionary:(NSDictionary *)dict inManagedObjectContext:(NSManagedObjectContext *)moc;"
            )
            accessor_groups = [f.relationship_accessors for f in fragments if f.relationship_accessors]
            if accessor_groups:
                interface.category_name = GENERATED_ACCESSORS_CATEGORY
                for i, group in enumerate(accessor_groups):
                    if i:
                        interface.category_methods.append("")
                    interface.category_methods.extend(group)
        else:
            interface.ivars = [f.ivar for f in fragments]
            if not has_parent:
                interface.protocols = ["NSCoding", "NSCopying"]
            interface.instance_methods.append("- (id) initWithDictionary:(NSDictionary *)dict;")

        interface.instance_methods.extend(
            [
                "- (NSDictionary *) dictionaryRepresentation;",
                "- (NSString *) JSONRepresentation;",
            ]
        )
        return interface

    def _build_implementation(
        self,
        definition: ObjectDefinition,
        class_name: str,
        has_parent: bool,
        fragments: list[CodeFragments],
        resolvers: ReferencedClassSet,
        converters: ReferencedClassSet,
    ) -> ObjCImplementation:
        managed = self.config.is_managed

        referenced = ReferencedClassSet()
        for f in fragments:
            referenced.update(f.forward_classes)
            referenced.update(f.referenced_classes)

        import_groups = [
            ImportGroup(comment, list(names))
            for comment, names in (
                ("Referenced classes", referenced),
                ("Referenced type resolvers", resolvers),
                ("Referenced type converters", converters),
            )
            if names
        ]

        implementation = ObjCImplementation(
            banner=self.banner(self.implementation_filename(class_name)),
            own_header=class_name,
            import_groups=import_groups,
            name=class_name,
            directives=[f.implementation_directive for f in fragments],
        )

        members = implementation.members
        if not managed:
            dealloc = [line for f in fragments for line in f.dealloc]
            dealloc.append("[super dealloc];")
            members.append(ObjCMethod("- (void) dealloc", dealloc))

        members.append(PragmaMark("Parsing / exporting"))
        if managed:
            members.append(
                ObjCMethod(
                    "+ (NSEntityDescription *) entityForClassInManagedObjectContext:(NSManagedObjectContext *)moc",
                    [
                        "return [[[[moc persistentStoreCoordinator] managedObjectModel] entitiesByName] "
                        f'objectForKey:@"{definition.id}"];'
                    ],
                )
            )
        members.append(self._build_initializer(has_parent, fragments))
        members.append(self._build_exporter(has_parent, fragments))
        members.append(
            ObjCMethod(
                "- (NSString *) JSONRepresentation",
                ["return [[self dictionaryRepresentation] JSONRepresentation];"],
            )
        )

        # NSCoding and NSCopying are not useful for NSManagedObjects
        if not managed:
            members.append(PragmaMark("NSCoding"))
            members.extend(self._build_coding(has_parent, fragments))
            members.append(PragmaMark("NSCopying"))
            members.append(self._build_copying(class_name, has_parent, fragments))

        return implementation

    def _build_initializer(self, has_parent: bool, fragments: list[CodeFragments]) -> ObjCMethod:
        if self.config.is_managed:
            signature = "- (id) initWithDictionary:(NSDictionary *)dict inManagedObjectContext:(NSManagedObjectContext *)moc"
            if has_parent:
                condition = "if ((self = [super initWithDictionary:dict inManagedObjectContext:moc]))"
            else:
                condition = (
                    "if ((self = [super initWithEntity:[[self class] entityForClassInManagedObjectContext:moc] "
                    "insertIntoManagedObjectContext:moc]))"
                )
        else:
            signature = "- (id) initWithDictionary:(NSDictionary *)dict"
            condition = "if ((self = [super initWithDictionary:dict]))" if has_parent else "if ((self = [super init]))"

        body = CodeBlock()
        with body.block(condition):
            if any(f.uses_raw_variable for f in fragments):
                body.line(f"id {RAW_VAR};")
            if any(f.uses_init_variable for f in fragments):
                body.line(f"id {INIT_VAR};")
            for f in fragments:
                for line in f.parser:
                    body.line(line)
        body.line("return self;")
        return ObjCMethod(signature, body.lines)

    def _build_exporter(self, has_parent: bool, fragments: list[CodeFragments]) -> ObjCMethod:
        body = CodeBlock()
        if has_parent:
            body.line("NSMutableDictionary *bufferDict = [[super dictionaryRepresentation] mutableCopy];")
        else:
            body.line("NSMutableDictionary *bufferDict = [[NSMutableDictionary alloc] init];")
        body.line()
        for f in fragments:
            for line in f.exporter:
                body.line(line)
        body.line()
        body.line("NSDictionary *outputDict = [NSDictionary dictionaryWithDictionary:bufferDict];")
        body.line("[bufferDict release];")
        body.line("return outputDict;")
        return ObjCMethod("- (NSDictionary *) dictionaryRepresentation", body.lines)

    def _build_coding(self, has_parent: bool, fragments: list[CodeFragments]) -> list[ObjCMethod]:
        decoder = CodeBlock()
        condition = "if ((self = [super initWithCoder:decoder]))" if has_parent else "if ((self = [super init]))"
        with decoder.block(condition):
            for f in fragments:
                for line in f.decoder:
                    decoder.line(line)
        decoder.line("return self;")

        encoder = CodeBlock()
        if has_parent:
            encoder.line("[super encodeWithCoder:encoder];")
        for f in fragments:
            for line in f.encoder:
                encoder.line(line)

        return [
            ObjCMethod("- (id) initWithCoder:(NSCoder *)decoder", decoder.lines),
            ObjCMethod("- (void) encodeWithCoder:(NSCoder *)encoder", encoder.lines),
        ]

    def _build_copying(self, class_name: str, has_parent: bool, fragments: list[CodeFragments]) -> ObjCMethod:
        body = CodeBlock()
        if has_parent:
            body.line(f"{class_name} *copy = [super copyWithZone:zone];")
        else:
            body.line(f"{class_name} *copy = [[[self class] allocWithZone:zone] init];")
        body.line()
        for f in fragments:
            for line in f.copier:
                body.line(line)
        body.line()
        body.line("return copy;")
        return ObjCMethod("- (id) copyWithZone:(NSZone *)zone", body.lines)
