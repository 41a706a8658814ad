"""
Auxiliary stub generation backend.

Type resolvers and type converters named in the schema are classes the
developer completes by hand. Each one gets a skeleton header and
implementation, generated once per run.
"""

from __future__ import annotations

import logging

from ..analyzer.ir_nodes import BACKEND_PROVIDED_CLASSES, GeneratedFile, ReferencedClassSet
from ..ast_backends.objc_ast_nodes import ObjCHelperStub
from .base import ObjCBackend

logger = logging.getLogger(__name__)

TYPE_RESOLVER = "type_resolver"
TYPE_CONVERTER = "type_converter"


class StubRegistry:
    """Run-scoped, deduplicating registry of helper classes to stub."""

    def __init__(self):
        self.type_resolvers = ReferencedClassSet(excluded=BACKEND_PROVIDED_CLASSES)
        self.type_converters = ReferencedClassSet(excluded=BACKEND_PROVIDED_CLASSES)

    def register_type_resolver(self, name: str) -> None:
        self.type_resolvers.add(name)

    def register_type_converter(self, name: str) -> None:
        self.type_converters.add(name)

    def __len__(self) -> int:
        return len(self.type_resolvers) + len(self.type_converters)


class AuxiliaryStubGenerator(ObjCBackend):
    """Generates skeleton files for the registered helper classes."""

    def generate(self, registry: StubRegistry) -> list[GeneratedFile]:
        files: list[GeneratedFile] = []
        for name in registry.type_resolvers:
            files.extend(self._generate_stub(name, TYPE_RESOLVER))
        for name in registry.type_converters:
            if name in registry.type_resolvers:
                logger.warning("%s is used both as type resolver and type converter, keeping the resolver stub", name)
                continue
            files.extend(self._generate_stub(name, TYPE_CONVERTER))
        return files

    def _generate_stub(self, name: str, kind: str) -> list[GeneratedFile]:
        logger.info("Generating %s class %s", kind.replace("_", " "), name)
        header = ObjCHelperStub(banner=self.banner(self.header_filename(name)), name=name, kind=kind)
        implementation = ObjCHelperStub(banner=self.banner(self.implementation_filename(name)), name=name, kind=kind)
        return [
            GeneratedFile(header.banner.filename, self.serializer.serialize_stub_header(header)),
            GeneratedFile(implementation.banner.filename, self.serializer.serialize_stub_implementation(implementation)),
        ]
