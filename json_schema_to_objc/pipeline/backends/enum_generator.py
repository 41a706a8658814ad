"""
Enum generation backend.

Generates a typedef enum and its ToString function.
"""

from __future__ import annotations

import logging

from ..analyzer.ir_nodes import GeneratedFile
from ..ast_backends.objc_ast_nodes import ObjCEnum, ObjCEnumMember
from ..schema_ast.nodes import EnumDefinition
from .base import ObjCBackend

logger = logging.getLogger(__name__)


class EnumGenerator(ObjCBackend):
    """Generates the files of an enum definition."""

    def generate(self, definition: EnumDefinition) -> list[GeneratedFile]:
        enum_name = definition.output_type
        logger.info("Generating files for enum %s", enum_name)

        header = self.build_enum(definition, self.header_filename(enum_name))
        implementation = self.build_enum(definition, self.implementation_filename(enum_name))
        return [
            GeneratedFile(header.banner.filename, self.serializer.serialize_enum_header(header)),
            GeneratedFile(
                implementation.banner.filename,
                self.serializer.serialize_enum_implementation(implementation),
            ),
        ]

    def build_enum(self, definition: EnumDefinition, filename: str) -> ObjCEnum:
        """Build the enum node; an empty value list yields no declaration."""
        enum_name = definition.output_type
        members = [
            ObjCEnumMember(name=f"{enum_name}{key}", value=self._format_value(value))
            for key, value in definition.values
        ]
        return ObjCEnum(banner=self.banner(filename), name=enum_name, members=members)

    @staticmethod
    def _format_value(value) -> str:
        if isinstance(value, bool):
            return "1" if value else "0"
        return str(value)
