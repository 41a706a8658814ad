"""
Objective-C AST Serializer.

Renders Objective-C AST nodes to source code through Jinja2 templates.
Follows the layout of the original generated files:
- Tab indentation
- Opening braces of methods on their own line
- `#pragma mark` separators between method groups
"""

from __future__ import annotations

from pathlib import Path

import jinja2

from ...utils import objc_string_literal
from .objc_ast_nodes import (
    ObjCEnum,
    ObjCHelperStub,
    ObjCImplementation,
    ObjCInterface,
    PragmaMark,
)


class ObjCSerializer:
    """Serializes Objective-C AST nodes to source code."""

    TEMPLATE_LANG = "objc"
    INDENT = "\t"

    def __init__(self):
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
            undefined=jinja2.StrictUndefined,
        )
        # Add custom filters
        self.jinja_env.filters["indent_statement"] = self._indent_statement
        self.jinja_env.filters["objc_string"] = objc_string_literal
        self.jinja_env.tests["pragma_mark"] = lambda node: isinstance(node, PragmaMark)

        self.interface_template = self.jinja_env.get_template("class.h.jinja2")
        self.implementation_template = self.jinja_env.get_template("class.m.jinja2")
        self.enum_header_template = self.jinja_env.get_template("enum.h.jinja2")
        self.enum_implementation_template = self.jinja_env.get_template("enum.m.jinja2")

    def _indent_statement(self, statement: str) -> str:
        return self.INDENT + statement if statement else statement

    def serialize_interface(self, interface: ObjCInterface) -> str:
        """Serialize a class interface to header source."""
        return self.interface_template.render(interface=interface, banner=interface.banner)

    def serialize_implementation(self, implementation: ObjCImplementation) -> str:
        """Serialize a class implementation to implementation source."""
        return self.implementation_template.render(implementation=implementation, banner=implementation.banner)

    def serialize_enum_header(self, enum: ObjCEnum) -> str:
        return self.enum_header_template.render(enum=enum, banner=enum.banner)

    def serialize_enum_implementation(self, enum: ObjCEnum) -> str:
        return self.enum_implementation_template.render(enum=enum, banner=enum.banner)

    def serialize_stub_header(self, stub: ObjCHelperStub) -> str:
        template = self.jinja_env.get_template(f"{stub.kind}.h.jinja2")
        return template.render(stub=stub, banner=stub.banner)

    def serialize_stub_implementation(self, stub: ObjCHelperStub) -> str:
        template = self.jinja_env.get_template(f"{stub.kind}.m.jinja2")
        return template.render(stub=stub, banner=stub.banner)
