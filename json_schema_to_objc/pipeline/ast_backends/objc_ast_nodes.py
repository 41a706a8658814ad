"""
Objective-C AST node definitions.

These nodes represent the structure of generated header and
implementation files. They are built by the generators and serialized
to source code by ObjCSerializer.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field


class CodeBlock:
    """Builder for brace-balanced statement lists.

    Blocks opened with block() are always closed, so emitted code keeps
    balanced braces and consistent tab indentation.
    """

    INDENT = "\t"

    def __init__(self):
        self.lines: list[str] = []
        self._depth = 0

    def line(self, text: str = "") -> CodeBlock:
        self.lines.append(self.INDENT * self._depth + text if text else "")
        return self

    @contextmanager
    def block(self, header: str) -> Iterator[CodeBlock]:
        """Emit `header {`, indent the body, then close the brace."""
        self.line(f"{header} {{")
        self._depth += 1
        try:
            yield self
        finally:
            self._depth -= 1
            self.line("}")

    def __bool__(self) -> bool:
        return bool(self.lines)


@dataclass
class ObjCNode:
    """Base class for all Objective-C AST nodes."""

    pass


@dataclass
class FileBanner(ObjCNode):
    """Comment block at the top of every generated file."""

    filename: str = ""
    tool_name: str = "json_schema_to_objc"
    notice: str = ""
    enabled: bool = True


@dataclass
class ImportGroup(ObjCNode):
    """A run of #import "<Name>.h" lines under an optional comment."""

    comment: str | None = None
    names: list[str] = field(default_factory=list)


@dataclass
class ObjCMethod(ObjCNode):
    """A method definition (signature + body statements)."""

    signature: str = ""  # e.g. "- (NSDictionary *) dictionaryRepresentation"
    body: list[str] = field(default_factory=list)


@dataclass
class PragmaMark(ObjCNode):
    """A `#pragma mark` section separator."""

    title: str = ""


@dataclass
class ObjCInterface(ObjCNode):
    """A class interface (header file)."""

    banner: FileBanner = field(default_factory=FileBanner)
    framework_import: str = "Foundation/Foundation.h"
    imports: list[str] = field(default_factory=list)
    forward_classes: list[str] = field(default_factory=list)
    name: str = ""
    superclass: str = "NSObject"
    protocols: list[str] = field(default_factory=list)
    ivars: list[str] = field(default_factory=list)
    properties: list[str] = field(default_factory=list)
    class_methods: list[str] = field(default_factory=list)
    instance_methods: list[str] = field(default_factory=list)

    # Optional category declared after the interface
    category_name: str | None = None
    category_methods: list[str] = field(default_factory=list)


@dataclass
class ObjCImplementation(ObjCNode):
    """A class implementation (implementation file)."""

    banner: FileBanner = field(default_factory=FileBanner)
    own_header: str = ""
    import_groups: list[ImportGroup] = field(default_factory=list)
    name: str = ""
    directives: list[str] = field(default_factory=list)  # @synthesize / @dynamic
    members: list[ObjCMethod | PragmaMark] = field(default_factory=list)


@dataclass
class ObjCEnumMember(ObjCNode):
    """An enum constant."""

    name: str = ""
    value: str = ""

    @property
    def description(self) -> str:
        """Descriptive string returned by the ToString function."""
        return f"{self.value}:{self.name}"


@dataclass
class ObjCEnum(ObjCNode):
    """A typedef enum with its ToString function."""

    banner: FileBanner = field(default_factory=FileBanner)
    name: str = ""
    members: list[ObjCEnumMember] = field(default_factory=list)

    @property
    def to_string_function(self) -> str:
        return f"{self.name}ToString"


@dataclass
class ObjCHelperStub(ObjCNode):
    """Skeleton class for a developer-completed helper."""

    banner: FileBanner = field(default_factory=FileBanner)
    name: str = ""
    kind: str = "type_resolver"  # "type_resolver" or "type_converter"
