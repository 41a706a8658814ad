"""
Objective-C AST module.

Contains the AST node definitions and the template-based serializer.
"""

from __future__ import annotations

from .objc_ast_nodes import (
    CodeBlock,
    FileBanner,
    ImportGroup,
    ObjCEnum,
    ObjCEnumMember,
    ObjCHelperStub,
    ObjCImplementation,
    ObjCInterface,
    ObjCMethod,
    PragmaMark,
)
from .objc_serializer import ObjCSerializer

__all__ = [
    "CodeBlock",
    "FileBanner",
    "ImportGroup",
    "ObjCEnum",
    "ObjCEnumMember",
    "ObjCHelperStub",
    "ObjCImplementation",
    "ObjCInterface",
    "ObjCMethod",
    "PragmaMark",
    "ObjCSerializer",
]
