"""
Code generation backends.

Contains the Objective-C class, enum and helper stub generators.
"""

from __future__ import annotations

from .base import ObjCBackend
from .class_generator import ClassGenerator
from .enum_generator import EnumGenerator
from .stub_generator import AuxiliaryStubGenerator, StubRegistry

__all__ = [
    "ObjCBackend",
    "ClassGenerator",
    "EnumGenerator",
    "AuxiliaryStubGenerator",
    "StubRegistry",
]
