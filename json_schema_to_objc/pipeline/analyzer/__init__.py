"""
Analyzer module.

Contains reference resolution, type resolution and the per-property
code generation rules.
"""

from __future__ import annotations

from .ir_nodes import (
    BACKEND_PROVIDED_CLASSES,
    CodeFragments,
    GeneratedFile,
    Ownership,
    ReferencedClassSet,
    TypeResolution,
)
from .property_rules import PropertyRules, date_formatter_for
from .reference_resolver import ReferenceResolver
from .type_resolver import SUPPORTED_TYPES, TypeResolver

__all__ = [
    "BACKEND_PROVIDED_CLASSES",
    "CodeFragments",
    "GeneratedFile",
    "Ownership",
    "PropertyRules",
    "ReferenceResolver",
    "ReferencedClassSet",
    "SUPPORTED_TYPES",
    "TypeResolution",
    "TypeResolver",
    "date_formatter_for",
]
