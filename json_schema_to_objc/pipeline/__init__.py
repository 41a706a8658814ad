"""
Pipeline - JSON Schema to Objective-C generator.

This module provides a multi-phase architecture for generating
Objective-C classes from JSON schemas:

1. Phase 1 (Parser): Parse the schema document into a typed SchemaIndex
2. Phase 2 (Analyzer): Resolve references, types and per-property code
3. Phase 3 (Backends): Assemble class, enum and helper stub artifacts
4. Phase 4 (Serializer): Render artifacts to source through templates
5. Phase 5 (Merger): Three-way merge with the developer's working copy
"""

from __future__ import annotations

from .config import Backend, CodeGeneratorConfig, OutputConfig, OutputMode
from .errors import SchemaError
from .generator import GenerationReport, PipelineGenerator
from .merger import AtomicWriter, CodeMergeError, Diff3MergeProvider, MergeProvider, MergeResult, MergeToolError

__all__ = [
    "PipelineGenerator",
    "GenerationReport",
    "Backend",
    "CodeGeneratorConfig",
    "OutputConfig",
    "OutputMode",
    "SchemaError",
    "CodeMergeError",
    "MergeToolError",
    "MergeProvider",
    "MergeResult",
    "Diff3MergeProvider",
    "AtomicWriter",
]
