"""JSON Schema to Objective-C Generator

A Python package for generating Objective-C classes from JSON Schema
definitions. Supports plain reference-counted NSObject classes and Core
Data NSManagedObject classes, with three-way merging of regenerated code
into hand-edited files.
"""

__version__ = "1.0.1"

from .pipeline import (
    AtomicWriter,
    Backend,
    CodeGeneratorConfig,
    CodeMergeError,
    Diff3MergeProvider,
    GenerationReport,
    MergeProvider,
    MergeResult,
    MergeToolError,
    OutputConfig,
    OutputMode,
    PipelineGenerator,
    SchemaError,
)

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
