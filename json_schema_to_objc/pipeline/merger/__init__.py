"""
Merger module.

Commits generated files, three-way merging them with the developer's
working copy against the previous generation.
"""

from __future__ import annotations

from .atomic_writer import AtomicWriter
from .base import CodeMergeError, MergeProvider, MergeResult, MergeToolError, count_conflicts
from .diff3_merger import Diff3MergeProvider
from .output_manager import CommitAction, CommitResult, OutputMergeManager

__all__ = [
    "AtomicWriter",
    "CodeMergeError",
    "CommitAction",
    "CommitResult",
    "Diff3MergeProvider",
    "MergeProvider",
    "MergeResult",
    "MergeToolError",
    "OutputMergeManager",
    "count_conflicts",
]
