"""
Base classes for three-way merging.

Provides the interface behind which the concrete merge tool sits, so the
merge strategy can be swapped (or faked in tests) without shelling out.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

CONFLICT_MARKER = "<<<<<<<"


class CodeMergeError(Exception):
    """Raised when merging generated code with the live file fails."""

    pass


class MergeToolError(CodeMergeError):
    """Raised when the external merge tool cannot be run or reports trouble.

    This can happen when:
    - The merge command is not installed
    - The merge command exits with an error status
    """

    def __init__(self, command, message: str):
        self.command = list(command)
        super().__init__(f"Merge command {' '.join(self.command)!r} failed: {message}")


@dataclass(frozen=True)
class MergeResult:
    """Outcome of a three-way merge.

    Attributes:
        text: Merged content, conflict markers included
        conflict_count: Number of conflicting hunks left in the text
    """

    text: str
    conflict_count: int = 0

    @property
    def has_conflicts(self) -> bool:
        return self.conflict_count > 0


def count_conflicts(text: str) -> int:
    """Count the conflict hunks a merge tool left in its output."""
    return sum(1 for line in text.splitlines() if line.startswith(CONFLICT_MARKER))


class MergeProvider(ABC):
    """Abstract three-way merge strategy."""

    @abstractmethod
    def merge(self, base: str, ours: str, theirs: str) -> MergeResult:
        """Merge two descendants of a common ancestor.

        Args:
            base: Common ancestor (the previous generation output)
            ours: Live file, possibly edited by the developer
            theirs: Newly generated content

        Returns:
            MergeResult with the merged text and the conflict count

        Raises:
            MergeToolError: If the merge cannot be performed
        """
        pass
