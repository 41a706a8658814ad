"""
Output merge manager.

Commits generated files to the live output directory. A shadow copy of
the previous generation is kept in the "original output" directory and
serves as the common ancestor of a three-way merge, so hand edits made
to the live files survive regeneration.
"""

from __future__ import annotations

import logging
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ..analyzer.ir_nodes import GeneratedFile
from ..config import CodeGeneratorConfig
from .atomic_writer import AtomicWriter
from .base import MergeProvider, MergeResult
from .diff3_merger import Diff3MergeProvider

logger = logging.getLogger(__name__)


class CommitAction(str, Enum):
    """What happened to a live file during commit."""

    FRESH = "fresh"  # Written directly (overwrite mode or new file)
    MERGED = "merged"  # Three-way merged with the previous generation
    UNCHANGED = "unchanged"  # Live file kept as is


@dataclass(frozen=True)
class CommitResult:
    """Outcome of committing one generated file."""

    filename: str
    action: CommitAction
    conflict_count: int = 0

    @property
    def has_conflicts(self) -> bool:
        return self.conflict_count > 0


class OutputMergeManager:
    """Writes generated files to the live and shadow output directories.

    Used as a context manager owning the process-scoped staging directory
    that holds freshly rendered content until it is committed.
    """

    def __init__(self, config: CodeGeneratorConfig, merge_provider: MergeProvider | None = None):
        if config.output.directory is None:
            raise ValueError("An output directory is required")
        self.config = config
        self.merge_provider = merge_provider or Diff3MergeProvider(config.merge_command)
        self.writer = AtomicWriter(atomic=config.output.atomic_write)
        self.output_directory = Path(config.output.directory)
        self.original_output_directory = Path(config.output.original_output_directory)
        self._staging: tempfile.TemporaryDirectory | None = None

    def __enter__(self) -> OutputMergeManager:
        self.output_directory.mkdir(parents=True, exist_ok=True)
        self.original_output_directory.mkdir(parents=True, exist_ok=True)
        self._staging = tempfile.TemporaryDirectory(prefix="json_schema_to_objc-")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._staging is not None:
            self._staging.cleanup()
            self._staging = None

    @property
    def staging_directory(self) -> Path:
        if self._staging is None:
            raise RuntimeError("OutputMergeManager must be used as a context manager")
        return Path(self._staging.name)

    def commit(self, generated: GeneratedFile) -> CommitResult:
        """
        Commit one generated file.

        Fresh mode (overwrite requested, or no live file yet) writes the
        content to both the live and the shadow location. Otherwise the
        live file is merged with the new content, using the shadow copy as
        common ancestor; conflicts stay in the live file as markers.

        Raises:
            MergeToolError: If the merge tool fails
        """
        staged = self.staging_directory / generated.filename
        self.writer.write(staged, generated.content)
        new_content = staged.read_text(encoding="utf-8")

        live = self.output_directory / generated.filename
        shadow = self.original_output_directory / generated.filename

        if self.config.output.overwrite or not live.exists():
            logger.info("Writing %s", live)
            self.writer.write(live, new_content)
            self.writer.write(shadow, new_content)
            return CommitResult(generated.filename, CommitAction.FRESH)

        base = shadow.read_text(encoding="utf-8") if shadow.exists() else ""
        ours = live.read_text(encoding="utf-8")
        result = self._merge(base, ours, new_content)

        if result.text == ours:
            logger.debug("%s is up to date", live)
            action = CommitAction.UNCHANGED
        else:
            logger.info("Merging %s", live)
            self.writer.write(live, result.text)
            action = CommitAction.MERGED
        # The shadow always reflects the latest generation
        self.writer.write(shadow, new_content)

        if result.has_conflicts:
            logger.warning("%d merge conflict(s) in %s", result.conflict_count, live)
        return CommitResult(generated.filename, action, result.conflict_count)

    def _merge(self, base: str, ours: str, theirs: str) -> MergeResult:
        # Trivial three-way cases need no merge tool
        if ours == theirs or base == theirs:
            return MergeResult(ours)
        if base == ours:
            return MergeResult(theirs)
        return self.merge_provider.merge(base=base, ours=ours, theirs=theirs)
