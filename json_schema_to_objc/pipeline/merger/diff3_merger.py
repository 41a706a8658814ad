"""
Merge provider running an external diff3-compatible command.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import tempfile
from collections.abc import Sequence
from pathlib import Path

from .base import MergeProvider, MergeResult, MergeToolError, count_conflicts

logger = logging.getLogger(__name__)

# diff3 exits with 0 for a clean merge, 1 when conflicts were emitted
# and 2 on trouble.
_MERGE_OK_STATUSES = (0, 1)


class Diff3MergeProvider(MergeProvider):
    """Three-way merge through `diff3 -m MINE OLDER YOURS`."""

    def __init__(self, command: Sequence[str] = ("diff3", "-m"), timeout: float = 60):
        if not command:
            raise ValueError("Merge command must not be empty")
        self.command = tuple(command)
        self.timeout = timeout

    def is_available(self) -> bool:
        """Check if the merge command is installed."""
        return shutil.which(self.command[0]) is not None

    def merge(self, base: str, ours: str, theirs: str) -> MergeResult:
        with tempfile.TemporaryDirectory(prefix="json_schema_to_objc-merge-") as temp_dir:
            paths = []
            for name, content in (("live", ours), ("original", base), ("generated", theirs)):
                path = Path(temp_dir) / name
                path.write_text(content, encoding="utf-8")
                paths.append(str(path))

            cmd = [*self.command, *paths]
            logger.debug("Running %s", " ".join(cmd))
            try:
                result = subprocess.run(
                    cmd,
                    capture_output=True,
                    text=True,
                    encoding="utf-8",
                    timeout=self.timeout,
                )
            except FileNotFoundError as e:
                raise MergeToolError(self.command, "command not found") from e
            except subprocess.SubprocessError as e:
                raise MergeToolError(self.command, str(e)) from e

        if result.returncode not in _MERGE_OK_STATUSES:
            message = result.stderr.strip() or f"exit status {result.returncode}"
            raise MergeToolError(self.command, message)

        return MergeResult(text=result.stdout, conflict_count=count_conflicts(result.stdout))
