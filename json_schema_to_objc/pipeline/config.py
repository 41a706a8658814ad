"""
Configuration for the code generator pipeline.

The configuration is an immutable value passed explicitly to every
component of a run.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from pathlib import Path


class Backend(str, Enum):
    """Target object model for the generated classes."""

    PLAIN = "plain"  # NSObject subclasses with manual reference counting
    MANAGED_PERSISTENCE = "managed-persistence"  # Core Data NSManagedObject subclasses


class OutputMode(str, Enum):
    """Output mode for file generation.

    Controls behavior when the output file already exists.
    """

    MERGE = "merge"  # Default: three-way merge with the previous generation
    OVERWRITE = "overwrite"  # Replace the live file unconditionally


@dataclass(frozen=True)
class OutputConfig:
    """Configuration for output file handling.

    Attributes:
        directory: Live output directory (developer-visible)
        mode: How to handle existing output files
        original_output_dirname: Name of the shadow "last generated" directory,
            created inside the live output directory
        atomic_write: Whether to use atomic file writes
    """

    directory: Path | None = None
    mode: OutputMode = OutputMode.MERGE
    original_output_dirname: str = "original-output"
    atomic_write: bool = True

    @property
    def overwrite(self) -> bool:
        return self.mode == OutputMode.OVERWRITE

    @property
    def original_output_directory(self) -> Path | None:
        if self.directory is None:
            return None
        return self.directory / self.original_output_dirname


@dataclass(frozen=True)
class CodeGeneratorConfig:
    """Configuration options for code generation."""

    # Target object model
    backend: Backend = Backend.PLAIN

    # Use nonNullObjectForKey: instead of objectForKey: for every property
    force_non_null_objects: bool = False

    # Add the generation banner at the top of each file
    add_generation_comment: bool = True

    # Copyright line appended to the generation banner (empty = none)
    copyright_notice: str = ""

    # External three-way merge command, invoked as: <cmd> MINE OLDER YOURS
    merge_command: tuple[str, ...] = ("diff3", "-m")

    # Output configuration
    output: OutputConfig = field(default_factory=OutputConfig)

    @property
    def is_managed(self) -> bool:
        return self.backend == Backend.MANAGED_PERSISTENCE

    def with_overrides(self, **changes) -> CodeGeneratorConfig:
        """Return a copy with the given top-level fields replaced."""
        return replace(self, **changes)

    def with_output(self, **changes) -> CodeGeneratorConfig:
        """Return a copy with the given output fields replaced."""
        return replace(self, output=replace(self.output, **changes))

    @staticmethod
    def from_dict(d: dict) -> CodeGeneratorConfig:
        """Create a config from a dictionary."""
        known = {f.name for f in fields(CodeGeneratorConfig)}
        kwargs = {}
        for k, v in d.items():
            if k == "output" and isinstance(v, dict):
                directory = v.get("directory")
                mode = v.get("mode", OutputMode.MERGE)
                if isinstance(mode, str):
                    mode = OutputMode(mode)
                if v.get("overwrite"):
                    mode = OutputMode.OVERWRITE
                kwargs["output"] = OutputConfig(
                    directory=Path(directory) if directory else None,
                    mode=mode,
                    original_output_dirname=v.get("original_output_dirname", "original-output"),
                    atomic_write=v.get("atomic_write", True),
                )
            elif k == "backend":
                kwargs["backend"] = Backend(v)
            elif k == "merge_command":
                kwargs["merge_command"] = tuple(v)
            elif k in known:
                kwargs[k] = v
        return CodeGeneratorConfig(**kwargs)

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "backend": self.backend.value,
            "force_non_null_objects": self.force_non_null_objects,
            "add_generation_comment": self.add_generation_comment,
            "copyright_notice": self.copyright_notice,
            "merge_command": list(self.merge_command),
            "output": {
                "directory": str(self.output.directory) if self.output.directory else None,
                "mode": self.output.mode.value,
                "original_output_dirname": self.output.original_output_dirname,
                "atomic_write": self.output.atomic_write,
            },
        }
