"""
Base class for Objective-C code generation backends.

Defines the interface that the class, enum and helper stub generators
implement.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..analyzer.ir_nodes import GeneratedFile
from ..ast_backends.objc_ast_nodes import FileBanner
from ..ast_backends.objc_serializer import ObjCSerializer
from ..config import CodeGeneratorConfig


class ObjCBackend(ABC):
    """Abstract base class for Objective-C generators."""

    HEADER_EXTENSION = "h"
    IMPLEMENTATION_EXTENSION = "m"

    def __init__(self, config: CodeGeneratorConfig, serializer: ObjCSerializer | None = None):
        """
        Initialize the backend.

        Args:
            config: Code generation configuration
            serializer: Shared serializer (one is created if omitted)
        """
        self.config = config
        self.serializer = serializer or ObjCSerializer()

    @abstractmethod
    def generate(self, definition) -> list[GeneratedFile]:
        """
        Generate the header and implementation files of one definition.

        Args:
            definition: The definition to generate

        Returns:
            Generated files, header first
        """

    def header_filename(self, type_name: str) -> str:
        return f"{type_name}.{self.HEADER_EXTENSION}"

    def implementation_filename(self, type_name: str) -> str:
        return f"{type_name}.{self.IMPLEMENTATION_EXTENSION}"

    def banner(self, filename: str) -> FileBanner:
        """Generation comment for a file."""
        return FileBanner(
            filename=filename,
            notice=self.config.copyright_notice,
            enabled=self.config.add_generation_comment,
        )
