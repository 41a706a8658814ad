"""
Pipeline generator.

Orchestrates one generation run: parse and index the schema, validate its
references, render every definition in index order, then commit the
rendered files through the output merge manager.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from .analyzer.ir_nodes import GeneratedFile
from .analyzer.reference_resolver import ReferenceResolver
from .analyzer.type_resolver import TypeResolver
from .ast_backends.objc_serializer import ObjCSerializer
from .backends import AuxiliaryStubGenerator, ClassGenerator, EnumGenerator, StubRegistry
from .config import CodeGeneratorConfig
from .merger import CommitResult, MergeProvider, OutputMergeManager
from .schema_ast import ObjectDefinition, SchemaIndex, SchemaParser

logger = logging.getLogger(__name__)


@dataclass
class GenerationReport:
    """Commit results of a run."""

    results: list[CommitResult] = field(default_factory=list)

    @property
    def conflicts(self) -> list[CommitResult]:
        return [r for r in self.results if r.has_conflicts]

    @property
    def conflict_count(self) -> int:
        return sum(r.conflict_count for r in self.results)


class PipelineGenerator:
    """
    Objective-C generator for a JSON schema document.

    The schema is a list of object and enum definitions.
    """

    def __init__(
        self,
        schema: Any,
        config: CodeGeneratorConfig | None = None,
        merge_provider: MergeProvider | None = None,
    ):
        self.schema = schema
        self.config = config or CodeGeneratorConfig()
        self.merge_provider = merge_provider
        self._index: SchemaIndex | None = None

    @property
    def index(self) -> SchemaIndex:
        if self._index is None:
            self._index = SchemaParser().parse(self.schema)
        return self._index

    def generate(self) -> list[GeneratedFile]:
        """
        Render every file of the run in memory.

        Returns:
            Generated files: a header and an implementation per definition,
            in index order, followed by the helper stubs

        Raises:
            SchemaError: On malformed or unsupported schema input
        """
        index = self.index
        references = ReferenceResolver(index)
        references.check_references()

        types = TypeResolver(self.config.backend)
        serializer = ObjCSerializer()
        stubs = StubRegistry()
        class_generator = ClassGenerator(self.config, types, references, stubs, serializer)
        enum_generator = EnumGenerator(self.config, serializer)

        files: list[GeneratedFile] = []
        for definition in index:
            if isinstance(definition, ObjectDefinition):
                files.extend(class_generator.generate(definition))
            else:
                files.extend(enum_generator.generate(definition))

        files.extend(AuxiliaryStubGenerator(self.config, serializer).generate(stubs))
        logger.debug("Rendered %d files for %d definitions", len(files), len(index))
        return files

    def write(self) -> GenerationReport:
        """
        Generate and commit every file to the output directory.

        All files are rendered before the first one is committed, so a
        schema error leaves the output directory untouched.

        Raises:
            SchemaError: On malformed or unsupported schema input
            MergeToolError: If the merge tool fails
        """
        files = self.generate()
        report = GenerationReport()
        with OutputMergeManager(self.config, self.merge_provider) as manager:
            for generated in files:
                report.results.append(manager.commit(generated))
        return report
