"""
Record generator: the entry point of the pipeline.

Runs the phases in order (parse, analyze, render) for one schema and one
record name. A generator holds no per-call state, so one instance may serve
concurrent calls.
"""

from __future__ import annotations

import logging
from typing import Any

from .analyzer import RecordAnalyzer, RecordDef
from .backends import GeneratedUnit, create_backend
from .config import CodeGeneratorConfig
from .schema_ast import SchemaParser

logger = logging.getLogger(__name__)


def not_object_diagnostic(type_name: str) -> str:
    return f"# JSON schema type is not object: {type_name}"


class RecordGenerator:
    """Generates validated record source code from object schemas."""

    def __init__(self, config: CodeGeneratorConfig | None = None, language: str | None = None):
        """
        Initialize the generator.

        Args:
            config: Code generation configuration
            language: Target language; defaults to ``config.language``

        Raises:
            UnsupportedLanguageError: If no backend exists for the language
        """
        self.config = config or CodeGeneratorConfig()
        self.language = language or self.config.language
        self.parser = SchemaParser()
        self.analyzer = RecordAnalyzer(self.config)
        self.backend = create_backend(self.language, self.config)

    def compile(self, schema: dict[str, Any], type_name: str) -> str:
        """
        Generate the source code of a record and all its nested records.

        Args:
            schema: An object-typed JSON Schema
            type_name: Name of the top-level record

        Returns:
            The generated source, or a one-line diagnostic comment when the
            schema is not object-typed

        Raises:
            SchemaError: If the schema violates a structural invariant
            CompileError: If a name cannot be used in the target language
        """
        records = self.analyze(schema, type_name)
        if records is None:
            return not_object_diagnostic(type_name)
        logger.debug("Rendering %d records for %s in %s", len(records), type_name, self.language)
        return self.backend.generate(records)

    def analyze(self, schema: dict[str, Any], type_name: str) -> list[RecordDef] | None:
        """
        Parse and analyze a schema without rendering it.

        Returns:
            The records to declare, nested ones first, or None when the schema
            is not object-typed
        """
        if not isinstance(schema, dict) or schema.get("type") != "object":
            logger.warning("Schema for %s is not object-typed, skipping", type_name)
            return None
        return self.analyzer.analyze(self.parser.parse(schema), type_name)

    def compile_units(self, schema: dict[str, Any], type_name: str) -> list[GeneratedUnit]:
        """
        Generate each record declaration separately, without the import prefix.

        Returns:
            Nested units depth-first in declaration order, then the top-level
            unit; an empty list when the schema is not object-typed
        """
        records = self.analyze(schema, type_name)
        if records is None:
            return []
        return [self.backend.render_record(record) for record in records]


def compile_schema(
    schema: dict[str, Any],
    type_name: str,
    language: str = "python",
    config: CodeGeneratorConfig | None = None,
) -> str:
    """
    Convenience function to generate a record from a schema.

    Args:
        schema: An object-typed JSON Schema
        type_name: Name of the top-level record
        language: Target language ("python" or "ruby")
        config: Optional code generation configuration

    Returns:
        Generated source code
    """
    return RecordGenerator(config, language).compile(schema, type_name)
