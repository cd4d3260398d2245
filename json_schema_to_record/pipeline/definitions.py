"""
Record generation for the named sub-schemas of a "definitions" map.

Missing definitions, and in batches definitions that fail to compile, are
reported inline as diagnostic comments so that a batch over many definitions
never stops on one bad key.
"""

from __future__ import annotations

import logging
from typing import Any

from .config import CodeGeneratorConfig
from .errors import CompileError
from .generator import RecordGenerator, not_object_diagnostic

logger = logging.getLogger(__name__)

NO_DEFINITIONS_DIAGNOSTIC = "# No definition names specified"


def missing_definition_diagnostic(key: str) -> str:
    return f'# Definition "{key}" does not exist in the JSON schema'


def failed_definition_diagnostic(key: str, error: CompileError) -> str:
    return f'# Definition "{key}" could not be generated: {error}'


class DefinitionsGenerator:
    """Generates records from the definitions of a schema document."""

    def __init__(
        self,
        schema: dict[str, Any],
        config: CodeGeneratorConfig | None = None,
        language: str | None = None,
    ):
        self.schema = schema
        self.generator = RecordGenerator(config, language)

    @property
    def definitions(self) -> dict[str, Any]:
        return self.schema.get("definitions") or {}

    def list_definition_keys(self) -> list[str]:
        """Definition names, in document order."""
        return list(self.definitions.keys())

    def compile_definition(self, key: str, override_name: str | None = None) -> str:
        """
        Generate the record for one definition.

        Args:
            key: Definition name
            override_name: Record name to use instead of the definition name

        Returns:
            Generated source, or a diagnostic comment when the definition is missing
        """
        if key not in self.definitions:
            logger.warning("Definition %s not found", key)
            return missing_definition_diagnostic(key)
        return self.generator.compile(self.definitions[key], override_name or key)

    def compile_many(self, keys: list[str]) -> str:
        """
        Generate several definitions into one source, separated by blank lines.

        The definitions share a single import prefix. Missing or non-object
        definitions, and definitions that fail to compile, leave a diagnostic
        comment in place.
        """
        if not keys:
            return NO_DEFINITIONS_DIAGNOSTIC

        backend = self.generator.backend
        all_records = []
        parts = []
        for key in keys:
            if key not in self.definitions:
                logger.warning("Definition %s not found", key)
                parts.append(missing_definition_diagnostic(key))
                continue
            try:
                records = self.generator.analyze(self.definitions[key], key)
                if records is None:
                    parts.append(not_object_diagnostic(key))
                    continue
                rendered = [backend.render_record(record).source_text for record in records]
            except CompileError as e:
                logger.warning("Definition %s could not be generated: %s", key, e)
                parts.append(failed_definition_diagnostic(key, e))
                continue
            all_records.extend(records)
            parts.extend(rendered)

        logger.debug("Compiled %d definitions into %d records", len(keys), len(all_records))
        return backend.assemble(all_records, parts)

    def compile_all(self) -> dict[str, str]:
        """Generate every definition separately, keyed by definition name."""
        results = {}
        for key in self.list_definition_keys():
            try:
                results[key] = self.compile_definition(key)
            except CompileError as e:
                logger.warning("Definition %s could not be generated: %s", key, e)
                results[key] = failed_definition_diagnostic(key, e)
        return results
