"""JSON Schema to Record Generator

A Python package for generating immutable, self-validating record types
from JSON Schema object definitions. Supports Python dataclasses and Ruby
Data classes.
"""

__version__ = "1.0.0"

from .pipeline import (
    AtomicWriter,
    CodeGeneratorConfig,
    CompileError,
    DefinitionsGenerator,
    OutputWriteError,
    RecordGenerator,
    SchemaError,
    UnsupportedLanguageError,
    compile_schema,
)

__all__ = [
    "RecordGenerator",
    "DefinitionsGenerator",
    "CodeGeneratorConfig",
    "CompileError",
    "SchemaError",
    "UnsupportedLanguageError",
    "OutputWriteError",
    "AtomicWriter",
    "compile_schema",
]
