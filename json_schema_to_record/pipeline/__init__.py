"""
Pipeline - JSON Schema to validated record generator.

This module provides a multi-phase architecture for generating immutable,
self-validating records from object schemas:

1. Phase 1 (Parser): Parse JSON Schema into Schema AST
2. Phase 2 (Analyzer): Decide validation obligations and nested records (IR)
3. Phase 3 (Backend): Render the IR with the target language's templates
"""

from __future__ import annotations

from .config import CodeGeneratorConfig
from .definitions import DefinitionsGenerator
from .errors import CompileError, OutputWriteError, SchemaError, UnsupportedLanguageError
from .generator import RecordGenerator, compile_schema
from .output import AtomicWriter

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
