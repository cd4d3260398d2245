"""
Exceptions raised by the record generator pipeline.

Malformed-but-expected inputs (a non-object root schema, a missing
definition) are reported as diagnostic comments instead of exceptions, so
only programmer errors end up here.
"""

from __future__ import annotations


class CompileError(Exception):
    """Base class for unrecoverable code generation errors."""


class SchemaError(CompileError):
    """Raised when a schema node violates the data model invariants."""

    def __init__(self, message: str, source_path: str = ""):
        self.source_path = source_path
        if source_path:
            message = f"{source_path}: {message}"
        super().__init__(message)


class UnsupportedLanguageError(CompileError):
    """Raised when no backend is registered for the requested language."""


class OutputWriteError(CompileError):
    """Raised when generated code fails validation before being written."""
