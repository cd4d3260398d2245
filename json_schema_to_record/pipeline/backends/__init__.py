"""
Code generation backends, one per target language.
"""

from __future__ import annotations

from ..config import CodeGeneratorConfig
from ..errors import UnsupportedLanguageError
from .base import CodeBackend, GeneratedUnit
from .python_backend import PythonBackend
from .ruby_backend import RubyBackend

BACKENDS: dict[str, type[CodeBackend]] = {
    "python": PythonBackend,
    "ruby": RubyBackend,
}


def create_backend(language: str, config: CodeGeneratorConfig) -> CodeBackend:
    """Instantiate the backend registered for a language."""
    try:
        backend_class = BACKENDS[language]
    except KeyError:
        raise UnsupportedLanguageError(f"Unsupported language {language!r}, expected one of: {', '.join(BACKENDS)}") from None
    return backend_class(config)


__all__ = [
    "BACKENDS",
    "CodeBackend",
    "GeneratedUnit",
    "PythonBackend",
    "RubyBackend",
    "create_backend",
]
