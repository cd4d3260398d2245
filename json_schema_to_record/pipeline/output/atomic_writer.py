"""
Atomic file writer for generated records.

Generated code is staged next to its destination and only moved into place
once it has been checked, so a failed or interrupted run leaves any previous
output untouched.
"""

from __future__ import annotations

import ast
import logging
import os
import tempfile
from collections.abc import Callable
from pathlib import Path

from ..errors import OutputWriteError

logger = logging.getLogger(__name__)

Validator = Callable[[str], None]


def check_python_syntax(content: str) -> None:
    """Reject Python source that does not parse.

    Raises:
        OutputWriteError: If the source has a syntax error
    """
    try:
        ast.parse(content)
    except SyntaxError as e:
        raise OutputWriteError(f"Generated Python code is not valid: {e}") from e


class AtomicWriter:
    """Stage, validate, then rename into place."""

    def __init__(self, validate_python: Validator | None = None):
        """
        Args:
            validate_python: Replaces the syntax check run on Python output
        """
        # Languages without an entry are written unchecked
        self.validators: dict[str, Validator] = {"python": validate_python or check_python_syntax}

    def write(self, path: Path, content: str, language: str, validate: bool = True) -> None:
        """Write ``content`` to ``path`` atomically.

        Args:
            path: Destination file; missing parent directories are created
            content: Generated source
            language: Target language of the source, selects the validator
            validate: Run the language validator before replacing the destination

        Raises:
            OutputWriteError: If validation fails
            OSError: If the file cannot be written
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        validator = self.validators.get(language) if validate else None

        # The staging file lives in the destination directory so the final rename stays on one filesystem
        fd, staged = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", text=True)
        staged_path = Path(staged)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            if validator is not None:
                validator(content)
            staged_path.replace(path)
        except BaseException:
            staged_path.unlink(missing_ok=True)
            raise

        logger.debug("Wrote %d characters of %s to %s", len(content), language, path)
