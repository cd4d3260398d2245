"""
Utility functions for JSON Schema to record generator.
"""

import re

# Regex pattern to split text into words, handling camelCase boundaries
_WORD_PATTERN = re.compile(r"[a-z]+|[A-Z][a-z]*|[0-9]+")


def _normalize_separators(text: str) -> str:
    """Normalize separators (underscores, hyphens, dots) to spaces."""
    return text.replace("_", " ").replace("-", " ").replace(".", " ")


def snake_to_pascal_case(text: str) -> str:
    """Convert snake_case, kebab-case, dotted or camelCase text to PascalCase.

    Used to turn a schema file stem into a default record name.

    Examples:
        "user" -> "User"
        "user_schema" -> "UserSchema"
        "tool-input.schema" -> "ToolInputSchema"
        "actionTemplate" -> "ActionTemplate"
    """
    if not text:
        return ""
    words = _WORD_PATTERN.findall(_normalize_separators(text))
    return "".join(word.capitalize() for word in words if word)
