"""
Configuration for the record generator pipeline.

Loaded from an optional JSON file by the command line tool; every key is
optional and unknown keys are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass

SUPPORTED_LANGUAGES = ("python", "ruby")


@dataclass
class CodeGeneratorConfig:
    """Configuration options for code generation."""

    # Target language of the generated records
    language: str = "python"

    # Add generation comment at top of file
    add_generation_comment: bool = True

    # Emit the documentation comment block before each record
    add_type_comments: bool = True

    # Whether to drop minItems/maxItems validation
    drop_min_max_items: bool = False

    # Use from __future__ import annotations in Python output
    use_future_annotations: bool = True

    @staticmethod
    def from_dict(d: dict) -> CodeGeneratorConfig:
        """Create a config from a dictionary."""
        config = CodeGeneratorConfig()
        for k, v in d.items():
            if hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "language": self.language,
            "add_generation_comment": self.add_generation_comment,
            "add_type_comments": self.add_type_comments,
            "drop_min_max_items": self.drop_min_max_items,
            "use_future_annotations": self.use_future_annotations,
        }
