"""
Base class for code generation backends.

Defines the interface that all language-specific backends must implement.
A backend renders the IR produced by the analyzer; it never looks at the
raw schema.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jinja2

from ..analyzer.ir_nodes import FieldDef, HelperKind, Obligation, ObligationKind, RecordDef
from ..config import CodeGeneratorConfig


@dataclass(frozen=True)
class GeneratedUnit:
    """One emitted record declaration."""

    type_name: str
    source_text: str


class CodeBackend(ABC):
    """Abstract base class for code generation backends."""

    # Template directory name
    TEMPLATE_LANG: str = ""

    # File extension
    FILE_EXTENSION: str = ""

    # Indentation added inside the optional-field guard
    INDENT: str = "    "

    def __init__(self, config: CodeGeneratorConfig):
        """
        Initialize the backend.

        Args:
            config: Code generation configuration
        """
        self.config = config
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
        )

        self.prefix_template = self.jinja_env.get_template(f"prefix.{self.FILE_EXTENSION}.jinja2")
        self.class_template = self.jinja_env.get_template(f"class.{self.FILE_EXTENSION}.jinja2")
        self.helper_templates = {
            helper: self.jinja_env.get_template(f"helpers/{helper.value}.{self.FILE_EXTENSION}.jinja2") for helper in HelperKind
        }
        self.matcher_template = self.jinja_env.get_template(f"helpers/match_schema.{self.FILE_EXTENSION}.jinja2")

    def generate(self, records: list[RecordDef]) -> str:
        """
        Generate the complete source for a list of records.

        Args:
            records: Records in declaration order (nested records first)

        Returns:
            The prefix (if any) followed by every record, separated by blank lines
        """
        return self.assemble(records, [self.render_record(record).source_text for record in records])

    def assemble(self, records: list[RecordDef], parts: list[str]) -> str:
        """
        Join already rendered parts behind one prefix.

        Args:
            records: Every record rendered into ``parts``, used to decide the prefix
            parts: Rendered declarations or diagnostic comments, in output order
        """
        body = "\n\n".join(parts)
        prefix = self.prefix_template.render(self._prepare_prefix_context(records)).strip("\n")
        if prefix:
            return f"{prefix}\n\n{body}"
        return body

    def render_record(self, record: RecordDef) -> GeneratedUnit:
        """Render one record declaration."""
        context = self._prepare_record_context(record)
        source_text = self.class_template.render(context).rstrip("\n")
        return GeneratedUnit(type_name=record.name, source_text=source_text)

    def _prepare_record_context(self, record: RecordDef) -> dict[str, Any]:
        """
        Prepare the template context for a record.

        Args:
            record: The record definition

        Returns:
            Dictionary of template variables
        """
        return {
            "class_name": record.name,
            "comment_lines": self._comment_lines(record) if self.config.add_type_comments else [],
            "fields": [self._prepare_field_context(f) for f in record.fields],
            "validation_code": self._validation_code(record),
            "helpers": self._render_helpers(record),
        }

    def _comment_lines(self, record: RecordDef) -> list[str]:
        """Documentation block: record description, then one line per field."""
        lines = []
        if record.description:
            lines.extend(self._comment(record.description))
        lines.append(f"# {record.name} fields:")
        for f in record.fields:
            lines.extend(self._comment(f"- {f.name}: {f.type_description}"))
        return lines

    def _comment(self, text: str) -> list[str]:
        """Turn text into comment lines; continuation lines are indented."""
        first, *rest = text.splitlines() or [""]
        lines = [f"# {first}".rstrip()]
        lines.extend(f"#   {line.strip()}".rstrip() for line in rest)
        return lines

    def _validation_code(self, record: RecordDef) -> list[str]:
        """Validation statements of every field, in field declaration order."""
        lines = []
        for f in record.fields:
            block = []
            for obligation in f.obligations:
                block.extend(self.render_obligation(f, obligation))
            if not block:
                continue
            if f.is_required:
                lines.extend(block)
            else:
                lines.extend(self.guard_optional(f, [self.INDENT + line for line in block]))
        return lines

    def render_obligation(self, field_def: FieldDef, obligation: Obligation) -> list[str]:
        """Render one obligation through the matching ``_render_<kind>`` method."""
        renderer = getattr(self, f"_render_{obligation.kind.value}")
        return renderer(field_def.name, obligation.argument)

    def _render_helpers(self, record: RecordDef) -> list[str]:
        """Render the helpers a record needs; the union helpers share one schema matcher."""
        rendered = []
        matcher_rendered = False
        for helper in record.helpers:
            rendered.append(self.helper_templates[helper].render())
            if helper in (HelperKind.ANY_OF, HelperKind.ONE_OF) and not matcher_rendered:
                rendered.append(self.matcher_template.render())
                matcher_rendered = True
        return rendered

    @staticmethod
    def uses(records: list[RecordDef], kind: ObligationKind) -> bool:
        return any(record.has_obligation(kind) for record in records)

    @abstractmethod
    def _prepare_prefix_context(self, records: list[RecordDef]) -> dict[str, Any]:
        """Template context for the text placed before the first record (imports)."""

    @abstractmethod
    def _prepare_field_context(self, field_def: FieldDef) -> dict[str, Any]:
        """Template context for one field declaration."""

    @abstractmethod
    def guard_optional(self, field_def: FieldDef, block: list[str]) -> list[str]:
        """Wrap an already indented block so it only runs when the field is present."""

    @abstractmethod
    def format_literal(self, value: Any) -> str:
        """Format a JSON value as a literal of the target language."""
