"""
Ruby code generation backend.

Generates ``Data.define`` records whose ``initialize`` validates every
keyword argument before forwarding them all to ``super``. Type mismatches
raise ``TypeError``; violated constraints raise ``ArgumentError``.
"""

from __future__ import annotations

import json
from typing import Any

from ..analyzer.ir_nodes import FieldDef, HelperKind, ObligationKind, RecordDef
from .base import CodeBackend


class RubyBackend(CodeBackend):
    """Ruby code generation backend."""

    TEMPLATE_LANG = "ruby"
    FILE_EXTENSION = "rb"
    INDENT = "  "

    # condition that passes the check, and the expected shape for the message
    TYPE_CHECKS = {
        "string": ("{value}.is_a?(String)", "a String"),
        "integer": ("{value}.is_a?(Integer)", "an Integer"),
        "number": ("{value}.is_a?(Numeric)", "a Numeric"),
        "boolean": ("[true, false].include?({value})", "a Boolean"),
        "array": ("{value}.is_a?(Array)", "an Array"),
        "object": ("{value}.is_a?(Hash)", "a Hash"),
    }

    def _prepare_prefix_context(self, records: list[RecordDef]) -> dict[str, Any]:
        requires = set()
        if self.uses(records, ObligationKind.ANY_OF) or self.uses(records, ObligationKind.ONE_OF):
            requires.add("json")
        if any(HelperKind.FORMAT in record.helpers for record in records):
            requires.update(("date", "time", "uri"))
        return {"requires": sorted(requires)}

    def _prepare_record_context(self, record: RecordDef) -> dict[str, Any]:
        context = super()._prepare_record_context(record)
        context["members"] = ", ".join(f":{f.name}" for f in record.fields)
        context["params"] = ", ".join(f"{f.name}:" if f.is_required else f"{f.name}: nil" for f in record.fields)
        # Every field is forwarded, including the ones replaced by nested records
        context["forwards"] = ", ".join(f"{f.name}: {f.name}" for f in record.fields)
        return context

    def _prepare_field_context(self, field_def: FieldDef) -> dict[str, Any]:
        return {"name": field_def.name}

    def guard_optional(self, field_def: FieldDef, block: list[str]) -> list[str]:
        return [f"unless {field_def.name}.nil?"] + block + ["end"]

    def format_literal(self, value: Any) -> str:
        """Format a JSON value as a Ruby literal."""
        if isinstance(value, str):
            return json.dumps(value, ensure_ascii=False).replace("#{", "\\#{")
        if value is True:
            return "true"
        if value is False:
            return "false"
        if value is None:
            return "nil"
        if isinstance(value, (list, tuple)):
            return "[" + ", ".join(self.format_literal(v) for v in value) + "]"
        if isinstance(value, dict):
            pairs = ", ".join(f"{self.format_literal(k)} => {self.format_literal(v)}" for k, v in value.items())
            return "{" + pairs + "}"
        return repr(value)

    def _json_parse(self, schema: dict) -> str:
        escaped = json.dumps(schema, ensure_ascii=False).replace("\\", "\\\\").replace("'", "\\'")
        return f"JSON.parse('{escaped}')"

    def _call(self, helper: str, name: str, *arguments: str) -> list[str]:
        return [f"{helper}({', '.join([name, *arguments, self.format_literal(name)])})"]

    # Obligation renderers, one per ObligationKind

    def _render_nested(self, name: str, class_name: str) -> list[str]:
        return [
            f"raise TypeError, {self.format_literal(f'{name} must be a Hash')} unless {name}.is_a?(Hash)",
            f"{name} = {class_name}.new(**{name}.transform_keys(&:to_sym))",
        ]

    def _render_type(self, name: str, type_name: str) -> list[str]:
        condition, expected = self.TYPE_CHECKS[type_name]
        message = self.format_literal(f"{name} must be {expected}")
        return [f"raise TypeError, {message} unless {condition.format(value=name)}"]

    def _render_any_of(self, name: str, variants: tuple) -> list[str]:
        schemas = "[" + ", ".join(self._json_parse(v) for v in variants) + "]"
        return self._call("validate_any_of", name, schemas)

    def _render_one_of(self, name: str, variants: tuple) -> list[str]:
        schemas = "[" + ", ".join(self._json_parse(v) for v in variants) + "]"
        return self._call("validate_one_of", name, schemas)

    def _render_format(self, name: str, format_name: str) -> list[str]:
        return self._call("validate_format", name, self.format_literal(format_name))

    def _render_enum(self, name: str, values: tuple) -> list[str]:
        return self._call("validate_enum", name, self.format_literal(list(values)))

    def _render_array_items(self, name: str, item_type: str | None) -> list[str]:
        return self._call("validate_array_items", name, self.format_literal(item_type))

    def _render_array_items_minimum(self, name: str, minimum: float) -> list[str]:
        return self._call("validate_array_items_minimum", name, self.format_literal(minimum))

    def _render_array_items_maximum(self, name: str, maximum: float) -> list[str]:
        return self._call("validate_array_items_maximum", name, self.format_literal(maximum))

    def _bound(self, name: str, message: str, condition: str) -> list[str]:
        return [f"raise ArgumentError, {self.format_literal(message)} if {condition}"]

    def _render_minimum(self, name: str, minimum: float) -> list[str]:
        return self._bound(name, f"{name} must be greater than or equal to {minimum}", f"{name} < {minimum!r}")

    def _render_maximum(self, name: str, maximum: float) -> list[str]:
        return self._bound(name, f"{name} must be less than or equal to {maximum}", f"{name} > {maximum!r}")

    def _render_min_length(self, name: str, min_length: int) -> list[str]:
        return self._bound(name, f"{name} must be at least {min_length} characters", f"{name}.length < {min_length!r}")

    def _render_max_length(self, name: str, max_length: int) -> list[str]:
        return self._bound(name, f"{name} must be at most {max_length} characters", f"{name}.length > {max_length!r}")

    def _render_pattern(self, name: str, pattern: str) -> list[str]:
        regexp = f"Regexp.new({self.format_literal(pattern)}, Regexp::IGNORECASE)"
        return [f"raise ArgumentError, {self.format_literal(f'{name} must match pattern {pattern}')} unless {name}.match?({regexp})"]

    def _render_min_items(self, name: str, min_items: int) -> list[str]:
        return self._bound(name, f"{name} must contain at least {min_items} items", f"{name}.length < {min_items!r}")

    def _render_max_items(self, name: str, max_items: int) -> list[str]:
        return self._bound(name, f"{name} must contain at most {max_items} items", f"{name}.length > {max_items!r}")
