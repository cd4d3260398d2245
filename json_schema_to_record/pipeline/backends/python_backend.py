"""
Python code generation backend.

Generates frozen, keyword-only dataclasses whose ``__post_init__`` validates
every field. Type mismatches raise ``TypeError``; violated constraints raise
``ValueError``.
"""

from __future__ import annotations

import json
import keyword
from typing import Any

from ..analyzer.ir_nodes import FieldDef, HelperKind, ObligationKind, RecordDef, TypeKind, TypeRef
from ..errors import CompileError
from .base import CodeBackend, GeneratedUnit


class PythonBackend(CodeBackend):
    """Python code generation backend."""

    TEMPLATE_LANG = "python"
    FILE_EXTENSION = "py"

    TYPE_MAP = {
        "integer": "int",
        "string": "str",
        "boolean": "bool",
        "number": "float",
        "object": "dict[str, Any]",
        "array": "list[Any]",
    }

    # condition that fails the check, and the expected shape for the message
    TYPE_CHECKS = {
        "string": ("not isinstance({value}, str)", "a str"),
        "integer": ("not isinstance({value}, int) or isinstance({value}, bool)", "an int"),
        "number": ("not isinstance({value}, (int, float)) or isinstance({value}, bool)", "a number"),
        "boolean": ("not isinstance({value}, bool)", "a bool"),
        "array": ("not isinstance({value}, list)", "a list"),
        "object": ("not isinstance({value}, dict)", "a dict"),
    }

    FORMAT_IMPORTS = ("datetime", "ipaddress", "re", "urllib.parse")

    # Names an optional field would shadow in the annotations that follow it
    ANNOTATION_NAMES = frozenset({"int", "str", "bool", "float", "dict", "list", "Any"})

    def render_record(self, record: RecordDef) -> GeneratedUnit:
        self._check_identifiers(record)
        return super().render_record(record)

    def _check_identifiers(self, record: RecordDef) -> None:
        """Record and field names become Python identifiers verbatim."""
        for name, what in [(record.name, "record name")] + [(f.name, "property name") for f in record.fields]:
            if not name.isidentifier() or keyword.iskeyword(name):
                raise CompileError(f"{what} {name!r} of {record.name} is not a valid Python identifier")

        # Without postponed evaluation a field default rebinds the name in the class body
        if not self.config.use_future_annotations:
            for f in record.fields:
                if not f.is_required and f.name in self.ANNOTATION_NAMES:
                    raise CompileError(
                        f"property name {f.name!r} of {record.name} shadows a type used in annotations"
                        " (enable use_future_annotations)"
                    )

    def _prepare_prefix_context(self, records: list[RecordDef]) -> dict[str, Any]:
        if not records:
            return {"import_lines": []}

        modules: set[str] = set()
        from_imports: dict[str, set[str]] = {"dataclasses": {"dataclass"}}

        if any("Any" in self.translate_type(f.type_ref) for record in records for f in record.fields):
            from_imports.setdefault("typing", set()).add("Any")
        if self.uses(records, ObligationKind.PATTERN):
            modules.add("re")
        if any(HelperKind.FORMAT in record.helpers for record in records):
            modules.update(self.FORMAT_IMPORTS)

        import_lines = []
        if self.config.use_future_annotations:
            import_lines.extend(["from __future__ import annotations", ""])
        import_lines.extend(f"import {module}" for module in sorted(modules))
        import_lines.extend(f"from {module} import {', '.join(sorted(names))}" for module, names in sorted(from_imports.items()))
        return {"import_lines": import_lines}

    def translate_type(self, type_ref: TypeRef) -> str:
        """Translate IR type to Python type string."""
        if type_ref.kind == TypeKind.PRIMITIVE:
            return self.TYPE_MAP[type_ref.name]

        if type_ref.kind == TypeKind.CLASS:
            return type_ref.name

        if type_ref.kind == TypeKind.ARRAY:
            if type_ref.type_args:
                return f"list[{self.translate_type(type_ref.type_args[0])}]"
            return "list[Any]"

        if type_ref.kind == TypeKind.UNION:
            types = []
            for arg in type_ref.type_args:
                translated = self.translate_type(arg)
                if translated not in types:
                    types.append(translated)
            if not types or "Any" in types:
                return "Any"
            return " | ".join(types)

        return "Any"

    def _prepare_field_context(self, field_def: FieldDef) -> dict[str, Any]:
        annotation = self.translate_type(field_def.type_ref)
        if field_def.is_required:
            declaration = f"{field_def.name}: {annotation}"
        elif annotation == "Any":
            declaration = f"{field_def.name}: Any = None"
        else:
            declaration = f"{field_def.name}: {annotation} | None = None"
        return {"name": field_def.name, "annotation": annotation, "declaration": declaration}

    def guard_optional(self, field_def: FieldDef, block: list[str]) -> list[str]:
        return [f"if self.{field_def.name} is not None:"] + block

    def format_literal(self, value: Any) -> str:
        """Format a JSON value as a Python literal, using double-quoted strings."""
        if isinstance(value, str):
            return json.dumps(value, ensure_ascii=False)
        if isinstance(value, (list, tuple)):
            return "[" + ", ".join(self.format_literal(v) for v in value) + "]"
        if isinstance(value, dict):
            items = ", ".join(f"{self.format_literal(k)}: {self.format_literal(v)}" for k, v in value.items())
            return "{" + items + "}"
        return repr(value)

    def _raise(self, exception: str, message: str) -> str:
        return f"    raise {exception}({self.format_literal(message)})"

    def _call(self, helper: str, name: str, *arguments: Any) -> list[str]:
        args = ", ".join([f"self.{name}"] + [self.format_literal(a) for a in arguments] + [self.format_literal(name)])
        return [f"self.{helper}({args})"]

    # Obligation renderers, one per ObligationKind

    def _render_nested(self, name: str, class_name: str) -> list[str]:
        # The dataclass initializer already stored the map; swap in the nested record
        return [
            f"if not isinstance(self.{name}, (dict, {class_name})):",
            self._raise("TypeError", f"{name} must be a dict"),
            f"if isinstance(self.{name}, dict):",
            f'    object.__setattr__(self, "{name}", {class_name}(**self.{name}))',
        ]

    def _render_type(self, name: str, type_name: str) -> list[str]:
        condition, expected = self.TYPE_CHECKS[type_name]
        return [
            f"if {condition.format(value=f'self.{name}')}:",
            self._raise("TypeError", f"{name} must be {expected}"),
        ]

    def _render_any_of(self, name: str, variants: tuple) -> list[str]:
        return self._call("_validate_any_of", name, list(variants))

    def _render_one_of(self, name: str, variants: tuple) -> list[str]:
        return self._call("_validate_one_of", name, list(variants))

    def _render_format(self, name: str, format_name: str) -> list[str]:
        return self._call("_validate_format", name, format_name)

    def _render_enum(self, name: str, values: tuple) -> list[str]:
        return self._call("_validate_enum", name, list(values))

    def _render_array_items(self, name: str, item_type: str | None) -> list[str]:
        return self._call("_validate_array_items", name, item_type)

    def _render_array_items_minimum(self, name: str, minimum: float) -> list[str]:
        return self._call("_validate_array_items_minimum", name, minimum)

    def _render_array_items_maximum(self, name: str, maximum: float) -> list[str]:
        return self._call("_validate_array_items_maximum", name, maximum)

    def _render_minimum(self, name: str, minimum: float) -> list[str]:
        return [f"if self.{name} < {minimum!r}:", self._raise("ValueError", f"{name} must be >= {minimum}")]

    def _render_maximum(self, name: str, maximum: float) -> list[str]:
        return [f"if self.{name} > {maximum!r}:", self._raise("ValueError", f"{name} must be <= {maximum}")]

    def _render_min_length(self, name: str, min_length: int) -> list[str]:
        return [
            f"if len(self.{name}) < {min_length!r}:",
            self._raise("ValueError", f"{name} must be at least {min_length} characters"),
        ]

    def _render_max_length(self, name: str, max_length: int) -> list[str]:
        return [
            f"if len(self.{name}) > {max_length!r}:",
            self._raise("ValueError", f"{name} must be at most {max_length} characters"),
        ]

    def _render_pattern(self, name: str, pattern: str) -> list[str]:
        return [
            f"if not re.search({self.format_literal(pattern)}, self.{name}, re.IGNORECASE):",
            self._raise("ValueError", f"{name} must match pattern {pattern}"),
        ]

    def _render_min_items(self, name: str, min_items: int) -> list[str]:
        return [
            f"if len(self.{name}) < {min_items!r}:",
            self._raise("ValueError", f"{name} must contain at least {min_items} items"),
        ]

    def _render_max_items(self, name: str, max_items: int) -> list[str]:
        return [
            f"if len(self.{name}) > {max_items!r}:",
            self._raise("ValueError", f"{name} must contain at most {max_items} items"),
        ]
