"""
AST (Abstract Syntax Tree) node definitions for JSON Schema.

These nodes represent the parsed structure of an object schema before any
validation logic is decided. Nodes are immutable once parsed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SchemaNode:
    """Base class for all AST nodes."""

    # Original source location in schema (for error messages)
    source_path: str = ""

    # Documentation only, never affects validation
    description: str | None = None

    # Literal values from "enum", in declaration order
    enum: tuple[Any, ...] | None = None

    @property
    def type_name(self) -> str | None:
        """The declared JSON Schema type, None when the node accepts anything."""
        return None


@dataclass(frozen=True)
class UnknownNode(SchemaNode):
    """A node without a declared type. No type obligation is ever emitted for it."""


@dataclass(frozen=True)
class PrimitiveNode(SchemaNode):
    """A string, integer, number or boolean, or an object without properties (opaque map)."""

    declared_type: str = ""

    format: str | None = None

    # String constraints
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None

    # Numeric constraints
    minimum: float | None = None
    maximum: float | None = None

    @property
    def type_name(self) -> str | None:
        return self.declared_type

    @property
    def is_numeric(self) -> bool:
        return self.declared_type in ("integer", "number")


@dataclass(frozen=True)
class ArrayNode(SchemaNode):
    """An array, optionally with an element schema."""

    items: SchemaNode | None = None
    min_items: int | None = None
    max_items: int | None = None

    # Bounds applied to every numeric element (from items.minimum/items.maximum)
    item_minimum: float | None = None
    item_maximum: float | None = None

    @property
    def type_name(self) -> str | None:
        return "array"

    @property
    def item_type(self) -> str | None:
        return self.items.type_name if self.items is not None else None


@dataclass(frozen=True)
class PropertyDef:
    """A property in an object."""

    name: str = ""
    type_node: SchemaNode = field(default_factory=UnknownNode)
    is_required: bool = False


@dataclass(frozen=True)
class ObjectNode(SchemaNode):
    """An object type with declared properties; becomes a generated record."""

    properties: tuple[PropertyDef, ...] = ()
    required: tuple[str, ...] = ()

    @property
    def type_name(self) -> str | None:
        return "object"


@dataclass(frozen=True)
class UnionNode(SchemaNode):
    """A oneOf or anyOf property.

    The alternatives are kept verbatim: generated code matches values against
    them at construction time.
    """

    variants: tuple[dict[str, Any], ...] = ()
    union_type: str = "anyOf"  # "oneOf" or "anyOf"

    # The plain "type" declared next to the union, if any
    declared_type: str | None = None

    # format, bounds and items declared next to the union, parsed as for declared_type
    constraints: SchemaNode | None = None

    @property
    def type_name(self) -> str | None:
        return self.declared_type
