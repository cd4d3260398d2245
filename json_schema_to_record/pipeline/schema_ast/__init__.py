"""
Schema AST (Abstract Syntax Tree) module.

Contains the AST node definitions and parser for JSON Schema.
"""

from __future__ import annotations

from .nodes import (
    ArrayNode,
    ObjectNode,
    PrimitiveNode,
    PropertyDef,
    SchemaNode,
    UnionNode,
    UnknownNode,
)
from .parser import SchemaParser

__all__ = [
    "SchemaNode",
    "ObjectNode",
    "ArrayNode",
    "PrimitiveNode",
    "PropertyDef",
    "UnionNode",
    "UnknownNode",
    "SchemaParser",
]
