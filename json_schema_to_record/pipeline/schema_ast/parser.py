"""
JSON Schema parser that builds an AST.

Phase 1 of the pipeline: turn a decoded JSON document into immutable schema
nodes, enforcing the structural invariants the analyzer relies on.
"""

from __future__ import annotations

import logging
from typing import Any

from ..errors import SchemaError
from .nodes import (
    ArrayNode,
    ObjectNode,
    PrimitiveNode,
    PropertyDef,
    SchemaNode,
    UnionNode,
    UnknownNode,
)

logger = logging.getLogger(__name__)


class SchemaParser:
    """Parses an object-shaped JSON Schema into an AST."""

    # Type names with a dedicated validation path
    KNOWN_TYPES = {"string", "integer", "number", "boolean", "array", "object"}

    def parse(self, schema: dict[str, Any], path: str = "#") -> ObjectNode:
        """
        Parse a root object schema.

        Args:
            schema: The JSON Schema dictionary; its "type" must be "object"
            path: Path of the schema in its document (for error messages)

        Returns:
            ObjectNode for the root record

        Raises:
            SchemaError: If the schema violates a structural invariant
        """
        if not isinstance(schema, dict):
            raise SchemaError(f"expected a schema object, got {type(schema).__name__}", path)
        return self._parse_object_node(schema, path)

    def _parse_schema_node(self, schema: dict[str, Any], path: str) -> SchemaNode:
        """
        Parse a property schema recursively.

        Args:
            schema: The schema dictionary
            path: Current path in schema (for error messages)

        Returns:
            Appropriate SchemaNode subclass
        """
        if not isinstance(schema, dict):
            raise SchemaError(f"expected a schema object, got {type(schema).__name__}", path)

        type_name = schema.get("type")

        if "properties" in schema and type_name != "object":
            raise SchemaError(f"'properties' is only allowed on object schemas, not {type_name!r}", path)

        # Objects with properties become records, even when they also declare a union
        if type_name == "object" and "properties" in schema:
            return self._parse_object_node(schema, path)

        # Handle oneOf/anyOf (takes priority over the plain type)
        if "oneOf" in schema or "anyOf" in schema:
            return self._parse_union_node(schema, path)

        if type_name is None:
            return UnknownNode(source_path=path, **self._common_fields(schema))

        if type_name not in self.KNOWN_TYPES:
            logger.warning("%s: unsupported type %r, treating it as untyped", path, type_name)
            return UnknownNode(source_path=path, **self._common_fields(schema))

        if type_name == "array":
            return self._parse_array_node(schema, path)

        return self._parse_primitive_node(schema, type_name, path)

    def _common_fields(self, schema: dict[str, Any]) -> dict[str, Any]:
        """Extract the fields shared by every node kind."""
        enum = schema.get("enum")
        return {
            "description": schema.get("description"),
            "enum": tuple(enum) if enum is not None else None,
        }

    def _parse_union_node(self, schema: dict[str, Any], path: str) -> UnionNode:
        """Parse a oneOf or anyOf union node."""
        if "oneOf" in schema and "anyOf" in schema:
            raise SchemaError("a property cannot declare both 'anyOf' and 'oneOf'", path)

        union_type = "oneOf" if "oneOf" in schema else "anyOf"
        variants = schema[union_type]
        if not isinstance(variants, list):
            raise SchemaError(f"'{union_type}' must be a list of schemas", path)
        for i, variant in enumerate(variants):
            if not isinstance(variant, dict):
                raise SchemaError("alternatives must be schema objects", f"{path}/{union_type}/{i}")

        # Constraints declared next to the union are enforced on top of it
        declared_type = schema.get("type")
        constraints: SchemaNode | None = None
        if declared_type == "array":
            constraints = self._parse_array_node(schema, path)
        elif isinstance(declared_type, str) and declared_type in self.KNOWN_TYPES:
            constraints = self._parse_primitive_node(schema, declared_type, path)

        return UnionNode(
            variants=tuple(variants),
            union_type=union_type,
            declared_type=declared_type,
            constraints=constraints,
            source_path=path,
            **self._common_fields(schema),
        )

    def _parse_array_node(self, schema: dict[str, Any], path: str) -> ArrayNode:
        """Parse an array type node."""
        items_schema = schema.get("items")
        items = None
        item_minimum = None
        item_maximum = None

        if items_schema is not None:
            items = self._parse_schema_node(items_schema, f"{path}/items")
            item_minimum = items_schema.get("minimum")
            item_maximum = items_schema.get("maximum")

        return ArrayNode(
            items=items,
            min_items=schema.get("minItems"),
            max_items=schema.get("maxItems"),
            item_minimum=item_minimum,
            item_maximum=item_maximum,
            source_path=path,
            **self._common_fields(schema),
        )

    def _parse_object_node(self, schema: dict[str, Any], path: str) -> ObjectNode:
        """Parse an object type node."""
        properties_schema = schema.get("properties") or {}
        required_fields = schema.get("required") or []

        missing = [name for name in required_fields if name not in properties_schema]
        if missing:
            raise SchemaError(f"required properties are not declared: {', '.join(missing)}", path)

        properties = []
        for prop_name, prop_schema in properties_schema.items():
            prop_path = f"{path}/properties/{prop_name}"
            properties.append(
                PropertyDef(
                    name=prop_name,
                    type_node=self._parse_schema_node(prop_schema, prop_path),
                    is_required=prop_name in required_fields,
                )
            )

        return ObjectNode(
            properties=tuple(properties),
            required=tuple(required_fields),
            source_path=path,
            **self._common_fields(schema),
        )

    def _parse_primitive_node(self, schema: dict[str, Any], type_name: str, path: str) -> PrimitiveNode:
        """Parse a primitive type node."""
        node_fields: dict[str, Any] = {}

        # Extract validation constraints
        if type_name == "string":
            node_fields["format"] = schema.get("format")
            node_fields["min_length"] = schema.get("minLength")
            node_fields["max_length"] = schema.get("maxLength")
            node_fields["pattern"] = schema.get("pattern")

        if type_name in ("integer", "number"):
            node_fields["minimum"] = schema.get("minimum")
            node_fields["maximum"] = schema.get("maximum")

        return PrimitiveNode(
            declared_type=type_name,
            source_path=path,
            **node_fields,
            **self._common_fields(schema),
        )
