"""
Schema analyzer.

Phase 2 of the pipeline: walk an object schema depth-first and decide, for
every property, which validation obligations the generated record must carry
and which nested records must be declared before it.

The walk is pure: each call returns its own record together with the nested
records it produced, and the caller composes them. Nothing is shared between
calls, so independent schemas can be analyzed concurrently.
"""

from __future__ import annotations

import json
import logging

from ..config import CodeGeneratorConfig
from ..schema_ast.nodes import (
    ArrayNode,
    ObjectNode,
    PrimitiveNode,
    SchemaNode,
    UnionNode,
)
from .ir_nodes import (
    OBLIGATION_HELPERS,
    FieldDef,
    HelperKind,
    Obligation,
    ObligationKind,
    RecordDef,
    TypeKind,
    TypeRef,
)
from .naming import derive_nested_name

logger = logging.getLogger(__name__)

NUMERIC_TYPES = ("integer", "number")


class RecordAnalyzer:
    """Builds record definitions from parsed object schemas."""

    def __init__(self, config: CodeGeneratorConfig | None = None):
        self.config = config or CodeGeneratorConfig()

    def analyze(self, node: ObjectNode, type_name: str) -> list[RecordDef]:
        """
        Analyze an object schema into the records to generate.

        Args:
            node: The parsed object schema
            type_name: Name of the top-level record

        Returns:
            Nested records depth-first in property declaration order,
            followed by the top-level record
        """
        record, nested = self.analyze_record(node, type_name)
        return nested + [record]

    def analyze_record(self, node: ObjectNode, type_name: str) -> tuple[RecordDef, list[RecordDef]]:
        """
        Analyze one object schema.

        Returns:
            Tuple of (the record for this schema, its nested records in declaration order)
        """
        fields = []
        nested: list[RecordDef] = []

        for prop in node.properties:
            type_node = prop.type_node

            if isinstance(type_node, ObjectNode):
                nested_name = derive_nested_name(type_name, prop.name)
                child, child_nested = self.analyze_record(type_node, nested_name)
                nested.extend(child_nested)
                nested.append(child)
                obligations: tuple[Obligation, ...] = (Obligation(ObligationKind.NESTED, nested_name),)
                type_ref = TypeRef(TypeKind.CLASS, nested_name)
            else:
                obligations = self._collect_obligations(type_node)
                type_ref = self._type_ref(type_node)

            fields.append(
                FieldDef(
                    name=prop.name,
                    is_required=prop.is_required,
                    type_ref=type_ref,
                    type_description=self.describe_type(type_node),
                    obligations=obligations,
                )
            )

        record = RecordDef(
            name=type_name,
            description=node.description,
            fields=tuple(fields),
            helpers=self._collect_helpers(fields),
        )
        logger.debug(
            "Analyzed record %s: %d fields, %d nested records, helpers=%s",
            type_name,
            len(fields),
            len(nested),
            [h.value for h in record.helpers],
        )
        return record, nested

    def _collect_obligations(self, node: SchemaNode) -> tuple[Obligation, ...]:
        """Collect the obligations of a non-nested property, in emission order."""
        obligations = []

        # Union check replaces the plain type check; the rest still applies
        if isinstance(node, UnionNode):
            kind = ObligationKind.ONE_OF if node.union_type == "oneOf" else ObligationKind.ANY_OF
            obligations.append(Obligation(kind, node.variants))
            if node.constraints is not None:
                constrained = self._collect_obligations(node.constraints)
                obligations.extend(o for o in constrained if o.kind != ObligationKind.TYPE)
                return tuple(obligations)
        elif isinstance(node, (PrimitiveNode, ArrayNode)):
            obligations.append(Obligation(ObligationKind.TYPE, node.type_name))

        if isinstance(node, PrimitiveNode) and node.format:
            obligations.append(Obligation(ObligationKind.FORMAT, node.format))

        if node.enum is not None:
            obligations.append(Obligation(ObligationKind.ENUM, node.enum))

        if isinstance(node, ArrayNode) and node.items is not None:
            item_type = node.item_type
            obligations.append(Obligation(ObligationKind.ARRAY_ITEMS, item_type))
            if item_type in NUMERIC_TYPES:
                if node.item_minimum is not None:
                    obligations.append(Obligation(ObligationKind.ARRAY_ITEMS_MINIMUM, node.item_minimum))
                if node.item_maximum is not None:
                    obligations.append(Obligation(ObligationKind.ARRAY_ITEMS_MAXIMUM, node.item_maximum))

        if isinstance(node, PrimitiveNode):
            if node.is_numeric:
                if node.minimum is not None:
                    obligations.append(Obligation(ObligationKind.MINIMUM, node.minimum))
                if node.maximum is not None:
                    obligations.append(Obligation(ObligationKind.MAXIMUM, node.maximum))
            if node.declared_type == "string":
                if node.min_length is not None:
                    obligations.append(Obligation(ObligationKind.MIN_LENGTH, node.min_length))
                if node.max_length is not None:
                    obligations.append(Obligation(ObligationKind.MAX_LENGTH, node.max_length))
                if node.pattern is not None:
                    obligations.append(Obligation(ObligationKind.PATTERN, node.pattern))

        if isinstance(node, ArrayNode) and not self.config.drop_min_max_items:
            if node.min_items is not None:
                obligations.append(Obligation(ObligationKind.MIN_ITEMS, node.min_items))
            if node.max_items is not None:
                obligations.append(Obligation(ObligationKind.MAX_ITEMS, node.max_items))

        return tuple(obligations)

    def _collect_helpers(self, fields: list[FieldDef]) -> tuple[HelperKind, ...]:
        """Helpers needed by this record's obligations, in fixed emission order."""
        used = {
            OBLIGATION_HELPERS[obligation.kind]
            for f in fields
            for obligation in f.obligations
            if obligation.kind in OBLIGATION_HELPERS
        }
        return tuple(helper for helper in HelperKind if helper in used)

    def _type_ref(self, node: SchemaNode | None) -> TypeRef:
        """Build the annotation type of a node."""
        if isinstance(node, UnionNode):
            return TypeRef(TypeKind.UNION, type_args=tuple(self._variant_type_ref(v) for v in node.variants))
        if isinstance(node, ArrayNode):
            type_args = (self._type_ref(node.items),) if node.items is not None else ()
            return TypeRef(TypeKind.ARRAY, "array", type_args)
        if isinstance(node, ObjectNode):
            # Objects nested in arrays are not turned into records
            return TypeRef(TypeKind.PRIMITIVE, "object")
        if isinstance(node, PrimitiveNode):
            return TypeRef(TypeKind.PRIMITIVE, node.declared_type)
        return TypeRef(TypeKind.ANY)

    def _variant_type_ref(self, variant: dict) -> TypeRef:
        variant_type = variant.get("type")
        if variant_type == "array":
            return TypeRef(TypeKind.ARRAY, "array")
        if variant_type in ("string", "integer", "number", "boolean", "object"):
            return TypeRef(TypeKind.PRIMITIVE, variant_type)
        return TypeRef(TypeKind.ANY)

    def describe_type(self, node: SchemaNode) -> str:
        """Human readable type of a property, used in documentation comments."""
        suffix = f" - {node.description}" if node.description else ""

        if isinstance(node, UnionNode):
            if node.union_type == "oneOf":
                return f"oneOf pattern{suffix}"
            types = []
            for variant in node.variants:
                variant_type = str(variant.get("type") or "object")
                if variant_type not in types:
                    types.append(variant_type)
            return f"{' or '.join(types)}{suffix}"

        if node.enum is not None:
            values = ", ".join(json.dumps(v, ensure_ascii=False) for v in node.enum)
            return f"{node.type_name or 'any'} ({values}){suffix}"

        if isinstance(node, ArrayNode) and node.items is not None:
            return f"{node.item_type or 'any'}[] (array){suffix}"

        if node.type_name == "object":
            return f"object{suffix}"

        format_name = node.format if isinstance(node, PrimitiveNode) else None
        format_part = f" ({format_name})" if format_name else ""
        return f"{node.type_name or 'any'}{format_part}{suffix}"
