"""
IR (Intermediate Representation) node definitions.

These nodes describe what each generated record must contain (fields,
validation obligations in emission order, helper routines) without saying
anything about target-language syntax. Backends render them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TypeKind(Enum):
    """Kind of a field type, used for annotations."""

    PRIMITIVE = "primitive"  # string, integer, number, boolean, object (opaque map)
    CLASS = "class"  # A generated nested record
    ARRAY = "array"  # list[T]
    UNION = "union"  # T | U | ...
    ANY = "any"  # No declared type


@dataclass(frozen=True)
class TypeRef:
    """A field type reference."""

    kind: TypeKind = TypeKind.ANY
    name: str = ""  # JSON Schema type name or generated record name

    # For arrays (one element type) and unions (one per alternative)
    type_args: tuple[TypeRef, ...] = ()


class ObligationKind(Enum):
    """One discrete validation rule. Declaration order is emission order."""

    NESTED = "nested"  # value must be a map, replaced by the nested record
    TYPE = "type"  # plain runtime kind check
    ANY_OF = "any_of"
    ONE_OF = "one_of"
    FORMAT = "format"
    ENUM = "enum"
    ARRAY_ITEMS = "array_items"
    ARRAY_ITEMS_MINIMUM = "array_items_minimum"
    ARRAY_ITEMS_MAXIMUM = "array_items_maximum"
    MINIMUM = "minimum"
    MAXIMUM = "maximum"
    MIN_LENGTH = "min_length"
    MAX_LENGTH = "max_length"
    PATTERN = "pattern"
    MIN_ITEMS = "min_items"
    MAX_ITEMS = "max_items"


class HelperKind(Enum):
    """Shared helper routines a record may need, in emission order."""

    ARRAY_ITEMS = "array_items"
    ENUM = "enum"
    ANY_OF = "any_of"
    ONE_OF = "one_of"
    FORMAT = "format"


# Which helper each obligation relies on
OBLIGATION_HELPERS = {
    ObligationKind.ARRAY_ITEMS: HelperKind.ARRAY_ITEMS,
    ObligationKind.ARRAY_ITEMS_MINIMUM: HelperKind.ARRAY_ITEMS,
    ObligationKind.ARRAY_ITEMS_MAXIMUM: HelperKind.ARRAY_ITEMS,
    ObligationKind.ENUM: HelperKind.ENUM,
    ObligationKind.ANY_OF: HelperKind.ANY_OF,
    ObligationKind.ONE_OF: HelperKind.ONE_OF,
    ObligationKind.FORMAT: HelperKind.FORMAT,
}


@dataclass(frozen=True)
class Obligation:
    """A validation rule attached to a field.

    ``argument`` depends on the kind: the JSON Schema type name (TYPE,
    ARRAY_ITEMS), the nested record name (NESTED), the bound, length or
    pattern, the format name, the enum values or the union alternatives.
    """

    kind: ObligationKind
    argument: Any = None


@dataclass(frozen=True)
class FieldDef:
    """A field of a generated record."""

    name: str = ""
    is_required: bool = False
    type_ref: TypeRef = field(default_factory=TypeRef)

    # Human readable type, rendered in the documentation comment
    type_description: str = ""

    obligations: tuple[Obligation, ...] = ()

    @property
    def nested_class(self) -> str | None:
        """Name of the nested record this field is constructed into, if any."""
        for obligation in self.obligations:
            if obligation.kind == ObligationKind.NESTED:
                return obligation.argument
        return None


@dataclass(frozen=True)
class RecordDef:
    """One generated record declaration."""

    name: str = ""
    description: str | None = None

    # In schema declaration order
    fields: tuple[FieldDef, ...] = ()

    # Helper routines needed by the obligations of this record only
    helpers: tuple[HelperKind, ...] = ()

    def has_obligation(self, kind: ObligationKind) -> bool:
        return any(o.kind == kind for f in self.fields for o in f.obligations)
