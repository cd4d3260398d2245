"""
Analyzer module.

Decides the validation obligations and nested records of each object
schema and produces the IR consumed by the backends.
"""

from __future__ import annotations

from .analyzer import RecordAnalyzer
from .ir_nodes import (
    FieldDef,
    HelperKind,
    Obligation,
    ObligationKind,
    RecordDef,
    TypeKind,
    TypeRef,
)
from .naming import derive_nested_name, singularize

__all__ = [
    "RecordAnalyzer",
    "RecordDef",
    "FieldDef",
    "Obligation",
    "ObligationKind",
    "HelperKind",
    "TypeKind",
    "TypeRef",
    "derive_nested_name",
    "singularize",
]
