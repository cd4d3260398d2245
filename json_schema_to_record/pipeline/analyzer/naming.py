"""
Name derivation for records generated from inline object properties.

Nested record names are built from the parent record name and the property
name, so the same schema always yields the same names. The singularization
rules are deliberately simple: irregular plurals are mis-singularized
("classes" -> "Classe") and downstream code may depend on exactly these names.
"""

from __future__ import annotations


def singularize(name: str) -> str:
    """Strip one plural suffix from a property name.

    Examples:
        "categories" -> "category"
        "boxes" -> "box"
        "addresses" -> "addresse"
        "tags" -> "tag"
        "address" -> "address"
    """
    if name.endswith("ies"):
        return name[:-3] + "y"
    if name.endswith("es") and not name.endswith("sses"):
        return name[:-2]
    if name.endswith("s") and not name.endswith("ss"):
        return name[:-1]
    return name


def class_name_for_property(property_name: str) -> str:
    """Singularize a property name and capitalize each underscore-separated word."""
    return "".join(part.capitalize() for part in singularize(property_name).split("_"))


def derive_nested_name(parent_type_name: str, property_name: str) -> str:
    """Name the record generated for an object-typed property.

    >>> derive_nested_name("Person", "addresses")
    'PersonAddresse'
    >>> derive_nested_name("Order", "line_items")
    'OrderLineItem'
    """
    return f"{parent_type_name}{class_name_for_property(property_name)}"
