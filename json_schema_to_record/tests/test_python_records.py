"""
Runtime tests for generated Python records.

The generated source is executed and the resulting dataclasses are
constructed with valid and invalid values.
"""

import ast
import dataclasses
import sys
import types

import pytest

from json_schema_to_record import CodeGeneratorConfig, CompileError, compile_schema

PERSON_SCHEMA = {
    "type": "object",
    "description": "A person",
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "age": {"type": "integer", "minimum": 0, "maximum": 150},
        "addr": {
            "type": "object",
            "properties": {"city": {"type": "string"}, "zip": {"type": "string", "pattern": "^[0-9]{5}$"}},
            "required": ["city"],
        },
    },
    "required": ["name"],
}


def build(schema, type_name="Record", config=None):
    """Generate and execute the records of a schema, returning the namespace."""
    code = compile_schema(schema, type_name, config=config)
    # dataclasses looks up string annotations through the defining module
    module = types.ModuleType("generated_records")
    sys.modules[module.__name__] = module
    try:
        exec(code, module.__dict__)
    finally:
        del sys.modules[module.__name__]
    return module.__dict__


def record_with(property_schema, required=True, type_name="Record"):
    schema = {"type": "object", "properties": {"value": property_schema}}
    if required:
        schema["required"] = ["value"]
    return build(schema, type_name)[type_name]


class TestGeneratedSource:
    def test_is_valid_python(self):
        ast.parse(compile_schema(PERSON_SCHEMA, "Person"))

    def test_deterministic(self):
        assert compile_schema(PERSON_SCHEMA, "Person") == compile_schema(PERSON_SCHEMA, "Person")

    def test_nested_declared_before_parent(self):
        code = compile_schema(PERSON_SCHEMA, "Person")

        assert code.index("class PersonAddr:") < code.index("class Person:")

    def test_fields_in_declaration_order(self):
        code = compile_schema(PERSON_SCHEMA, "Person")
        person = code[code.index("class Person:") :]

        assert person.index("name: str") < person.index("age: int | None = None") < person.index("addr: PersonAddr | None = None")

    def test_frozen_keyword_only_dataclass(self):
        code = compile_schema(PERSON_SCHEMA, "Person")

        assert "@dataclass(frozen=True, kw_only=True)" in code
        assert code.startswith("from __future__ import annotations\n\nimport re\nfrom dataclasses import dataclass\n\n")

    def test_documentation_comment(self):
        code = compile_schema(PERSON_SCHEMA, "Person")

        assert "# A person\n# Person fields:\n# - name: string\n# - age: integer\n# - addr: object\n@dataclass" in code

    def test_multiline_description(self):
        code = compile_schema({"type": "object", "description": "First line\nsecond line", "properties": {}}, "Note")

        assert "# First line\n#   second line\n# Note fields:" in code

    def test_no_type_comments(self):
        code = compile_schema(PERSON_SCHEMA, "Person", config=CodeGeneratorConfig(add_type_comments=False))

        assert "fields:" not in code

    def test_only_needed_imports(self):
        code = compile_schema({"type": "object", "properties": {"a": {"type": "integer"}}}, "A")

        assert code.startswith("from __future__ import annotations\n\nfrom dataclasses import dataclass\n\n# A fields:")
        assert "import re" not in code
        assert "typing" not in code

    def test_any_import_for_untyped_fields(self):
        code = compile_schema({"type": "object", "properties": {"a": {}, "b": {"type": "object"}}}, "A")

        assert "from typing import Any" in code
        assert "a: Any = None" in code
        assert "b: dict[str, Any] | None = None" in code

    def test_empty_record(self):
        namespace = build({"type": "object"}, "Empty")

        assert namespace["Empty"]() == namespace["Empty"]()

    def test_non_object_root(self):
        assert compile_schema({"type": "string"}, "Name") == "# JSON schema type is not object: Name"

    def test_invalid_identifier(self):
        with pytest.raises(CompileError, match="class"):
            compile_schema({"type": "object", "properties": {"class": {"type": "string"}}}, "Course")

    def test_builtin_named_optional_fields(self):
        namespace = build(
            {"type": "object", "properties": {"str": {"type": "string"}, "list": {"type": "array"}, "name": {"type": "string"}}},
            "Shadow",
        )

        record = namespace["Shadow"](str="a", list=[1], name="n")
        assert (record.str, record.list, record.name) == ("a", [1], "n")
        with pytest.raises(TypeError, match="name must be a str"):
            namespace["Shadow"](name=1)

    def test_builtin_named_field_needs_future_annotations(self):
        config = CodeGeneratorConfig(use_future_annotations=False)
        schema = {"type": "object", "properties": {"str": {"type": "string"}, "name": {"type": "string"}}}

        with pytest.raises(CompileError, match="shadows a type"):
            compile_schema(schema, "Shadow", config=config)
        # Required fields have no default, so nothing is shadowed
        schema["required"] = ["str"]
        assert not compile_schema(schema, "Shadow", config=config).startswith("from __future__")

    def test_object_with_properties_and_union_is_nested_record(self):
        namespace = build(
            {
                "type": "object",
                "properties": {
                    "addr": {
                        "type": "object",
                        "properties": {"city": {"type": "string"}},
                        "required": ["city"],
                        "anyOf": [{"type": "object", "required": ["city"]}],
                    }
                },
            },
            "Person",
        )

        person = namespace["Person"](addr={"city": "Paris"})
        assert isinstance(person.addr, namespace["PersonAddr"])
        with pytest.raises(TypeError, match="city must be a str"):
            namespace["Person"](addr={"city": 1})

    def test_helpers_only_when_used(self):
        code = compile_schema(PERSON_SCHEMA, "Person")

        for helper in ("_validate_enum", "_validate_array_items", "_validate_any_of", "_validate_one_of", "_validate_format", "_matches_schema"):
            assert helper not in code

    def test_one_matcher_per_record(self):
        code = compile_schema(
            {
                "type": "object",
                "properties": {"a": {"anyOf": [{"type": "string"}]}, "b": {"oneOf": [{"type": "integer"}]}},
            },
            "U",
        )

        assert code.count("def _matches_schema") == 1
        assert code.count("def _validate_any_of") == 1
        assert code.count("def _validate_one_of") == 1


class TestConstruction:
    def test_valid_person(self):
        ns = build(PERSON_SCHEMA, "Person")
        person = ns["Person"](name="Ada", age=36, addr={"city": "London", "zip": "12345"})

        assert person.name == "Ada"
        assert isinstance(person.addr, ns["PersonAddr"])
        assert person.addr.city == "London"

    def test_optional_fields_default_to_none(self):
        person = build(PERSON_SCHEMA, "Person")["Person"](name="Ada")

        assert person.age is None
        assert person.addr is None

    def test_missing_required_field(self):
        with pytest.raises(TypeError):
            build(PERSON_SCHEMA, "Person")["Person"]()

    def test_positional_arguments_rejected(self):
        with pytest.raises(TypeError):
            build(PERSON_SCHEMA, "Person")["Person"]("Ada")

    def test_immutable(self):
        person = build(PERSON_SCHEMA, "Person")["Person"](name="Ada")

        with pytest.raises(dataclasses.FrozenInstanceError):
            person.name = "Bob"

    def test_replace_keeps_nested_record(self):
        ns = build(PERSON_SCHEMA, "Person")
        person = ns["Person"](name="Ada", addr={"city": "London"})
        moved = dataclasses.replace(person, name="Bob")

        assert moved.addr == person.addr

    def test_nested_must_be_a_map(self):
        with pytest.raises(TypeError, match="addr must be a dict"):
            build(PERSON_SCHEMA, "Person")["Person"](name="Ada", addr="London")

    def test_nested_record_validates(self):
        ns = build(PERSON_SCHEMA, "Person")

        with pytest.raises(ValueError, match="zip must match pattern"):
            ns["Person"](name="Ada", addr={"city": "London", "zip": "N1"})
        with pytest.raises(TypeError):
            ns["Person"](name="Ada", addr={"zip": "12345"})

    def test_unknown_nested_key(self):
        with pytest.raises(TypeError):
            build(PERSON_SCHEMA, "Person")["Person"](name="Ada", addr={"city": "London", "street": "Baker"})

    def test_first_failure_wins(self):
        Person = build(PERSON_SCHEMA, "Person")["Person"]

        # name is checked before age
        with pytest.raises(ValueError, match="name must be at least 1 characters"):
            Person(name="", age=-1)
        with pytest.raises(TypeError, match="age must be an int"):
            Person(name="Ada", age="old")


class TestTypes:
    @pytest.mark.parametrize(
        "json_type, good, bad",
        [
            ("string", "x", 1),
            ("integer", 3, 3.5),
            ("integer", 3, True),
            ("number", 3.5, "3.5"),
            ("number", 3, False),
            ("boolean", False, 0),
            ("array", [1], (1,)),
            ("object", {"a": 1}, [("a", 1)]),
        ],
    )
    def test_type_check(self, json_type, good, bad):
        Record = record_with({"type": json_type})

        assert Record(value=good).value == good
        with pytest.raises(TypeError):
            Record(value=bad)

    def test_untyped_accepts_anything(self):
        Record = record_with({})

        for value in ("x", 1, None, [1], {"a": 1}):
            assert Record(value=value).value == value

    def test_optional_none_skips_checks(self):
        Record = record_with({"type": "string", "minLength": 3}, required=False)

        assert Record(value=None).value is None
        with pytest.raises(ValueError):
            Record(value="ab")


class TestConstraints:
    def test_inclusive_minimum(self):
        Record = record_with({"type": "integer", "minimum": 0})

        assert Record(value=0).value == 0
        with pytest.raises(ValueError, match="value must be >= 0"):
            Record(value=-1)

    def test_inclusive_maximum(self):
        Record = record_with({"type": "number", "maximum": 1.5})

        assert Record(value=1.5).value == 1.5
        with pytest.raises(ValueError, match="value must be <= 1.5"):
            Record(value=1.6)

    def test_max_length(self):
        Record = record_with({"type": "string", "maxLength": 2})

        Record(value="ab")
        with pytest.raises(ValueError, match="at most 2 characters"):
            Record(value="abc")

    def test_pattern_is_case_insensitive_search(self):
        Record = record_with({"type": "string", "pattern": "b+"})

        Record(value="aBBa")
        with pytest.raises(ValueError, match="value must match pattern b\\+"):
            Record(value="aaa")

    def test_pattern_with_anchors_and_escapes(self):
        Record = record_with({"type": "string", "pattern": "^\\d{3}-[a-z]+$"})

        Record(value="123-ABC")
        with pytest.raises(ValueError):
            Record(value="x123-abc")

    def test_inclusive_items(self):
        Record = record_with({"type": "array", "minItems": 1, "maxItems": 1})

        Record(value=[1])
        with pytest.raises(ValueError, match="at least 1 items"):
            Record(value=[])
        with pytest.raises(ValueError, match="at most 1 items"):
            Record(value=[1, 2])

    def test_enum(self):
        Record = record_with({"type": "string", "enum": ["red", "green"]})

        Record(value="green")
        with pytest.raises(ValueError, match="value must be one of: red, green"):
            Record(value="blue")

    def test_enum_distinguishes_booleans_from_numbers(self):
        Record = record_with({"enum": [0, 1]})

        assert Record(value=1).value == 1
        assert Record(value=0.0).value == 0.0
        with pytest.raises(ValueError, match="must be one of: 0, 1"):
            Record(value=True)

        Record = record_with({"enum": [True, "yes"]})
        Record(value=True)
        with pytest.raises(ValueError):
            Record(value=1)

    def test_enum_checked_before_length(self):
        Record = record_with({"type": "string", "enum": ["abc"], "minLength": 2})

        with pytest.raises(ValueError, match="must be one of"):
            Record(value="z")

    def test_array_item_types(self):
        Record = record_with({"type": "array", "items": {"type": "integer"}})

        Record(value=[1, 2])
        with pytest.raises(TypeError, match="All items in value must be an int"):
            Record(value=[1, True])

    def test_array_item_bounds(self):
        Record = record_with({"type": "array", "items": {"type": "number", "minimum": 0, "maximum": 1}})

        Record(value=[0, 0.5, 1])
        with pytest.raises(ValueError, match="Items in value must be >= 0"):
            Record(value=[0.5, -0.1])
        with pytest.raises(ValueError, match="Items in value must be <= 1"):
            Record(value=[2])

    def test_untyped_items(self):
        Record = record_with({"type": "array", "items": {}})

        assert Record(value=[1, "a", None]).value == [1, "a", None]


class TestFormats:
    @pytest.mark.parametrize(
        "format_name, good, bad",
        [
            ("email", "ada@example.com", "ada.example.com"),
            ("uri", "https://example.com/path", "ftp://example.com"),
            ("uri", "http://example.com", "example.com"),
            ("date", "2024-02-29", "2023-02-29"),
            ("date-time", "2024-02-29T12:30:00", "yesterday"),
            ("ipv4", "192.168.0.1", "256.1.1.1"),
            ("ipv6", "::1", "192.168.0.1"),
        ],
    )
    def test_format(self, format_name, good, bad):
        Record = record_with({"type": "string", "format": format_name})

        Record(value=good)
        with pytest.raises(ValueError, match=f"value is not a valid {format_name}"):
            Record(value=bad)

    def test_unknown_format_is_accepted(self):
        Record = record_with({"type": "string", "format": "hostname"})

        assert Record(value="anything").value == "anything"

    def test_type_checked_before_format(self):
        Record = record_with({"type": "string", "format": "email"})

        with pytest.raises(TypeError):
            Record(value=42)


class TestUnions:
    def test_any_of_rejects_booleans_and_maps(self):
        Record = record_with({"anyOf": [{"type": "string"}, {"type": "integer"}]})

        assert Record(value="x").value == "x"
        assert Record(value=3).value == 3
        with pytest.raises(ValueError, match="value does not match any of the allowed schemas"):
            Record(value=True)
        with pytest.raises(ValueError):
            Record(value={"a": 1})

    def test_any_of_object_requires_keys(self):
        Record = record_with({"anyOf": [{"type": "string"}, {"type": "object", "required": ["id"]}]})

        Record(value={"id": 1})
        with pytest.raises(ValueError):
            Record(value={"name": "x"})

    def test_any_of_untyped_alternative_matches_anything(self):
        Record = record_with({"anyOf": [{"type": "string"}, {"description": "anything"}]})

        assert Record(value=[1]).value == [1]

    def test_one_of_exactly_one(self):
        Record = record_with({"oneOf": [{"type": "object", "required": ["a"]}, {"type": "object", "required": ["b"]}]})

        Record(value={"a": 1})
        Record(value={"b": 1})
        with pytest.raises(ValueError, match="must match exactly one"):
            Record(value={"a": 1, "b": 2})
        with pytest.raises(ValueError, match="must match exactly one"):
            Record(value={})

    def test_one_of_number_and_integer_overlap(self):
        Record = record_with({"oneOf": [{"type": "number"}, {"type": "integer"}]})

        Record(value=1.5)
        with pytest.raises(ValueError):
            Record(value=1)

    def test_optional_union_accepts_none(self):
        Record = record_with({"anyOf": [{"type": "string"}]}, required=False)

        assert Record(value=None).value is None
        assert Record().value is None

    def test_union_keeps_format_check(self):
        Record = record_with({"type": "string", "format": "email", "anyOf": [{"type": "string"}]})

        Record(value="ada@example.com")
        with pytest.raises(ValueError, match="value is not a valid email"):
            Record(value="not-an-email")

    def test_union_keeps_array_checks(self):
        Record = record_with({"type": "array", "oneOf": [{"type": "array"}], "items": {"type": "integer"}, "maxItems": 2})

        Record(value=[1, 2])
        with pytest.raises(TypeError, match="All items in value must be an int"):
            Record(value=[1, "x"])
        with pytest.raises(ValueError, match="at most 2 items"):
            Record(value=[1, 2, 3])

    def test_union_keeps_bounds(self):
        Record = record_with({"type": "string", "maxLength": 3, "anyOf": [{"type": "string"}, {"type": "integer"}]})

        Record(value="abc")
        with pytest.raises(ValueError, match="at most 3 characters"):
            Record(value="abcd")

    def test_union_annotation(self):
        code = compile_schema(
            {"type": "object", "properties": {"v": {"anyOf": [{"type": "string"}, {"type": "integer"}]}}, "required": ["v"]},
            "U",
        )

        assert "v: str | int\n" in code
        # Required unions are checked without a None guard
        assert "if self.v is not None:" not in code
