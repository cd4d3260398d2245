"""
Tests for generating records from a "definitions" map.
"""

from __future__ import annotations

import json
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from json_schema_to_record import CompileError, DefinitionsGenerator, UnsupportedLanguageError

SCHEMAS_DIR = Path(__file__).parent / "test_data" / "schemas"


@pytest.fixture
def document():
    with open(SCHEMAS_DIR / "shop.schema.json") as f:
        return json.load(f)


def test_list_definition_keys_in_document_order(document):
    assert DefinitionsGenerator(document).list_definition_keys() == ["Address", "Customer", "Status", "LineItem"]


def test_list_definition_keys_without_definitions():
    assert DefinitionsGenerator({"type": "object"}).list_definition_keys() == []


def test_compile_definition(document):
    out = DefinitionsGenerator(document).compile_definition("Address")

    assert "class Address:" in out
    assert "postal_code: str | None = None" in out


def test_compile_definition_with_override_name(document):
    out = DefinitionsGenerator(document).compile_definition("Customer", "Client")

    assert "class Client:" in out
    assert "class ClientBillingAddress:" in out


def test_missing_definition(document):
    assert DefinitionsGenerator(document).compile_definition("Nope") == '# Definition "Nope" does not exist in the JSON schema'


def test_non_object_definition(document):
    assert DefinitionsGenerator(document).compile_definition("Status") == "# JSON schema type is not object: Status"


def test_compile_many_empty(document):
    assert DefinitionsGenerator(document).compile_many([]) == "# No definition names specified"


def test_compile_many_keeps_order_and_diagnostics(document):
    out = DefinitionsGenerator(document).compile_many(["LineItem", "Nope", "Address"])

    assert out.index("class LineItem:") < out.index('# Definition "Nope"') < out.index("class Address:")


def test_compile_many_shares_one_prefix(document):
    out = DefinitionsGenerator(document).compile_many(["Address", "Customer"])

    assert out.count("from dataclasses import dataclass") == 1
    assert out.count("import re\n") == 1
    assert out.startswith("from __future__ import annotations\n\nimport datetime\nimport ipaddress\nimport re\nimport urllib.parse\n")
    compile(out, "<generated>", "exec")


def test_compile_many_only_diagnostics(document):
    out = DefinitionsGenerator(document).compile_many(["Nope", "Status"])

    assert out == ('# Definition "Nope" does not exist in the JSON schema\n\n' "# JSON schema type is not object: Status")


def test_compile_many_reports_failed_definitions_inline(document):
    document["definitions"]["tool-input"] = {"type": "object", "properties": {"query": {"type": "string"}}}

    out = DefinitionsGenerator(document).compile_many(["tool-input", "Address"])

    assert out.index('# Definition "tool-input" could not be generated: ') < out.index("class Address:")
    assert "not a valid Python identifier" in out
    assert "query" not in out
    compile(out, "<generated>", "exec")


def test_compile_all_reports_failed_definitions(document):
    document["definitions"]["tool-input"] = {"type": "object", "properties": {}}

    results = DefinitionsGenerator(document).compile_all()

    assert results["tool-input"].startswith('# Definition "tool-input" could not be generated: ')
    assert "class Address:" in results["Address"]


def test_compile_definition_raises_for_invalid_name(document):
    document["definitions"]["tool-input"] = {"type": "object", "properties": {}}

    with pytest.raises(CompileError, match="tool-input"):
        DefinitionsGenerator(document).compile_definition("tool-input")

    assert "class ToolInput:" in DefinitionsGenerator(document).compile_definition("tool-input", "ToolInput")


def test_compile_all(document):
    results = DefinitionsGenerator(document).compile_all()

    assert list(results) == ["Address", "Customer", "Status", "LineItem"]
    assert results["Status"] == "# JSON schema type is not object: Status"
    assert "class LineItem:" in results["LineItem"]


def test_ruby_definitions(document):
    out = DefinitionsGenerator(document, language="ruby").compile_many(["Address", "Customer"])

    assert "Address = Data.define(:street, :city, :postal_code) do" in out
    assert "CustomerBillingAddress = Data.define" in out


def test_unsupported_language(document):
    with pytest.raises(UnsupportedLanguageError):
        DefinitionsGenerator(document, language="cobol")


def test_concurrent_compiles_match_sequential(document):
    generator = DefinitionsGenerator(document)
    keys = generator.list_definition_keys() * 4

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(generator.compile_definition, keys))

    assert results == [generator.compile_definition(key) for key in keys]
