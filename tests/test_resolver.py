"""Unit tests for schema parsing and type expression resolution."""

from __future__ import annotations

from typing import Any, Optional

import pytest

from openapi_ts_client_generator.model_types import (
    ArrayNode,
    ComposedNode,
    EnumStringNode,
    ObjectNode,
    PrimitiveNode,
    ReferenceNode,
)
from openapi_ts_client_generator.resolver import TypeResolver
from openapi_ts_client_generator.schema_nodes import (
    ResolveError,
    SchemaCatalog,
    build_catalog,
    parse_schema_node,
)


def _resolve(schema: Any, *, catalog: Optional[SchemaCatalog] = None, **options: bool) -> str:
    resolver = TypeResolver(catalog or SchemaCatalog(), **options)
    return resolver.resolve(parse_schema_node(schema))


def test_reference_resolves_to_bare_name_without_catalog_entry() -> None:
    """References are emitted by name even when the catalog lacks them."""
    assert _resolve({"$ref": "#/components/schemas/Foo"}) == "Foo"
    catalog = SchemaCatalog({"Foo": {"type": "string"}})
    assert _resolve({"$ref": "#/components/schemas/Foo"}, catalog=catalog) == "Foo"


@pytest.mark.parametrize(
    ("schema", "expected"),
    [
        ({"type": "string"}, "string"),
        ({"type": "string", "format": "date-time"}, "string"),
        ({"type": "number"}, "number"),
        ({"type": "integer"}, "number"),
        ({"type": "boolean"}, "boolean"),
        ({"type": "null"}, "any"),
        ({}, "any"),
        (None, "any"),
        ("not a schema", "any"),
        ({"type": ["string", "null"]}, "any"),
    ],
)
def test_primitive_and_missing_schemas(schema: Any, expected: str) -> None:
    """Unsupported or absent schemas degrade to ``any``."""
    assert _resolve(schema) == expected


def test_enum_keeps_declared_order() -> None:
    """String enums become a literal union in declared order."""
    schema = {"type": "string", "enum": ["Z", "A", "M"]}
    assert _resolve(schema) == "'Z' | 'A' | 'M'"


def test_enum_values_are_escaped_and_stringified() -> None:
    """Quotes are escaped and non-string values use their JSON spelling."""
    schema = {"type": "string", "enum": ["it's", None, 3]}
    assert _resolve(schema) == "'it\\'s' | 'null' | '3'"


def test_enum_without_string_type_is_not_a_union() -> None:
    """Integer enums resolve by their primitive type."""
    assert _resolve({"type": "integer", "enum": [1, 2]}) == "number"


def test_array_of_nested_items() -> None:
    """Arrays append ``[]`` to the resolved item type."""
    schema = {"type": "array", "items": {"type": "array", "items": {"$ref": "#/x/Cell"}}}
    assert _resolve(schema) == "Cell[][]"
    assert _resolve({"type": "array"}) == "any[]"


def test_inline_object_literal() -> None:
    """Objects inline their properties with optional markers in declared order."""
    schema = {
        "type": "object",
        "properties": {
            "b": {"type": "string"},
            "a": {"type": "integer"},
            "x-id": {"type": "boolean"},
        },
        "required": ["a"],
    }
    assert _resolve(schema) == "{ b?: string, a: number, 'x-id'?: boolean }"


def test_object_without_properties_is_open_map() -> None:
    """Objects with no properties resolve to an open string-keyed map."""
    assert _resolve({"type": "object"}) == "Record<string, any>"
    assert _resolve({"type": "object", "properties": {}}) == "Record<string, any>"


def test_untyped_schema_with_properties_is_an_object() -> None:
    """A ``properties`` mapping implies an object when ``type`` is absent."""
    assert _resolve({"properties": {"a": {"type": "string"}}}) == "{ a?: string }"


def test_all_of_uses_first_branch_only() -> None:
    """Later ``allOf`` branches are dropped by default."""
    schema = {"allOf": [{"$ref": "#/components/schemas/Base"}, {"type": "object"}]}
    assert _resolve(schema) == "Base"


def test_all_of_intersection_when_enabled() -> None:
    """With intersection enabled every branch contributes."""
    schema = {
        "allOf": [
            {"$ref": "#/components/schemas/Base"},
            {"type": "string", "enum": ["a", "b"]},
        ]
    }
    assert _resolve(schema, intersect_all_of=True) == "Base & ('a' | 'b')"


def test_resolution_is_deterministic_for_identical_structures() -> None:
    """Structurally identical nodes render identical text."""
    schema = {
        "type": "object",
        "properties": {"tags": {"type": "array", "items": {"type": "string"}}},
    }
    assert _resolve(dict(schema)) == _resolve(dict(schema))


def test_deeply_nested_objects_resolve() -> None:
    """Nesting is bounded only by schema depth."""
    schema: dict[str, Any] = {"type": "string"}
    for _ in range(40):
        schema = {"type": "object", "properties": {"n": schema}, "required": ["n"]}
    resolved = _resolve(schema)
    assert resolved.count("{ n: ") == 40
    assert "string" in resolved


def test_parse_schema_node_variants() -> None:
    """Raw schemas map onto the tagged node types."""
    assert parse_schema_node({"$ref": "#/components/schemas/A"}) == ReferenceNode("A")
    assert parse_schema_node({"type": "integer"}) == PrimitiveNode("integer")
    assert parse_schema_node({"type": "string", "enum": ["x"]}) == EnumStringNode(("x",))
    assert parse_schema_node({"type": "array", "items": {}}) == ArrayNode(PrimitiveNode(None))
    composed = parse_schema_node({"allOf": [{"$ref": "#/a/B"}, 1]})
    assert composed == ComposedNode((ReferenceNode("B"), None))
    obj = parse_schema_node({"type": "object", "required": ["a", 3]})
    assert isinstance(obj, ObjectNode)
    assert obj.required == frozenset({"a"})


def test_catalog_preserves_order_and_is_lazy() -> None:
    """Catalog order follows the document; references are checked only on demand."""
    document = {
        "components": {
            "schemas": {
                "Zeta": {"$ref": "#/components/schemas/Missing"},
                "Alpha": {"type": "string", "description": "First letter"},
            }
        }
    }
    catalog = build_catalog(document)
    assert list(catalog) == ["Zeta", "Alpha"]
    assert catalog.description("Alpha") == "First letter"
    assert catalog.dangling_references() == ["Missing"]
    assert catalog.dereference("Alpha") == PrimitiveNode("string")
    with pytest.raises(ResolveError):
        catalog.dereference("Missing")


def test_catalog_tolerates_missing_components() -> None:
    """Absent component sections mean an empty catalog."""
    assert len(build_catalog({})) == 0
    assert len(build_catalog({"components": {"schemas": None}})) == 0


def test_resolver_dereferences_only_on_request() -> None:
    """Explicit dereferencing fails for dangling names while resolution does not."""
    catalog = SchemaCatalog({"Pet": {"type": "object"}})
    resolver = TypeResolver(catalog)
    assert isinstance(resolver.dereference(ReferenceNode("Pet")), ObjectNode)
    assert resolver.resolve(ReferenceNode("Ghost")) == "Ghost"
    with pytest.raises(ResolveError, match="Ghost"):
        resolver.dereference(ReferenceNode("Ghost"))
