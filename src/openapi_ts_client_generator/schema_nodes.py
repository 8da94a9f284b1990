"""Parsing raw schema objects into schema nodes and building the schema catalog."""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from typing import Optional

from .json_types import JSONObject, JSONValue
from .model_types import (
    ArrayNode,
    ComposedNode,
    EnumStringNode,
    ObjectNode,
    PrimitiveNode,
    PropertyDef,
    ReferenceNode,
    SchemaNode,
)


class ResolveError(RuntimeError):
    """Raised when dereferencing a local OpenAPI reference fails."""


def parse_schema_node(raw: Optional[JSONValue]) -> Optional[SchemaNode]:
    """Parse one raw schema object into a schema node.

    References are kept by name and never followed, so dangling references
    parse without error.

    Args:
        raw (Optional[JSONValue]): Raw schema value from the document.

    Returns:
        Optional[SchemaNode]: Parsed node, or ``None`` for non-mapping input.
    """
    if not isinstance(raw, Mapping):
        return None

    ref = raw.get("$ref")
    if isinstance(ref, str):
        return ReferenceNode(name=ref.rsplit("/", maxsplit=1)[-1])

    all_of = raw.get("allOf")
    if isinstance(all_of, list) and all_of:
        return ComposedNode(branches=tuple(parse_schema_node(branch) for branch in all_of))

    schema_type = raw.get("type")
    enum_values = raw.get("enum")
    if schema_type == "string" and isinstance(enum_values, list):
        return EnumStringNode(values=tuple(_enum_literal(value) for value in enum_values))

    if schema_type == "array":
        return ArrayNode(item=parse_schema_node(raw.get("items")))

    properties = raw.get("properties")
    if schema_type == "object" or (schema_type is None and isinstance(properties, Mapping)):
        return _parse_object(raw)

    return PrimitiveNode(kind=schema_type if isinstance(schema_type, str) else None)


def _parse_object(raw: JSONObject) -> ObjectNode:
    properties = raw.get("properties")
    property_defs: list[PropertyDef] = []
    if isinstance(properties, Mapping):
        for name, prop_schema in properties.items():
            if not isinstance(name, str):
                continue
            description = None
            if isinstance(prop_schema, Mapping):
                description = _string_or_none(prop_schema.get("description"))
            property_defs.append(
                PropertyDef(
                    name=name,
                    schema=parse_schema_node(prop_schema),
                    description=description,
                )
            )

    required_raw = raw.get("required")
    required: frozenset[str] = frozenset()
    if isinstance(required_raw, list):
        required = frozenset(item for item in required_raw if isinstance(item, str))

    return ObjectNode(properties=tuple(property_defs), required=required)


def _enum_literal(value: JSONValue) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _string_or_none(value: Optional[JSONValue]) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


class SchemaCatalog(Mapping[str, Optional[SchemaNode]]):
    """Read-only, ordered mapping of component schema names to parsed nodes."""

    def __init__(self, raw_schemas: Optional[JSONObject] = None) -> None:
        self._nodes: dict[str, Optional[SchemaNode]] = {}
        self._descriptions: dict[str, Optional[str]] = {}
        for name, raw in (raw_schemas or {}).items():
            if not isinstance(name, str):
                continue
            self._nodes[name] = parse_schema_node(raw)
            description = raw.get("description") if isinstance(raw, Mapping) else None
            self._descriptions[name] = _string_or_none(description)

    def __getitem__(self, name: str) -> Optional[SchemaNode]:
        return self._nodes[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def description(self, name: str) -> Optional[str]:
        """Return the raw description of a catalog entry, if any."""
        return self._descriptions.get(name)

    def dereference(self, name: str) -> Optional[SchemaNode]:
        """Look up a referenced schema, failing if it is not defined.

        Args:
            name (str): Bare schema name as carried by ``ReferenceNode``.

        Returns:
            Optional[SchemaNode]: The catalog entry.
        """
        if name not in self._nodes:
            raise ResolveError(f"Unresolvable schema reference: {name}")
        return self._nodes[name]

    def dangling_references(self) -> list[str]:
        """Return referenced names with no catalog entry, in discovery order."""
        missing: list[str] = []
        for node in self._nodes.values():
            for name in iter_reference_names(node):
                if name not in self._nodes and name not in missing:
                    missing.append(name)
        return missing


def build_catalog(document: JSONObject) -> SchemaCatalog:
    """Build the schema catalog from ``components.schemas``; absent means empty."""
    components = document.get("components")
    if not isinstance(components, Mapping):
        return SchemaCatalog()
    schemas = components.get("schemas")
    if not isinstance(schemas, Mapping):
        return SchemaCatalog()
    return SchemaCatalog(schemas)


def iter_reference_names(node: Optional[SchemaNode]) -> Iterator[str]:
    """Yield every reference name reachable from ``node`` without dereferencing."""
    if node is None:
        return
    if isinstance(node, ReferenceNode):
        yield node.name
    elif isinstance(node, ArrayNode):
        yield from iter_reference_names(node.item)
    elif isinstance(node, ObjectNode):
        for prop in node.properties:
            yield from iter_reference_names(prop.schema)
    elif isinstance(node, ComposedNode):
        for branch in node.branches:
            yield from iter_reference_names(branch)


def resolve_local_ref(document: JSONObject, ref: str) -> JSONValue:
    """Follow a local JSON pointer such as ``#/components/parameters/Limit``.

    Args:
        document (JSONObject): Whole source document.
        ref (str): Reference string.

    Returns:
        JSONValue: The referenced raw value.
    """
    if not ref.startswith("#/"):
        raise ResolveError(f"Only local references are currently supported: {ref}")

    current: JSONValue = document
    for token in ref[2:].split("/"):
        token = token.replace("~1", "/").replace("~0", "~")
        if not isinstance(current, Mapping) or token not in current:
            raise ResolveError(f"Unresolvable reference: {ref}")
        current = current[token]
    return current
