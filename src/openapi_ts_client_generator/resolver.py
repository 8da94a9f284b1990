"""Resolution of schema nodes into TypeScript type expressions."""

from __future__ import annotations

from typing import Optional

from .model_types import (
    ArrayNode,
    ComposedNode,
    EnumStringNode,
    ObjectNode,
    PrimitiveNode,
    ReferenceNode,
    SchemaNode,
)
from .naming import property_key, quote_literal
from .schema_nodes import SchemaCatalog

ANY_TYPE = "any"
OPEN_MAP_TYPE = "Record<string, any>"

_PRIMITIVE_TYPES: dict[str, str] = {
    "string": "string",
    "number": "number",
    "integer": "number",
    "boolean": "boolean",
}


class TypeResolver:
    """Map schema nodes onto type expressions.

    Resolution is total: unsupported or missing constructs become ``any``.
    References resolve to their bare name and are never inlined; the catalog
    is held for callers that need to dereference a name explicitly.
    """

    def __init__(self, catalog: SchemaCatalog, *, intersect_all_of: bool = False) -> None:
        self._catalog = catalog
        self._intersect_all_of = intersect_all_of

    def resolve(self, node: Optional[SchemaNode]) -> str:
        """Resolve a schema node into a type expression.

        Args:
            node (Optional[SchemaNode]): Parsed schema node, ``None`` when absent.

        Returns:
            str: Non-empty type expression.
        """
        if node is None:
            return ANY_TYPE
        if isinstance(node, ReferenceNode):
            return node.name
        if isinstance(node, ComposedNode):
            return self._resolve_composed(node)
        if isinstance(node, EnumStringNode):
            return self.resolve_enum(node)
        if isinstance(node, PrimitiveNode):
            return _PRIMITIVE_TYPES.get(node.kind or "", ANY_TYPE)
        if isinstance(node, ArrayNode):
            return f"{self.resolve(node.item)}[]"
        if isinstance(node, ObjectNode):
            return self._resolve_object(node)
        return ANY_TYPE

    def dereference(self, node: ReferenceNode) -> Optional[SchemaNode]:
        """Return the catalog entry a reference names; raises ``ResolveError`` if absent."""
        return self._catalog.dereference(node.name)

    def resolve_enum(self, node: EnumStringNode) -> str:
        """Render a union of string literals in declared order."""
        if not node.values:
            return ANY_TYPE
        return " | ".join(quote_literal(value) for value in node.values)

    def _resolve_composed(self, node: ComposedNode) -> str:
        if not node.branches:
            return ANY_TYPE
        if not self._intersect_all_of or len(node.branches) == 1:
            return self.resolve(node.branches[0])
        return " & ".join(_parenthesize(self.resolve(branch)) for branch in node.branches)

    def _resolve_object(self, node: ObjectNode) -> str:
        if not node.properties:
            return OPEN_MAP_TYPE
        members = ", ".join(
            f"{property_key(prop.name)}{'' if prop.name in node.required else '?'}: "
            f"{self.resolve(prop.schema)}"
            for prop in node.properties
        )
        return f"{{ {members} }}"


def _parenthesize(expression: str) -> str:
    if " | " in expression:
        return f"({expression})"
    return expression
