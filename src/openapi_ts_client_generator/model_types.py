"""Internal datatypes for schema resolution and code generation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class ReferenceNode:
    """Pointer to a named catalog entry, emitted by name only."""

    name: str


@dataclass(frozen=True)
class PrimitiveNode:
    """Scalar schema; ``kind`` is the raw ``type`` value when it is a string."""

    kind: Optional[str]


@dataclass(frozen=True)
class EnumStringNode:
    """String schema restricted to a fixed list of literals."""

    values: tuple[str, ...]


@dataclass(frozen=True)
class ArrayNode:
    """Homogeneous array schema."""

    item: Optional[SchemaNode]


@dataclass(frozen=True)
class PropertyDef:
    """A single property of an object schema."""

    name: str
    schema: Optional[SchemaNode]
    description: Optional[str] = None


@dataclass(frozen=True)
class ObjectNode:
    """Object schema with properties in declared order."""

    properties: tuple[PropertyDef, ...]
    required: frozenset[str]


@dataclass(frozen=True)
class ComposedNode:
    """``allOf`` composition."""

    branches: tuple[Optional[SchemaNode], ...]


type SchemaNode = Union[
    ReferenceNode,
    PrimitiveNode,
    EnumStringNode,
    ArrayNode,
    ObjectNode,
    ComposedNode,
]


@dataclass(frozen=True)
class ParameterDef:
    """Path or query parameter of an operation."""

    name: str
    location: str
    required: bool
    schema: Optional[SchemaNode]
    description: Optional[str] = None


@dataclass(frozen=True)
class Operation:
    """One HTTP method bound to one path template."""

    method: str
    path: str
    operation_id: Optional[str]
    summary: Optional[str]
    description: Optional[str]
    parameters: tuple[ParameterDef, ...]
    has_request_body: bool
    request_body: Optional[SchemaNode]
    response_schema: Optional[SchemaNode]


@dataclass(frozen=True)
class OperationAnalysis:
    """Request and response shape derived from one operation."""

    operation_id: str
    type_name: str
    function_name: str
    path_params: tuple[ParameterDef, ...]
    query_params: tuple[ParameterDef, ...]
    has_body: bool
    body_type: Optional[str]
    response_type: str
    optional_query: bool = False

    @property
    def has_query(self) -> bool:
        """Whether the operation declares any query parameter."""
        return bool(self.query_params)

    @property
    def needs_request_type(self) -> bool:
        """Whether the client function takes a typed ``params`` argument."""
        return bool(self.path_params) or self.has_query or self.has_body

    @property
    def request_type_name(self) -> str:
        return f"{self.type_name}Request"

    @property
    def response_type_name(self) -> str:
        return f"{self.type_name}Response"


@dataclass(frozen=True)
class GeneratedDocuments:
    """Text documents produced by one generation run."""

    types_document: str
    client_document: str
    helper_document: str
    function_names: tuple[str, ...]
    warnings: tuple[str, ...]
