"""Operation extraction from ``paths`` and request/response shape analysis."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Optional

from .json_types import JSONObject, JSONValue
from .model_types import Operation, OperationAnalysis, ParameterDef
from .naming import camel_case, operation_identifier, pascal_case
from .resolver import TypeResolver
from .schema_nodes import ResolveError, parse_schema_node, resolve_local_ref

logger = logging.getLogger(__name__)

HTTP_METHODS: frozenset[str] = frozenset(
    {"get", "put", "post", "delete", "patch", "head", "options", "trace"}
)

_JSON_MEDIA_TYPE = "application/json"
_SUCCESS_STATUS = "200"
_PARAMETER_LOCATIONS = ("path", "query")


def collect_operations(document: JSONObject, warnings: list[str]) -> list[Operation]:
    """Build one operation per (path, method) pair in document order.

    Args:
        document (JSONObject): Parsed source document.
        warnings (list[str]): Collector for degraded-input diagnostics.

    Returns:
        list[Operation]: Operations in the order they appear in ``paths``.
    """
    raw_paths = document.get("paths")
    if not isinstance(raw_paths, Mapping):
        return []

    operations: list[Operation] = []
    for path, path_item in raw_paths.items():
        if not isinstance(path, str) or not isinstance(path_item, Mapping):
            continue
        shared_parameters = _collect_parameters(
            document, path_item.get("parameters"), warnings=warnings, context=path
        )
        for method, raw_operation in path_item.items():
            if not isinstance(method, str) or method.lower() not in HTTP_METHODS:
                continue
            if not isinstance(raw_operation, Mapping):
                continue
            operations.append(
                _build_operation(
                    document,
                    method=method.lower(),
                    path=path,
                    raw_operation=raw_operation,
                    shared_parameters=shared_parameters,
                    warnings=warnings,
                )
            )
    return operations


def _build_operation(
    document: JSONObject,
    *,
    method: str,
    path: str,
    raw_operation: JSONObject,
    shared_parameters: list[ParameterDef],
    warnings: list[str],
) -> Operation:
    context = f"{method.upper()} {path}"
    own_parameters = _collect_parameters(
        document, raw_operation.get("parameters"), warnings=warnings, context=context
    )
    own_keys = {(param.name, param.location) for param in own_parameters}
    parameters = [
        param for param in shared_parameters if (param.name, param.location) not in own_keys
    ]
    parameters.extend(own_parameters)

    raw_request_body = raw_operation.get("requestBody")
    has_request_body = isinstance(raw_request_body, Mapping)
    request_schema = None
    if has_request_body:
        request_body = _dereference(
            document, raw_request_body, warnings=warnings, context=context
        )
        request_schema = _json_schema(request_body)

    response_schema = None
    responses = raw_operation.get("responses")
    if isinstance(responses, Mapping):
        success = _dereference(
            document, _success_response(responses), warnings=warnings, context=context
        )
        response_schema = _json_schema(success)

    operation_id = raw_operation.get("operationId")
    return Operation(
        method=method,
        path=path,
        operation_id=operation_id if isinstance(operation_id, str) else None,
        summary=_string_or_none(raw_operation.get("summary")),
        description=_string_or_none(raw_operation.get("description")),
        parameters=tuple(parameters),
        has_request_body=has_request_body,
        request_body=parse_schema_node(request_schema),
        response_schema=parse_schema_node(response_schema),
    )


def _collect_parameters(
    document: JSONObject,
    raw_parameters: Optional[JSONValue],
    *,
    warnings: list[str],
    context: str,
) -> list[ParameterDef]:
    if not isinstance(raw_parameters, list):
        return []

    parameters: list[ParameterDef] = []
    for raw in raw_parameters:
        parameter = _dereference(document, raw, warnings=warnings, context=context)
        if not isinstance(parameter, Mapping):
            continue
        name = parameter.get("name")
        location = parameter.get("in")
        if not isinstance(name, str) or not name or location not in _PARAMETER_LOCATIONS:
            continue
        parameters.append(
            ParameterDef(
                name=name,
                location=str(location),
                required=bool(parameter.get("required")),
                schema=parse_schema_node(parameter.get("schema")),
                description=_string_or_none(parameter.get("description")),
            )
        )
    return parameters


def _dereference(
    document: JSONObject,
    node: Optional[JSONValue],
    *,
    warnings: list[str],
    context: str,
) -> Optional[JSONValue]:
    seen: set[str] = set()
    while isinstance(node, Mapping) and isinstance(node.get("$ref"), str):
        ref = str(node["$ref"])
        if ref in seen:
            warnings.append(f"{context}: circular reference {ref} ignored")
            return None
        seen.add(ref)
        try:
            node = resolve_local_ref(document, ref)
        except ResolveError as exc:
            warnings.append(f"{context}: {exc}")
            return None
    return node


def _success_response(responses: Mapping[str, JSONValue]) -> Optional[JSONValue]:
    # YAML loads an unquoted ``200:`` status key as an integer.
    for status, response in responses.items():
        if str(status) == _SUCCESS_STATUS:
            return response
    return None


def _json_schema(node: Optional[JSONValue]) -> Optional[JSONValue]:
    if not isinstance(node, Mapping):
        return None
    content = node.get("content")
    if not isinstance(content, Mapping):
        return None
    media = content.get(_JSON_MEDIA_TYPE)
    if not isinstance(media, Mapping):
        return None
    return media.get("schema")


def _string_or_none(value: Optional[JSONValue]) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def analyze_operation(
    operation: Operation,
    resolver: TypeResolver,
    *,
    optional_query_group: bool = False,
) -> OperationAnalysis:
    """Derive identifiers and request/response types for one operation.

    Args:
        operation (Operation): Operation extracted from the document.
        resolver (TypeResolver): Resolver for body, response and parameter schemas.
        optional_query_group (bool): Mark the nested ``query`` field optional when
            every query parameter is optional.

    Returns:
        OperationAnalysis: Shape used by the declaration emitter.
    """
    operation_id = operation_identifier(operation.method, operation.path, operation.operation_id)
    path_params = tuple(param for param in operation.parameters if param.location == "path")
    query_params = tuple(param for param in operation.parameters if param.location == "query")

    body_type: Optional[str] = None
    if operation.has_request_body:
        body_type = resolver.resolve(operation.request_body)

    response_type = resolver.resolve(operation.response_schema)
    optional_query = (
        optional_query_group
        and bool(query_params)
        and not any(param.required for param in query_params)
    )
    logger.debug("Analyzed %s %s as %s", operation.method.upper(), operation.path, operation_id)

    return OperationAnalysis(
        operation_id=operation_id,
        type_name=pascal_case(operation_id),
        function_name=camel_case(operation_id),
        path_params=path_params,
        query_params=query_params,
        has_body=operation.has_request_body,
        body_type=body_type,
        response_type=response_type,
        optional_query=optional_query,
    )
