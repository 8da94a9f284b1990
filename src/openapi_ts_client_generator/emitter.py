"""Rendering of declarations and client functions as TypeScript source text."""

from __future__ import annotations

import re
from typing import Optional

from .model_types import (
    EnumStringNode,
    ObjectNode,
    Operation,
    OperationAnalysis,
    ParameterDef,
    SchemaNode,
)
from .naming import is_ts_identifier, property_key, quote_literal
from .resolver import TypeResolver

TYPES_NAMESPACE = "ApiTypes"
SERVICE_FUNCTION = "useApiService"

_LINE_BREAK_RE = re.compile(r"\r?\n")
_PATH_PLACEHOLDER_RE = re.compile(r"\{([^{}]+)\}")


def format_comment(text: str, indent: str = "") -> str:
    """Render text as line comments, one per source line.

    Args:
        text (str): Description that may span several lines.
        indent (str): Indentation of the documented declaration.

    Returns:
        str: Comment lines joined with newlines, without a trailing newline.
    """
    return "\n".join(
        f"{indent}// {line.strip()}".rstrip() for line in _LINE_BREAK_RE.split(text)
    )


def _comment_block(text: Optional[str], indent: str = "") -> str:
    if not text:
        return ""
    return format_comment(text, indent) + "\n"


def render_schema_declaration(
    name: str,
    node: Optional[SchemaNode],
    resolver: TypeResolver,
    *,
    description: Optional[str] = None,
) -> str:
    """Render one catalog entry as a type alias or interface.

    Args:
        name (str): Catalog entry name, used verbatim as the declaration name.
        node (Optional[SchemaNode]): Parsed schema of the entry.
        resolver (TypeResolver): Resolver for member types.
        description (Optional[str]): Entry description for the leading comment.

    Returns:
        str: Declaration text followed by a blank line.
    """
    if isinstance(node, EnumStringNode):
        comment = _comment_block(description)
        return f"{comment}export type {name} = {resolver.resolve_enum(node)}\n\n"

    if isinstance(node, ObjectNode) or node is None:
        return _render_interface(name, node, resolver, description=description)

    comment = _comment_block(description)
    return f"{comment}export type {name} = {resolver.resolve(node)}\n\n"


def _render_interface(
    name: str,
    node: Optional[ObjectNode],
    resolver: TypeResolver,
    *,
    description: Optional[str],
) -> str:
    lines: list[str] = []
    if description:
        lines.append(format_comment(description))
    lines.append(f"export interface {name} {{")
    if node is not None:
        for prop in node.properties:
            if prop.description:
                lines.append(format_comment(prop.description, "  "))
            optional = "" if prop.name in node.required else "?"
            lines.append(f"  {property_key(prop.name)}{optional}: {resolver.resolve(prop.schema)}")
    lines.append("}")
    return "\n".join(lines) + "\n\n"


def render_request_type(analysis: OperationAnalysis, resolver: TypeResolver) -> str:
    """Render the request interface of an operation.

    Returns an empty string when the operation takes no typed request.
    """
    if not analysis.needs_request_type:
        return ""

    lines = [f"export interface {analysis.request_type_name} {{"]
    for param in analysis.path_params:
        lines.extend(_parameter_lines(param, resolver, indent="  ", optional=False))

    if analysis.has_query:
        query_marker = "?" if analysis.optional_query else ""
        lines.append(f"  query{query_marker}: {{")
        for param in analysis.query_params:
            lines.extend(
                _parameter_lines(param, resolver, indent="    ", optional=not param.required)
            )
        lines.append("  }")

    if analysis.has_body:
        lines.append(f"  body: {analysis.body_type or 'any'}")

    lines.append("}")
    return "\n".join(lines) + "\n\n"


def _parameter_lines(
    param: ParameterDef,
    resolver: TypeResolver,
    *,
    indent: str,
    optional: bool,
) -> list[str]:
    lines: list[str] = []
    if param.description:
        lines.append(format_comment(param.description, indent))
    marker = "?" if optional else ""
    lines.append(f"{indent}{property_key(param.name)}{marker}: {resolver.resolve(param.schema)}")
    return lines


def render_response_type(analysis: OperationAnalysis) -> str:
    """Render the response type alias of an operation."""
    return f"export type {analysis.response_type_name} = {analysis.response_type}\n\n"


def render_client_function(operation: Operation, analysis: OperationAnalysis) -> str:
    """Render one client function inside the client factory body.

    The body performs exactly one call to the fetch wrapper; failures of that
    call propagate to the caller unchanged.

    Args:
        operation (Operation): Source operation, for the path template and comment.
        analysis (OperationAnalysis): Analyzed request/response shape.

    Returns:
        str: Function declaration indented for the factory body.
    """
    comment = operation.summary or operation.description
    if not comment:
        comment = f"{operation.method.upper()} {operation.path}"

    params = ""
    if analysis.needs_request_type:
        params = f"params: {TYPES_NAMESPACE}.{analysis.request_type_name}"
    response_type = f"{TYPES_NAMESPACE}.{analysis.response_type_name}"

    lines = [
        format_comment(comment, "  "),
        f"  const {analysis.function_name} = async ({params}): Promise<{response_type}> => {{",
        f"    {render_service_call(operation, analysis)}",
        "  }",
    ]
    return "\n".join(lines) + "\n\n"


def render_service_call(operation: Operation, analysis: OperationAnalysis) -> str:
    """Render the ``return await useApiService(...)`` statement of a client function."""
    path = operation.path
    if analysis.path_params:
        path = _PATH_PLACEHOLDER_RE.sub(lambda match: f"${{{param_access(match.group(1))}}}", path)

    options = ["baseURL", f"method: {quote_literal(operation.method.upper())}"]
    if analysis.has_query:
        options.append("query: params.query")
    if analysis.has_body:
        options.append("body: params.body")

    response_type = f"{TYPES_NAMESPACE}.{analysis.response_type_name}"
    option_lines = ",\n".join(f"      {option}" for option in options)
    return (
        f"return await {SERVICE_FUNCTION}<{response_type}>(`{path}`, {{\n"
        f"{option_lines}\n"
        "    })"
    )


def param_access(name: str) -> str:
    """Render the expression reading a path parameter from ``params``."""
    if is_ts_identifier(name):
        return f"params.{name}"
    return f"params[{quote_literal(name)}]"
