"""High-level generator orchestration."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .config import GeneratorConfig
from .emitter import (
    TYPES_NAMESPACE,
    SERVICE_FUNCTION,
    render_client_function,
    render_request_type,
    render_response_type,
    render_schema_declaration,
)
from .json_types import JSONObject
from .loader import OpenAPILoadError, load_openapi_document, validate_openapi_document
from .model_types import GeneratedDocuments, Operation, OperationAnalysis
from .naming import find_duplicate_names, quote_literal
from .operations import analyze_operation, collect_operations
from .resolver import TypeResolver
from .schema_nodes import SchemaCatalog, build_catalog, iter_reference_names
from .static_helper import render_helper_document
from .writer import WriteError, write_documents

logger = logging.getLogger(__name__)

_DEFAULT_API_NAME = "API"


class GenerationError(RuntimeError):
    """Raised when generation is aborted by a strict configuration check."""


@dataclass(frozen=True)
class GenerationRun:
    """Generated documents and the files they were written to."""

    documents: GeneratedDocuments
    written_files: tuple[Path, ...]


def generate_documents(
    document: JSONObject,
    *,
    config: Optional[GeneratorConfig] = None,
    generated_at: Optional[datetime] = None,
) -> GeneratedDocuments:
    """Generate the types, client and helper documents for an API description.

    Output is byte-identical across runs on the same input except for the
    ``Generated at`` line.

    Args:
        document (JSONObject): Parsed API description.
        config (Optional[GeneratorConfig]): Generation options; defaults apply when omitted.
        generated_at (Optional[datetime]): Timestamp embedded in headers; now (UTC) when omitted.

    Returns:
        GeneratedDocuments: Rendered documents with generation warnings.
    """
    config = config or GeneratorConfig()
    timestamp = _format_timestamp(generated_at or datetime.now(timezone.utc))
    api_name = config.api_name or _document_title(document) or _DEFAULT_API_NAME
    warnings: list[str] = []

    catalog = build_catalog(document)
    resolver = TypeResolver(catalog, intersect_all_of=config.intersect_all_of)
    logger.debug("Resolving %d component schemas", len(catalog))
    schema_section = "".join(
        render_schema_declaration(
            name,
            catalog[name],
            resolver,
            description=catalog.description(name),
        )
        for name in catalog
    )

    operations = collect_operations(document, warnings)
    logger.debug("Generating %d operations", len(operations))
    analyses = [
        analyze_operation(
            operation,
            resolver,
            optional_query_group=config.optional_query_group,
        )
        for operation in operations
    ]
    _check_operation_names(analyses, strict=config.strict_operation_ids, warnings=warnings)
    warnings.extend(
        f"Unresolved schema reference: {name}"
        for name in _dangling_references(catalog, operations)
    )

    endpoint_section = "// Endpoint-specific types\n" + "".join(
        render_request_type(analysis, resolver) + render_response_type(analysis)
        for analysis in analyses
    )
    types_document = (
        f"// Generated TypeScript types for {api_name}\n"
        f"// Generated at: {timestamp}\n\n"
        f"{schema_section}{endpoint_section}"
    )

    client_document = _render_client_document(
        operations=operations,
        analyses=analyses,
        api_name=api_name,
        timestamp=timestamp,
        config=config,
    )

    return GeneratedDocuments(
        types_document=types_document,
        client_document=client_document,
        helper_document=render_helper_document(),
        function_names=tuple(analysis.function_name for analysis in analyses),
        warnings=tuple(warnings),
    )


def run_generation(
    *,
    input_path: Path,
    output_dir: Path,
    config: Optional[GeneratorConfig] = None,
) -> GenerationRun:
    """Load an API description, generate the documents and write them to disk.

    Nothing is written when loading or generation fails.

    Args:
        input_path (Path): Path to the JSON or YAML API description.
        output_dir (Path): Directory receiving ``types/`` and ``composables/``.
        config (Optional[GeneratorConfig]): Generation options.

    Returns:
        GenerationRun: Generated documents and written file paths.
    """
    config = config or GeneratorConfig()
    document = load_openapi_document(input_path)
    if config.validate_openapi:
        validate_openapi_document(document, source=str(input_path))

    documents = generate_documents(document, config=config)
    written_files = write_documents(output_dir=output_dir, documents=documents)
    return GenerationRun(documents=documents, written_files=written_files)


def _render_client_document(
    *,
    operations: list[Operation],
    analyses: list[OperationAnalysis],
    api_name: str,
    timestamp: str,
    config: GeneratorConfig,
) -> str:
    default_base_url = quote_literal(config.api_base_url)
    functions = "".join(
        render_client_function(operation, analysis)
        for operation, analysis in zip(operations, analyses)
    )
    names = [analysis.function_name for analysis in analyses]
    if names:
        function_map = "  return {\n    " + ",\n    ".join(names) + "\n  }\n"
    else:
        function_map = "  return {}\n"

    return (
        f"// Generated API composables for {api_name}\n"
        f"// Generated at: {timestamp}\n\n"
        f"import type * as {TYPES_NAMESPACE} from {quote_literal(config.types_import_path)}\n"
        f"import {{ {SERVICE_FUNCTION} }} from './{SERVICE_FUNCTION}'\n\n"
        "export interface ApiConfig {\n"
        f"  // Base URL prepended to every request path. Defaults to {default_base_url}.\n"
        "  apiBaseUrl?: string\n"
        "}\n\n"
        "export const useApi = (config: ApiConfig = {}) => {\n"
        f"  const baseURL = config.apiBaseUrl ?? {default_base_url}\n\n"
        f"{functions}"
        f"{function_map}"
        "}\n"
    )


def _check_operation_names(
    analyses: list[OperationAnalysis],
    *,
    strict: bool,
    warnings: list[str],
) -> None:
    duplicates = find_duplicate_names(analysis.function_name for analysis in analyses)
    if not duplicates:
        return
    joined = ", ".join(duplicates)
    if strict:
        raise GenerationError(f"Duplicate operation identifiers: {joined}")
    warnings.append(
        f"Duplicate operation identifiers; later declarations shadow earlier ones: {joined}"
    )


def _dangling_references(catalog: SchemaCatalog, operations: list[Operation]) -> list[str]:
    missing = catalog.dangling_references()
    for operation in operations:
        nodes = [operation.request_body, operation.response_schema]
        nodes.extend(param.schema for param in operation.parameters)
        for node in nodes:
            for name in iter_reference_names(node):
                if name not in catalog and name not in missing:
                    missing.append(name)
    return missing


def _document_title(document: JSONObject) -> Optional[str]:
    info = document.get("info")
    if not isinstance(info, Mapping):
        return None
    title = info.get("title")
    if isinstance(title, str) and title.strip():
        return title.strip()
    return None


def _format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    utc_value = value.astimezone(timezone.utc)
    return utc_value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


__all__ = [
    "GenerationError",
    "GenerationRun",
    "OpenAPILoadError",
    "WriteError",
    "generate_documents",
    "run_generation",
]
