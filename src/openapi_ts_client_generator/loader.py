"""API description loading and structural checks."""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from jsonschema.exceptions import best_match
from jsonschema.validators import validator_for
from openapi_python_client.schema import OpenAPI
from pydantic import ValidationError

from .json_types import JSONObject, JSONValue


class OpenAPILoadError(RuntimeError):
    """Raised when a source API description cannot be loaded."""


_JSON_SUFFIXES = frozenset({".json"})

# Only the parts the generator walks; everything else is left unchecked.
_DOCUMENT_SHAPE_SCHEMA: JSONObject = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "paths": {
            "type": "object",
            "additionalProperties": {"type": "object"},
        },
        "components": {
            "type": "object",
            "properties": {"schemas": {"type": "object"}},
        },
    },
}


def load_openapi_document(path: Path) -> JSONObject:
    """Load an API description from JSON or YAML.

    Args:
        path (Path): Path to the description file. ``.json`` files are parsed as
            JSON, everything else as YAML.

    Returns:
        JSONObject: Parsed document with a checked top-level shape.
    """
    try:
        with path.open("r", encoding="utf-8") as handle:
            if path.suffix.lower() in _JSON_SUFFIXES:
                payload = json.load(handle)
            else:
                payload = yaml.safe_load(handle)
    except OSError as exc:
        raise OpenAPILoadError(f"Failed to read API description {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise OpenAPILoadError(f"Failed to parse JSON in {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise OpenAPILoadError(f"Failed to parse YAML in {path}: {exc}") from exc

    return ensure_document_shape(payload, source=str(path))


def ensure_document_shape(payload: JSONValue, *, source: str = "<document>") -> JSONObject:
    """Check that a parsed payload has the structure the generator walks.

    Missing ``paths`` or ``components.schemas`` are accepted and treated as empty.

    Args:
        payload (JSONValue): Parsed document.
        source (str): Label used in error messages.

    Returns:
        JSONObject: The payload, typed as a mapping.
    """
    if not isinstance(payload, dict):
        raise OpenAPILoadError(
            f"API description {source} must deserialize to a mapping, got {type(payload)!r}"
        )

    validator_cls = validator_for(_DOCUMENT_SHAPE_SCHEMA)
    error = best_match(validator_cls(_DOCUMENT_SHAPE_SCHEMA).iter_errors(payload))
    if error is not None:
        location = "/".join(str(part) for part in error.absolute_path) or "<root>"
        raise OpenAPILoadError(f"Unexpected structure in {source} at {location}: {error.message}")
    return payload


def validate_openapi_document(document: JSONObject, *, source: str = "<document>") -> None:
    """Run full OpenAPI v3 model validation on a document.

    Args:
        document (JSONObject): Parsed document.
        source (str): Label used in error messages.
    """
    ensure_supported_version(get_openapi_version(document))
    try:
        OpenAPI.model_validate(document)
    except ValidationError as exc:
        raise OpenAPILoadError(f"OpenAPI schema validation failed for {source}: {exc}") from exc


def get_openapi_version(document: JSONObject) -> str:
    """Return the declared OpenAPI version string."""
    version = document.get("openapi")
    if not isinstance(version, str) or not version.strip():
        raise OpenAPILoadError("Missing or invalid 'openapi' version field")
    return version.strip()


def ensure_supported_version(version: str) -> None:
    """Validate that the input version is OpenAPI v3+."""
    major_text = version.split(".", maxsplit=1)[0]
    try:
        major = int(major_text)
    except ValueError as exc:
        raise OpenAPILoadError(f"Unable to parse OpenAPI version: {version}") from exc
    if major < 3:
        raise OpenAPILoadError(f"Unsupported OpenAPI version {version}; only v3+ is supported")
