"""Fixture-based OpenAPI validation tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from openapi_python_client.schema import OpenAPI
from pydantic import ValidationError

from openapi_ts_client_generator.loader import OpenAPILoadError, load_openapi_document
from .fixture_helpers import fixture_dir, parametrize_fixtures


def test_fixture_directory_exists() -> None:
    """Ensure the fixtures directory is present."""
    assert fixture_dir().is_dir(), f"Fixture directory not found: {fixture_dir()}"


@parametrize_fixtures()
def test_fixture_is_valid_openapi(fixture_path: Path) -> None:
    """Validate each fixture using openapi-python-client's OpenAPI schema model."""
    try:
        data = load_openapi_document(fixture_path)
    except OpenAPILoadError as exc:
        pytest.fail(f"Failed to load fixture {fixture_path}: {exc}")
    try:
        OpenAPI.model_validate(data)
    except ValidationError as exc:
        pytest.fail(f"OpenAPI validation failed for {fixture_path}:\n{exc}")
