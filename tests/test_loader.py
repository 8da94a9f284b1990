"""Unit tests for API description loading and configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from openapi_ts_client_generator.config import (
    DEFAULT_API_BASE_URL,
    ConfigError,
    GeneratorConfig,
    load_config,
)
from openapi_ts_client_generator.loader import (
    OpenAPILoadError,
    ensure_document_shape,
    ensure_supported_version,
    load_openapi_document,
    validate_openapi_document,
)
from .fixture_helpers import named_fixture_path


def test_json_and_yaml_fixtures_load() -> None:
    """Both supported serializations parse into mappings."""
    petstore = load_openapi_document(named_fixture_path("petstore.json"))
    reports = load_openapi_document(named_fixture_path("reports.yaml"))
    assert "/pets" in petstore["paths"]
    assert "/reports" in reports["paths"]


def test_missing_sections_are_accepted() -> None:
    """A document without ``paths`` or ``components`` is structurally fine."""
    assert ensure_document_shape({"openapi": "3.0.0"}) == {"openapi": "3.0.0"}


@pytest.mark.parametrize(
    "payload",
    [
        ["not", "a", "mapping"],
        {"paths": []},
        {"paths": {"/a": "nope"}},
        {"components": {"schemas": ["Pet"]}},
    ],
)
def test_unexpected_structure_is_fatal(payload: Any) -> None:
    """Documents the generator cannot walk are rejected up front."""
    with pytest.raises(OpenAPILoadError):
        ensure_document_shape(payload)


def test_unreadable_and_malformed_files(tmp_path: Path) -> None:
    """Read and syntax errors are wrapped in ``OpenAPILoadError``."""
    with pytest.raises(OpenAPILoadError, match="Failed to read"):
        load_openapi_document(tmp_path / "absent.json")

    bad_yaml = tmp_path / "bad.yaml"
    bad_yaml.write_text("paths: [unclosed", encoding="utf-8")
    with pytest.raises(OpenAPILoadError, match="Failed to parse YAML"):
        load_openapi_document(bad_yaml)


def test_strict_validation_rejects_invalid_documents() -> None:
    """Full validation requires a v3 version and a valid OpenAPI model."""
    with pytest.raises(OpenAPILoadError, match="version"):
        validate_openapi_document({"paths": {}})
    with pytest.raises(OpenAPILoadError, match="validation failed"):
        validate_openapi_document({"openapi": "3.0.3", "paths": {}})
    with pytest.raises(OpenAPILoadError, match="Unsupported"):
        ensure_supported_version("2.0")


def test_default_config() -> None:
    """Defaults keep the source generator's behavior."""
    config = GeneratorConfig()
    assert config.api_base_url == DEFAULT_API_BASE_URL
    assert not config.strict_operation_ids
    assert not config.optional_query_group
    assert not config.intersect_all_of


def test_config_file_and_overrides(tmp_path: Path) -> None:
    """File values load first and non-``None`` overrides win."""
    config_path = tmp_path / "generator.yaml"
    config_path.write_text(
        "api_base_url: https://file.example\nintersect_all_of: true\n", encoding="utf-8"
    )
    config = load_config(
        config_path,
        overrides={"api_base_url": "https://cli.example", "strict_operation_ids": None},
    )
    assert config.api_base_url == "https://cli.example"
    assert config.intersect_all_of
    assert not config.strict_operation_ids


def test_config_errors(tmp_path: Path) -> None:
    """Unknown keys, bad YAML and non-mappings are configuration errors."""
    unknown = tmp_path / "unknown.yaml"
    unknown.write_text("base: x\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid generator configuration"):
        load_config(unknown)

    listing = tmp_path / "list.yaml"
    listing.write_text("- a\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="must contain a mapping"):
        load_config(listing)

    with pytest.raises(ConfigError, match="Failed to read"):
        load_config(tmp_path / "absent.yaml")


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    """An empty file is the same as no file."""
    empty = tmp_path / "empty.yaml"
    empty.write_text("", encoding="utf-8")
    assert load_config(empty) == GeneratorConfig()
