"""Generator configuration and configuration file loading."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from .json_types import JSONValue

DEFAULT_API_BASE_URL = "http://localhost:8000"
DEFAULT_TYPES_IMPORT_PATH = "../types/api.types"


class ConfigError(RuntimeError):
    """Raised when generator configuration cannot be loaded."""


class GeneratorConfig(BaseModel):
    """Options controlling one generation run.

    ``api_base_url`` becomes the default of the ``apiBaseUrl`` option accepted
    by the generated client factory; callers can still pass their own value
    at runtime.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    api_base_url: str = DEFAULT_API_BASE_URL
    api_name: Optional[str] = None
    types_import_path: str = DEFAULT_TYPES_IMPORT_PATH
    strict_operation_ids: bool = False
    optional_query_group: bool = False
    intersect_all_of: bool = False
    validate_openapi: bool = False


def load_config(
    path: Optional[Path] = None,
    *,
    overrides: Optional[Mapping[str, JSONValue]] = None,
) -> GeneratorConfig:
    """Load configuration from an optional YAML file plus explicit overrides.

    Args:
        path (Optional[Path]): YAML file holding ``GeneratorConfig`` fields.
        overrides (Optional[Mapping[str, JSONValue]]): Values taking precedence
            over the file; ``None`` entries are ignored.

    Returns:
        GeneratorConfig: Validated configuration.
    """
    values: dict[str, JSONValue] = {}
    if path is not None:
        values.update(_read_config_file(path))
    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value

    try:
        return GeneratorConfig.model_validate(values)
    except ValidationError as exc:
        source = str(path) if path is not None else "overrides"
        raise ConfigError(f"Invalid generator configuration in {source}: {exc}") from exc


def _read_config_file(path: Path) -> Mapping[str, JSONValue]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse YAML in {path}: {exc}") from exc

    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigError(f"Config file {path} must contain a mapping, got {type(payload)!r}")
    return payload
