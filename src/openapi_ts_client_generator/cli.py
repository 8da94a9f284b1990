"""Command line interface for TypeScript client generation."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

from .config import ConfigError, load_config
from .generator import GenerationError, OpenAPILoadError, WriteError, run_generation


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser."""
    parser = argparse.ArgumentParser(
        prog="openapi-ts-client-generator",
        description="Generate TypeScript types and a typed fetch client from an OpenAPI document",
    )
    parser.add_argument("--input", required=True, help="Path to an OpenAPI JSON or YAML file")
    parser.add_argument("--output", required=True, help="Output directory for generated files")
    parser.add_argument("--config", help="Path to a YAML generator configuration file")
    parser.add_argument("--api-base-url", help="Default base URL of the generated client")
    parser.add_argument(
        "--strict-operation-ids",
        action="store_true",
        default=None,
        help="Fail when two operations produce the same function name",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        default=None,
        help="Validate the input against the OpenAPI v3 model before generating",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Run CLI and return process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(
            Path(args.config) if args.config else None,
            overrides={
                "api_base_url": args.api_base_url,
                "strict_operation_ids": args.strict_operation_ids,
                "validate_openapi": args.validate,
            },
        )
        run = run_generation(
            input_path=Path(args.input),
            output_dir=Path(args.output),
            config=config,
        )
    except (ConfigError, OpenAPILoadError, GenerationError, WriteError) as exc:
        parser.error(str(exc))
        return 2

    for warning in run.documents.warnings:
        print(f"Warning: {warning}")
    for path in run.written_files:
        print(f"Generated {path}")
    print(f"Generated {len(run.documents.function_names)} client functions")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
