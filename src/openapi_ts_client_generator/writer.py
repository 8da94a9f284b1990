"""Filesystem writers for generated TypeScript documents."""

from __future__ import annotations

import logging
from pathlib import Path

from .model_types import GeneratedDocuments

logger = logging.getLogger(__name__)

TYPES_PATH = Path("types") / "api.types.ts"
CLIENT_PATH = Path("composables") / "useApi.ts"
HELPER_PATH = Path("composables") / "useApiService.ts"


class WriteError(RuntimeError):
    """Raised when output files cannot be written."""


def write_documents(*, output_dir: Path, documents: GeneratedDocuments) -> tuple[Path, ...]:
    """Write the three generated documents below ``output_dir``.

    Existing files are overwritten.

    Args:
        output_dir (Path): Root output directory; created when missing.
        documents (GeneratedDocuments): Documents to write.

    Returns:
        tuple[Path, ...]: Written file paths in types, client, helper order.
    """
    targets = (
        (output_dir / TYPES_PATH, documents.types_document),
        (output_dir / CLIENT_PATH, documents.client_document),
        (output_dir / HELPER_PATH, documents.helper_document),
    )
    written: list[Path] = []
    for path, content in targets:
        _write_file(path, content)
        logger.info("Wrote %s", path)
        written.append(path)
    return tuple(written)


def _write_file(path: Path, content: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise WriteError(f"Failed to write file {path}: {exc}") from exc
