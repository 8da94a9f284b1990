"""OpenAPI to TypeScript client generator package."""

from __future__ import annotations

from .cli import main
from .config import GeneratorConfig
from .generator import GenerationRun, generate_documents, run_generation

__all__ = ["GenerationRun", "GeneratorConfig", "generate_documents", "main", "run_generation"]
