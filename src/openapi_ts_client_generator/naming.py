"""Naming helpers for generated TypeScript identifiers."""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable
from typing import Optional

_WORD_SPLIT_RE = re.compile(r"[^0-9A-Za-z]+")
_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z])(?=[A-Z])")
_PATH_PARAM_RE = re.compile(r"\{[^{}]*\}")
_NON_IDENTIFIER_RE = re.compile(r"[^0-9A-Za-z]")
_TS_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][0-9A-Za-z_$]*$")


def split_words(raw: str) -> list[str]:
    """Split text on non-alphanumeric runs and lower-to-upper case transitions.

    Args:
        raw (str): Arbitrary source text.

    Returns:
        list[str]: Non-empty words in source order.
    """
    words: list[str] = []
    for chunk in _WORD_SPLIT_RE.split(raw):
        if not chunk:
            continue
        words.extend(word for word in _CAMEL_BOUNDARY_RE.split(chunk) if word)
    return words


def pascal_case(raw: str) -> str:
    """Convert text to a PascalCase identifier.

    Args:
        raw (str): Arbitrary source text.

    Returns:
        str: Identifier with the first letter of every word upper-cased.
    """
    text = "".join(word[0].upper() + word[1:] for word in split_words(raw))
    return _NON_IDENTIFIER_RE.sub("", text)


def camel_case(raw: str) -> str:
    """Convert text to a camelCase identifier.

    Args:
        raw (str): Arbitrary source text.

    Returns:
        str: PascalCase identifier with the first word lower-cased.
    """
    words = split_words(raw)
    if not words:
        return ""
    head = words[0].lower()
    tail = "".join(word[0].upper() + word[1:] for word in words[1:])
    return _NON_IDENTIFIER_RE.sub("", head + tail)


def derive_operation_id(method: str, path: str) -> str:
    """Derive an operation id from the HTTP method and path template.

    Placeholders become ``By`` and separators are stripped before casing, so
    ``get /users/{id}/posts`` becomes ``getUsersByposts``.
    """
    compact = _NON_IDENTIFIER_RE.sub("", _PATH_PARAM_RE.sub("By", path))
    return f"{method.lower()}{pascal_case(compact)}"


def operation_identifier(method: str, path: str, operation_id: Optional[str]) -> str:
    """Return the declared operation id, falling back to the derived one."""
    if operation_id is not None and operation_id.strip():
        return operation_id.strip()
    return derive_operation_id(method, path)


def find_duplicate_names(names: Iterable[str]) -> list[str]:
    """Return names that occur more than once, in first-occurrence order."""
    ordered = list(names)
    counts = Counter(ordered)
    duplicates: list[str] = []
    for name in ordered:
        if counts[name] > 1 and name not in duplicates:
            duplicates.append(name)
    return duplicates


def is_ts_identifier(name: str) -> bool:
    """Whether ``name`` can be used unquoted as a TypeScript property name."""
    return bool(_TS_IDENTIFIER_RE.match(name))


def property_key(name: str) -> str:
    """Render a property name for a type literal or interface body."""
    if is_ts_identifier(name):
        return name
    return quote_literal(name)


def quote_literal(value: str) -> str:
    """Render a single-quoted TypeScript string literal."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"
