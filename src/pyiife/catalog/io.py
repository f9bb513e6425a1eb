# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""I/O helpers for reading manifest, vocabulary and schema JSON documents."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import cast

from ..errors import CatalogIntegrityError
from ..types import JSONValue


def load_document(path: Path) -> Mapping[str, JSONValue]:
    """Load a JSON object document from disk.

    Args:
        path: Filesystem path to the JSON document.

    Returns:
        Mapping[str, JSONValue]: Parsed JSON object.

    Raises:
        FileNotFoundError: If the document does not exist.
        CatalogIntegrityError: If the document cannot be parsed or is not a JSON object.
    """
    if not path.is_file():
        raise FileNotFoundError(path)
    with path.open("r", encoding="utf-8") as stream:
        try:
            payload = cast(JSONValue, json.load(stream))
        except json.JSONDecodeError as exc:
            raise CatalogIntegrityError(f"{path}: failed to parse JSON document") from exc
    return _ensure_json_object(payload, context=str(path))


def read_text(path: Path) -> str:
    """Return the UTF-8 text stored at ``path``."""

    return path.read_text(encoding="utf-8")


def _ensure_json_object(value: JSONValue, *, context: str) -> Mapping[str, JSONValue]:
    """Ensure ``value`` is a JSON object, raising on type mismatch.

    Args:
        value: Parsed JSON payload to validate.
        context: Human-readable context string used in error messages.

    Returns:
        Mapping[str, JSONValue]: Validated JSON object.

    Raises:
        CatalogIntegrityError: If ``value`` is not a mapping.
    """

    if not isinstance(value, Mapping):
        raise CatalogIntegrityError(f"{context}: expected a JSON object")
    return value


def expect_sequence(value: JSONValue | None, *, key: str, context: str) -> Sequence[JSONValue]:
    """Return ``value`` as a JSON array or raise a catalog error.

    Args:
        value: Raw JSON value extracted from a document.
        key: Attribute name used in error messages.
        context: Human-friendly prefix describing the validation context.

    Returns:
        Sequence[JSONValue]: The validated array.

    Raises:
        CatalogIntegrityError: If ``value`` is not an array.
    """
    if not isinstance(value, Sequence) or isinstance(value, (str, bytes, bytearray)):
        raise CatalogIntegrityError(f"{context}: expected '{key}' to be an array")
    return value


__all__ = ["expect_sequence", "load_document", "read_text"]
