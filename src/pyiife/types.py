# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared type aliases and wire constants for bundle generation."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Final, TypeAlias

JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | Sequence["JSONValue"] | Mapping[str, "JSONValue"]

BOOTSTRAP_MODULE: Final[str] = "async-core"
ALL_MODULES: Final[str] = "all"
CSS_LOADER: Final[str] = "css-loader"
JS_LOADER: Final[str] = "js-loader"
LOADER_MODULES: Final[tuple[str, ...]] = (CSS_LOADER, JS_LOADER)
DEBUG_MODULE: Final[str] = "debug"

# Values of a ``source`` key that are always replaced by their index.
SOURCE_TOKENS: Final[frozenset[str]] = frozenset({"xhr", "cors", "cssText"})
# Keys carrying base-URL compaction.
BASE_URL_KEYS: Final[frozenset[str]] = frozenset({"href", "src"})
# Keys whose container values are kept verbatim.
OPAQUE_KEYS: Final[frozenset[str]] = frozenset({"proxy", "attributes"})
# Keys whose string values never receive vocabulary substitution.
LITERAL_VALUE_KEYS: Final[frozenset[str]] = frozenset(
    {"href", "src", "match", "proxy", "search", "replace", "attributes"},
)

__all__ = [
    "ALL_MODULES",
    "BASE_URL_KEYS",
    "BOOTSTRAP_MODULE",
    "CSS_LOADER",
    "DEBUG_MODULE",
    "JSONPrimitive",
    "JSONValue",
    "JS_LOADER",
    "LITERAL_VALUE_KEYS",
    "LOADER_MODULES",
    "OPAQUE_KEYS",
    "SOURCE_TOKENS",
]
