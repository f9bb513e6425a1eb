# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Dictionary-indexed compression of loader configuration values.

The compressor walks a JSON-like value and rewrites object keys and selected
string values into their :class:`~pyiife.vocabulary.VocabularyIndex` position.
URLs below a *global base* are shortened to their relative part. The browser
runtime reverses both substitutions, so the rewrite is purely syntactic and
unknown tokens pass through untouched.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Final

from .catalog.loader import load_vocabulary
from .types import (
    BASE_URL_KEYS,
    LITERAL_VALUE_KEYS,
    OPAQUE_KEYS,
    SOURCE_TOKENS,
    JSONValue,
)
from .vocabulary import VocabularyIndex

LOGGER = logging.getLogger(__name__)

SOURCE_KEY: Final[str] = "source"
SECONDARY_SLOT: Final[int] = 4
CAPTURE_SLOT: Final[int] = 2


def parse_config(config: JSONValue) -> JSONValue:
    """Return ``config`` parsed from JSON text when it is a string.

    Strings that are not valid JSON are returned unchanged.
    """

    if not isinstance(config, str):
        return config
    try:
        return json.loads(config)
    except json.JSONDecodeError:
        return config


def normalize_base(global_base: str | None) -> str | None:
    """Return ``global_base`` with a trailing slash, or ``None`` when unset."""

    if not global_base:
        return None
    return global_base if global_base.endswith("/") else f"{global_base}/"


def _is_empty(value: JSONValue) -> bool:
    if value is None or value is False or value == 0:
        return True
    if isinstance(value, (str, Sequence, Mapping)):
        return len(value) == 0
    return False


class ConfigCompressor:
    """Rewrite configuration values using a fixed vocabulary."""

    def __init__(self, vocabulary: VocabularyIndex) -> None:
        """Bind the compressor to ``vocabulary``.

        Args:
            vocabulary: Index providing the integer for each known token.
        """

        self.vocabulary = vocabulary

    def compress(
        self,
        config: JSONValue,
        js_config: JSONValue = None,
        global_base: str | None = None,
        *,
        drop_empty_capture: bool = False,
    ) -> JSONValue:
        """Compress ``config`` and optionally merge a JS loader configuration.

        Args:
            config: Configuration value, or JSON text encoding one.
            js_config: Optional JS loader configuration (value or JSON text)
                placed from slot 4 of the result.
            global_base: URL prefix stripped from ``href``/``src`` values and
                bare strings.
            drop_empty_capture: Remove the top-level capture slots (2 and 3)
                when the capture configuration is empty.

        Returns:
            JSONValue: Compressed value of the same shape as ``config``.
        """

        base = normalize_base(global_base)
        compressed = self._compress(
            parse_config(config),
            base,
            deep=False,
            drop_empty_capture=drop_empty_capture,
        )
        if js_config is None:
            return compressed

        secondary = self._compress(parse_config(js_config), base, deep=False)
        merged: list[JSONValue] = [compressed]
        merged.extend(0 for _ in range(SECONDARY_SLOT - len(merged)))
        if isinstance(secondary, list):
            merged.extend(secondary)
        else:
            merged.append(secondary)
        return merged

    def _compress(
        self,
        value: JSONValue,
        base: str | None,
        *,
        deep: bool,
        drop_empty_capture: bool = False,
    ) -> JSONValue:
        if value is None:
            return []
        if isinstance(value, Mapping):
            return self._compress_object(value, base)
        if isinstance(value, str):
            return self._strip_base(value, base)
        if isinstance(value, Sequence):
            if not deep and drop_empty_capture:
                value = _drop_capture_slots(value)
            return [self._compress(item, base, deep=True) for item in value]
        return value

    def _compress_object(self, value: Mapping[str, JSONValue], base: str | None) -> dict[str, JSONValue]:
        compressed: dict[str, JSONValue] = {}
        for key, data in value.items():
            if key in BASE_URL_KEYS and isinstance(data, str):
                data = self._strip_base(data, base)

            if key == SOURCE_KEY:
                data = self._compress_source(data)

            if (data is None or isinstance(data, (Mapping, list, tuple))) and key not in OPAQUE_KEYS:
                data = self._compress(data, base, deep=True)

            if isinstance(data, str) and key not in LITERAL_VALUE_KEYS:
                index = self.vocabulary.lookup(data)
                if index is not None:
                    data = index

            index = self.vocabulary.lookup(key)
            compressed[str(index) if index is not None else key] = data
        return compressed

    def _compress_source(self, data: JSONValue) -> JSONValue:
        """Replace cache source tokens in a ``source`` value."""

        if isinstance(data, str):
            return self._source_token(data)
        if isinstance(data, Mapping):
            return {key: self._source_token(item) for key, item in data.items()}
        if isinstance(data, (list, tuple)):
            return [self._source_token(item) for item in data]
        return data

    def _source_token(self, value: JSONValue) -> JSONValue:
        if isinstance(value, str) and value in SOURCE_TOKENS:
            index = self.vocabulary.lookup(value)
            if index is not None:
                return index
        return value

    @staticmethod
    def _strip_base(value: str, base: str | None) -> str:
        if base and value.startswith(base):
            return value[len(base) :]
        return value


def _drop_capture_slots(value: Sequence[JSONValue]) -> list[JSONValue]:
    """Remove the empty capture slots of a top-level loader configuration."""

    items = list(value)
    if len(items) <= CAPTURE_SLOT or not _is_empty(items[CAPTURE_SLOT]):
        return items
    LOGGER.debug("dropping empty capture configuration slots")
    del items[CAPTURE_SLOT : CAPTURE_SLOT + 2]
    if len(items) > 1 and _is_empty(items[1]):
        del items[1]
    return items


def _runtime_key_order(value: JSONValue) -> JSONValue:
    """Order object keys the way the browser serialises them: array indices first.

    Keys that are canonical non-negative integers come first in ascending
    numeric order, followed by the remaining keys in insertion order.
    """

    if isinstance(value, Mapping):
        numeric = sorted((key for key in value if key.isascii() and key.isdigit() and str(int(key)) == key), key=int)
        named = [key for key in value if key not in numeric]
        return {key: _runtime_key_order(value[key]) for key in (*numeric, *named)}
    if isinstance(value, list):
        return [_runtime_key_order(item) for item in value]
    return value


def compress_config(
    config: JSONValue,
    js_config: JSONValue = None,
    global_base: str | None = None,
    *,
    root_path: Path | str | None = None,
    drop_empty_capture: bool = False,
) -> JSONValue:
    """Compress ``config`` with the vocabulary of ``root_path``.

    Args:
        config: Configuration value or JSON text.
        js_config: Optional JS loader configuration.
        global_base: Optional URL prefix to strip.
        root_path: Source root providing the vocabulary.
        drop_empty_capture: Remove empty top-level capture slots.

    Returns:
        JSONValue: Compressed configuration.
    """

    compressor = ConfigCompressor(load_vocabulary(root_path))
    return compressor.compress(config, js_config, global_base, drop_empty_capture=drop_empty_capture)


def compress_to_json(
    config: JSONValue,
    js_config: JSONValue = None,
    global_base: str | None = None,
    *,
    root_path: Path | str | None = None,
    drop_empty_capture: bool = False,
) -> str:
    """Return the compressed configuration serialised as compact JSON text."""

    compressed = compress_config(
        config,
        js_config,
        global_base,
        root_path=root_path,
        drop_empty_capture=drop_empty_capture,
    )
    return json.dumps(_runtime_key_order(compressed), separators=(",", ":"), ensure_ascii=False)


__all__ = [
    "ConfigCompressor",
    "compress_config",
    "compress_to_json",
    "normalize_base",
    "parse_config",
]
