# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""In-memory cache for generated bundles keyed by a selection digest."""

from __future__ import annotations

import hashlib
import json
from collections import OrderedDict
from collections.abc import Sequence
from dataclasses import dataclass
from threading import Lock
from typing import Final


@dataclass(frozen=True, slots=True)
class CacheInfo:
    """Describe cache state metadata.

    Attributes:
        current_size: Number of cached bundles currently stored.
        hits: Number of cache hits that have occurred.
        maxsize: Configured maximum cache capacity, ``None`` when unbounded.
    """

    current_size: int
    hits: int
    maxsize: int | None


def bundle_key(
    modules: Sequence[str],
    *,
    format_name: str,
    compress: bool,
    debug: bool,
    root: str,
) -> str:
    """Return the digest identifying a bundle built from the given inputs.

    Args:
        modules: Resolved module names in bundle order.
        format_name: Wrapper format name.
        compress: Whether the bundle is minified.
        debug: Whether debug sources are used.
        root: Source root the modules are read from.

    Returns:
        str: Hex-encoded SHA-256 digest.
    """

    payload = json.dumps([list(modules), format_name, compress, debug, root], separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class BundleCache:
    """Thread-safe LRU store of generated bundle text."""

    def __init__(self, maxsize: int | None = 128) -> None:
        """Initialise an empty cache.

        Args:
            maxsize: Maximum number of bundles retained, ``None`` for no cap.
        """

        self._maxsize = maxsize
        self._store: OrderedDict[str, str] = OrderedDict()
        self._lock = Lock()
        self._hits = 0

    def get(self, key: str) -> str | None:
        """Return the bundle stored under ``key`` and mark it recently used."""

        with self._lock:
            cached = self._store.get(key)
            if cached is not None:
                self._store.move_to_end(key)
                self._hits += 1
            return cached

    def put(self, key: str, text: str) -> None:
        """Store ``text`` under ``key``, evicting the least recently used entry."""

        with self._lock:
            self._store[key] = text
            self._store.move_to_end(key)
            if self._maxsize is not None and len(self._store) > self._maxsize:
                self._store.popitem(last=False)

    def clear(self) -> None:
        """Reset cached entries and hit tracking."""

        with self._lock:
            self._store.clear()
            self._hits = 0

    def info(self) -> CacheInfo:
        """Return cache metadata including hits."""

        with self._lock:
            return CacheInfo(current_size=len(self._store), hits=self._hits, maxsize=self._maxsize)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._store

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)


_SHARED_CACHE: Final[BundleCache] = BundleCache()


def shared_cache() -> BundleCache:
    """Return the process-wide bundle cache."""

    return _SHARED_CACHE


__all__ = ["BundleCache", "CacheInfo", "bundle_key", "shared_cache"]
