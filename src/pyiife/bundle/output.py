# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Write bundles to disk and report their size."""

from __future__ import annotations

import gzip
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class BundleStats:
    """Size statistics of a written bundle.

    Attributes:
        modules: Modules contained in the bundle, in order.
        path: File the bundle was written to.
        size: Size of the file in bytes.
        gzip_size: Length of the gzip-compressed bundle in bytes.
    """

    modules: tuple[str, ...]
    path: Path
    size: int
    gzip_size: int

    @property
    def size_kb(self) -> float:
        """Return :attr:`size` in kilobytes."""

        return self.size / 1024

    @property
    def gzip_size_kb(self) -> float:
        """Return :attr:`gzip_size` in kilobytes."""

        return self.gzip_size / 1024


def write_bundle(text: str, path: Path, modules: Sequence[str]) -> BundleStats:
    """Write ``text`` to ``path`` and return its size statistics.

    Args:
        text: Bundle text.
        path: Destination file; parent directories are created.
        modules: Modules contained in the bundle.

    Returns:
        BundleStats: Statistics of the written file.
    """

    path.parent.mkdir(parents=True, exist_ok=True)
    data = text.encode("utf-8")
    path.write_bytes(data)
    return BundleStats(
        modules=tuple(modules),
        path=path,
        size=path.stat().st_size,
        gzip_size=len(gzip.compress(data)),
    )


__all__ = ["BundleStats", "write_bundle"]
