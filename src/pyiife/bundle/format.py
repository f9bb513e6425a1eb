# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Wrapper formats applied around concatenated module sources."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum


class BundleFormat(str, Enum):
    """Supported bundle wrapper formats."""

    NONE = "none"
    WRAP = "wrap"
    UNARY = "unary"

    @classmethod
    def parse(cls, value: BundleFormat | str | None) -> BundleFormat:
        """Return the format named by ``value``; unknown names select :attr:`NONE`."""

        if isinstance(value, BundleFormat):
            return value
        if not value:
            return cls.NONE
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.NONE

    @property
    def prefix(self) -> str:
        """Return the text emitted before the module sources."""

        return _PREFIXES[self]

    @property
    def suffix(self) -> str:
        """Return the text emitted after the module sources."""

        return _SUFFIXES[self]

    def render(self, sources: Iterable[str]) -> str:
        """Concatenate ``sources`` inside this wrapper."""

        return f"{self.prefix}{''.join(sources)}{self.suffix}"


_PREFIXES = {
    BundleFormat.NONE: "",
    BundleFormat.WRAP: "(function(window){",
    BundleFormat.UNARY: "!function(window){",
}
_SUFFIXES = {
    BundleFormat.NONE: "",
    BundleFormat.WRAP: "})(window);",
    BundleFormat.UNARY: "}(window);",
}

__all__ = ["BundleFormat"]
