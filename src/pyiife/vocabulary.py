# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Flattened token dictionary used to shrink configuration payloads.

The integer assigned to each token is a wire contract with the browser runtime
that decodes compressed configuration, so the flattening order must never
change: groups in declaration order, tokens within a group in array order,
numbered from zero across all groups.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field

from .errors import CatalogIntegrityError

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class VocabularyIndex:
    """Read-only mapping from known string tokens to their integer index."""

    _index: Mapping[str, int] = field(default_factory=dict)
    size: int = 0

    @classmethod
    def from_groups(cls, groups: Mapping[str, Sequence[str]]) -> VocabularyIndex:
        """Flatten grouped tokens into a vocabulary index.

        Every token consumes a position, including duplicates, and the first
        occurrence of a duplicated token keeps its index.

        Args:
            groups: Mapping of group name to ordered token list.

        Returns:
            VocabularyIndex: Index over all tokens of ``groups``.

        Raises:
            CatalogIntegrityError: If a group is not a list of strings.
        """

        index: dict[str, int] = {}
        position = 0
        for group, tokens in groups.items():
            if isinstance(tokens, (str, bytes)) or not isinstance(tokens, Sequence):
                raise CatalogIntegrityError(f"vocabulary group '{group}' must be a list of tokens")
            for token in tokens:
                if not isinstance(token, str):
                    raise CatalogIntegrityError(f"vocabulary group '{group}' contains a non-string token")
                if token in index:
                    LOGGER.warning(
                        "vocabulary token %r in group %r already indexed as %d",
                        token,
                        group,
                        index[token],
                    )
                else:
                    index[token] = position
                position += 1
        return cls(_index=index, size=position)

    def lookup(self, token: str) -> int | None:
        """Return the index for ``token`` or ``None`` when it is not known."""

        return self._index.get(token)

    def __contains__(self, token: object) -> bool:
        return isinstance(token, str) and token in self._index

    def __getitem__(self, token: str) -> int:
        return self._index[token]

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)


__all__ = ["VocabularyIndex"]
