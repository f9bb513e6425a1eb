# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Catalog models describing the ordered set of bundle modules."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field

from ..errors import CatalogIntegrityError
from ..types import BOOTSTRAP_MODULE


@dataclass(frozen=True, slots=True)
class ModuleDescriptor:
    """Name and human description of a single catalog module."""

    name: str
    description: str = ""


@dataclass(frozen=True, slots=True)
class ModuleCatalog:
    """Immutable, ordered module catalog where index is canonical position."""

    modules: tuple[ModuleDescriptor, ...]
    _positions: Mapping[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Index module names and reject duplicate or misplaced entries.

        Raises:
            CatalogIntegrityError: If a module name occurs more than once or the
                bootstrap module is not at position 0.
        """

        if not self.modules or self.modules[0].name != BOOTSTRAP_MODULE:
            raise CatalogIntegrityError(f"catalog must start with the '{BOOTSTRAP_MODULE}' module")
        positions: dict[str, int] = {}
        for index, descriptor in enumerate(self.modules):
            if descriptor.name in positions:
                raise CatalogIntegrityError(f"Duplicate module '{descriptor.name}' detected in catalog")
            positions[descriptor.name] = index
        object.__setattr__(self, "_positions", positions)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Sequence[str]]) -> ModuleCatalog:
        """Build a catalog from ``[name, description]`` pairs.

        Args:
            pairs: Ordered pairs as stored in the manifest ``_modules`` list.

        Returns:
            ModuleCatalog: Catalog preserving the order of ``pairs``.
        """

        descriptors = []
        for pair in pairs:
            name = pair[0]
            description = pair[1] if len(pair) > 1 else ""
            descriptors.append(ModuleDescriptor(name=name, description=description))
        return cls(modules=tuple(descriptors))

    def position(self, name: str) -> int | None:
        """Return the canonical position of ``name`` or ``None`` when unknown."""

        return self._positions.get(name)

    def exists(self, name: str) -> bool:
        """Return ``True`` when ``name`` is a catalog module."""

        return name in self._positions

    def all(self) -> tuple[ModuleDescriptor, ...]:
        """Return every descriptor in canonical order."""

        return self.modules

    @property
    def names(self) -> tuple[str, ...]:
        """Return module names in canonical order."""

        return tuple(descriptor.name for descriptor in self.modules)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name in self._positions

    def __iter__(self) -> Iterator[ModuleDescriptor]:
        return iter(self.modules)

    def __len__(self) -> int:
        return len(self.modules)


__all__ = ["ModuleCatalog", "ModuleDescriptor"]
