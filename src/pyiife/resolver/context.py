# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Per-call state threaded through module resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..catalog.model import ModuleCatalog
from ..errors import CatalogIntegrityError
from ..types import BOOTSTRAP_MODULE
from .rules import CASCADE_RULES, CascadeRule

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ResolverContext:
    """Activation table and flags for a single resolution call.

    The activation table is sparse and keyed by catalog position, so activating
    a module twice only rewrites the same slot. A module counts as *active*
    when it was requested or has been activated.

    Attributes:
        catalog: Catalog providing canonical positions.
        requested: Normalised module names requested by the caller.
        debug: ``True`` when resolving a debug bundle.
        cascades: Cascade rules applied on every fresh activation.
        table: Sparse mapping of catalog position to activated module name.
    """

    catalog: ModuleCatalog
    requested: frozenset[str]
    debug: bool = False
    cascades: tuple[CascadeRule, ...] = CASCADE_RULES
    table: dict[int, str] = field(default_factory=dict)

    def is_requested(self, name: str) -> bool:
        """Return ``True`` when ``name`` was part of the caller's selection."""

        return name in self.requested

    def is_activated(self, name: str) -> bool:
        """Return ``True`` when ``name`` has been placed in the activation table."""

        position = self.catalog.position(name)
        return position is not None and self.table.get(position) == name

    def is_active(self, name: str) -> bool:
        """Return ``True`` when ``name`` is requested or activated."""

        return self.is_requested(name) or self.is_activated(name)

    def activate(self, name: str) -> None:
        """Place ``name`` in the activation table and apply its cascades.

        Re-activating a module is a no-op.

        Args:
            name: Catalog module name to activate.

        Raises:
            CatalogIntegrityError: If ``name`` is missing from the catalog.
        """

        position = self.catalog.position(name)
        if position is None:
            raise CatalogIntegrityError(f"module '{name}' is required but missing from the catalog")
        if self.table.get(position) == name:
            return
        self.table[position] = name
        LOGGER.debug("activated module=%s position=%d", name, position)
        for rule in self.cascades:
            if rule.fires(self, name):
                self.activate(rule.target)

    def modules(self) -> list[str]:
        """Return the dense module list with the bootstrap module at position 0."""

        table = dict(self.table)
        table[0] = BOOTSTRAP_MODULE
        return [table[position] for position in sorted(table)]


__all__ = ["ResolverContext"]
