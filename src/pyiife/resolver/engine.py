# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Expand a module selection into the ordered list of bundle modules."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from ..catalog.loader import load_catalog
from ..catalog.model import ModuleCatalog
from ..errors import InvalidModulesError, MissingLoaderModuleError, NoModulesError
from ..types import ALL_MODULES, DEBUG_MODULE, LOADER_MODULES
from .context import ResolverContext
from .rules import CASCADE_RULES, WALK_RULES, CascadeRule, WalkRule, select_walk_rule

LOGGER = logging.getLogger(__name__)

_TOKEN_SEPARATOR: Final[re.Pattern[str]] = re.compile(r"[\s,]+")

ModuleTokens = str | Iterable[str] | None


@dataclass(frozen=True, slots=True)
class Selection:
    """Normalised module selection.

    Attributes:
        requested: Valid module names in first-seen order, without duplicates.
        select_all: ``True`` when the caller asked for every module.
        errors: One message per unknown module token.
    """

    requested: tuple[str, ...] = ()
    select_all: bool = False
    errors: tuple[str, ...] = ()


def split_module_tokens(text: str) -> list[str]:
    """Split command-line module input on commas and/or whitespace."""

    return [token for token in _TOKEN_SEPARATOR.split(text) if token]


def invalid_module_message(token: str) -> str:
    """Return the validation message reported for an unknown module token."""

    return f"{token} is not a valid module"


class ModuleResolver:
    """Resolve module selections against a catalog using declarative rules."""

    def __init__(
        self,
        catalog: ModuleCatalog,
        *,
        cascade_rules: tuple[CascadeRule, ...] = CASCADE_RULES,
        walk_rules: tuple[WalkRule, ...] = WALK_RULES,
    ) -> None:
        """Bind the resolver to a catalog and its rule tables.

        Args:
            catalog: Catalog defining valid modules and canonical order.
            cascade_rules: Rules fired on module activation.
            walk_rules: Rules consulted per catalog module.
        """

        self.catalog = catalog
        self.cascade_rules = cascade_rules
        self.walk_rules = walk_rules

    def normalize(self, tokens: ModuleTokens) -> Selection:
        """Normalise raw tokens into a :class:`Selection`.

        Tokens are trimmed and lower-cased, empty tokens are dropped and
        unknown tokens are collected as errors rather than discarded.

        Args:
            tokens: Raw selection, a single token or ``None``.

        Returns:
            Selection: Normalised selection.
        """

        if tokens is None:
            raw: Iterable[str] = ()
        elif isinstance(tokens, str):
            raw = (tokens,)
        else:
            raw = tokens

        requested: dict[str, None] = {}
        errors: list[str] = []
        select_all = False
        for token in raw:
            name = token.strip().lower()
            if not name:
                continue
            if name == ALL_MODULES:
                select_all = True
            elif self.catalog.exists(name):
                requested.setdefault(name, None)
            else:
                errors.append(invalid_module_message(name))

        if select_all:
            return Selection(requested=self.catalog.names, select_all=True)
        return Selection(requested=tuple(requested), errors=tuple(errors))

    def resolve(self, tokens: ModuleTokens, *, debug: bool = False) -> list[str]:
        """Resolve ``tokens`` into the ordered, duplicate-free module list.

        Args:
            tokens: Raw module selection.
            debug: ``True`` to include the debug module and its dependencies.

        Returns:
            list[str]: Module names in catalog order, starting with the bootstrap module.

        Raises:
            NoModulesError: If no valid module was selected.
            MissingLoaderModuleError: If neither loader module was selected.
            InvalidModulesError: If unknown module names were supplied.
            CatalogIntegrityError: If a rule targets a module absent from the catalog.
        """

        selection = self.normalize(tokens)
        self._check(selection)

        context = ResolverContext(
            catalog=self.catalog,
            requested=frozenset(selection.requested),
            debug=debug,
            cascades=self.cascade_rules,
        )
        if debug:
            context.activate(DEBUG_MODULE)
        for descriptor in self.catalog:
            rule = select_walk_rule(descriptor.name, self.walk_rules)
            rule.apply(context, descriptor.name)

        modules = context.modules()
        LOGGER.debug("resolved modules=%s", ",".join(modules))
        return modules

    @staticmethod
    def _check(selection: Selection) -> None:
        """Apply the validation gate, first failing check wins."""

        if not selection.requested:
            LOGGER.debug("resolution failed: no modules selected")
            raise NoModulesError()
        if not any(loader in selection.requested for loader in LOADER_MODULES):
            LOGGER.debug("resolution failed: no loader module selected")
            raise MissingLoaderModuleError()
        if selection.errors:
            LOGGER.debug("resolution failed: %d invalid module(s)", len(selection.errors))
            raise InvalidModulesError(selection.errors)


def resolve_modules(
    tokens: ModuleTokens,
    catalog: ModuleCatalog | None = None,
    *,
    debug: bool = False,
    root_path: Path | str | None = None,
) -> list[str]:
    """Resolve ``tokens`` against ``catalog`` or the catalog of ``root_path``.

    Args:
        tokens: Raw module selection.
        catalog: Catalog to resolve against; ``None`` loads the catalog of ``root_path``.
        debug: ``True`` to resolve a debug bundle.
        root_path: Source root used when ``catalog`` is omitted.

    Returns:
        list[str]: Ordered module names.

    Raises:
        ConfigError: If neither ``catalog`` nor ``root_path`` is given.
    """

    if catalog is None:
        catalog = load_catalog(root_path)
    return ModuleResolver(catalog).resolve(tokens, debug=debug)


__all__ = [
    "ModuleResolver",
    "ModuleTokens",
    "Selection",
    "invalid_module_message",
    "resolve_modules",
    "split_module_tokens",
]
