# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Declarative composition rules driving module resolution.

Two tables describe how a selection expands:

* :data:`CASCADE_RULES` fire whenever a module is activated and force the
  activation of the modules it cannot work without.
* :data:`WALK_RULES` are consulted for every catalog module, in canonical
  order, and decide whether (and with which prerequisites) it is activated.
  The first rule whose :meth:`WalkRule.matches` returns ``True`` wins.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from ..types import CSS_LOADER, DEBUG_MODULE, JS_LOADER

if TYPE_CHECKING:
    from .context import ResolverContext

EVENT_EMITTER: Final[str] = "event-emitter"
VENDOR: Final[str] = "vendor"
REGEX: Final[str] = "regex"
CACHE: Final[str] = "cache"
CAPTURE: Final[str] = "capture"
CAPTURE_INSERT: Final[str] = "capture-insert"
CAPTURE_OBSERVER: Final[str] = "capture-observer"
TIMING: Final[str] = "timing"


@dataclass(frozen=True, slots=True)
class CascadeRule:
    """Activate ``target`` whenever one of ``triggers`` is activated.

    Attributes:
        triggers: Module names that fire the rule.
        target: Module forced active by the rule.
        when: Optional module that must already be active for the rule to fire.
    """

    triggers: frozenset[str]
    target: str
    when: str | None = None

    def fires(self, context: ResolverContext, name: str) -> bool:
        """Return ``True`` when activating ``name`` must also activate :attr:`target`."""

        if name not in self.triggers:
            return False
        return self.when is None or context.is_active(self.when)


CASCADE_RULES: Final[tuple[CascadeRule, ...]] = (
    CascadeRule(frozenset({"api", DEBUG_MODULE, "dependency"}), EVENT_EMITTER),
    CascadeRule(frozenset({CACHE}), "cache-css", when=CSS_LOADER),
    CascadeRule(frozenset({CACHE}), "cache-js", when=JS_LOADER),
    CascadeRule(frozenset({CACHE}), EVENT_EMITTER),
    CascadeRule(frozenset({CAPTURE}), "capture-css", when=CSS_LOADER),
    CascadeRule(frozenset({CAPTURE}), "capture-js", when=JS_LOADER),
    CascadeRule(frozenset({TIMING, CAPTURE_OBSERVER}), VENDOR),
    CascadeRule(frozenset({"dependency", CAPTURE}), REGEX),
)


class WalkRule(ABC):
    """Decide whether a catalog module joins the bundle during the catalog walk."""

    @abstractmethod
    def matches(self, name: str) -> bool:
        """Return ``True`` when the rule governs module ``name``."""

    @abstractmethod
    def apply(self, context: ResolverContext, name: str) -> None:
        """Activate ``name`` (and any prerequisites) when the rule allows it."""


@dataclass(frozen=True, slots=True)
class NamedRule(WalkRule, ABC):
    """Walk rule bound to an explicit set of module names."""

    modules: frozenset[str]

    def matches(self, name: str) -> bool:
        return name in self.modules


@dataclass(frozen=True, slots=True)
class IndirectRule(NamedRule):
    """Activate a support module only while one of ``triggers`` is active."""

    triggers: frozenset[str] = frozenset()

    def apply(self, context: ResolverContext, name: str) -> None:
        if any(context.is_active(trigger) for trigger in self.triggers):
            context.activate(name)


@dataclass(frozen=True, slots=True)
class DebugRule(NamedRule):
    """Honour a requested module only when resolving in debug mode."""

    def apply(self, context: ResolverContext, name: str) -> None:
        if context.debug and context.is_active(name):
            context.activate(name)


@dataclass(frozen=True, slots=True)
class PrerequisiteRule(NamedRule):
    """Activate ``prerequisite`` before a requested module."""

    prerequisite: str = ""

    def apply(self, context: ResolverContext, name: str) -> None:
        if context.is_active(name):
            context.activate(self.prerequisite)
            context.activate(name)


@dataclass(frozen=True, slots=True)
class CaptureRule(NamedRule):
    """Give the capture module a default capture method when none is selected."""

    default_method: str = CAPTURE_INSERT
    methods: frozenset[str] = frozenset({CAPTURE_INSERT, CAPTURE_OBSERVER})

    def apply(self, context: ResolverContext, name: str) -> None:
        if not context.is_active(name):
            return
        if not any(context.is_active(method) for method in self.methods):
            context.activate(self.default_method)
        context.activate(name)


@dataclass(frozen=True, slots=True)
class PrefixRule(WalkRule):
    """Activate ``parent`` first for requested modules named ``prefix*``."""

    prefix: str
    parent: str

    def matches(self, name: str) -> bool:
        return name.startswith(self.prefix)

    def apply(self, context: ResolverContext, name: str) -> None:
        if not context.is_active(name):
            return
        if not context.is_active(self.parent):
            context.activate(self.parent)
        context.activate(name)


@dataclass(frozen=True, slots=True)
class RequestedRule(WalkRule):
    """Fallback rule: activate a module when it was requested."""

    def matches(self, name: str) -> bool:
        return True

    def apply(self, context: ResolverContext, name: str) -> None:
        if context.is_active(name):
            context.activate(name)


WALK_RULES: Final[tuple[WalkRule, ...]] = (
    IndirectRule(frozenset({REGEX}), triggers=frozenset({"dependency", CAPTURE})),
    IndirectRule(frozenset({VENDOR}), triggers=frozenset({TIMING, CAPTURE_OBSERVER})),
    DebugRule(frozenset({DEBUG_MODULE})),
    PrerequisiteRule(frozenset({"inview", "responsive"}), prerequisite=TIMING),
    PrerequisiteRule(frozenset({"localstorage", "cache-api"}), prerequisite=CACHE),
    CaptureRule(frozenset({CAPTURE})),
    PrefixRule(prefix=f"{CAPTURE}-", parent=CAPTURE),
    RequestedRule(),
)


def select_walk_rule(name: str, rules: tuple[WalkRule, ...] = WALK_RULES) -> WalkRule:
    """Return the first walk rule governing ``name``.

    Args:
        name: Catalog module name.
        rules: Ordered walk rules to consult.

    Returns:
        WalkRule: Matching rule.

    Raises:
        LookupError: If no rule matches, which means ``rules`` lacks a fallback.
    """

    for rule in rules:
        if rule.matches(name):
            return rule
    raise LookupError(f"no walk rule governs module '{name}'")


__all__ = [
    "CASCADE_RULES",
    "WALK_RULES",
    "CaptureRule",
    "CascadeRule",
    "DebugRule",
    "IndirectRule",
    "NamedRule",
    "PrefixRule",
    "PrerequisiteRule",
    "RequestedRule",
    "WalkRule",
    "select_walk_rule",
]
