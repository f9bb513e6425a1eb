# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Public export surface for module resolution."""

from __future__ import annotations

from .context import ResolverContext
from .engine import (
    ModuleResolver,
    ModuleTokens,
    Selection,
    invalid_module_message,
    resolve_modules,
    split_module_tokens,
)
from .rules import CASCADE_RULES, WALK_RULES, CascadeRule, WalkRule, select_walk_rule

__all__ = [
    "CASCADE_RULES",
    "WALK_RULES",
    "CascadeRule",
    "ModuleResolver",
    "ModuleTokens",
    "ResolverContext",
    "Selection",
    "WalkRule",
    "invalid_module_message",
    "resolve_modules",
    "select_walk_rule",
    "split_module_tokens",
]
