# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Public export surface for the module catalog and source loading."""

from __future__ import annotations

from .loader import (
    ModuleSources,
    SourceRoot,
    clear_source_cache,
    load_catalog,
    load_sources,
    load_vocabulary,
    resolve_root,
    version,
)
from .model import ModuleCatalog, ModuleDescriptor
from .schema import SchemaRepository

__all__ = [
    "ModuleCatalog",
    "ModuleDescriptor",
    "ModuleSources",
    "SchemaRepository",
    "SourceRoot",
    "clear_source_cache",
    "load_catalog",
    "load_sources",
    "load_vocabulary",
    "resolve_root",
    "version",
]
