# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Module resolution, configuration compression and bundle generation for async loaders."""

from __future__ import annotations

from importlib import metadata

from .bundle import BundleFormat, BundleGenerator, GenerateOptions, generate
from .catalog import ModuleCatalog, load_catalog, load_vocabulary
from .compressor import ConfigCompressor, compress_config, compress_to_json
from .config import PyIIFEConfig, load_config
from .errors import (
    CatalogIntegrityError,
    InvalidModulesError,
    MissingLoaderModuleError,
    NoModulesError,
    PyIIFEError,
    ResolutionError,
)
from .resolver import ModuleResolver, resolve_modules
from .vocabulary import VocabularyIndex

try:
    __version__ = metadata.version("pyiife")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"

__all__ = [
    "BundleFormat",
    "BundleGenerator",
    "CatalogIntegrityError",
    "ConfigCompressor",
    "GenerateOptions",
    "InvalidModulesError",
    "MissingLoaderModuleError",
    "ModuleCatalog",
    "ModuleResolver",
    "NoModulesError",
    "PyIIFEConfig",
    "PyIIFEError",
    "ResolutionError",
    "VocabularyIndex",
    "__version__",
    "compress_config",
    "compress_to_json",
    "generate",
    "load_catalog",
    "load_config",
    "load_vocabulary",
    "resolve_modules",
]
