# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Bundle generation: wrapping, caching, minification and output."""

from __future__ import annotations

from .cache import BundleCache, CacheInfo, bundle_key, shared_cache
from .format import BundleFormat
from .generator import BundleGenerator, GenerateOptions, generate
from .minify import DEFAULT_COMPILER_URL, ClosureCompilerClient
from .output import BundleStats, write_bundle

__all__ = [
    "DEFAULT_COMPILER_URL",
    "BundleCache",
    "BundleFormat",
    "BundleGenerator",
    "BundleStats",
    "CacheInfo",
    "ClosureCompilerClient",
    "GenerateOptions",
    "bundle_key",
    "generate",
    "shared_cache",
    "write_bundle",
]
