# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Assemble self-contained loader bundles from resolved module selections."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

from ..catalog.loader import ModuleSources, load_sources
from ..resolver.engine import ModuleResolver, ModuleTokens
from .cache import BundleCache, bundle_key, shared_cache
from .format import BundleFormat
from .minify import ClosureCompilerClient
from .output import BundleStats, write_bundle

LOGGER = logging.getLogger(__name__)


class GenerateOptions(BaseModel):
    """Options controlling how a bundle is generated."""

    model_config = ConfigDict(validate_assignment=True)

    debug: bool = False
    compress: bool = False
    format: BundleFormat = BundleFormat.NONE
    cache: bool = True
    root_path: Path | None = None

    @field_validator("format", mode="before")
    @classmethod
    def _parse_format(cls, value: object) -> BundleFormat:
        """Normalise format names; unknown names fall back to ``none``."""

        if isinstance(value, (BundleFormat, str)) or value is None:
            return BundleFormat.parse(value)
        raise ValueError("format must be a string")


class BundleGenerator:
    """Resolve module selections and concatenate their sources."""

    def __init__(
        self,
        options: GenerateOptions | None = None,
        *,
        cache: BundleCache | None = None,
        minifier: ClosureCompilerClient | None = None,
        sources: ModuleSources | None = None,
    ) -> None:
        """Initialise the generator.

        Args:
            options: Generation options; defaults are used when omitted.
            cache: Bundle cache; the process-wide cache is used when omitted.
            minifier: Client used when ``options.compress`` is set.
            sources: Preloaded sources; loaded from ``options.root_path`` when omitted.

        Raises:
            ConfigError: If neither ``sources`` nor ``options.root_path`` is given.
        """

        self.options = options or GenerateOptions()
        self.cache = cache if cache is not None else shared_cache()
        self.minifier = minifier or ClosureCompilerClient()
        self.sources = sources or load_sources(self.options.root_path)
        self.resolver = ModuleResolver(self.sources.catalog)

    def resolve(self, tokens: ModuleTokens) -> list[str]:
        """Return the resolved module list for ``tokens``.

        Raises:
            ResolutionError: If the selection cannot be resolved.
        """

        return self.resolver.resolve(tokens, debug=self.options.debug)

    def generate(self, tokens: ModuleTokens) -> str:
        """Return the bundle text for ``tokens``.

        Args:
            tokens: Raw module selection.

        Returns:
            str: Concatenated (optionally wrapped and minified) bundle.

        Raises:
            ResolutionError: If the selection cannot be resolved.
            SourceNotFoundError: If a module source is missing.
            MinifyError: If minification was requested and failed.
        """

        return self._build(self.resolve(tokens))

    def write(self, tokens: ModuleTokens, output: Path) -> BundleStats:
        """Generate the bundle for ``tokens`` and write it to ``output``.

        Returns:
            BundleStats: Modules and size statistics of the written bundle.
        """

        modules = self.resolve(tokens)
        text = self._build(modules)
        stats = write_bundle(text, output, modules)
        LOGGER.debug("wrote bundle path=%s size=%d gzip_size=%d", output, stats.size, stats.gzip_size)
        return stats

    def _build(self, modules: list[str]) -> str:
        options = self.options
        key = bundle_key(
            modules,
            format_name=options.format.value,
            compress=options.compress,
            debug=options.debug,
            root=str(self.sources.root.path),
        )
        if options.cache:
            cached = self.cache.get(key)
            if cached is not None:
                LOGGER.debug("bundle cache hit key=%s", key)
                return cached

        text = options.format.render(self.sources.source(name, debug=options.debug) for name in modules)
        if options.compress:
            text = self.minifier.minify(text, self.sources.externs())

        if options.cache:
            self.cache.put(key, text)
        return text


def generate(tokens: ModuleTokens, options: GenerateOptions | None = None) -> str:
    """Return the bundle text for ``tokens`` using ``options``."""

    return BundleGenerator(options).generate(tokens)


__all__ = ["BundleGenerator", "GenerateOptions", "generate"]
