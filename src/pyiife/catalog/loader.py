# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Loader that materialises the catalog, vocabulary and module sources of a root."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import Final

from ..errors import CatalogIntegrityError, ConfigError, SourceNotFoundError
from ..types import JSONValue
from ..vocabulary import VocabularyIndex
from .io import expect_sequence, load_document, read_text
from .model import ModuleCatalog
from .schema import SchemaRepository, default_schemas

LOGGER = logging.getLogger(__name__)

MANIFEST_FILE: Final[str] = "package.json"
VOCABULARY_FILE: Final[str] = "src/compression-index.json"
EXTERNS_FILE: Final[str] = "async.ext.js"
DIST_DIR: Final[str] = "dist"
DEBUG_DIR: Final[str] = "dist/debug"


@dataclass(frozen=True, slots=True)
class SourceRoot:
    """Filesystem layout of a loader distribution."""

    path: Path

    @property
    def manifest(self) -> Path:
        """Return the manifest path."""

        return self.path / MANIFEST_FILE

    @property
    def vocabulary(self) -> Path:
        """Return the grouped vocabulary path."""

        return self.path / VOCABULARY_FILE

    @property
    def externs(self) -> Path:
        """Return the minifier externs path."""

        return self.path / EXTERNS_FILE

    def module_source(self, name: str, *, debug: bool = False) -> Path:
        """Return the path of the release or debug source of ``name``."""

        directory = DEBUG_DIR if debug else DIST_DIR
        return self.path / directory / f"{name}.js"


@dataclass(slots=True)
class ModuleSources:
    """Catalog, vocabulary and lazily read module sources of one source root.

    Manifest and vocabulary are parsed eagerly on construction. Module sources
    and externs are read on first use and kept for the lifetime of the object.
    """

    root: SourceRoot
    schemas: SchemaRepository = field(default_factory=default_schemas, repr=False)
    version: str | None = field(init=False, default=None)
    catalog: ModuleCatalog = field(init=False, repr=False)
    _vocabulary: VocabularyIndex | None = field(init=False, default=None, repr=False)
    _texts: dict[tuple[str, bool], str] = field(init=False, default_factory=dict, repr=False)
    _externs: str | None = field(init=False, default=None, repr=False)
    _lock: Lock = field(init=False, default_factory=Lock, repr=False)

    def __post_init__(self) -> None:
        """Load and validate the manifest of the source root."""

        path = self.root.manifest
        document = _load_required(path, "loader manifest")
        self.schemas.validate_manifest(document, path=path)
        pairs = expect_sequence(document.get("_modules"), key="_modules", context=str(path))
        self.catalog = ModuleCatalog.from_pairs(pairs)  # type: ignore[arg-type]
        version = document.get("version")
        self.version = version if isinstance(version, str) else None
        LOGGER.debug("loaded %d modules from %s", len(self.catalog), path)

    @property
    def vocabulary(self) -> VocabularyIndex:
        """Return the vocabulary index of the source root, loading it on first use.

        Raises:
            SourceNotFoundError: If the root ships no vocabulary document.
            CatalogValidationError: If the vocabulary fails schema validation.
        """

        with self._lock:
            if self._vocabulary is None:
                path = self.root.vocabulary
                document = _load_required(path, "compression vocabulary")
                self.schemas.validate_vocabulary(document, path=path)
                self._vocabulary = VocabularyIndex.from_groups(document)  # type: ignore[arg-type]
                LOGGER.debug("loaded %d vocabulary tokens from %s", len(self._vocabulary), path)
            return self._vocabulary

    def source(self, name: str, *, debug: bool = False) -> str:
        """Return the release or debug source text of module ``name``.

        Args:
            name: Catalog module name.
            debug: ``True`` to read the debug variant.

        Returns:
            str: Opaque module source text.

        Raises:
            CatalogIntegrityError: If ``name`` is not part of the catalog.
            SourceNotFoundError: If the source file is missing.
        """

        if not self.catalog.exists(name):
            raise CatalogIntegrityError(f"'{name}' is not part of the catalog at {self.root.path}")
        key = (name, debug)
        with self._lock:
            cached = self._texts.get(key)
            if cached is not None:
                return cached
            path = self.root.module_source(name, debug=debug)
            if not path.is_file():
                raise SourceNotFoundError(f"missing {'debug ' if debug else ''}source for '{name}': {path}")
            text = read_text(path)
            self._texts[key] = text
            return text

    def externs(self) -> str:
        """Return the minifier externs of the source root.

        Raises:
            SourceNotFoundError: If the externs file is missing.
        """

        with self._lock:
            if self._externs is None:
                path = self.root.externs
                if not path.is_file():
                    raise SourceNotFoundError(f"missing externs file: {path}")
                self._externs = read_text(path)
            return self._externs


def _load_required(path: Path, label: str) -> Mapping[str, JSONValue]:
    try:
        return load_document(path)
    except FileNotFoundError as exc:
        raise SourceNotFoundError(f"missing {label}: {path}") from exc


def resolve_root(root_path: Path | str | None = None) -> Path:
    """Return the absolute source root.

    Raises:
        ConfigError: If no source root was given.
    """

    if root_path is None or root_path == "":
        raise ConfigError("no loader source root configured; pass --root-path or set root_path")
    return Path(root_path).expanduser().resolve()


@lru_cache(maxsize=None)
def _load_sources(root: Path) -> ModuleSources:
    return ModuleSources(root=SourceRoot(root))


def load_sources(root_path: Path | str | None = None) -> ModuleSources:
    """Return the memoized sources for ``root_path``.

    Args:
        root_path: Source root directory of a loader distribution.

    Returns:
        ModuleSources: Sources shared by every caller using the same root.

    Raises:
        ConfigError: If ``root_path`` is unset.
    """

    return _load_sources(resolve_root(root_path))


def load_catalog(root_path: Path | str | None = None) -> ModuleCatalog:
    """Return the module catalog of ``root_path``."""

    return load_sources(root_path).catalog


def load_vocabulary(root_path: Path | str | None = None) -> VocabularyIndex:
    """Return the vocabulary index of ``root_path``."""

    return load_sources(root_path).vocabulary


def version(root_path: Path | str | None = None) -> str | None:
    """Return the loader version declared by the manifest of ``root_path``."""

    return load_sources(root_path).version


def clear_source_cache() -> None:
    """Forget every memoized source root."""

    _load_sources.cache_clear()


__all__ = [
    "ModuleSources",
    "SourceRoot",
    "clear_source_cache",
    "load_catalog",
    "load_sources",
    "load_vocabulary",
    "resolve_root",
    "version",
]
