# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import shutil
from collections.abc import Iterator
from pathlib import Path

import pytest

from pyiife.bundle.cache import shared_cache
from pyiife.catalog import ModuleCatalog, clear_source_cache, load_catalog, load_vocabulary
from pyiife.vocabulary import VocabularyIndex

SAMPLE_ROOT = Path(__file__).resolve().parent / "data" / "sample-loader"
EXTERNS = "var Async;\n"


def release_source(name: str) -> str:
    """Return the fake release source written for ``name``."""

    return f"/*{name}*/"


def debug_source(name: str) -> str:
    """Return the fake debug source written for ``name``."""

    return f"/*debug:{name}*/"


@pytest.fixture(autouse=True)
def _reset_caches() -> Iterator[None]:
    clear_source_cache()
    shared_cache().clear()
    yield
    clear_source_cache()
    shared_cache().clear()


@pytest.fixture
def sample_root() -> Path:
    """Return the sample loader root holding only a manifest and a vocabulary."""
    return SAMPLE_ROOT


@pytest.fixture
def catalog(sample_root: Path) -> ModuleCatalog:
    """Return the sample module catalog."""
    return load_catalog(sample_root)


@pytest.fixture
def vocabulary(sample_root: Path) -> VocabularyIndex:
    """Return the sample vocabulary index."""
    return load_vocabulary(sample_root)


@pytest.fixture
def source_root(tmp_path: Path, sample_root: Path, catalog: ModuleCatalog) -> Path:
    """Build a complete loader distribution with one-line module sources."""

    root = tmp_path / "async"
    (root / "src").mkdir(parents=True)
    (root / "dist" / "debug").mkdir(parents=True)
    shutil.copyfile(sample_root / "package.json", root / "package.json")
    shutil.copyfile(sample_root / "src" / "compression-index.json", root / "src" / "compression-index.json")
    (root / "async.ext.js").write_text(EXTERNS, encoding="utf-8")
    for name in catalog.names:
        (root / "dist" / f"{name}.js").write_text(release_source(name), encoding="utf-8")
        (root / "dist" / "debug" / f"{name}.js").write_text(debug_source(name), encoding="utf-8")
    return root
