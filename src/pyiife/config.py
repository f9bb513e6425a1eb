# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and layered loading for bundle generation."""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .bundle.format import BundleFormat
from .bundle.generator import GenerateOptions
from .bundle.minify import DEFAULT_COMPILER_URL
from .errors import ConfigError

LOGGER = logging.getLogger(__name__)

PYPROJECT_FILE: Final[str] = "pyproject.toml"
LOCAL_CONFIG_FILE: Final[str] = ".pyiife.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "pyiife"


class PyIIFEConfig(BaseModel):
    """Resolved settings shared by the CLI and library entry points."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    root_path: Path | None = None
    format: BundleFormat = BundleFormat.NONE
    debug: bool = False
    compress: bool = False
    cache: bool = True
    cache_size: int | None = Field(default=128, ge=1)
    compiler_url: str = DEFAULT_COMPILER_URL
    compiler_timeout: float = Field(default=30.0, gt=0)
    global_base: str | None = None
    emoji: bool = True
    color: bool = True

    @field_validator("format", mode="before")
    @classmethod
    def _parse_format(cls, value: object) -> BundleFormat:
        if isinstance(value, (BundleFormat, str)) or value is None:
            return BundleFormat.parse(value)
        raise ValueError("format must be a string")

    def generate_options(self) -> GenerateOptions:
        """Return the bundle generation options described by this config."""

        return GenerateOptions(
            debug=self.debug,
            compress=self.compress,
            format=self.format,
            cache=self.cache,
            root_path=self.root_path,
        )


class TomlConfigSource:
    """Read configuration from a standalone TOML document."""

    def __init__(self, path: Path, *, name: str | None = None) -> None:
        self.path = path
        self.name = name or str(path)

    def load(self) -> Mapping[str, Any]:
        """Return the configuration table, or an empty mapping if the file is absent.

        Raises:
            ConfigError: If the document is not valid TOML.
        """

        data = _read_toml(self.path)
        if PYPROJECT_TOOL_KEY in data:
            return _tool_section(data)
        return data

    def describe(self) -> str:
        return f"TOML configuration at {self.name}"


class PyProjectConfigSource(TomlConfigSource):
    """Read configuration from ``[tool.pyiife]`` within ``pyproject.toml``."""

    def load(self) -> Mapping[str, Any]:
        return _tool_section(_read_toml(self.path))

    def describe(self) -> str:
        return f"pyproject.toml ({self.name})"


def _read_toml(path: Path) -> Mapping[str, Any]:
    if not path.is_file():
        return {}
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path}: invalid TOML: {exc}") from exc


def _tool_section(data: Mapping[str, Any]) -> Mapping[str, Any]:
    tool_section = data.get(PYPROJECT_TOOL_KEY)
    if not isinstance(tool_section, Mapping):
        return {}
    section = tool_section.get(PYPROJECT_SECTION_KEY)
    if not isinstance(section, Mapping):
        return {}
    return section


def default_sources(project_root: Path) -> tuple[TomlConfigSource, ...]:
    """Return configuration sources in ascending precedence."""

    return (
        PyProjectConfigSource(project_root / PYPROJECT_FILE),
        TomlConfigSource(project_root / LOCAL_CONFIG_FILE),
    )


def load_config(
    project_root: Path | None = None,
    overrides: Mapping[str, Any] | None = None,
    *,
    sources: Sequence[TomlConfigSource] | None = None,
) -> PyIIFEConfig:
    """Load configuration layered over the built-in defaults.

    Precedence, lowest first: defaults, ``pyproject.toml [tool.pyiife]``,
    ``.pyiife.toml`` and finally ``overrides``. ``None`` override values are
    ignored so unset CLI options never mask file settings.

    Args:
        project_root: Directory holding the configuration files; defaults to the cwd.
        overrides: Explicit values taking precedence over every file.
        sources: Optional replacement for the default file sources.

    Returns:
        PyIIFEConfig: Validated configuration.

    Raises:
        ConfigError: If a source is unreadable or a value is invalid.
    """

    root = (project_root or Path.cwd()).resolve()
    merged: dict[str, Any] = {}
    for source in sources if sources is not None else default_sources(root):
        fragment = source.load()
        if fragment:
            LOGGER.debug("applying %s", source.describe())
            merged.update(fragment)
    if overrides:
        merged.update({key: value for key, value in overrides.items() if value is not None})

    root_path = merged.get("root_path")
    if isinstance(root_path, (str, Path)) and str(root_path):
        candidate = Path(root_path).expanduser()
        merged["root_path"] = candidate if candidate.is_absolute() else root / candidate

    try:
        return PyIIFEConfig(**merged)
    except ValidationError as exc:
        raise ConfigError(f"invalid configuration: {exc}") from exc


__all__ = [
    "LOCAL_CONFIG_FILE",
    "PyIIFEConfig",
    "PyProjectConfigSource",
    "TomlConfigSource",
    "default_sources",
    "load_config",
]
