# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Custom exceptions raised by bundle resolution and source loading."""

from __future__ import annotations

from collections.abc import Iterable
from typing import ClassVar


class PyIIFEError(RuntimeError):
    """Base class for all errors raised by :mod:`pyiife`."""


class ResolutionError(PyIIFEError):
    """Raised when a module selection cannot be resolved into a bundle."""

    code: ClassVar[str] = "resolution_error"

    @property
    def value(self) -> str | list[str]:
        """Return the failure value surfaced to callers.

        Returns:
            str | list[str]: Sentinel string identifying the failure.
        """

        return self.code


class NoModulesError(ResolutionError):
    """Raised when the selection does not name a single valid module."""

    code: ClassVar[str] = "no_modules"

    def __init__(self) -> None:
        """Create the error with its fixed sentinel message."""

        super().__init__(self.code)


class MissingLoaderModuleError(ResolutionError):
    """Raised when neither the CSS loader nor the JS loader is selected."""

    code: ClassVar[str] = "missing_loader_module"

    def __init__(self) -> None:
        """Create the error with its fixed sentinel message."""

        super().__init__(self.code)


class InvalidModulesError(ResolutionError):
    """Raised when one or more requested module names are unknown."""

    code: ClassVar[str] = "invalid_modules"

    def __init__(self, errors: Iterable[str]) -> None:
        """Create the error from the accumulated validation messages.

        Args:
            errors: Human-readable messages, one per unknown module name.
        """

        self.errors: tuple[str, ...] = tuple(errors)
        super().__init__("; ".join(self.errors))

    @property
    def value(self) -> list[str]:
        """Return the accumulated validation messages.

        Returns:
            list[str]: One message per unknown module name.
        """

        return list(self.errors)


class CatalogIntegrityError(PyIIFEError):
    """Raised when catalog or vocabulary data violates semantic invariants."""


class CatalogValidationError(PyIIFEError):
    """Raised when a catalog document fails structural schema validation."""


class SourceNotFoundError(PyIIFEError):
    """Raised when a module source artifact is missing from the source root."""


class MinifyError(PyIIFEError):
    """Raised when the remote minification service fails."""


class ConfigError(PyIIFEError):
    """Raised when configuration input is invalid."""


__all__ = (
    "CatalogIntegrityError",
    "CatalogValidationError",
    "ConfigError",
    "InvalidModulesError",
    "MinifyError",
    "MissingLoaderModuleError",
    "NoModulesError",
    "PyIIFEError",
    "ResolutionError",
    "SourceNotFoundError",
)
