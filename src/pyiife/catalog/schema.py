# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Schema loading utilities for validating manifest and vocabulary documents."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Final

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from ..errors import CatalogValidationError
from ..types import JSONValue
from .io import load_document

SCHEMA_ROOT: Final[Path] = Path(__file__).resolve().parent.parent / "data" / "schema"
MANIFEST_SCHEMA: Final[str] = "manifest.schema.json"
VOCABULARY_SCHEMA: Final[str] = "vocabulary.schema.json"


@dataclass(frozen=True, slots=True)
class SchemaRepository:
    """Hold jsonschema validators for manifests and vocabularies."""

    schema_root: Path
    manifest_validator: Draft202012Validator
    vocabulary_validator: Draft202012Validator

    @classmethod
    def load(cls, schema_root: Path = SCHEMA_ROOT) -> SchemaRepository:
        """Load schema validators from disk.

        Args:
            schema_root: Directory containing the schema documents.

        Returns:
            SchemaRepository: Repository configured with both validators.
        """

        manifest_schema = load_document(schema_root / MANIFEST_SCHEMA)
        vocabulary_schema = load_document(schema_root / VOCABULARY_SCHEMA)
        return cls(
            schema_root=schema_root,
            manifest_validator=Draft202012Validator(manifest_schema),
            vocabulary_validator=Draft202012Validator(vocabulary_schema),
        )

    def validate_manifest(self, document: Mapping[str, JSONValue], *, path: Path) -> None:
        """Validate a manifest document.

        Raises:
            CatalogValidationError: When the document fails schema validation.
        """

        _validate(self.manifest_validator, document, path=path)

    def validate_vocabulary(self, document: Mapping[str, JSONValue], *, path: Path) -> None:
        """Validate a grouped vocabulary document.

        Raises:
            CatalogValidationError: When the document fails schema validation.
        """

        _validate(self.vocabulary_validator, document, path=path)


def _validate(validator: Draft202012Validator, document: Mapping[str, JSONValue], *, path: Path) -> None:
    try:
        validator.validate(document)
    except ValidationError as exc:
        raise CatalogValidationError(f"{path}: {exc.message}") from exc


@lru_cache(maxsize=1)
def default_schemas() -> SchemaRepository:
    """Return the shared repository built from the bundled schemas."""

    return SchemaRepository.load()


__all__ = ["SCHEMA_ROOT", "SchemaRepository", "default_schemas"]
