"""JSON schemas shipped with contract-debugger and the registry that applies them."""

from __future__ import annotations

import functools
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema

DESCRIPTOR_SCHEMA = "contract.descriptor.schema.json"


class SchemaValidationError(ValueError):
    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


@dataclass(frozen=True)
class SchemaRegistry:
    schema_root: Path

    @classmethod
    def default(cls) -> "SchemaRegistry":
        return cls(schema_root=Path(__file__).resolve().parent)

    # One validator per schema file for the life of the registry; a catalog
    # load validates every descriptor against the same one.
    @functools.cache
    def validator_for(self, schema_filename: str) -> jsonschema.Validator:
        schema = load_json(self.schema_root / schema_filename)
        validator_cls = jsonschema.validators.validator_for(schema)
        validator_cls.check_schema(schema)
        return validator_cls(schema)

    def validate_instance(self, instance: Any, schema_filename: str) -> None:
        """
        Raises:
            SchemaValidationError: Listing every violation as ``<json path>: <message>``
        """
        errors = sorted(
            self.validator_for(schema_filename).iter_errors(instance),
            key=lambda e: e.json_path,
        )
        if errors:
            formatted = [f"{err.json_path}: {err.message}" for err in errors]
            raise SchemaValidationError("; ".join(formatted), errors=formatted)


def load_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


__all__ = [
    "DESCRIPTOR_SCHEMA",
    "SchemaRegistry",
    "SchemaValidationError",
    "load_json",
]
