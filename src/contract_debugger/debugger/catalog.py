"""
Contract catalog - discover descriptor files and parse them.

Every regular file in the catalog directory is a candidate. A file makes it
into the catalog only if it holds a JSON object with a non-empty ``address``
string and an ``abi`` array; anything else is skipped with a warning.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator, Optional, Union

from ..exceptions import ContractNotFoundError
from ..models import ContractDescriptor
from ..schema import DESCRIPTOR_SCHEMA, SchemaRegistry, SchemaValidationError, load_json
from ..utils import display_name

logger = logging.getLogger("contract_debugger").getChild("catalog")

CONTRACTS_DIR_ENV = "CONTRACT_DEBUGGER_CONTRACTS_DIR"


def get_default_contracts_dir() -> Path:
    """
    Get the default descriptor directory.

    Returns:
        $CONTRACT_DEBUGGER_CONTRACTS_DIR if set, else ./public/contracts
    """
    configured = os.environ.get(CONTRACTS_DIR_ENV)
    if configured:
        return Path(configured).expanduser()
    return Path.cwd() / "public" / "contracts"


class Catalog:
    """Descriptors in load order, addressable by display name."""

    def __init__(self, descriptors: list[ContractDescriptor], directory: Optional[Path] = None) -> None:
        self._descriptors = list(descriptors)
        self.directory = directory

    def __len__(self) -> int:
        return len(self._descriptors)

    def __iter__(self) -> Iterator[ContractDescriptor]:
        return iter(self._descriptors)

    def __contains__(self, name: object) -> bool:
        return any(d.name == name for d in self._descriptors)

    def names(self) -> list[str]:
        return [d.name for d in self._descriptors]

    def get(self, name: str) -> ContractDescriptor:
        """
        Look up a descriptor by display name.

        Raises:
            ContractNotFoundError: If no descriptor carries that name
        """
        for descriptor in self._descriptors:
            if descriptor.name == name:
                return descriptor
        raise ContractNotFoundError(
            f"Contract '{name}' not found. Available: {', '.join(self.names()) or 'none'}"
        )


def parse_descriptor(path: Path, registry: Optional[SchemaRegistry] = None) -> ContractDescriptor:
    """
    Parse one descriptor file.

    Raises:
        OSError: If the file cannot be read
        ValueError: If it is not JSON or does not match the descriptor schema
    """
    registry = registry or SchemaRegistry.default()
    payload = load_json(path)
    registry.validate_instance(payload, DESCRIPTOR_SCHEMA)
    return ContractDescriptor(
        name=display_name(path.name),
        address=payload["address"],
        abi=tuple(payload["abi"]),
        source=path,
    )


def load_catalog(
    directory: Optional[Union[Path, str]] = None,
    registry: Optional[SchemaRegistry] = None,
) -> Catalog:
    """
    Load every valid descriptor from ``directory``.

    A malformed or unreadable file never prevents its siblings from loading.
    """
    directory = Path(directory) if directory is not None else get_default_contracts_dir()
    registry = registry or SchemaRegistry.default()

    try:
        files = sorted(p for p in directory.iterdir() if p.is_file())
    except OSError as exc:
        logger.error("Failed to list contract files in %s: %s", directory, exc)
        return Catalog([], directory)

    logger.debug("Files: %s", [p.name for p in files])

    descriptors: list[ContractDescriptor] = []
    for path in files:
        try:
            descriptors.append(parse_descriptor(path, registry))
        except SchemaValidationError as exc:
            logger.warning("Skipping contract file %s: %s", path.name, exc)
        except (OSError, ValueError) as exc:
            logger.warning("Failed to load contract file %s: %s", path.name, exc)

    return Catalog(descriptors, directory)
