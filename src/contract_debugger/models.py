from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from .chain.abi import AbiFunction, extract_functions
from .utils import to_rfc3339, utc_now


@dataclass(frozen=True)
class ContractDescriptor:
    name: str
    address: str
    abi: tuple[Any, ...]
    source: Optional[Path] = None

    @property
    def functions(self) -> list[AbiFunction]:
        return extract_functions(self.abi)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "address": self.address, "abi": list(self.abi)}


@dataclass(frozen=True)
class InvocationResult:
    function_name: str
    inputs: dict[str, str]
    result: Any = None
    error: Optional[str] = None
    transaction_hash: Optional[str] = None
    gas_used: Optional[str] = None
    timestamp: datetime = field(default_factory=utc_now)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "functionName": self.function_name,
            "inputs": dict(self.inputs),
            "result": self.result,
            "timestamp": to_rfc3339(self.timestamp),
        }
        if self.error is not None:
            payload["error"] = self.error
        if self.transaction_hash is not None:
            payload["transactionHash"] = self.transaction_hash
        if self.gas_used is not None:
            payload["gasUsed"] = self.gas_used
        return payload


__all__ = [
    "ContractDescriptor",
    "InvocationResult",
]
