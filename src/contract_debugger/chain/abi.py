"""
ABI entries as a closed set of variants.

A raw ABI document is a list of JSON objects tagged by ``type``. Each tag
maps to exactly one dataclass here; only ``function`` entries are ever
surfaced as forms.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Sequence, Union

from ..exceptions import AbiFormatError, FunctionNotFoundError

logger = logging.getLogger("contract_debugger").getChild("abi")

_ARRAY_SUFFIX = re.compile(r"^(?P<base>.+?)(?P<dims>(\[\d*\])+)$")
_INTEGER_TYPE = re.compile(r"^u?int\d*$")


class StateMutability(Enum):
    PURE = "pure"
    VIEW = "view"
    NONPAYABLE = "nonpayable"
    PAYABLE = "payable"

    @property
    def is_read_only(self) -> bool:
        return self in (StateMutability.PURE, StateMutability.VIEW)


@dataclass(frozen=True)
class AbiParameter:
    name: str
    type: str
    components: tuple["AbiParameter", ...] = ()

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "AbiParameter":
        if "type" not in payload:
            raise AbiFormatError(f"ABI parameter without type: {payload!r}")
        return cls(
            name=payload.get("name", ""),
            type=payload["type"],
            components=tuple(cls.from_dict(c) for c in payload.get("components", [])),
        )

    @property
    def canonical_type(self) -> str:
        """Type string as eth-abi expects it; tuples expand to ``(t1,t2)``."""
        if not self.type.startswith("tuple"):
            return self.type
        suffix = self.type[len("tuple"):]
        inner = ",".join(c.canonical_type for c in self.components)
        return f"({inner}){suffix}"

    @property
    def is_array(self) -> bool:
        return _ARRAY_SUFFIX.match(self.type) is not None

    @property
    def element_type(self) -> str:
        """Innermost element type of an array, or the type itself."""
        match = _ARRAY_SUFFIX.match(self.type)
        return match.group("base") if match else self.type

    @property
    def is_integer(self) -> bool:
        return _INTEGER_TYPE.match(self.type) is not None


def _parameters(entry: dict[str, Any], key: str) -> tuple[AbiParameter, ...]:
    return tuple(AbiParameter.from_dict(p) for p in entry.get(key) or [])


def _mutability(entry: dict[str, Any]) -> StateMutability:
    raw = entry.get("stateMutability")
    if raw is not None:
        try:
            return StateMutability(raw)
        except ValueError as exc:
            raise AbiFormatError(f"Unknown state mutability: {raw!r}") from exc
    # Pre-0.5 solc output only carries the constant/payable flags
    if entry.get("constant"):
        return StateMutability.VIEW
    if entry.get("payable"):
        return StateMutability.PAYABLE
    return StateMutability.NONPAYABLE


@dataclass(frozen=True)
class AbiFunction:
    name: str
    state_mutability: StateMutability
    inputs: tuple[AbiParameter, ...] = ()
    outputs: tuple[AbiParameter, ...] = ()

    @property
    def is_read_only(self) -> bool:
        return self.state_mutability.is_read_only

    @property
    def input_types(self) -> list[str]:
        return [p.canonical_type for p in self.inputs]

    @property
    def output_types(self) -> list[str]:
        return [p.canonical_type for p in self.outputs]

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.input_types)})"


@dataclass(frozen=True)
class AbiEvent:
    name: str
    inputs: tuple[AbiParameter, ...] = ()
    anonymous: bool = False


@dataclass(frozen=True)
class AbiConstructor:
    state_mutability: StateMutability
    inputs: tuple[AbiParameter, ...] = ()


@dataclass(frozen=True)
class AbiFallback:
    state_mutability: StateMutability


@dataclass(frozen=True)
class AbiReceive:
    state_mutability: StateMutability = StateMutability.PAYABLE


@dataclass(frozen=True)
class AbiError:
    name: str
    inputs: tuple[AbiParameter, ...] = ()


AbiEntry = Union[AbiFunction, AbiEvent, AbiConstructor, AbiFallback, AbiReceive, AbiError]


def parse_abi_entry(entry: dict[str, Any]) -> AbiEntry:
    """
    Build the variant for one raw ABI entry.

    Raises:
        AbiFormatError: If the type tag is missing or unknown, or a
            required field is absent.
    """
    try:
        match entry.get("type"):
            case "function":
                return AbiFunction(
                    name=entry["name"],
                    state_mutability=_mutability(entry),
                    inputs=_parameters(entry, "inputs"),
                    outputs=_parameters(entry, "outputs"),
                )
            case "event":
                return AbiEvent(
                    name=entry["name"],
                    inputs=_parameters(entry, "inputs"),
                    anonymous=bool(entry.get("anonymous", False)),
                )
            case "constructor":
                return AbiConstructor(
                    state_mutability=_mutability(entry),
                    inputs=_parameters(entry, "inputs"),
                )
            case "fallback":
                return AbiFallback(state_mutability=_mutability(entry))
            case "receive":
                return AbiReceive()
            case "error":
                return AbiError(name=entry["name"], inputs=_parameters(entry, "inputs"))
            case other:
                raise AbiFormatError(f"Unknown ABI entry type: {other!r}")
    except KeyError as exc:
        raise AbiFormatError(f"ABI entry missing field {exc}: {entry!r}") from exc


def extract_functions(abi: Iterable[Any]) -> list[AbiFunction]:
    """
    Return the function entries of an ABI, in document order.

    Entries that are not objects or carry an unknown tag are dropped.
    """
    functions: list[AbiFunction] = []
    for entry in abi:
        if not isinstance(entry, dict):
            logger.debug("Skipping non-object ABI entry: %r", entry)
            continue
        try:
            parsed = parse_abi_entry(entry)
        except AbiFormatError as exc:
            logger.debug("Skipping ABI entry: %s", exc)
            continue
        match parsed:
            case AbiFunction():
                functions.append(parsed)
            case AbiEvent() | AbiConstructor() | AbiFallback() | AbiReceive() | AbiError():
                continue
    return functions


def select_function(
    functions: Sequence[AbiFunction], key: str, arity: Optional[int] = None
) -> AbiFunction:
    """
    Pick one function by signature or by name.

    A full signature such as ``get(uint256)`` always names a single
    function. A bare name must match exactly one overload, or exactly one
    taking ``arity`` arguments when given.

    Raises:
        FunctionNotFoundError: If nothing matches, or a bare name stays
            ambiguous between overloads.
    """
    for function in functions:
        if function.signature == key:
            return function

    candidates = [f for f in functions if f.name == key]
    if len(candidates) > 1 and arity is not None:
        candidates = [f for f in candidates if len(f.inputs) == arity] or candidates
    if len(candidates) == 1:
        return candidates[0]
    if not candidates:
        raise FunctionNotFoundError(f"Function {key} not found in ABI")
    overloads = ", ".join(f.signature for f in candidates)
    raise FunctionNotFoundError(f"Function {key} is overloaded; use one of: {overloads}")


def find_function(abi: Iterable[Any], key: str, arity: Optional[int] = None) -> AbiFunction:
    return select_function(extract_functions(abi), key, arity)
