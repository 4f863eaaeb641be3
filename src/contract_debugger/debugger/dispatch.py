"""
Invocation dispatch - from raw form strings to a recorded result.

An invocation coerces the raw inputs of a function into call arguments,
performs a read call or a transaction through the contract binding,
normalizes the outcome into display-safe values and appends an
InvocationResult to the result log. Failures at any step are recorded on
the result; ``invoke`` itself never raises.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from collections import Counter
from typing import Any, Mapping, Protocol

from ..chain.abi import AbiFunction, AbiParameter
from ..models import InvocationResult
from .forms import FormState
from .results import ResultLog

logger = logging.getLogger("contract_debugger").getChild("dispatch")

_INTEGER_LITERAL = re.compile(r"(?P<sign>[+-]?)(?:0[xX](?P<hex>[0-9a-fA-F]+)|(?P<dec>[0-9]+))")


class PendingTransaction(Protocol):
    hash: str

    async def wait(self) -> Mapping[str, Any]: ...


class ContractBinding(Protocol):
    async def call(self, function: AbiFunction, args: list) -> Any: ...

    async def transact(self, function: AbiFunction, args: list) -> PendingTransaction: ...


# ============ Coercion ============


def parse_integer(raw: str) -> int:
    """
    Parse a decimal or 0x-hex integer with an optional sign; an empty string is zero.

    Raises:
        ValueError: If ``raw`` is anything else
    """
    text = raw.strip()
    if not text:
        return 0
    match = _INTEGER_LITERAL.fullmatch(text)
    if match is None:
        raise ValueError(f"Invalid integer: {raw!r}")
    value = int(match["hex"], 16) if match["hex"] else int(match["dec"], 10)
    return -value if match["sign"] == "-" else value


def _is_integer_type(abi_type: str) -> bool:
    return AbiParameter(name="", type=abi_type).is_integer


def _coerce_element(abi_type: str, value: Any) -> Any:
    if isinstance(value, list):
        return [_coerce_element(abi_type, v) for v in value]
    if not isinstance(value, str):
        return value
    if _is_integer_type(abi_type):
        return parse_integer(value)
    if abi_type == "bool":
        return value.lower() == "true"
    return value


def coerce_argument(param: AbiParameter, raw: str) -> Any:
    """
    Convert one raw form string into a call argument.

    - arrays: JSON array literal, ``[]`` when it does not parse as one
    - uint*/int*: arbitrary precision int, ``""`` is 0
    - bool: true only for a case-insensitive ``"true"``
    - anything else: the raw string

    Raises:
        ValueError: If an integer parameter holds a non-numeric string
    """
    if param.is_array:
        try:
            parsed = json.loads(raw or "[]")
        except ValueError:
            return []
        if not isinstance(parsed, list):
            return []
        return _coerce_element(param.element_type, parsed)
    if param.is_integer:
        return parse_integer(raw)
    if param.type == "bool":
        return raw.lower() == "true"
    return raw


def coerce_arguments(function: AbiFunction, inputs: Mapping[str, str]) -> list[Any]:
    return [coerce_argument(p, inputs.get(p.name) or "") for p in function.inputs]


# ============ Normalization ============


def normalize_result(value: Any) -> Any:
    """Render every int in ``value`` as a decimal string, recursively."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [normalize_result(v) for v in value]
    if isinstance(value, dict):
        return {k: normalize_result(v) for k, v in value.items()}
    return value


# ============ Dispatcher ============


class InvocationDispatcher:
    def __init__(self, contract: ContractBinding, forms: FormState, results: ResultLog) -> None:
        self.contract = contract
        self.forms = forms
        self.results = results
        self._pending: Counter[str] = Counter()

    @property
    def loading(self) -> set[str]:
        """Function names with at least one invocation in flight."""
        return {name for name, count in self._pending.items() if count > 0}

    def is_loading(self, function_name: str) -> bool:
        return self._pending[function_name] > 0

    def start(self, function: AbiFunction) -> "asyncio.Task[InvocationResult]":
        """Schedule ``invoke`` on the running loop; overlapping calls are allowed."""
        return asyncio.create_task(self.invoke(function), name=f"invoke:{function.name}")

    async def invoke(self, function: AbiFunction) -> InvocationResult:
        function_name = function.name
        inputs = self.forms.get_inputs(function_name)
        self._pending[function_name] += 1
        logger.debug("Invoking %s with %s", function.signature, inputs)

        try:
            outcome = await self._execute(function, inputs)
            self.results.append(outcome)
            return outcome
        finally:
            self._pending[function_name] -= 1
            if self._pending[function_name] <= 0:
                del self._pending[function_name]

    async def _execute(self, function: AbiFunction, inputs: dict[str, str]) -> InvocationResult:
        function_name = function.name
        try:
            args = coerce_arguments(function, inputs)

            transaction_hash = None
            gas_used = None
            if function.is_read_only:
                result = await self.contract.call(function, args)
            else:
                tx = await self.contract.transact(function, args)
                transaction_hash = tx.hash
                receipt = await tx.wait()
                gas_used = str(receipt["gasUsed"])
                result = receipt

            return InvocationResult(
                function_name=function_name,
                inputs=inputs,
                result=normalize_result(result),
                transaction_hash=transaction_hash,
                gas_used=gas_used,
            )
        except Exception as exc:
            logger.info("Invocation of %s failed: %s", function_name, exc)
            return InvocationResult(
                function_name=function_name,
                inputs=inputs,
                result=None,
                error=str(exc) or exc.__class__.__name__,
            )
