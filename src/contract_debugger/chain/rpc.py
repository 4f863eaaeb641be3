"""
Async JSON-RPC client.

Thin wrapper around httpx for node access plus the eth-abi glue that turns
ABI function descriptors and Python values into calldata and back.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Optional

import httpx
from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_hash.auto import keccak
from eth_utils import to_bytes, to_hex

from ..exceptions import RpcError
from .abi import AbiFunction

logger = logging.getLogger("contract_debugger").getChild("rpc")

DEFAULT_TIMEOUT = 30.0

# Selector of Error(string), the standard revert payload
ERROR_STRING_SELECTOR = "0x08c379a0"


class RpcClient:
    """JSON-RPC 2.0 client bound to a single endpoint."""

    def __init__(
        self,
        rpc_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.rpc_url = rpc_url
        self._ids = itertools.count(1)
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def __aenter__(self) -> "RpcClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(self, method: str, params: Optional[list] = None) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            RpcError: If the node answers with an error object
            httpx.HTTPError: If the endpoint is unreachable or answers non-2xx
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": next(self._ids),
        }
        logger.debug("-> %s %s", method, payload["params"])

        response = await self._client.post(self.rpc_url, json=payload)
        response.raise_for_status()
        data = response.json()

        if "error" in data and data["error"] is not None:
            raise _rpc_error(data["error"])

        return data.get("result")

    async def chain_id(self) -> int:
        return int(await self.request("eth_chainId"), 16)

    async def accounts(self) -> list[str]:
        return await self.request("eth_accounts") or []

    async def request_accounts(self) -> list[str]:
        return await self.request("eth_requestAccounts") or []

    async def get_nonce(self, address: str) -> int:
        return int(await self.request("eth_getTransactionCount", [address, "pending"]), 16)

    async def gas_price(self) -> int:
        return int(await self.request("eth_gasPrice"), 16)

    async def estimate_gas(self, tx: dict[str, Any]) -> int:
        return int(await self.request("eth_estimateGas", [_rpc_tx(tx)]), 16)

    async def call(self, tx: dict[str, Any], block: str = "latest") -> str:
        return await self.request("eth_call", [_rpc_tx(tx), block])

    async def send_raw_transaction(self, raw_tx: str) -> str:
        return await self.request("eth_sendRawTransaction", [raw_tx])

    async def send_transaction(self, tx: dict[str, Any]) -> str:
        return await self.request("eth_sendTransaction", [_rpc_tx(tx)])

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[dict[str, Any]]:
        return await self.request("eth_getTransactionReceipt", [tx_hash])


def _rpc_tx(tx: dict[str, Any]) -> dict[str, Any]:
    """Render integer transaction fields as hex quantities."""
    return {k: hex(v) if isinstance(v, int) else v for k, v in tx.items() if v is not None}


def _rpc_error(error: Any) -> RpcError:
    if not isinstance(error, dict):
        return RpcError(f"RPC error: {error}")
    message = error.get("message") or "RPC error"
    data = error.get("data")
    reason = decode_revert_reason(data)
    if reason and reason not in message:
        message = f"{message}: {reason}"
    return RpcError(message, code=error.get("code"), data=data)


def decode_revert_reason(data: Any) -> Optional[str]:
    """Decode an ``Error(string)`` revert payload, if that is what ``data`` holds."""
    if isinstance(data, dict):
        data = data.get("data")
    if not isinstance(data, str) or not data.startswith(ERROR_STRING_SELECTOR):
        return None
    try:
        (reason,) = decode(["string"], to_bytes(hexstr=data[len(ERROR_STRING_SELECTOR):]))
    except (DecodingError, ValueError):
        return None
    return reason


def function_selector(function: AbiFunction) -> bytes:
    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    return keccak(function.signature.encode("utf-8"))[:4]


def encode_function_call(function: AbiFunction, args: list) -> str:
    """
    ABI-encode a function call.

    Returns:
        0x-prefixed hex encoded calldata
    """
    input_types = function.input_types
    if len(args) != len(input_types):
        raise ValueError(
            f"{function.name} expects {len(input_types)} arguments, got {len(args)}"
        )
    prepared = [_prepare_argument(t, a) for t, a in zip(input_types, args)]
    encoded_args = encode(input_types, prepared) if input_types else b""
    return to_hex(function_selector(function) + encoded_args)


def decode_function_result(function: AbiFunction, data: str) -> Any:
    """
    ABI-decode a function call result.

    Returns:
        None for functions without outputs, the single value for one
        output, otherwise a list of values. Bytes come back as 0x-hex and
        tuples as lists.
    """
    output_types = function.output_types
    if not output_types:
        return None

    decoded = decode(output_types, to_bytes(hexstr=data))
    values = [_to_plain(v) for v in decoded]
    if len(values) == 1:
        return values[0]
    return values


def _prepare_argument(abi_type: str, value: Any) -> Any:
    """Convert hex strings into bytes for ``bytes``/``bytesN`` parameters."""
    if abi_type.endswith("]") and isinstance(value, (list, tuple)):
        element_type = abi_type[: abi_type.rindex("[")]
        return [_prepare_argument(element_type, v) for v in value]
    if abi_type.startswith("bytes") and isinstance(value, str):
        return to_bytes(hexstr=value)
    return value


def _to_plain(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return to_hex(value)
    if isinstance(value, (list, tuple)):
        return [_to_plain(v) for v in value]
    return value
