"""
Contract binding - call and transact against a deployed contract.

Reads go through eth_call from the signer's address so that functions
depending on msg.sender answer as they would for the connected account.
Writes are handed to the signer and come back as a PendingTransaction.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Any, Optional

from ..exceptions import ContractCallError, TransactionRevertedError
from .abi import AbiFunction
from .rpc import RpcClient, decode_function_result, encode_function_call

if TYPE_CHECKING:
    from ..wallet.eth import Signer

RECEIPT_TIMEOUT = 120.0
RECEIPT_POLL_INTERVAL = 1.0

# Receipt fields the node sends as hex quantities
_RECEIPT_QUANTITIES = (
    "blockNumber",
    "cumulativeGasUsed",
    "effectiveGasPrice",
    "gasUsed",
    "status",
    "transactionIndex",
    "type",
)


class PendingTransaction:
    def __init__(self, hash: str, rpc: RpcClient) -> None:
        self.hash = hash
        self.rpc = rpc

    async def wait(
        self,
        timeout: float = RECEIPT_TIMEOUT,
        poll_interval: float = RECEIPT_POLL_INTERVAL,
    ) -> dict[str, Any]:
        """
        Wait for the transaction receipt.

        Returns:
            Receipt dict with quantities converted to int

        Raises:
            TransactionRevertedError: If the receipt reports status 0
            TimeoutError: If no receipt shows up within ``timeout`` seconds
        """
        deadline = time.monotonic() + timeout
        while True:
            receipt = await self.rpc.get_transaction_receipt(self.hash)
            if receipt is not None:
                break
            if time.monotonic() >= deadline:
                raise TimeoutError(f"Transaction {self.hash} not confirmed within {timeout}s")
            await asyncio.sleep(poll_interval)

        receipt = parse_receipt(receipt)
        if receipt.get("status") == 0:
            raise TransactionRevertedError(
                f"Transaction {self.hash} reverted", transaction_hash=self.hash
            )
        return receipt


class Contract:
    def __init__(self, address: str, rpc: RpcClient, signer: "Signer") -> None:
        self.address = address
        self.rpc = rpc
        self.signer = signer

    async def call(self, function: AbiFunction, args: list) -> Any:
        """
        Read from the contract (eth_call).

        Returns:
            Decoded return value(s)
        """
        data = await self.rpc.call(
            {
                "from": self.signer.address,
                "to": self.address,
                "data": encode_function_call(function, args),
            }
        )
        if not function.outputs:
            return None
        if data in (None, "0x"):
            raise ContractCallError(
                f"Empty result from {function.signature}; is {self.address} a contract "
                "on this network?"
            )
        return decode_function_result(function, data)

    async def transact(
        self, function: AbiFunction, args: list, value: int = 0, gas: Optional[int] = None
    ) -> PendingTransaction:
        """Build the call, hand it to the signer and return the pending transaction."""
        tx_hash = await self.signer.send_transaction(
            {
                "to": self.address,
                "data": encode_function_call(function, args),
                "value": value,
                "gas": gas,
            }
        )
        return PendingTransaction(tx_hash, self.rpc)


def parse_receipt(receipt: dict[str, Any]) -> dict[str, Any]:
    parsed = dict(receipt)
    for key in _RECEIPT_QUANTITIES:
        value = parsed.get(key)
        if isinstance(value, str) and value.startswith("0x"):
            parsed[key] = int(value, 16)
    return parsed
