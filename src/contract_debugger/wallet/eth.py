"""
Signers for contract-debugger.

Two ways to obtain an account able to send transactions:

- LocalKeySigner: a raw private key, signed locally with eth-account and
  broadcast with eth_sendRawTransaction.
- NodeAccountSigner: an account managed by the node itself (an unlocked
  Anvil account, or a wallet bridge), requested through eth_requestAccounts
  and used through eth_sendTransaction.

Private keys may also be read from a .env file or the PRIVATE_KEY
environment variable.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional, Protocol

from dotenv import load_dotenv
from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address, to_hex

from ..chain.rpc import RpcClient
from ..exceptions import RpcError, WalletConnectionError

# JSON-RPC "method not found"
METHOD_NOT_FOUND = -32601


class Signer(Protocol):
    address: str

    async def send_transaction(self, tx: dict[str, Any]) -> str:
        """Submit ``tx`` (to, data, value) and return the transaction hash."""
        ...


class LocalKeySigner:
    def __init__(self, account: LocalAccount, rpc: RpcClient) -> None:
        self._account = account
        self.rpc = rpc
        self.address = account.address

    @classmethod
    async def connect(cls, private_key: str, rpc: RpcClient) -> "LocalKeySigner":
        """
        Build a signer from a private key and check the endpoint answers.

        Raises:
            WalletConnectionError: If the key is malformed or the RPC
                endpoint cannot be reached.
        """
        try:
            account = Account.from_key(normalize_private_key(private_key))
            await rpc.chain_id()
        except Exception as exc:
            raise WalletConnectionError(f"Invalid private key or RPC URL: {exc}") from exc
        return cls(account, rpc)

    async def send_transaction(self, tx: dict[str, Any]) -> str:
        base = {
            "from": self.address,
            "to": to_checksum_address(tx["to"]),
            "data": tx.get("data", "0x"),
            "value": tx.get("value", 0),
        }
        gas = tx.get("gas") or await self.rpc.estimate_gas(base)
        signable = {
            "to": base["to"],
            "data": base["data"],
            "value": base["value"],
            "gas": gas,
            "gasPrice": await self.rpc.gas_price(),
            "nonce": await self.rpc.get_nonce(self.address),
            "chainId": await self.rpc.chain_id(),
        }
        signed = self._account.sign_transaction(signable)
        return await self.rpc.send_raw_transaction(to_hex(signed.raw_transaction))


class NodeAccountSigner:
    def __init__(self, address: str, rpc: RpcClient) -> None:
        self.address = address
        self.rpc = rpc

    @classmethod
    async def connect(cls, rpc: RpcClient) -> "NodeAccountSigner":
        """
        Ask the node for an account to act as.

        Raises:
            WalletConnectionError: If the node refuses, exposes no
                account, or cannot be reached.
        """
        try:
            try:
                accounts = await rpc.request_accounts()
            except RpcError as exc:
                if exc.code != METHOD_NOT_FOUND:
                    raise
                accounts = await rpc.accounts()
            if not accounts:
                raise WalletConnectionError("the node exposes no accounts")
        except Exception as exc:
            raise WalletConnectionError(f"Failed to connect wallet: {exc}") from exc
        return cls(to_checksum_address(accounts[0]), rpc)

    async def send_transaction(self, tx: dict[str, Any]) -> str:
        return await self.rpc.send_transaction(
            {
                "from": self.address,
                "to": to_checksum_address(tx["to"]),
                "data": tx.get("data", "0x"),
                "value": tx.get("value", 0),
                "gas": tx.get("gas"),
            }
        )


def normalize_private_key(private_key: str) -> str:
    private_key = private_key.strip()
    if not private_key.startswith("0x"):
        private_key = "0x" + private_key
    return private_key


def load_private_key(env_path: Optional[Path] = None) -> Optional[str]:
    """
    Load a private key from a .env file or the environment.

    Args:
        env_path: Path to .env file (default: ./.env)

    Returns:
        0x-prefixed hex private key, or None when none is configured
    """
    env_path = env_path or Path.cwd() / ".env"

    if env_path.exists():
        load_dotenv(env_path, override=False)

    private_key = os.environ.get("PRIVATE_KEY")
    if not private_key:
        return None
    return normalize_private_key(private_key)
