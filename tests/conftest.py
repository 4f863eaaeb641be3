"""Shared fixtures: ABI documents, descriptor directories and a fake node."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

CONTRACT_ADDRESS = "0x" + "ab" * 20
NODE_ACCOUNT = "0x" + "11" * 20
# Throwaway key, never funded anywhere
PRIVATE_KEY = "0x" + "01" * 32
TX_HASH = "0x" + "cd" * 32

TOKEN_ABI: list[dict[str, Any]] = [
    {
        "type": "constructor",
        "stateMutability": "nonpayable",
        "inputs": [{"name": "supply", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "balanceOf",
        "stateMutability": "view",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "event",
        "name": "Transfer",
        "anonymous": False,
        "inputs": [
            {"name": "from", "type": "address", "indexed": True},
            {"name": "to", "type": "address", "indexed": True},
            {"name": "value", "type": "uint256", "indexed": False},
        ],
    },
    {
        "type": "function",
        "name": "totalSupply",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "transfer",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "to", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
    },
    {"type": "error", "name": "InsufficientBalance", "inputs": []},
    {
        "type": "function",
        "name": "deposit",
        "stateMutability": "payable",
        "inputs": [],
        "outputs": [],
    },
    {"type": "fallback", "stateMutability": "nonpayable"},
    {"type": "receive", "stateMutability": "payable"},
]


def write_descriptor(directory: Path, file_name: str, payload: Any) -> Path:
    path = directory / file_name
    if isinstance(payload, str):
        path.write_text(payload, encoding="utf-8")
    else:
        path.write_text(json.dumps(payload), encoding="utf-8")
    return path


@pytest.fixture()
def token_abi() -> list[dict[str, Any]]:
    return json.loads(json.dumps(TOKEN_ABI))


@pytest.fixture()
def contracts_dir(tmp_path: Path) -> Path:
    """Descriptor directory holding one valid token contract."""
    directory = tmp_path / "contracts"
    directory.mkdir()
    write_descriptor(directory, "my-token.json", {"address": CONTRACT_ADDRESS, "abi": TOKEN_ABI})
    return directory


# ============ Fake node ============


class NodeError(Exception):
    """Raised by a fake node handler to answer with a JSON-RPC error object."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data


class FakeNode:
    """
    In-memory JSON-RPC endpoint for httpx.MockTransport.

    ``responses`` maps a method name to either a plain result or a callable
    taking the params list. Callables may raise NodeError.
    """

    def __init__(self) -> None:
        self.responses: dict[str, Any] = {}
        self.calls: list[tuple[str, list]] = []

    def on(self, method: str, answer: Any) -> None:
        self.responses[method] = answer

    def methods(self) -> list[str]:
        return [method for method, _ in self.calls]

    def params(self, method: str) -> list:
        for called, params in reversed(self.calls):
            if called == method:
                return params
        raise AssertionError(f"{method} was never called")

    def handle(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        method = payload["method"]
        params = payload.get("params", [])
        self.calls.append((method, params))

        body: dict[str, Any] = {"jsonrpc": "2.0", "id": payload["id"]}
        if method not in self.responses:
            body["error"] = {"code": -32601, "message": f"the method {method} does not exist"}
            return httpx.Response(200, json=body)

        answer = self.responses[method]
        try:
            body["result"] = answer(params) if callable(answer) else answer
        except NodeError as exc:
            body["error"] = {"code": exc.code, "message": exc.message, "data": exc.data}
        return httpx.Response(200, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def rpc_factory(self) -> Callable[[str], Any]:
        from contract_debugger.chain.rpc import RpcClient

        return lambda rpc_url: RpcClient(rpc_url, transport=self.transport)


@pytest.fixture()
def node() -> FakeNode:
    """Fake node exposing one unlocked account on chain 31337."""
    fake = FakeNode()
    fake.on("eth_chainId", hex(31337))
    fake.on("eth_requestAccounts", [NODE_ACCOUNT])
    fake.on("eth_accounts", [NODE_ACCOUNT])
    return fake
