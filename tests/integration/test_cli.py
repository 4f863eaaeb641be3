"""
CLI integration tests using Click's test runner.

Tests verify that the CLI commands work end-to-end via the Click
CliRunner. Commands that reach a node talk to a FakeNode patched in
place of the session's RPC client.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional
from unittest.mock import patch

import pytest
from click.testing import CliRunner
from eth_abi import encode

from conftest import CONTRACT_ADDRESS, NODE_ACCOUNT, PRIVATE_KEY, TX_HASH, FakeNode, NodeError, write_descriptor
from contract_debugger import __version__
from contract_debugger.cli import cli


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def fake_node(node: FakeNode, monkeypatch: pytest.MonkeyPatch) -> FakeNode:
    """Route every session RPC client to the fake node."""
    monkeypatch.setattr("contract_debugger.debugger.session.RpcClient", node.rpc_factory())
    node.on("eth_call", "0x" + encode(["uint256"], [123456789012345678901234567890]).hex())
    return node


@pytest.fixture()
def overloaded_dir(tmp_path: Path) -> Path:
    """Descriptor directory holding a contract with two `get` overloads."""
    getter = {"type": "function", "name": "get", "stateMutability": "view", "outputs": [{"name": "", "type": "uint256"}]}
    abi = [{**getter, "inputs": []}, {**getter, "inputs": [{"name": "k", "type": "uint256"}]}]
    write_descriptor(tmp_path, "store.json", {"address": CONTRACT_ADDRESS, "abi": abi})
    return tmp_path


# CliRunner removes variables mapped to None
NO_KEY: dict[str, Optional[str]] = {"PRIVATE_KEY": None}


class TestVersionAndInfo:
    """Test commands that never touch a node."""

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_banner_without_command(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "SMART CONTRACT DEBUGGER" in result.output
        assert "console" in result.output

    def test_networks(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["networks"])
        assert result.exit_code == 0
        assert "Anvil (Local)" in result.output
        assert "Sepolia Testnet" in result.output
        assert "(default)" in result.output

    def test_network_rpc_override(self, runner: CliRunner) -> None:
        with patch.dict(os.environ, {"ANVIL_RPC_URL": "http://anvil.internal:8545"}):
            result = runner.invoke(cli, ["networks"])
        assert "http://anvil.internal:8545" in result.output


class TestCatalogCommands:
    def test_contracts(self, runner: CliRunner, contracts_dir: Path) -> None:
        result = runner.invoke(cli, ["--contracts-dir", str(contracts_dir), "contracts"])
        assert result.exit_code == 0
        assert "Found 1 contracts" in result.output
        assert "My Token" in result.output
        assert "(4 functions)" in result.output

    def test_contracts_from_env(self, runner: CliRunner, contracts_dir: Path) -> None:
        result = runner.invoke(
            cli, ["contracts"], env={"CONTRACT_DEBUGGER_CONTRACTS_DIR": str(contracts_dir)}
        )
        assert result.exit_code == 0
        assert "My Token" in result.output

    def test_contracts_empty(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["--contracts-dir", str(tmp_path), "contracts"])
        assert result.exit_code == 0
        assert "No contracts found" in result.output

    def test_functions(self, runner: CliRunner, contracts_dir: Path) -> None:
        result = runner.invoke(cli, ["--contracts-dir", str(contracts_dir), "functions", "My Token"])
        assert result.exit_code == 0
        assert "Functions: 4" in result.output
        assert "transfer(address to, uint256 amount)" in result.output

    def test_functions_json(self, runner: CliRunner, contracts_dir: Path) -> None:
        result = runner.invoke(
            cli, ["--contracts-dir", str(contracts_dir), "functions", "My Token", "--json"]
        )
        assert result.exit_code == 0
        summaries = json.loads(result.stdout)
        assert [s["name"] for s in summaries] == ["balanceOf", "totalSupply", "transfer", "deposit"]
        assert summaries[2]["signature"] == "transfer(address,uint256)"
        assert summaries[3]["stateMutability"] == "payable"

    def test_functions_unknown_contract(self, runner: CliRunner, contracts_dir: Path) -> None:
        result = runner.invoke(cli, ["--contracts-dir", str(contracts_dir), "functions", "Nope"])
        assert result.exit_code == 2
        assert "not found" in result.output


class TestCall:
    def _call(self, runner: CliRunner, contracts_dir: Path, *args: str):
        return runner.invoke(
            cli,
            ["--contracts-dir", str(contracts_dir), "call", "My Token", *args, "--network", "anvil", "--node-wallet"],
            env=NO_KEY,
        )

    def _call_store(self, runner: CliRunner, directory: Path, *args: str):
        return runner.invoke(
            cli,
            ["--contracts-dir", str(directory), "call", "Store", *args, "--network", "anvil", "--node-wallet"],
            env=NO_KEY,
        )

    def test_view_call_json(self, runner: CliRunner, contracts_dir: Path, fake_node: FakeNode) -> None:
        result = self._call(runner, contracts_dir, "balanceOf", "-a", f"account={NODE_ACCOUNT}", "--json")
        assert result.exit_code == 0, result.output
        record = json.loads(result.stdout)
        assert record["functionName"] == "balanceOf"
        assert record["inputs"] == {"account": NODE_ACCOUNT}
        assert record["result"] == "123456789012345678901234567890"
        assert "error" not in record
        assert "transactionHash" not in record

    def test_view_call_text(self, runner: CliRunner, contracts_dir: Path, fake_node: FakeNode) -> None:
        result = self._call(runner, contracts_dir, "totalSupply")
        assert result.exit_code == 0, result.output
        assert "Anvil (Local)" in result.output
        assert "Node Wallet" in result.output
        assert "123456789012345678901234567890" in result.output

    def test_positional_arguments(self, runner: CliRunner, contracts_dir: Path, fake_node: FakeNode) -> None:
        fake_node.on("eth_sendTransaction", TX_HASH)
        fake_node.on(
            "eth_getTransactionReceipt",
            {"transactionHash": TX_HASH, "gasUsed": "0x5208", "status": "0x1"},
        )
        result = self._call(runner, contracts_dir, "transfer", "-a", NODE_ACCOUNT, "-a", "5", "--json")
        assert result.exit_code == 0, result.output
        record = json.loads(result.stdout)
        assert record["inputs"] == {"to": NODE_ACCOUNT, "amount": "5"}
        assert record["transactionHash"] == TX_HASH
        assert record["gasUsed"] == "21000"

    def test_revert_exits_nonzero(self, runner: CliRunner, contracts_dir: Path, fake_node: FakeNode) -> None:
        def revert(params: list) -> None:
            raise NodeError(-32000, "execution reverted: Insufficient balance")

        fake_node.on("eth_sendTransaction", revert)
        result = self._call(runner, contracts_dir, "transfer", "-a", f"to={NODE_ACCOUNT}", "-a", "amount=5")
        assert result.exit_code == 1
        assert "Insufficient balance" in result.output

    def test_unknown_parameter(self, runner: CliRunner, contracts_dir: Path, fake_node: FakeNode) -> None:
        result = self._call(runner, contracts_dir, "transfer", "-a", "recipient=0x1")
        assert result.exit_code != 0
        assert "no parameter 'recipient'" in result.output

    def test_unknown_contract(self, runner: CliRunner, contracts_dir: Path, fake_node: FakeNode) -> None:
        result = runner.invoke(
            cli,
            ["--contracts-dir", str(contracts_dir), "call", "Nope", "totalSupply", "--node-wallet"],
            env=NO_KEY,
        )
        assert result.exit_code == 2
        assert "not found" in result.output

    def test_wallet_failure(self, runner: CliRunner, contracts_dir: Path, fake_node: FakeNode) -> None:
        fake_node.on("eth_requestAccounts", [])
        result = self._call(runner, contracts_dir, "totalSupply")
        assert result.exit_code == 4
        assert "Failed to connect wallet" in result.output

    def test_overload_chosen_by_argument_count(
        self, runner: CliRunner, overloaded_dir: Path, fake_node: FakeNode
    ) -> None:
        result = self._call_store(runner, overloaded_dir, "get", "-a", "7", "--json")
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["inputs"] == {"k": "7"}
        data = fake_node.params("eth_call")[0]["data"]
        assert data.endswith(encode(["uint256"], [7]).hex())

    def test_overload_by_signature(self, runner: CliRunner, overloaded_dir: Path, fake_node: FakeNode) -> None:
        result = self._call_store(runner, overloaded_dir, "get()", "--json")
        assert result.exit_code == 0, result.output
        assert len(fake_node.params("eth_call")[0]["data"]) == 2 + 8


class TestConsole:
    def test_run_function_and_quit(self, runner: CliRunner, contracts_dir: Path, fake_node: FakeNode) -> None:
        result = runner.invoke(
            cli,
            ["--contracts-dir", str(contracts_dir), "console", "--network", "anvil", "--node-wallet"],
            input="1\ntotalSupply\nhistory\nquit\n",
            env=NO_KEY,
        )
        assert result.exit_code == 0, result.output
        assert "Connected" in result.output
        assert "Contract Functions (4)" in result.output
        assert "Results (1)" in result.output
        assert "123456789012345678901234567890" in result.output

    def test_remembers_inputs(self, runner: CliRunner, contracts_dir: Path, fake_node: FakeNode) -> None:
        result = runner.invoke(
            cli,
            ["--contracts-dir", str(contracts_dir), "console", "--network", "anvil", "--node-wallet"],
            input=f"1\n1\n{NODE_ACCOUNT}\n1\n\nquit\n",
            env=NO_KEY,
        )
        assert result.exit_code == 0, result.output
        calls = [params for method, params in fake_node.calls if method == "eth_call"]
        assert len(calls) == 2
        assert calls[0][0]["data"] == calls[1][0]["data"]

    def test_unknown_command(self, runner: CliRunner, contracts_dir: Path, fake_node: FakeNode) -> None:
        result = runner.invoke(
            cli,
            ["--contracts-dir", str(contracts_dir), "console", "--network", "anvil", "--node-wallet"],
            input="1\nfrobnicate\nq\n",
            env=NO_KEY,
        )
        assert result.exit_code == 0
        assert "Unknown command or function: frobnicate" in result.output

    def test_empty_catalog(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["--contracts-dir", str(tmp_path), "console"])
        assert result.exit_code == 1
        assert "No contracts found" in result.output

    def test_retry_asks_for_a_new_key(self, runner: CliRunner, contracts_dir: Path, fake_node: FakeNode) -> None:
        result = runner.invoke(
            cli,
            ["--contracts-dir", str(contracts_dir), "console", "--network", "anvil", "--private-key", "0x1234"],
            input=f"1\ny\nprivate-key\n{PRIVATE_KEY}\nquit\n",
        )
        assert result.exit_code == 0, result.output
        assert "Invalid private key" in result.output
        assert "Warning: entering a private key" in result.output
        assert "Connected" in result.output
        assert "Private Key" in result.output
