"""Network configuration for contract-debugger."""

from __future__ import annotations

import os
from dataclasses import dataclass

from ..exceptions import NetworkNotFoundError


@dataclass(frozen=True)
class Network:
    key: str
    name: str
    chain_id: int
    default_rpc_url: str
    description: str
    rpc_env: str

    @property
    def rpc_url(self) -> str:
        """RPC endpoint, overridable through the network's environment variable."""
        return os.environ.get(self.rpc_env) or self.default_rpc_url


NETWORKS: dict[str, Network] = {
    "anvil": Network(
        key="anvil",
        name="Anvil (Local)",
        chain_id=31337,
        default_rpc_url="http://127.0.0.1:8545",
        description="Local development network",
        rpc_env="ANVIL_RPC_URL",
    ),
    "sepolia": Network(
        key="sepolia",
        name="Sepolia Testnet",
        chain_id=11155111,
        default_rpc_url="https://sepolia.drpc.org",
        description="Ethereum testnet",
        rpc_env="SEPOLIA_RPC_URL",
    ),
}

DEFAULT_NETWORK = "sepolia"


def get_network(key: str, networks: dict[str, Network] | None = None) -> Network:
    networks = NETWORKS if networks is None else networks
    try:
        return networks[key]
    except KeyError:
        raise NetworkNotFoundError(
            f"Network '{key}' not found. Available: {', '.join(sorted(networks))}"
        ) from None
