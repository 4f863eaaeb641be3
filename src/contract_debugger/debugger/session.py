"""
Debugger session - the top-level controller.

Owns the session state (selected network and contract, connection status,
wallet address), the form state, the result log and the dispatcher.
Selecting a network or a contract drops the current connection; connecting
again starts a fresh result log while keeping the form inputs.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..chain.abi import AbiFunction, extract_functions, select_function
from ..chain.contract import Contract
from ..chain.networks import DEFAULT_NETWORK, NETWORKS, Network, get_network
from ..chain.rpc import RpcClient
from ..exceptions import WalletConnectionError
from ..models import ContractDescriptor, InvocationResult
from ..wallet.eth import LocalKeySigner, NodeAccountSigner, Signer
from .catalog import Catalog
from .dispatch import InvocationDispatcher
from .forms import FormState
from .results import ResultLog

logger = logging.getLogger("contract_debugger").getChild("session")

RpcFactory = Callable[[str], RpcClient]


class AuthMethod(Enum):
    NODE = "node"
    PRIVATE_KEY = "private-key"

    @property
    def label(self) -> str:
        return "Node Wallet" if self is AuthMethod.NODE else "Private Key"


@dataclass
class SessionState:
    network: str = DEFAULT_NETWORK
    contract: Optional[str] = None
    auth_method: AuthMethod = AuthMethod.NODE
    connecting: bool = False
    connected: bool = False
    wallet_address: Optional[str] = None
    connection_error: Optional[str] = None

    def reset_connection(self) -> None:
        self.connected = False
        self.wallet_address = None
        self.connection_error = None


class DebuggerSession:
    def __init__(
        self,
        catalog: Catalog,
        networks: Optional[dict[str, Network]] = None,
        rpc_factory: Optional[RpcFactory] = None,
    ) -> None:
        self.catalog = catalog
        self.networks = NETWORKS if networks is None else networks
        self.state = SessionState()
        self.forms = FormState()
        self.results = ResultLog()
        self._rpc_factory = rpc_factory or RpcClient
        self._rpc: Optional[RpcClient] = None
        self._signer: Optional[Signer] = None
        self._dispatcher: Optional[InvocationDispatcher] = None
        self._descriptor: Optional[ContractDescriptor] = None
        self._functions: list[AbiFunction] = []

    # ============ Selection ============

    @property
    def network(self) -> Network:
        return get_network(self.state.network, self.networks)

    @property
    def contract(self) -> Optional[ContractDescriptor]:
        return self._descriptor

    async def select_network(self, key: str) -> Network:
        network = get_network(key, self.networks)
        await self._disconnect()
        self.state.network = key
        return network

    async def select_contract(self, name: str) -> ContractDescriptor:
        descriptor = self.catalog.get(name)
        await self._disconnect()
        self.state.contract = name
        self._descriptor = descriptor
        return descriptor

    # ============ Connection ============

    @property
    def connected(self) -> bool:
        return self.state.connected

    async def connect(
        self,
        auth_method: AuthMethod = AuthMethod.NODE,
        private_key: Optional[str] = None,
    ) -> str:
        """
        Connect a wallet and bind the selected contract.

        Returns:
            The connected wallet address

        Raises:
            WalletConnectionError: On any failure; the message is also kept
                in ``state.connection_error``.
        """
        await self._disconnect()
        self.state.auth_method = auth_method
        self.state.connecting = True
        rpc: Optional[RpcClient] = None
        try:
            if self._descriptor is None:
                raise WalletConnectionError("Please select a contract")

            network = self.network
            rpc = self._rpc_factory(network.rpc_url)
            if auth_method is AuthMethod.PRIVATE_KEY:
                if not private_key:
                    raise WalletConnectionError("Please enter your private key")
                signer: Signer = await LocalKeySigner.connect(private_key, rpc)
            else:
                signer = await NodeAccountSigner.connect(rpc)

            contract = Contract(self._descriptor.address, rpc, signer)
            self._functions = extract_functions(self._descriptor.abi)
            self.results = ResultLog()
            self._dispatcher = InvocationDispatcher(contract, self.forms, self.results)
            self._rpc = rpc
            self._signer = signer
        except WalletConnectionError as exc:
            if rpc is not None:
                await rpc.aclose()
            self.state.connection_error = str(exc)
            self.state.connected = False
            logger.warning("Connection failed: %s", exc)
            raise
        finally:
            self.state.connecting = False

        self.state.connected = True
        self.state.wallet_address = signer.address
        logger.info(
            "Connected %s on %s as %s", self._descriptor.name, network.name, signer.address
        )
        return signer.address

    async def aclose(self) -> None:
        await self._disconnect()

    async def _disconnect(self) -> None:
        if self._rpc is not None:
            await self._rpc.aclose()
        self._rpc = None
        self._signer = None
        self._dispatcher = None
        self._functions = []
        self.state.reset_connection()

    # ============ Forms & invocation ============

    @property
    def functions(self) -> list[AbiFunction]:
        return list(self._functions)

    def function(self, key: str, arity: Optional[int] = None) -> AbiFunction:
        """Look up a function by signature, or by name when that is unambiguous."""
        return select_function(self._functions, key, arity)

    def set_input(self, function_name: str, param_name: str, value: str) -> None:
        self.forms.set_input(function_name, param_name, value)

    def get_inputs(self, function_name: str) -> dict[str, str]:
        return self.forms.get_inputs(function_name)

    def _require_dispatcher(self) -> InvocationDispatcher:
        if self._dispatcher is None:
            raise WalletConnectionError("Not connected. Connect to the contract first.")
        return self._dispatcher

    async def invoke(self, key: str) -> InvocationResult:
        return await self._require_dispatcher().invoke(self.function(key))

    def start(self, key: str) -> "asyncio.Task[InvocationResult]":
        return self._require_dispatcher().start(self.function(key))

    def is_loading(self, function_name: str) -> bool:
        return self._dispatcher is not None and self._dispatcher.is_loading(function_name)

    def latest(self, function_name: str) -> Optional[InvocationResult]:
        return self.results.latest(function_name)
