"""
contract-debugger: generate call forms from contract ABIs and invoke them.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("contract-debugger")
except PackageNotFoundError:
    __version__ = "0.0.0+local"

__all__ = [
    # Models
    "ContractDescriptor",
    "InvocationResult",
    # ABI
    "AbiFunction",
    "AbiParameter",
    "StateMutability",
    "extract_functions",
    "parse_abi_entry",
    # Catalog
    "Catalog",
    "load_catalog",
    # Forms, dispatch & results
    "FormState",
    "InvocationDispatcher",
    "ResultLog",
    "coerce_argument",
    "coerce_arguments",
    "normalize_result",
    # Session
    "AuthMethod",
    "DebuggerSession",
    "SessionState",
    # Chain & wallet
    "Contract",
    "Network",
    "NETWORKS",
    "RpcClient",
    "LocalKeySigner",
    "NodeAccountSigner",
    # Errors
    "DebuggerError",
    "CatalogError",
    "ContractNotFoundError",
    "NetworkNotFoundError",
    "AbiFormatError",
    "FunctionNotFoundError",
    "WalletConnectionError",
    "RpcError",
    "ContractCallError",
    "TransactionRevertedError",
]

from .chain.abi import AbiFunction, AbiParameter, StateMutability, extract_functions, parse_abi_entry
from .chain.contract import Contract
from .chain.networks import NETWORKS, Network
from .chain.rpc import RpcClient
from .debugger.catalog import Catalog, load_catalog
from .debugger.dispatch import InvocationDispatcher, coerce_argument, coerce_arguments, normalize_result
from .debugger.forms import FormState
from .debugger.results import ResultLog
from .debugger.session import AuthMethod, DebuggerSession, SessionState
from .exceptions import (
    AbiFormatError,
    CatalogError,
    ContractCallError,
    ContractNotFoundError,
    DebuggerError,
    FunctionNotFoundError,
    NetworkNotFoundError,
    RpcError,
    TransactionRevertedError,
    WalletConnectionError,
)
from .models import ContractDescriptor, InvocationResult
from .wallet.eth import LocalKeySigner, NodeAccountSigner
