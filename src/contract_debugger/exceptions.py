"""
Error taxonomy for contract-debugger.

Catalog errors are reported per file and never abort a load. Connection
errors are stored on the session and shown to the user. Invocation errors
are captured into an InvocationResult and never escape the dispatcher.
"""

from __future__ import annotations

from typing import Any, Optional


class DebuggerError(RuntimeError):
    exit_code: int = 1


class CatalogError(DebuggerError):
    exit_code = 2


class ContractNotFoundError(CatalogError):
    pass


class NetworkNotFoundError(DebuggerError):
    exit_code = 2


class AbiFormatError(DebuggerError):
    exit_code = 3


class FunctionNotFoundError(DebuggerError):
    exit_code = 3


class WalletConnectionError(DebuggerError):
    exit_code = 4


class RpcError(DebuggerError):
    """JSON-RPC level failure reported by the node."""

    exit_code = 5

    def __init__(self, message: str, code: Optional[int] = None, data: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.data = data


class ContractCallError(DebuggerError):
    exit_code = 6


class TransactionRevertedError(ContractCallError):
    def __init__(self, message: str, transaction_hash: Optional[str] = None) -> None:
        super().__init__(message)
        self.transaction_hash = transaction_hash
