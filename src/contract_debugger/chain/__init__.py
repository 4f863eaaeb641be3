"""
Chain - on-chain interaction layer for contract-debugger.

Provides the ABI entry model, network table, async JSON-RPC client and the
contract binding used to call and transact.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
