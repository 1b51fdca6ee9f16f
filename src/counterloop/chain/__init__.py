"""
Chain - On-chain interaction layer for Counterloop.

Provides a JSON-RPC client, the Counter ABI, and transaction utilities.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
