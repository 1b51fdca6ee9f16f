"""
JSON-RPC Client for EVM test networks.

Lightweight alternative to web3.py: uses httpx for HTTP + eth-abi for encoding.
Supports read-only contract calls, balance queries, raw transaction
submission and transaction receipt polling.
"""

from __future__ import annotations

import itertools
import time
from typing import Any, Callable, Optional

import httpx

from .abi import decode_function_result, encode_function_call

# Default RPC endpoint (Ethereum Sepolia)
DEFAULT_RPC_URL = "https://rpc.sepolia.org"


class RpcError(RuntimeError):
    """The node answered with a JSON-RPC error object."""

    def __init__(self, method: str, error: Any) -> None:
        self.method = method
        self.error = error
        message = error.get("message", error) if isinstance(error, dict) else error
        super().__init__(f"RPC error in {method}: {message}")


class ReceiptTimeoutError(TimeoutError):
    pass


class RpcClient:
    """
    Minimal JSON-RPC client bound to a single endpoint.

    Args:
        url: RPC endpoint URL
        timeout: Per-request HTTP timeout in seconds
        transport: Optional httpx transport (tests pass httpx.MockTransport)
    """

    def __init__(
        self,
        url: str = DEFAULT_RPC_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.url = url
        self._client = httpx.Client(timeout=timeout, transport=transport)
        self._ids = itertools.count(1)

    def __enter__(self) -> "RpcClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def call(self, method: str, params: Optional[list] = None) -> Any:
        """
        Make a JSON-RPC call.

        Returns:
            Result field from the RPC response

        Raises:
            RpcError: If the node returns an error object
            httpx.HTTPError: On transport or HTTP status failures
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": next(self._ids),
        }
        response = self._client.post(self.url, json=payload)
        response.raise_for_status()
        data = response.json()

        if "error" in data:
            raise RpcError(method, data["error"])

        return data.get("result")

    # ---- Account / network ----

    def get_balance(self, address: str) -> int:
        """Balance in wei at the latest block."""
        return int(self.call("eth_getBalance", [address, "latest"]), 16)

    def get_nonce(self, address: str, block: str = "pending") -> int:
        return int(self.call("eth_getTransactionCount", [address, block]), 16)

    def get_gas_price(self) -> int:
        return int(self.call("eth_gasPrice"), 16)

    def get_chain_id(self) -> int:
        return int(self.call("eth_chainId"), 16)

    def estimate_gas(self, tx: dict[str, Any]) -> int:
        return int(self.call("eth_estimateGas", [tx]), 16)

    # ---- Contracts ----

    def read_contract(
        self,
        contract_address: str,
        abi: list,
        function_name: str,
        args: Optional[list] = None,
    ) -> Any:
        """
        Read from a smart contract (eth_call).

        Returns:
            Decoded return value(s), or None for empty return data
        """
        calldata = encode_function_call(abi, function_name, args)
        result = self.call("eth_call", [{"to": contract_address, "data": calldata}, "latest"])

        if result is None or result == "0x":
            return None

        return decode_function_result(abi, function_name, result)

    # ---- Transactions ----

    def send_raw_transaction(self, raw_tx: str) -> str:
        """Send a signed raw transaction. Returns the 0x-prefixed tx hash."""
        return self.call("eth_sendRawTransaction", [raw_tx])

    def get_transaction_receipt(self, tx_hash: str) -> Optional[dict]:
        return self.call("eth_getTransactionReceipt", [tx_hash])

    def wait_for_receipt(
        self,
        tx_hash: str,
        timeout: Optional[float] = None,
        poll_interval: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> dict:
        """
        Wait for a transaction receipt.

        Args:
            tx_hash: Transaction hash
            timeout: Maximum wait time in seconds, None to wait indefinitely
            poll_interval: Polling interval in seconds

        Raises:
            ReceiptTimeoutError: If a timeout is set and no receipt arrives
        """
        start = time.monotonic()
        while True:
            receipt = self.get_transaction_receipt(tx_hash)
            if receipt is not None:
                return receipt
            if timeout is not None and time.monotonic() - start >= timeout:
                raise ReceiptTimeoutError(
                    f"Transaction {tx_hash} not confirmed within {timeout}s"
                )
            sleep(poll_interval)
