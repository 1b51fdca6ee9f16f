"""
Counter - Typed access to a deployed Counter contract.

Wraps the contract address, the signing account and the RPC client so
the runner only deals with counts, pending transactions and receipts.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

from eth_abi.exceptions import DecodingError
from eth_account.signers.local import LocalAccount

from .chain.abi import COUNTER_ABI, decode_event_log, encode_function_call, to_checksum_address
from .chain.rpc import RpcClient
from .chain.tx import build_contract_tx, sign_and_send
from .utils import from_hex


class EmptyCallResultError(RuntimeError):
    """eth_call returned no data, usually because no contract is deployed there."""

    def __init__(self, function_name: str, address: str) -> None:
        self.function_name = function_name
        self.address = address
        super().__init__(f"{function_name} returned no data (no contract at {address}?)")


class TransactionRevertedError(RuntimeError):
    def __init__(self, tx_hash: str) -> None:
        self.tx_hash = tx_hash
        super().__init__(f"Transaction reverted: {tx_hash}")


@dataclass(frozen=True)
class PendingTransaction:
    tx_hash: str
    nonce: int
    gas_price: int


@dataclass(frozen=True)
class TxReceipt:
    tx_hash: str
    status: int
    gas_used: int
    effective_gas_price: Optional[int]
    block_number: Optional[int]
    new_count: Optional[int] = None


class CounterContract:
    """
    A deployed Counter contract bound to a signer.

    Args:
        client: RPC client for the contract's network
        address: Contract address
        account: Signing account for state-changing calls
        chain_id: EIP-155 chain id (default: queried once via eth_chainId)
        gas_limit: Fixed gas limit (default: eth_estimateGas per call)
        receipt_timeout: Seconds to wait for a receipt, None to wait forever
        poll_interval: Receipt polling interval in seconds
    """

    def __init__(
        self,
        client: RpcClient,
        address: str,
        account: LocalAccount,
        chain_id: Optional[int] = None,
        gas_limit: Optional[int] = None,
        receipt_timeout: Optional[float] = None,
        poll_interval: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.client = client
        self.address = to_checksum_address(address)
        self.account = account
        self.gas_limit = gas_limit
        self.receipt_timeout = receipt_timeout
        self.poll_interval = poll_interval
        self._chain_id = chain_id
        self._sleep = sleep

    @property
    def chain_id(self) -> int:
        if self._chain_id is None:
            self._chain_id = self.client.get_chain_id()
        return self._chain_id

    # ---- Reads ----

    def get_count(self) -> int:
        return self._read("getCount")

    def owner(self) -> str:
        return to_checksum_address(self._read("owner"))

    def _read(self, function_name: str):
        result = self.client.read_contract(self.address, COUNTER_ABI, function_name)
        if result is None:
            raise EmptyCallResultError(function_name, self.address)
        return result

    # ---- Writes ----

    def increment(self) -> PendingTransaction:
        return self._transact("increment")

    def decrement(self) -> PendingTransaction:
        return self._transact("decrement")

    def _transact(self, function_name: str) -> PendingTransaction:
        tx = build_contract_tx(
            self.client,
            self.account,
            self.address,
            encode_function_call(COUNTER_ABI, function_name),
            chain_id=self.chain_id,
            gas_limit=self.gas_limit,
        )
        tx_hash = sign_and_send(self.client, self.account, tx)
        return PendingTransaction(tx_hash=tx_hash, nonce=tx["nonce"], gas_price=tx["gasPrice"])

    def wait(self, pending: PendingTransaction) -> TxReceipt:
        """
        Block until the transaction is mined and parse its receipt.

        Raises:
            TransactionRevertedError: If the receipt status is 0
            ReceiptTimeoutError: If receipt_timeout is set and elapses
        """
        raw = self.client.wait_for_receipt(
            pending.tx_hash,
            timeout=self.receipt_timeout,
            poll_interval=self.poll_interval,
            sleep=self._sleep,
        )

        if from_hex(raw.get("status", "0x0")) != 1:
            raise TransactionRevertedError(pending.tx_hash)

        return TxReceipt(
            tx_hash=pending.tx_hash,
            status=1,
            gas_used=from_hex(raw["gasUsed"]),
            effective_gas_price=from_hex(raw.get("effectiveGasPrice")),
            block_number=from_hex(raw.get("blockNumber")),
            new_count=self._incremented_count(raw),
        )

    def _incremented_count(self, raw_receipt: dict) -> Optional[int]:
        for log in raw_receipt.get("logs") or []:
            if (log.get("address") or "").lower() != self.address.lower():
                continue
            try:
                event = decode_event_log(COUNTER_ABI, "Incremented", log)
            except (DecodingError, ValueError):
                # the transaction is already mined; a bad log only loses the new count
                return None
            if event is not None:
                return event["newCount"]
        return None
