"""
Shared fixtures: an in-memory JSON-RPC node served through httpx.MockTransport.

The node understands just enough of the eth_* namespace to exercise the
real signing, encoding and receipt-parsing paths without network access.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import httpx
import pytest
from eth_abi import encode
from eth_account import Account

from counterloop.chain.abi import COUNTER_ABI, event_topic, function_selector, keccak256
from counterloop.chain.rpc import RpcClient
from counterloop.counter import CounterContract

# Well-known local development key (never funded on a public network)
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
COUNTER_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
CHAIN_ID = 11155111


class FakeNode:
    """Scriptable stand-in for a Sepolia node hosting a Counter contract."""

    def __init__(
        self,
        count: int = 0,
        balance: int = 10**18,
        gas_price: int = 1,
        gas_used: int = 21_000,
        owner: str = TEST_ADDRESS,
    ) -> None:
        self.count = count
        self.balance = balance
        self.gas_price = gas_price
        self.gas_used = gas_used
        self.owner = owner
        self.nonce = 0
        self.sends = 0
        self.fail_sends: set[int] = set()
        self.revert_sends: set[int] = set()
        self.report_effective_price = True
        self.emit_events = True
        self.malformed_events = False
        self.empty_calls = False
        self.receipt_delay_polls = 0
        self.receipts: dict[str, dict[str, Any]] = {}
        self.methods: list[str] = []
        self._pending_polls: dict[str, int] = {}

    # ---- transport ----

    def handle(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        method = body["method"]
        self.methods.append(method)
        try:
            result = getattr(self, method)(*body.get("params", []))
        except NodeError as exc:
            return httpx.Response(
                200,
                json={"jsonrpc": "2.0", "id": body["id"], "error": {"code": -32000, "message": str(exc)}},
            )
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    # ---- eth_* ----

    def eth_chainId(self) -> str:
        return hex(CHAIN_ID)

    def eth_getBalance(self, address: str, block: str) -> str:
        return hex(self.balance)

    def eth_gasPrice(self) -> str:
        return hex(self.gas_price)

    def eth_getTransactionCount(self, address: str, block: str) -> str:
        return hex(self.nonce)

    def eth_estimateGas(self, tx: dict) -> str:
        return hex(self.gas_used)

    def eth_call(self, tx: dict, block: str) -> str:
        if self.empty_calls:
            # what a node answers for an address without code
            return "0x"
        selector = tx["data"][2:10]
        if selector == function_selector(COUNTER_ABI, "getCount").hex():
            return "0x" + encode(["uint256"], [self.count]).hex()
        if selector == function_selector(COUNTER_ABI, "owner").hex():
            return "0x" + encode(["address"], [self.owner]).hex()
        raise NodeError("execution reverted")

    def eth_sendRawTransaction(self, raw_tx: str) -> str:
        self.sends += 1
        if self.sends in self.fail_sends:
            raise NodeError("replacement transaction underpriced")

        sender = Account.recover_transaction(raw_tx)
        tx_hash = "0x" + keccak256(bytes.fromhex(raw_tx[2:])).hex()
        self.nonce += 1

        reverted = self.sends in self.revert_sends
        logs = []
        if not reverted:
            self.count += 1
            if self.emit_events:
                logs.append(
                    {
                        "address": COUNTER_ADDRESS.lower(),
                        "topics": [
                            event_topic(COUNTER_ABI, "Incremented"),
                            "0x" + "00" * 12 + sender[2:].lower(),
                        ],
                        "data": "0x12" if self.malformed_events else "0x" + encode(["uint256"], [self.count]).hex(),
                    }
                )
        self.balance -= self.gas_used * self.gas_price

        receipt: dict[str, Any] = {
            "transactionHash": tx_hash,
            "status": "0x0" if reverted else "0x1",
            "gasUsed": hex(self.gas_used),
            "blockNumber": hex(100 + self.sends),
            "logs": logs,
        }
        if self.report_effective_price:
            receipt["effectiveGasPrice"] = hex(self.gas_price)
        self.receipts[tx_hash] = receipt
        self._pending_polls[tx_hash] = self.receipt_delay_polls
        return tx_hash

    def eth_getTransactionReceipt(self, tx_hash: str) -> Optional[dict]:
        if self._pending_polls.get(tx_hash, 0) > 0:
            self._pending_polls[tx_hash] -= 1
            return None
        return self.receipts.get(tx_hash)


class NodeError(Exception):
    pass


class SleepRecorder:
    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture()
def node() -> FakeNode:
    return FakeNode()


@pytest.fixture()
def client(node: FakeNode):
    with RpcClient("http://node.test", transport=node.transport()) as rpc:
        yield rpc


@pytest.fixture()
def account():
    return Account.from_key(TEST_PRIVATE_KEY)


@pytest.fixture()
def sleeps() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture()
def counter(client: RpcClient, account, sleeps: SleepRecorder) -> CounterContract:
    return CounterContract(client, COUNTER_ADDRESS, account, sleep=sleeps)
