"""
CounterContract and RpcClient tests against the in-memory node.

Transactions are really signed with eth-account and calldata really
encoded with eth-abi; only the HTTP layer is replaced.
"""

from __future__ import annotations

import pytest

from counterloop.chain.rpc import ReceiptTimeoutError, RpcError
from counterloop.counter import CounterContract, EmptyCallResultError, TransactionRevertedError

from .conftest import CHAIN_ID, COUNTER_ADDRESS, TEST_ADDRESS, FakeNode, SleepRecorder


class TestReads:
    """Read-only calls and account queries."""

    def test_get_count(self, node: FakeNode, counter: CounterContract) -> None:
        node.count = 17
        assert counter.get_count() == 17

    def test_owner(self, counter: CounterContract) -> None:
        assert counter.owner() == TEST_ADDRESS

    def test_address_is_checksummed(self, client, account) -> None:
        contract = CounterContract(client, COUNTER_ADDRESS.lower(), account)
        assert contract.address == COUNTER_ADDRESS

    def test_chain_id_is_queried_once(self, node: FakeNode, counter: CounterContract) -> None:
        assert counter.chain_id == CHAIN_ID
        assert counter.chain_id == CHAIN_ID
        assert node.methods.count("eth_chainId") == 1

    def test_balance(self, node: FakeNode, client) -> None:
        node.balance = 123
        assert client.get_balance(TEST_ADDRESS) == 123

    def test_empty_get_count_raises(self, node: FakeNode, counter: CounterContract) -> None:
        node.empty_calls = True
        with pytest.raises(EmptyCallResultError, match="getCount"):
            counter.get_count()

    def test_empty_owner_raises(self, node: FakeNode, counter: CounterContract) -> None:
        node.empty_calls = True
        with pytest.raises(EmptyCallResultError, match="owner"):
            counter.owner()


class TestIncrement:
    """Signing, submission and receipt parsing."""

    def test_increment_and_wait(self, node: FakeNode, counter: CounterContract) -> None:
        node.count = 5
        node.gas_price = 3

        pending = counter.increment()
        assert pending.gas_price == 3
        assert pending.nonce == 0

        receipt = counter.wait(pending)
        assert receipt.status == 1
        assert receipt.gas_used == 21_000
        assert receipt.effective_gas_price == 3
        assert receipt.new_count == 6
        assert node.count == 6

    def test_nonce_advances(self, counter: CounterContract) -> None:
        first = counter.increment()
        counter.wait(first)
        second = counter.increment()
        assert second.nonce == first.nonce + 1

    def test_fixed_gas_limit_skips_estimate(self, node: FakeNode, client, account) -> None:
        contract = CounterContract(client, COUNTER_ADDRESS, account, chain_id=CHAIN_ID, gas_limit=60_000)
        contract.wait(contract.increment())
        assert "eth_estimateGas" not in node.methods
        assert "eth_chainId" not in node.methods

    def test_missing_effective_price(self, node: FakeNode, counter: CounterContract) -> None:
        node.report_effective_price = False
        receipt = counter.wait(counter.increment())
        assert receipt.effective_gas_price is None

    def test_without_event(self, node: FakeNode, counter: CounterContract) -> None:
        node.emit_events = False
        receipt = counter.wait(counter.increment())
        assert receipt.new_count is None
        assert receipt.block_number == 101

    def test_malformed_event_keeps_receipt(self, node: FakeNode, counter: CounterContract) -> None:
        node.malformed_events = True
        receipt = counter.wait(counter.increment())
        assert receipt.status == 1
        assert receipt.gas_used == 21_000
        assert receipt.new_count is None

    def test_reverted(self, node: FakeNode, counter: CounterContract) -> None:
        node.revert_sends = {1}
        with pytest.raises(TransactionRevertedError):
            counter.wait(counter.increment())
        assert node.count == 0

    def test_rpc_error(self, node: FakeNode, counter: CounterContract) -> None:
        node.fail_sends = {1}
        with pytest.raises(RpcError, match="underpriced"):
            counter.increment()

    def test_decrement_submits(self, node: FakeNode, counter: CounterContract) -> None:
        pending = counter.decrement()
        assert pending.tx_hash in node.receipts


class TestReceiptPolling:
    """Waiting for a transaction to be mined."""

    def test_polls_until_mined(
        self, node: FakeNode, counter: CounterContract, sleeps: SleepRecorder
    ) -> None:
        node.receipt_delay_polls = 2
        counter.wait(counter.increment())
        assert sleeps.calls == [2.0, 2.0]

    def test_timeout(self, node: FakeNode, client, account) -> None:
        node.receipt_delay_polls = 10**6
        contract = CounterContract(
            client, COUNTER_ADDRESS, account, receipt_timeout=0.05, poll_interval=0.01
        )
        with pytest.raises(ReceiptTimeoutError):
            contract.wait(contract.increment())
