"""
Transaction Runner - Sequential increment loop with statistics.

Flow:
1. Check the signer holds a non-zero balance (fatal otherwise)
2. Record the initial counter value
3. For each attempt: read count, send increment(), wait for the receipt,
   account gas used x gas price
4. Sleep a random delay after each success (except the last attempt) or
   a fixed backoff after each failure
5. Read the final count and balance and print the report

Exactly one transaction is outstanding at any time. A failed attempt is
counted and skipped; the loop index always advances.
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import Callable, Optional

from . import report
from .chain.rpc import RpcClient
from .config import RunnerConfig
from .counter import CounterContract


class InsufficientBalanceError(RuntimeError):
    exit_code: int = 1


@dataclass
class RunStatistics:
    """Outcome counters for a run. Gas totals only grow, and only on success."""

    initial_count: int = 0
    initial_balance: int = 0
    attempted: int = 0
    succeeded: int = 0
    failed: int = 0
    total_gas_used: int = 0
    total_gas_cost: int = 0

    def record_success(self, gas_used: int, gas_price: int) -> int:
        """Add one confirmed transaction. Returns its cost in wei."""
        if gas_used < 0 or gas_price < 0:
            raise ValueError("Gas used and gas price must be non-negative")
        cost = gas_used * gas_price
        self.attempted += 1
        self.succeeded += 1
        self.total_gas_used += gas_used
        self.total_gas_cost += cost
        return cost

    def record_failure(self) -> None:
        self.attempted += 1
        self.failed += 1

    def success_rate(self, target: int) -> float:
        """Percentage of target attempts that succeeded (0.0 when target is 0)."""
        if target <= 0:
            return 0.0
        return self.succeeded / target * 100

    @property
    def average_gas(self) -> int:
        if self.succeeded == 0:
            return 0
        return self.total_gas_used // self.succeeded

    @property
    def average_cost(self) -> int:
        if self.succeeded == 0:
            return 0
        return self.total_gas_cost // self.succeeded


@dataclass
class RunReport:
    target_attempts: int
    stats: RunStatistics
    final_count: int
    final_balance: int

    @property
    def initial_count(self) -> int:
        return self.stats.initial_count

    @property
    def count_delta(self) -> int:
        return self.final_count - self.stats.initial_count

    @property
    def initial_balance(self) -> int:
        return self.stats.initial_balance

    @property
    def total_spent(self) -> int:
        return self.stats.initial_balance - self.final_balance


class TransactionRunner:
    """
    Drives config.attempts sequential increment() calls.

    Args:
        config: Validated run configuration
        counter: Target contract bound to the signing account
        client: RPC client for balance queries (default: counter.client)
        sleep: Sleep function taking seconds (tests inject a recorder)
        rng: Random source for the inter-attempt delay
    """

    def __init__(
        self,
        config: RunnerConfig,
        counter: CounterContract,
        client: Optional[RpcClient] = None,
        sleep: Callable[[float], None] = time.sleep,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config
        self.counter = counter
        self.client = client or counter.client
        self._sleep = sleep
        self._rng = rng or random.Random()

    @property
    def address(self) -> str:
        return self.counter.account.address

    def check_balance(self) -> int:
        """
        Return the signer balance in wei.

        Raises:
            InsufficientBalanceError: If the balance is zero
        """
        balance = self.client.get_balance(self.address)
        report.balance(balance)
        if balance <= 0:
            raise InsufficientBalanceError(
                "Insufficient balance. Please add Sepolia ETH to your wallet."
            )
        return balance

    def run(self) -> RunReport:
        target = self.config.attempts
        report.header(self.config, self.counter.address, self.address)

        stats = RunStatistics(initial_balance=self.check_balance())
        stats.initial_count = self.counter.get_count()
        report.initial_count(stats.initial_count)

        report.starting()
        for index in range(1, target + 1):
            self.attempt(index, stats)

        result = RunReport(
            target_attempts=target,
            stats=stats,
            final_count=self.counter.get_count(),
            final_balance=self.client.get_balance(self.address),
        )
        report.summary(result)
        return result

    def attempt(self, index: int, stats: RunStatistics) -> bool:
        """Run one attempt, absorbing any error into stats. Returns success."""
        target = self.config.attempts
        try:
            current = self.counter.get_count()
            report.attempt_started(index, target, current)

            pending = self.counter.increment()
            report.tx_sent(pending.tx_hash)

            receipt = self.counter.wait(pending)
        except Exception as exc:
            stats.record_failure()
            report.attempt_failed(exc, self.config.backoff_ms)
            self._sleep(self.config.backoff_ms / 1000)
            return False

        gas_price = receipt.effective_gas_price or pending.gas_price
        cost = stats.record_success(receipt.gas_used, gas_price)
        report.attempt_succeeded(receipt, cost)

        if index < target:
            delay_ms = self._rng.randint(self.config.min_delay_ms, self.config.max_delay_ms)
            report.waiting(delay_ms)
            self._sleep(delay_ms / 1000)
        return True
