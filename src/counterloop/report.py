"""
Console output for a Counterloop run.

Human-readable, line-oriented text written through click. Nothing parses
it, so only the set of fields matters, not the exact layout.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from .utils import format_eth, format_seconds

if TYPE_CHECKING:
    from .config import RunnerConfig
    from .counter import TxReceipt
    from .runner import RunReport


def header(config: "RunnerConfig", contract_address: str, wallet_address: str) -> None:
    click.secho("Counter Interaction Test", fg="cyan", bold=True)
    click.secho("========================", fg="cyan")
    click.echo(f"Contract Address:  {contract_address}")
    click.echo(f"Wallet Address:    {wallet_address}")
    click.echo(f"Target Increments: {config.attempts}")
    click.echo(
        f"Delay Range:       {format_seconds(config.min_delay_ms)} - "
        f"{format_seconds(config.max_delay_ms)}"
    )
    click.echo("")


def balance(wei: int) -> None:
    click.echo(f"Wallet Balance: {format_eth(wei)} ETH")


def initial_count(count: int) -> None:
    click.echo(f"Initial Counter Value: {count}")
    click.echo("")


def starting() -> None:
    click.secho("Starting increment operations...", fg="cyan")
    click.echo("")


def attempt_started(index: int, target: int, current: int) -> None:
    click.echo(f"[{index}/{target}] Incrementing... (current: {current})")


def tx_sent(tx_hash: str) -> None:
    click.echo(f"  Transaction sent: {tx_hash}")


def attempt_succeeded(receipt: "TxReceipt", cost: int) -> None:
    if receipt.new_count is not None:
        click.secho(f"  Success! New count: {receipt.new_count}", fg="green")
    else:
        click.secho(f"  Success! Block: {receipt.block_number}", fg="green")
    click.echo(f"  Gas used: {receipt.gas_used} | Cost: {format_eth(cost)} ETH")


def waiting(delay_ms: int) -> None:
    click.echo(f"  Waiting {format_seconds(delay_ms)}...")
    click.echo("")


def attempt_failed(exc: BaseException, backoff_ms: int) -> None:
    click.secho(f"  Error: {exc}", fg="red", err=True)
    click.echo(f"  Waiting {format_seconds(backoff_ms)} before continuing...")
    click.echo("")


def summary(result: "RunReport") -> None:
    stats = result.stats
    click.echo("")
    click.secho("Final Statistics", fg="cyan", bold=True)
    click.secho("================", fg="cyan")

    click.echo(f"Initial Count:     {result.initial_count}")
    click.echo(f"Final Count:       {result.final_count}")
    click.echo(f"Actual Increments: {result.count_delta}")
    click.echo("")

    click.echo(f"Success:      {stats.succeeded}")
    click.echo(f"Failed:       {stats.failed}")
    click.echo(f"Success Rate: {stats.success_rate(result.target_attempts):.2f}%")
    click.echo("")

    click.echo(f"Total Gas Used:  {stats.total_gas_used}")
    click.echo(f"Total Gas Cost:  {format_eth(stats.total_gas_cost)} ETH")
    click.echo(f"Avg Gas Per Tx:  {stats.average_gas}")
    click.echo(f"Avg Cost Per Tx: {format_eth(stats.average_cost)} ETH")
    click.echo("")

    click.echo(f"Initial Balance: {format_eth(result.initial_balance)} ETH")
    click.echo(f"Final Balance:   {format_eth(result.final_balance)} ETH")
    click.echo(f"Total Spent:     {format_eth(result.total_spent)} ETH")
    click.echo("")
    click.secho("Test completed!", fg="green")
