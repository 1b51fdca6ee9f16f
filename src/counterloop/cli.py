"""
Counterloop CLI

Command-line interface for driving repeated increment() calls against a
deployed Counter contract on a test network.

Commands:
  run     - Send N sequential increment transactions and report gas usage
  status  - Show the counter value, owner and wallet balance
  whoami  - Show the wallet address derived from PRIVATE_KEY

Exit codes: 0 when a run completes (even with failed attempts), 1 on
missing configuration, zero balance, or any other fatal error.
"""

from __future__ import annotations

import dataclasses
import sys
from typing import Any, NoReturn, Optional

import click

from .chain.rpc import RpcClient
from .config import ConfigError, RunnerConfig, load_env_file
from .counter import CounterContract
from .runner import InsufficientBalanceError, TransactionRunner
from .utils import format_eth
from .wallet.eth import get_account, get_address, load_private_key


VERSION = "0.1.0"


@click.group()
@click.version_option(version=VERSION, prog_name="counterloop")
def cli() -> None:
    """Counterloop: sequential Counter increments with gas accounting."""


def _fail(message: str) -> NoReturn:
    click.secho(f"Error: {message}", fg="red", err=True)
    sys.exit(1)


def _load_config(**overrides: Any) -> RunnerConfig:
    """Environment / .env first, then any CLI flag that was given."""
    try:
        config = RunnerConfig.from_env()
        config = dataclasses.replace(
            config, **{k: v for k, v in overrides.items() if v is not None}
        )
        config.validate()
    except ConfigError as exc:
        _fail(str(exc))
    return config


def _open_counter(config: RunnerConfig, client: RpcClient) -> CounterContract:
    try:
        account = get_account(config.private_key)
        return CounterContract(
            client,
            config.counter_address,
            account,
            chain_id=config.chain_id,
            gas_limit=config.gas_limit,
            receipt_timeout=config.receipt_timeout,
        )
    except ValueError as exc:
        _fail(str(exc))


# ============ Run ============


@cli.command()
@click.option("--rpc-url", default=None, help="JSON-RPC endpoint [env: SEPOLIA_RPC_URL]")
@click.option("--address", "counter_address", default=None, help="Counter contract [env: COUNTER_ADDRESS]")
@click.option("--count", "attempts", type=int, default=None, help="Number of increments [default: 50]")
@click.option("--min-delay", "min_delay_ms", type=int, default=None, help="Min delay after success, ms [default: 1000]")
@click.option("--max-delay", "max_delay_ms", type=int, default=None, help="Max delay after success, ms [default: 3000]")
@click.option("--backoff", "backoff_ms", type=int, default=None, help="Sleep after a failure, ms [default: 5000]")
@click.option("--chain-id", type=int, default=None, help="Chain id [default: from node]")
@click.option("--gas-limit", type=int, default=None, help="Gas limit [default: estimated]")
@click.option("--receipt-timeout", type=float, default=None, help="Seconds to wait per receipt [default: none]")
def run(**options: Optional[Any]) -> None:
    """
    Send sequential increment() transactions and report the results.

    Individual failures are counted and the run continues; only startup
    problems abort it.
    """
    config = _load_config(**options)

    with RpcClient(config.rpc_url) as client:
        counter = _open_counter(config, client)
        runner = TransactionRunner(config, counter, client)
        try:
            runner.run()
        except InsufficientBalanceError as exc:
            _fail(str(exc))
        except Exception as exc:
            click.secho(f"Fatal error: {exc}", fg="red", err=True)
            sys.exit(1)


# ============ Status ============


@cli.command()
@click.option("--rpc-url", default=None, help="JSON-RPC endpoint [env: SEPOLIA_RPC_URL]")
@click.option("--address", "counter_address", default=None, help="Counter contract [env: COUNTER_ADDRESS]")
def status(rpc_url: Optional[str], counter_address: Optional[str]) -> None:
    """Show the counter value, its owner and the wallet balance."""
    config = _load_config(rpc_url=rpc_url, counter_address=counter_address)

    with RpcClient(config.rpc_url) as client:
        counter = _open_counter(config, client)
        try:
            owner = counter.owner()
            count = counter.get_count()
            balance = client.get_balance(counter.account.address)
        except Exception as exc:
            click.secho(f"ERROR: Failed to read on-chain data: {exc}", fg="red", err=True)
            sys.exit(1)

    click.echo(f"  Contract:  {counter.address}")
    click.echo(f"  Owner:     {owner}")
    click.echo(f"  Count:     {count}")
    click.echo(f"  Wallet:    {counter.account.address}")
    click.echo(f"  Balance:   {format_eth(balance)} ETH")
    if owner.lower() == counter.account.address.lower():
        click.secho("  [YOU OWN THIS COUNTER]", fg="green", bold=True)


# ============ Identity ============


@cli.command()
def whoami() -> None:
    """Show the wallet address for PRIVATE_KEY."""
    load_env_file()
    try:
        address = get_address(load_private_key())
    except ValueError:
        click.echo("No wallet found.")
        click.echo("Set PRIVATE_KEY in the environment or .env.")
        sys.exit(1)
    click.echo(f"Address: {address}")


# ============ Entry Points ============


def main() -> None:
    """Counterloop CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
