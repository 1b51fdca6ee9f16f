"""
Configuration for a Counterloop run.

Values come from the process environment, optionally seeded from a .env
file in the working directory, and may be overridden by CLI flags. The
resulting RunnerConfig is built once at startup and passed explicitly
into the runner.

Example:
    ```python
    from counterloop.config import RunnerConfig

    config = RunnerConfig.from_env()
    config.validate()
    ```
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv

from .chain.rpc import DEFAULT_RPC_URL

DEFAULT_ATTEMPTS = 50
DEFAULT_MIN_DELAY_MS = 1000
DEFAULT_MAX_DELAY_MS = 3000
DEFAULT_BACKOFF_MS = 5000


class ConfigError(ValueError):
    exit_code: int = 1


@dataclass
class RunnerConfig:
    """
    Settings for one run of the increment loop.

    Attributes:
        private_key: Hex signing key (PRIVATE_KEY).
        counter_address: Deployed Counter contract (COUNTER_ADDRESS).
        rpc_url: JSON-RPC endpoint (SEPOLIA_RPC_URL).
        attempts: Number of increment attempts.
        min_delay_ms: Lower bound of the random delay after a success.
        max_delay_ms: Upper bound of the random delay after a success.
        backoff_ms: Fixed sleep after a failed attempt.
        chain_id: EIP-155 chain id, queried from the node when None.
        gas_limit: Fixed gas limit, estimated per transaction when None.
        receipt_timeout: Seconds to wait for a receipt, None waits forever.
    """

    private_key: str = ""
    counter_address: str = ""
    rpc_url: str = DEFAULT_RPC_URL
    attempts: int = DEFAULT_ATTEMPTS
    min_delay_ms: int = DEFAULT_MIN_DELAY_MS
    max_delay_ms: int = DEFAULT_MAX_DELAY_MS
    backoff_ms: int = DEFAULT_BACKOFF_MS
    chain_id: Optional[int] = None
    gas_limit: Optional[int] = None
    receipt_timeout: Optional[float] = None

    @classmethod
    def from_env(
        cls,
        env: Optional[Mapping[str, str]] = None,
        env_file: Optional[Path] = None,
    ) -> "RunnerConfig":
        """
        Build a config from environment variables.

        When env is None, a .env file (env_file, or the nearest one found
        from the working directory) is loaded into os.environ first.
        Variables already set in the environment win over the file.
        """
        if env is None:
            load_env_file(env_file)
            env = os.environ

        return cls(
            private_key=env.get("PRIVATE_KEY", ""),
            counter_address=env.get("COUNTER_ADDRESS", ""),
            rpc_url=env.get("SEPOLIA_RPC_URL") or DEFAULT_RPC_URL,
            attempts=_int(env, "INCREMENT_COUNT", DEFAULT_ATTEMPTS),
            min_delay_ms=_int(env, "MIN_DELAY_MS", DEFAULT_MIN_DELAY_MS),
            max_delay_ms=_int(env, "MAX_DELAY_MS", DEFAULT_MAX_DELAY_MS),
            backoff_ms=_int(env, "RETRY_BACKOFF_MS", DEFAULT_BACKOFF_MS),
            chain_id=_int(env, "CHAIN_ID", None),
            gas_limit=_int(env, "GAS_LIMIT", None),
            receipt_timeout=_float(env, "RECEIPT_TIMEOUT", None),
        )

    def validate(self) -> None:
        """
        Check required values and bounds.

        Raises:
            ConfigError: On the first problem found
        """
        if not self.private_key or not self.private_key.strip():
            raise ConfigError("PRIVATE_KEY not found in .env")
        if not self.counter_address or not self.counter_address.strip():
            raise ConfigError(
                "COUNTER_ADDRESS not found in .env. "
                "Please deploy the contract first and add the address to .env"
            )
        if self.attempts < 0:
            raise ConfigError(f"Attempt count must be >= 0, got {self.attempts}")
        if self.min_delay_ms < 0 or self.backoff_ms < 0:
            raise ConfigError("Delays must be >= 0")
        if self.min_delay_ms > self.max_delay_ms:
            raise ConfigError(
                f"Minimum delay ({self.min_delay_ms}ms) exceeds "
                f"maximum delay ({self.max_delay_ms}ms)"
            )
        if self.receipt_timeout is not None and self.receipt_timeout <= 0:
            raise ConfigError("Receipt timeout must be positive")


def load_env_file(env_file: Optional[Path] = None) -> None:
    """Load env_file, or the nearest .env above the working directory, into os.environ."""
    dotenv_path = env_file or find_dotenv(usecwd=True)
    if dotenv_path:
        load_dotenv(dotenv_path, override=False)


def _int(env: Mapping[str, str], key: str, default: Optional[int]) -> Optional[int]:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw, 0)
    except ValueError:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from None


def _float(env: Mapping[str, str], key: str, default: Optional[float]) -> Optional[float]:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{key} must be a number, got {raw!r}") from None
