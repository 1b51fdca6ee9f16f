"""
ECDSA / secp256k1 identity for Counterloop.

The runner signs every transaction with a single externally owned account
whose key is supplied as PRIVATE_KEY (environment or a .env file in the
working directory).

Dependencies: eth-account (no full web3.py needed)
"""

from __future__ import annotations

import os
from typing import Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount


def normalize_private_key(private_key: str) -> str:
    """
    Strip whitespace and ensure the 0x prefix.

    Raises:
        ValueError: If the key is empty
    """
    private_key = private_key.strip()
    if not private_key:
        raise ValueError("PRIVATE_KEY is empty")
    if not private_key.startswith("0x"):
        private_key = "0x" + private_key
    return private_key


def load_private_key() -> str:
    """
    Load the private key from the environment.

    Returns:
        0x-prefixed hex private key

    Raises:
        ValueError: If PRIVATE_KEY is not set
    """
    private_key = os.environ.get("PRIVATE_KEY")
    if not private_key:
        raise ValueError("PRIVATE_KEY not found in environment or .env")
    return normalize_private_key(private_key)


def get_account(private_key: Optional[str] = None) -> LocalAccount:
    """
    Get an eth-account LocalAccount from a private key.

    Args:
        private_key: 0x-prefixed hex private key.
                     If None, loads from the environment.

    Returns:
        LocalAccount instance for signing transactions
    """
    if private_key is None:
        private_key = load_private_key()
    try:
        return Account.from_key(normalize_private_key(private_key))
    except ValueError:
        raise
    except Exception as exc:
        # eth-keys rejects out-of-range keys with its own ValidationError
        raise ValueError("Invalid PRIVATE_KEY") from exc


def get_address(private_key: Optional[str] = None) -> str:
    """Return the checksummed address for a private key."""
    return get_account(private_key).address
