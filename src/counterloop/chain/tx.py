"""
Transaction Builder - Build, sign, and send Ethereum transactions.

Uses eth-account for signing and the httpx-based RpcClient for sending.
All gas is paid by the signing EOA.
"""

from __future__ import annotations

from typing import Any, Optional

from eth_account.signers.local import LocalAccount

from ..utils import to_hex
from .abi import to_checksum_address
from .rpc import RpcClient


def build_contract_tx(
    client: RpcClient,
    account: LocalAccount,
    contract_address: str,
    calldata: str,
    chain_id: int,
    value: int = 0,
    gas_limit: Optional[int] = None,
) -> dict[str, Any]:
    """
    Build a contract call transaction (unsigned, legacy gasPrice).

    Args:
        client: RPC client used for nonce, gas price and gas estimation
        account: Sending account
        contract_address: 0x-prefixed contract address
        calldata: 0x-prefixed ABI-encoded call
        chain_id: EIP-155 chain id
        value: ETH value in wei (default: 0)
        gas_limit: Gas limit (default: eth_estimateGas)

    Returns:
        Unsigned transaction dict
    """
    to = to_checksum_address(contract_address)

    if gas_limit is None:
        gas_limit = client.estimate_gas(
            {"from": account.address, "to": to, "data": calldata, "value": to_hex(value)}
        )

    return {
        "to": to,
        "data": calldata,
        "value": value,
        "nonce": client.get_nonce(account.address),
        "gas": gas_limit,
        "gasPrice": client.get_gas_price(),
        "chainId": chain_id,
    }


def sign_and_send(client: RpcClient, account: LocalAccount, tx: dict[str, Any]) -> str:
    """
    Sign a transaction and submit it.

    Returns:
        Transaction hash (0x-prefixed hex)
    """
    signed = account.sign_transaction(tx)
    raw_tx = "0x" + signed.raw_transaction.hex()
    return client.send_raw_transaction(raw_tx)
