"""
Counter ABI - Minimal contract interface and ABI encoding helpers.

The Counter contract is compiled and deployed outside of this package
(see scripts/setup-deploy.sh), so the ABI is declared inline with only
the entries the runner needs.
"""

from __future__ import annotations

from typing import Any, Optional

from eth_abi import decode, encode
from eth_hash.auto import keccak

COUNTER_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "increment",
        "inputs": [],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "decrement",
        "inputs": [],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "getCount",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "owner",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view",
    },
    {
        "type": "event",
        "name": "Incremented",
        "inputs": [
            {"name": "newCount", "type": "uint256", "indexed": False},
            {"name": "caller", "type": "address", "indexed": True},
        ],
        "anonymous": False,
    },
]


def keccak256(data: bytes) -> bytes:
    """Keccak-256 hash (NOT the same as hashlib.sha3_256 / NIST SHA-3)."""
    return keccak(data)


def _find_entry(abi: list[dict[str, Any]], kind: str, name: str) -> dict[str, Any]:
    for entry in abi:
        if entry.get("type") == kind and entry.get("name") == name:
            return entry
    raise ValueError(f"{kind.capitalize()} {name} not found in ABI")


def _signature(entry: dict[str, Any]) -> str:
    input_types = [inp["type"] for inp in entry.get("inputs", [])]
    return f"{entry['name']}({','.join(input_types)})"


def function_selector(abi: list[dict[str, Any]], function_name: str) -> bytes:
    """First 4 bytes of keccak256 over the canonical function signature."""
    func = _find_entry(abi, "function", function_name)
    return keccak256(_signature(func).encode("utf-8"))[:4]


def event_topic(abi: list[dict[str, Any]], event_name: str) -> str:
    """0x-prefixed topic0 for a non-anonymous event."""
    event = _find_entry(abi, "event", event_name)
    return "0x" + keccak256(_signature(event).encode("utf-8")).hex()


def encode_function_call(
    abi: list[dict[str, Any]],
    function_name: str,
    args: Optional[list] = None,
) -> str:
    """
    ABI-encode a function call.

    Args:
        abi: Contract ABI
        function_name: Function name to call
        args: Function arguments

    Returns:
        0x-prefixed hex encoded calldata
    """
    func = _find_entry(abi, "function", function_name)
    input_types = [inp["type"] for inp in func.get("inputs", [])]
    selector = function_selector(abi, function_name)

    encoded_args = encode(input_types, args) if args else b""
    return "0x" + selector.hex() + encoded_args.hex()


def decode_function_result(abi: list[dict[str, Any]], function_name: str, data: str) -> Any:
    """
    ABI-decode a function call result.

    Returns:
        None for functions without outputs, the single value for one
        output, otherwise a tuple
    """
    func = _find_entry(abi, "function", function_name)
    output_types = [out["type"] for out in func.get("outputs", [])]
    if not output_types:
        return None

    decoded = decode(output_types, _hex_to_bytes(data))
    if len(decoded) == 1:
        return decoded[0]
    return decoded


def decode_event_log(
    abi: list[dict[str, Any]],
    event_name: str,
    log: dict[str, Any],
) -> Optional[dict[str, Any]]:
    """
    Decode a receipt log entry for the given event.

    Returns:
        Mapping of argument name to value, or None if the log belongs to
        a different event
    """
    topics = log.get("topics") or []
    if not topics or topics[0].lower() != event_topic(abi, event_name):
        return None

    event = _find_entry(abi, "event", event_name)
    indexed = [inp for inp in event["inputs"] if inp.get("indexed")]
    plain = [inp for inp in event["inputs"] if not inp.get("indexed")]

    result: dict[str, Any] = {}
    for inp, topic in zip(indexed, topics[1:]):
        result[inp["name"]] = decode([inp["type"]], _hex_to_bytes(topic))[0]

    values = decode([inp["type"] for inp in plain], _hex_to_bytes(log.get("data", "0x")))
    for inp, value in zip(plain, values):
        result[inp["name"]] = value
    return result


def to_checksum_address(address: str) -> str:
    """Convert an address to EIP-55 checksummed format.

    eth-account requires checksummed addresses in transaction fields.

    Raises:
        ValueError: If the value is not a 20-byte hex address
    """
    addr = address.strip().lower()
    if addr.startswith("0x"):
        addr = addr[2:]
    if len(addr) != 40 or any(c not in "0123456789abcdef" for c in addr):
        raise ValueError(f"Invalid address: {address!r}")

    addr_hash = keccak256(addr.encode("utf-8")).hex()
    result = "0x"
    for i, c in enumerate(addr):
        if c in "abcdef":
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result


def _hex_to_bytes(data: str) -> bytes:
    return bytes.fromhex(data[2:] if data.startswith("0x") else data)
