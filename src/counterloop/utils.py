from __future__ import annotations

from decimal import Decimal

WEI_PER_ETH = Decimal(10) ** 18


def format_eth(wei: int, places: int = 6) -> str:
    return f"{Decimal(wei) / WEI_PER_ETH:.{places}f}"


def format_seconds(ms: int) -> str:
    return f"{ms / 1000:.1f}s"


def to_hex(value: int) -> str:
    return hex(value)


def from_hex(value: str | None) -> int | None:
    if value is None:
        return None
    return int(value, 16)
