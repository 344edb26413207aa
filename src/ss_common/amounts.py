"""Integer token amounts.

All balances are int in the smallest denomination (usomm). No float.
Decimal is used only to truncate Cosmos SDK Dec strings
("12.500000000000000000" -> 12).
"""

from decimal import Decimal, InvalidOperation
from typing import Any

MICRO_PER_TOKEN = 1_000_000


def parse_amount(raw: Any) -> int:
    """Parse an SDK Int string ("12345") into a non-negative int."""
    if isinstance(raw, bool) or not isinstance(raw, (str, int)):
        raise ValueError(f"Amount must be an integer string, got {raw!r}")
    try:
        amount = int(raw)
    except ValueError:
        raise ValueError(f"Amount must be an integer string, got {raw!r}") from None
    if amount < 0:
        raise ValueError(f"Amount must be non-negative, got {amount}")
    return amount


def parse_dec_amount(raw: Any) -> int:
    """Parse an SDK Dec string, truncating the fractional part."""
    if not isinstance(raw, str):
        raise ValueError(f"Dec amount must be a string, got {raw!r}")
    try:
        dec = Decimal(raw)
    except InvalidOperation:
        raise ValueError(f"Invalid Dec amount: {raw!r}") from None
    if not dec.is_finite() or dec < 0:
        raise ValueError(f"Dec amount must be finite and non-negative, got {raw!r}")
    return int(dec)  # truncates toward zero


def sum_denom(coins: Any, denom: str, *, dec: bool = False) -> int:
    """Sum the amounts of `denom` in a list of {"denom", "amount"} coins."""
    if not isinstance(coins, list):
        raise ValueError(f"Coins must be a list, got {type(coins).__name__}")
    parse = parse_dec_amount if dec else parse_amount
    total = 0
    for coin in coins:
        if not isinstance(coin, dict) or "denom" not in coin or "amount" not in coin:
            raise ValueError(f"Malformed coin: {coin!r}")
        if coin["denom"] == denom:
            total += parse(coin["amount"])
    return total


def micro_to_display(amount: int, denom: str = "somm") -> str:
    """Convert micro units to display string: 1_500_000 -> '1.500000 SOMM'."""
    whole, frac = divmod(amount, MICRO_PER_TOKEN)
    return f"{whole:,}.{frac:06d} {denom.upper()}"
