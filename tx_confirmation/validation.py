"""Boundary validation for queued transaction arguments."""

from typing import Any

from eth_utils import is_hex, remove_0x_prefix
from web3 import Web3


def is_valid_hex(value: Any) -> bool:
    """Check that value is a non-empty hex string, with or without 0x prefix."""
    if not isinstance(value, str):
        return False
    if not remove_0x_prefix(value):
        return False
    return bool(is_hex(value))


def normalize_value(value: Any) -> int:
    """
    Normalize a transaction value to wei.

    Accepts hex quantities ("0x..."), decimal strings and ints.
    A missing value is zero.

    Raises:
        ValueError: If the value is negative or cannot be parsed.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        raise ValueError(f"Invalid transaction value: {value!r}")
    if isinstance(value, int):
        amount = value
    elif isinstance(value, str):
        text = value.strip()
        if text.lower().startswith("0x"):
            if not is_valid_hex(text):
                raise ValueError(f"Invalid hex value: {value!r}")
            amount = Web3.to_int(hexstr=text)
        else:
            amount = int(text, 10)
    else:
        raise ValueError(f"Unsupported transaction value type: {type(value).__name__}")

    if amount < 0:
        raise ValueError(f"Negative transaction value: {value!r}")
    return amount
