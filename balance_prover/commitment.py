"""
Balance commitment decoding.

A commitment is an opaque string with a 64-bit balance encoded up front:

- "00000000000003e8secret123": 16 hex chars of balance + opaque suffix
- "00000000000003e8ffee...": plain hex blob whose first 8 bytes are the balance
"""

import string

from .errors import UnparsableCommitment

BALANCE_HEX_CHARS = 16
BALANCE_BYTES = 8

_HEX_DIGITS = frozenset(string.hexdigits)


def _is_hex(s: str) -> bool:
    return bool(s) and all(c in _HEX_DIGITS for c in s)


def decode_prefix(commitment: str) -> int | None:
    """Parse the first 16 chars as a big-endian hex u64, ignoring the suffix."""
    if len(commitment) < BALANCE_HEX_CHARS:
        return None
    prefix = commitment[:BALANCE_HEX_CHARS]
    # One leading "+" is allowed, as in unsigned radix parsing; "-" is not
    digits = prefix[1:] if prefix.startswith("+") else prefix
    if not _is_hex(digits):
        return None
    return int(digits, 16)


def decode_blob(commitment: str) -> int | None:
    """Hex-decode the whole string and read the first 8 bytes as a big-endian u64."""
    # bytes.fromhex tolerates whitespace; the blob must be strict hex
    if len(commitment) % 2 or not _is_hex(commitment):
        return None
    raw = bytes.fromhex(commitment)
    if len(raw) < BALANCE_BYTES:
        return None
    return int.from_bytes(raw[:BALANCE_BYTES], "big")


def decode_balance(commitment: str) -> int:
    """
    Extract the balance from a commitment.

    Tries the 16-char hex prefix first, then the whole-string hex blob.

    Raises:
        UnparsableCommitment: If neither form decodes
    """
    balance = decode_prefix(commitment)
    if balance is not None:
        return balance

    balance = decode_blob(commitment)
    if balance is not None:
        return balance

    raise UnparsableCommitment()


def encode_commitment(balance: int, suffix: str = "") -> str:
    """Build a commitment in the "16 hex chars + suffix" form."""
    if not 0 <= balance < (1 << 64):
        raise ValueError(f"Balance out of u64 range: {balance}")
    return f"{balance:016x}{suffix}"
