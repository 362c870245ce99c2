"""
Hashing and integer encoding helpers.
"""

import hashlib

U64_MAX = (1 << 64) - 1
DIGEST_SIZE = 32


def sha3_256(data: bytes) -> bytes:
    """Compute SHA3-256."""
    return hashlib.sha3_256(data).digest()


def sha3_256_hex(data: bytes) -> str:
    """Compute SHA3-256 as lowercase hex."""
    return hashlib.sha3_256(data).hexdigest()


def u64_be(value: int) -> bytes:
    """Encode an unsigned 64-bit integer as 8 big-endian bytes."""
    if not 0 <= value <= U64_MAX:
        raise ValueError(f"Value out of u64 range: {value}")
    return value.to_bytes(8, "big")


def commitment_hash(commitment: str) -> str:
    """Hash of the raw commitment bytes (public input)."""
    return sha3_256_hex(commitment.encode("utf-8"))


def proof_digest(amount: int, diff: int, commitment: str, nonce: str) -> bytes:
    """
    Derive proof bytes.

    SHA3-256(amount_be8 || diff_be8 || commitment || nonce)
    """
    return sha3_256(
        u64_be(amount)
        + u64_be(diff)
        + commitment.encode("utf-8")
        + nonce.encode("utf-8")
    )
