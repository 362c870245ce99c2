"""
Balance proof generation and verification.

Proves balance > amount with a hash-based construction:

    proof_bytes = SHA3-256(amount || balance - amount || commitment || nonce)
    commitment_hash = SHA3-256(commitment)

The balance is decoded from the commitment, so any verifier holding the
commitment can recover it. This is not a zero-knowledge proof.
"""

from dataclasses import dataclass
from typing import Any, Optional

import structlog

from .cache import ProofCache, fingerprint
from .commitment import decode_balance
from .digest import U64_MAX, commitment_hash, proof_digest
from .errors import InsufficientBalance

logger = structlog.get_logger()


@dataclass(frozen=True)
class ProofRequest:
    """Request to prove that the committed balance exceeds `amount`."""

    user_address: str
    amount: int
    balance_commitment: str
    secret_nonce: str

    def __post_init__(self) -> None:
        if not 0 <= self.amount <= U64_MAX:
            raise ValueError(f"Amount out of u64 range: {self.amount}")

    def fingerprint(self) -> str:
        return fingerprint(self.user_address, self.amount, self.balance_commitment)


@dataclass(frozen=True)
class PublicInputs:
    """Public inputs of a balance proof."""

    amount: int
    commitment_hash: str
    user_address: str

    def __post_init__(self) -> None:
        if not 0 <= self.amount <= U64_MAX:
            raise ValueError(f"Amount out of u64 range: {self.amount}")


@dataclass(frozen=True)
class Proof:
    """Generated balance proof."""

    proof_bytes: bytes
    public_inputs: PublicInputs
    commitment_hash: str

    def to_hex(self) -> str:
        """Proof bytes as lowercase hex."""
        return self.proof_bytes.hex()

    def size(self) -> int:
        """Proof size in bytes."""
        return len(self.proof_bytes)

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible representation (proof bytes as a list of ints)."""
        return {
            "proof_bytes": list(self.proof_bytes),
            "public_inputs": {
                "amount": self.public_inputs.amount,
                "commitment_hash": self.public_inputs.commitment_hash,
                "user_address": self.public_inputs.user_address,
            },
            "commitment_hash": self.commitment_hash,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Proof":
        """Parse the representation produced by `to_dict`."""
        raw = data["proof_bytes"]
        proof_bytes = bytes.fromhex(raw) if isinstance(raw, str) else bytes(raw)
        inputs = data["public_inputs"]
        return cls(
            proof_bytes=proof_bytes,
            public_inputs=PublicInputs(
                amount=int(inputs["amount"]),
                commitment_hash=str(inputs["commitment_hash"]),
                user_address=str(inputs["user_address"]),
            ),
            commitment_hash=str(data["commitment_hash"]),
        )

    def __str__(self) -> str:
        return (
            f"BalanceProof(amount={self.public_inputs.amount}, "
            f"commitment_hash={self.commitment_hash[:16]}, "
            f"proof_size={self.size()} bytes)"
        )


class ProofEngine:
    """
    Generates and verifies balance proofs.

    `generate` consults the cache before doing any work and stores what it
    derives; `verify` is pure and never touches the cache.
    """

    def __init__(self, cache: Optional[ProofCache] = None):
        self.cache = cache if cache is not None else ProofCache()

    def generate(self, request: ProofRequest) -> Proof:
        """
        Generate a proof that the committed balance exceeds `request.amount`.

        Raises:
            InsufficientBalance: If balance <= amount (nothing is cached)
            UnparsableCommitment: If the commitment cannot be decoded
        """
        key = request.fingerprint()
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Proof cache hit", user_address=request.user_address, amount=request.amount)
            return cached

        balance = decode_balance(request.balance_commitment)
        if balance <= request.amount:
            raise InsufficientBalance(balance, request.amount)

        diff = balance - request.amount
        proof_bytes = proof_digest(
            request.amount, diff, request.balance_commitment, request.secret_nonce
        )
        c_hash = commitment_hash(request.balance_commitment)

        proof = Proof(
            proof_bytes=proof_bytes,
            public_inputs=PublicInputs(
                amount=request.amount,
                commitment_hash=c_hash,
                user_address=request.user_address,
            ),
            commitment_hash=c_hash,
        )

        self.cache.put(key, proof)
        logger.debug("Proof generated", user_address=request.user_address, amount=request.amount)
        return proof

    def verify(self, proof: Proof, balance_commitment: str, secret_nonce: str) -> bool:
        """
        Verify a proof against the commitment and nonce used to generate it.

        Returns False when the proof does not hold.

        Raises:
            UnparsableCommitment: If the commitment cannot be decoded
        """
        # Cheap rejection before decoding
        if commitment_hash(balance_commitment) != proof.commitment_hash:
            return False

        balance = decode_balance(balance_commitment)
        amount = proof.public_inputs.amount
        if not 0 <= amount < balance:
            return False

        expected = proof_digest(amount, balance - amount, balance_commitment, secret_nonce)
        return expected == proof.proof_bytes

    def cleanup_cache(self) -> int:
        """Drop expired cache entries."""
        return self.cache.cleanup()
