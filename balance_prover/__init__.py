"""
Balance Prover - hash-based balance proofs for interbank transfers.

Provides:
- Proof generation and verification (balance > amount)
- A time-bounded cache of generated proofs
- REST endpoints and a CLI on top of the engine
"""

__version__ = "0.1.0"

from .cache import CacheEntry, ProofCache
from .commitment import decode_balance, encode_commitment
from .errors import InsufficientBalance, ProofError, UnparsableCommitment
from .proof import Proof, ProofEngine, ProofRequest, PublicInputs

__all__ = [
    "__version__",
    "CacheEntry",
    "ProofCache",
    "decode_balance",
    "encode_commitment",
    "InsufficientBalance",
    "ProofError",
    "UnparsableCommitment",
    "Proof",
    "ProofEngine",
    "ProofRequest",
    "PublicInputs",
]
