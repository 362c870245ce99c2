"""
In-memory store of issued proofs (process lifetime only).
"""

import threading

from .proof import Proof


class ProofStore:
    """Append-only list of generated proofs."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._proofs: list[Proof] = []

    def add(self, proof: Proof) -> None:
        with self._lock:
            self._proofs.append(proof)

    def all(self) -> list[Proof]:
        with self._lock:
            return list(self._proofs)

    def __len__(self) -> int:
        with self._lock:
            return len(self._proofs)
