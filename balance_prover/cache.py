"""
Time-bounded cache of generated proofs.

Entries live for a fixed TTL measured from insertion. Nothing is evicted for
size reasons; expired entries are dropped by `cleanup()`, which callers run
periodically.

Cache access is best-effort: if the lock cannot be acquired within
`lock_timeout`, a read is reported as a miss and a write is skipped.
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterator

import structlog

from .digest import commitment_hash

if TYPE_CHECKING:
    from .proof import Proof

logger = structlog.get_logger()

DEFAULT_TTL_SECONDS = 60
DEFAULT_LOCK_TIMEOUT = 0.1


def fingerprint(user_address: str, amount: int, balance_commitment: str) -> str:
    """
    Cache key for a proof request.

    The nonce is not part of the key. The commitment is hashed, so the
    trailing segment has a fixed width and the key splits unambiguously
    from the right even if the address contains ":".
    """
    return f"{user_address}:{amount}:{commitment_hash(balance_commitment)}"


class ReadWriteLock:
    """Many concurrent readers or a single writer."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False

    def acquire_read(self, timeout: float | None = None) -> bool:
        with self._cond:
            if not self._cond.wait_for(lambda: not self._writer, timeout):
                return False
            self._readers += 1
            return True

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self, timeout: float | None = None) -> bool:
        with self._cond:
            if not self._cond.wait_for(lambda: not self._writer and self._readers == 0, timeout):
                return False
            self._writer = True
            return True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read(self, timeout: float | None = None) -> Iterator[bool]:
        """Yield whether the read lock was acquired."""
        acquired = self.acquire_read(timeout)
        try:
            yield acquired
        finally:
            if acquired:
                self.release_read()

    @contextmanager
    def write(self, timeout: float | None = None) -> Iterator[bool]:
        """Yield whether the write lock was acquired."""
        acquired = self.acquire_write(timeout)
        try:
            yield acquired
        finally:
            if acquired:
                self.release_write()


@dataclass(frozen=True)
class CacheEntry:
    """A cached proof and its insertion time (unix seconds)."""

    proof: Proof
    timestamp: float

    def age(self, now: float) -> float:
        return now - self.timestamp

    def is_live(self, now: float, ttl_seconds: float) -> bool:
        return self.age(now) < ttl_seconds


class ProofCache:
    """
    Fingerprint -> Proof mapping with a fixed TTL.

    Not single-flight: concurrent misses for the same fingerprint may both
    recompute and overwrite each other with identical proofs.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
        lock_timeout: float | None = DEFAULT_LOCK_TIMEOUT,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock_timeout = lock_timeout
        self._lock = ReadWriteLock()
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> Proof | None:
        """Return the live proof for `key`, or None. Never evicts."""
        with self._lock.read(self._lock_timeout) as acquired:
            if not acquired:
                logger.debug("Proof cache read skipped (lock busy)")
                return None
            entry = self._entries.get(key)

        if entry is None or not entry.is_live(self._clock(), self.ttl_seconds):
            return None
        return entry.proof

    def put(self, key: str, proof: Proof) -> bool:
        """Insert or overwrite `key`, stamped with the current time."""
        entry = CacheEntry(proof=proof, timestamp=self._clock())
        with self._lock.write(self._lock_timeout) as acquired:
            if not acquired:
                logger.debug("Proof cache write skipped (lock busy)")
                return False
            self._entries[key] = entry
        return True

    def cleanup(self) -> int:
        """Remove every entry whose age is >= TTL. Returns the number removed."""
        with self._lock.write(self._lock_timeout) as acquired:
            if not acquired:
                logger.debug("Proof cache cleanup skipped (lock busy)")
                return 0
            now = self._clock()
            expired = [
                key
                for key, entry in self._entries.items()
                if not entry.is_live(now, self.ttl_seconds)
            ]
            for key in expired:
                del self._entries[key]

        if expired:
            logger.debug("Proof cache cleaned up", removed=len(expired))
        return len(expired)

    def clear(self) -> None:
        with self._lock.write(self._lock_timeout) as acquired:
            if acquired:
                self._entries.clear()

    def __len__(self) -> int:
        with self._lock.read(self._lock_timeout) as acquired:
            return len(self._entries) if acquired else 0
