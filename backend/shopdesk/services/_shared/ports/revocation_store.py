from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Protocol

from shopdesk.services._shared.errors import StoreUnavailableError


class RevocationStore(Protocol):
    """
    Shared set of revoked keys (token ``jti`` or session ``sid``) with per-key TTL.

    Contract
    --------
    - ``mark_revoked`` is idempotent and returns ``True`` only for the call that
      created the record. Callers rely on this as an atomic single-key claim.
    - ``is_revoked`` answers presence only and reflects every prior write.
    - Both raise :class:`StoreUnavailableError` instead of guessing.
    """

    def mark_revoked(self, key: str, ttl_seconds: int, *, reason: str) -> bool: ...
    def is_revoked(self, *keys: str) -> bool: ...
    def ping(self) -> bool: ...


class InMemoryRevocationStore(RevocationStore):
    """Process-local store for unit tests; honours TTLs against ``clock``."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}
        self._lock = threading.Lock()
        self.available = True

    def _check(self) -> None:
        if not self.available:
            raise StoreUnavailableError()

    def _live(self, key: str, now: float) -> bool:
        entry = self._entries.get(key)
        if entry is None:
            return False
        if entry[1] <= now:
            del self._entries[key]
            return False
        return True

    def mark_revoked(self, key: str, ttl_seconds: int, *, reason: str) -> bool:
        self._check()
        with self._lock:
            now = self._clock()
            if self._live(key, now):
                return False
            self._entries[key] = (f"{reason}:{int(now)}", now + max(1, int(ttl_seconds)))
            return True

    def is_revoked(self, *keys: str) -> bool:
        self._check()
        with self._lock:
            now = self._clock()
            return any(self._live(k, now) for k in keys)

    def ping(self) -> bool:
        return self.available
