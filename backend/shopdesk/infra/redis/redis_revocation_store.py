from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import cast

import redis  # type: ignore[import-untyped]

from shopdesk.services._shared.errors import StoreUnavailableError

log = logging.getLogger(__name__)


@dataclass(slots=True)
class RedisRevocationStore:
    """
    Revocation set on Redis: one string key per revoked ``jti``/``sid``.

    Keys:
      - ``{prefix}{key}`` -> ``"{reason}:{unix_ts}"`` with ``EX`` = remaining token lifetime

    ``SET NX`` gives the atomic single-key claim used by refresh rotation; no
    ``WATCH`` or Lua is needed. Every Redis failure surfaces as
    :class:`StoreUnavailableError` so callers can never read it as "not revoked".
    """

    r: redis.Redis
    prefix: str = "shopdesk:revoked:"

    def _k(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def mark_revoked(self, key: str, ttl_seconds: int, *, reason: str) -> bool:
        ttl = max(1, int(ttl_seconds))
        value = f"{reason}:{int(time.time())}"
        try:
            created = self.r.set(self._k(key), value, ex=ttl, nx=True)
        except redis.RedisError as exc:
            log.error("revocation_store.unavailable op=mark_revoked key=%s", key, exc_info=True)
            raise StoreUnavailableError() from exc
        return bool(created)

    def is_revoked(self, *keys: str) -> bool:
        if not keys:
            return False
        try:
            found = cast(int, self.r.exists(*(self._k(k) for k in keys)))
        except redis.RedisError as exc:
            log.error("revocation_store.unavailable op=is_revoked", exc_info=True)
            raise StoreUnavailableError() from exc
        return found > 0

    def ping(self) -> bool:
        try:
            return bool(self.r.ping())
        except redis.RedisError:
            log.warning("revocation_store.ping_failed", exc_info=True)
            return False
