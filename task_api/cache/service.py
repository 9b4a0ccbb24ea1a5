import asyncio
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: Any
    expires_at: float


class ResponseCache:
    """
    In-process TTL cache for serialized read responses.

    Entries expire a fixed number of seconds after they were written. A read
    at or after the expiry is a miss even when the entry is still stored.
    Bulk invalidation removes every key that contains a pattern as a
    substring, so a collection path clears all cached variants of it.

    Each public operation holds the lock for its whole duration. There is no
    isolation across operations: a read racing an invalidation may see either
    the old or the new state.
    """

    def __init__(
        self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None

            if entry.expires_at <= self.clock():
                del self._entries[key]
                self._misses += 1
                return None

            self._hits += 1
            return entry.value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(
                key=key, value=value, expires_at=self.clock() + self.ttl_seconds
            )

    def invalidate(self, pattern: str) -> int:
        with self._lock:
            matched = [key for key in self._entries if pattern in key]
            for key in matched:
                del self._entries[key]

        if matched:
            logger.debug(f"Invalidated {len(matched)} cache entries matching '{pattern}'")
        return len(matched)

    def purge_expired(self) -> int:
        with self._lock:
            now = self.clock()
            expired = [
                key for key, entry in self._entries.items() if entry.expires_at <= now
            ]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {
                "keys": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
            }

    async def run_periodic_purge(self, interval_seconds: float) -> None:
        while True:
            await asyncio.sleep(interval_seconds)
            purged = self.purge_expired()
            if purged:
                logger.debug(f"Purged {purged} expired cache entries")
