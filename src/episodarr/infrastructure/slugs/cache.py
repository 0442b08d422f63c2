"""In-memory TTL cache for resolved provider slugs."""

from __future__ import annotations

import time
from collections.abc import Callable

from episodarr.domain.entities.resolution import SlugCacheEntry, SlugCacheKey


class SlugCache:
    """Maps ``(origin, title)`` to a slug with lazy TTL invalidation.

    Entries are never evicted; an expired entry is simply ignored on read
    and overwritten by the next resolution.  Concurrent writers for the
    same key are harmless: last write wins.
    """

    def __init__(
        self,
        ttl_seconds: float = 1800,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[SlugCacheKey, SlugCacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: SlugCacheKey) -> str | None:
        entry = self._entries.get(key)
        if entry is None or entry.is_expired(self._clock(), self._ttl):
            return None
        return entry.value

    def set(self, key: SlugCacheKey, value: str) -> None:
        self._entries[key] = SlugCacheEntry(value=value, stored_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()
