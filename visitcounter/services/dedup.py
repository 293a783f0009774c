"""Visitor deduplication table.

Keys are ``(project_id, identity_hash)`` pairs; the value is a bare presence
marker that expires after the tracking window. A repeat ``mark_seen`` inside
the window keeps the original expiry, so the window is anchored at the
first visit.
"""

from __future__ import annotations

import time
from typing import Callable, Optional, Tuple

from visitcounter.utils.ttl_cache import TTLCache


DEFAULT_DEDUP_TTL_SECONDS = 24 * 60 * 60

DedupKey = Tuple[str, str]


class DedupTable:
    def __init__(
        self,
        ttl_seconds: int = DEFAULT_DEDUP_TTL_SECONDS,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        self._cache: TTLCache[DedupKey, bool] = TTLCache(
            ttl_seconds=ttl_seconds,
            max_items=max_entries,
            clock=clock,
        )

    @property
    def ttl_seconds(self) -> int:
        return self._cache.ttl_seconds

    def is_new(self, project_id: str, identity_hash: str) -> bool:
        return not self._cache.contains((project_id, identity_hash))

    def mark_seen(self, project_id: str, identity_hash: str) -> None:
        self._cache.add((project_id, identity_hash), True)

    def purge_project(self, project_id: str) -> int:
        return self._cache.pop_where(lambda key: key[0] == project_id)

    def prune_expired(self) -> int:
        return self._cache.prune()

    def __len__(self) -> int:
        return len(self._cache)
