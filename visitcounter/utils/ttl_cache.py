from __future__ import annotations

import time
from dataclasses import dataclass
from threading import RLock
from typing import Callable, Dict, Generic, Optional, TypeVar


K = TypeVar('K')
V = TypeVar('V')


@dataclass
class _Entry(Generic[V]):
    value: V
    expires_at: float


class TTLCache(Generic[K, V]):
    """Small in-process TTL map.

    - Lost on restart
    - Thread-safe
    - Expiry is lazy: an entry past its deadline reads as absent, and is
      only dropped by eviction or an explicit ``prune()``
    """

    def __init__(
        self,
        ttl_seconds: int = 60,
        max_items: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        self._ttl = max(1, int(ttl_seconds))
        self._max = max(1, int(max_items)) if max_items else None
        self._clock = clock
        self._data: Dict[K, _Entry[V]] = {}
        self._lock = RLock()

    @property
    def ttl_seconds(self) -> int:
        return self._ttl

    def contains(self, key: K) -> bool:
        """Live-entry check that never mutates the map."""
        now = self._clock()
        with self._lock:
            entry = self._data.get(key)
            return entry is not None and entry.expires_at > now

    def add(self, key: K, value: V, ttl_seconds: Optional[int] = None) -> bool:
        """Store ``value`` only when ``key`` has no live entry.

        A live entry keeps its original value and expiry. Returns True when
        the value was stored.
        """
        now = self._clock()
        with self._lock:
            entry = self._data.get(key)
            if entry is not None and entry.expires_at > now:
                return False
            self._data.pop(key, None)
            self._make_room_locked(key)
            self._data[key] = _Entry(value=value, expires_at=now + self._resolve_ttl(ttl_seconds))
            return True

    def pop_where(self, predicate: Callable[[K], bool]) -> int:
        """Delete every key matching ``predicate``; returns how many were removed."""
        with self._lock:
            doomed = [k for k in self._data if predicate(k)]
            for k in doomed:
                self._data.pop(k, None)
        return len(doomed)

    def prune(self) -> int:
        with self._lock:
            return self._prune_locked()

    def __len__(self) -> int:
        now = self._clock()
        with self._lock:
            return sum(1 for v in self._data.values() if v.expires_at > now)

    def _resolve_ttl(self, ttl_seconds: Optional[int]) -> int:
        return self._ttl if ttl_seconds is None else max(1, int(ttl_seconds))

    def _make_room_locked(self, key: K) -> None:
        if self._max is None or key in self._data or len(self._data) < self._max:
            return
        # naive eviction: drop expired, then drop oldest-ish (first key)
        self._prune_locked()
        if len(self._data) >= self._max:
            try:
                first = next(iter(self._data))
                self._data.pop(first, None)
            except StopIteration:
                pass

    def _prune_locked(self) -> int:
        now = self._clock()
        expired = [k for k, v in self._data.items() if v.expires_at <= now]
        for k in expired:
            self._data.pop(k, None)
        return len(expired)
