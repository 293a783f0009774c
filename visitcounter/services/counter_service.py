"""
Visitor Counting Service

Owns the two in-memory tables and is the only write path into them:

1. Dedup table: (project, identity hash) -> presence marker with a TTL
2. Aggregate table: project -> running count + unique identity hashes

One instance is built by the application factory and shared by every
request handler (see ``get_counter_service``). All compound operations run
under a single lock, so the "is this visitor new?" check and the increment
that follows are atomic with respect to other requests.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Dict, Optional

from visitcounter.services.aggregates import AggregateTable, ProjectAggregate
from visitcounter.services.dedup import DEFAULT_DEDUP_TTL_SECONDS, DedupTable


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VisitResult:
    project: str
    count: int
    unique_visitors: int
    is_new_visitor: bool


class CounterService:
    def __init__(
        self,
        dedup_ttl_seconds: int = DEFAULT_DEDUP_TTL_SECONDS,
        max_dedup_entries: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        self._lock = Lock()
        self._dedup = DedupTable(
            ttl_seconds=dedup_ttl_seconds,
            max_entries=max_dedup_entries,
            clock=clock,
        )
        self._aggregates = AggregateTable()
        self._started_at = time.monotonic()

    @property
    def dedup_ttl_seconds(self) -> int:
        return self._dedup.ttl_seconds

    @property
    def uptime_seconds(self) -> float:
        return time.monotonic() - self._started_at

    @property
    def project_count(self) -> int:
        with self._lock:
            return len(self._aggregates)

    @property
    def dedup_size(self) -> int:
        with self._lock:
            return len(self._dedup)

    def record_visit(self, project_id: str, identity_hash: str, base: int = 0) -> VisitResult:
        """Count a visit at most once per identity per dedup window."""
        with self._lock:
            aggregate = self._aggregates.get_or_create(project_id, base)
            is_new_visitor = self._dedup.is_new(project_id, identity_hash)
            if is_new_visitor:
                self._dedup.mark_seen(project_id, identity_hash)
                aggregate.count += 1
                aggregate.unique_hashes.add(identity_hash)
            result = VisitResult(
                project=project_id,
                count=aggregate.count,
                unique_visitors=aggregate.unique_visitors,
                is_new_visitor=is_new_visitor,
            )

        if is_new_visitor:
            logger.debug('New visitor for %s (count=%d)', project_id, result.count)
        return result

    def get(self, project_id: str) -> Optional[ProjectAggregate]:
        with self._lock:
            return self._aggregates.get(project_id)

    def get_or_create(self, project_id: str, base: int = 0) -> ProjectAggregate:
        with self._lock:
            return self._aggregates.get_or_create(project_id, base).copy()

    def reset(self, project_id: str) -> bool:
        """Drop the project's aggregate and every dedup marker it owns.

        Unknown projects are a no-op. Returns whether an aggregate existed.
        """
        with self._lock:
            existed = self._aggregates.remove(project_id)
            purged = self._dedup.purge_project(project_id)

        logger.info('Reset project %s (aggregate=%s, dedup entries purged=%d)', project_id, existed, purged)
        return existed

    def stats(self) -> Dict[str, dict]:
        with self._lock:
            snapshot = self._aggregates.snapshot()
        return {name: aggregate.to_dict() for name, aggregate in snapshot.items()}

    def prune_expired(self) -> int:
        with self._lock:
            return self._dedup.prune_expired()
