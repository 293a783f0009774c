"""Per-project aggregate records (running count + unique visitor hashes)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Set


@dataclass
class ProjectAggregate:
    count: int = 0
    unique_hashes: Set[str] = field(default_factory=set)

    @property
    def unique_visitors(self) -> int:
        return len(self.unique_hashes)

    def copy(self) -> 'ProjectAggregate':
        return ProjectAggregate(count=self.count, unique_hashes=set(self.unique_hashes))

    def to_dict(self) -> dict:
        return {'count': self.count, 'uniqueVisitors': self.unique_visitors}


class AggregateTable:
    """Project id -> ProjectAggregate.

    Not locked on its own; ``CounterService`` serializes access. ``get`` and
    ``snapshot`` hand out copies so readers never see later mutations.
    """

    def __init__(self):
        self._projects: Dict[str, ProjectAggregate] = {}

    def get(self, project_id: str) -> Optional[ProjectAggregate]:
        aggregate = self._projects.get(project_id)
        return aggregate.copy() if aggregate is not None else None

    def get_or_create(self, project_id: str, base: int = 0) -> ProjectAggregate:
        """Return the live record, seeding a new one with ``count = base``."""
        aggregate = self._projects.get(project_id)
        if aggregate is None:
            aggregate = ProjectAggregate(count=max(0, int(base or 0)))
            self._projects[project_id] = aggregate
        return aggregate

    def remove(self, project_id: str) -> bool:
        return self._projects.pop(project_id, None) is not None

    def snapshot(self) -> Dict[str, ProjectAggregate]:
        return {name: aggregate.copy() for name, aggregate in self._projects.items()}

    def __contains__(self, project_id: object) -> bool:
        return project_id in self._projects

    def __len__(self) -> int:
        return len(self._projects)
