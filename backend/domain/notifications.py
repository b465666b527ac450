from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class NotificationCounts:
    """Badge counters shown in the navigation bar."""

    admin_count: int = 0
    worker_count: int = 0

    def as_dict(self) -> dict[str, int]:
        return {"adminCount": self.admin_count, "workerCount": self.worker_count}
