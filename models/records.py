"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional


@dataclass(slots=True, frozen=True)
class Reading:
    """A single stored distance measurement."""

    id: int
    distance: float
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "distance": self.distance, "created_at": self.created_at}


@dataclass(slots=True, frozen=True)
class ListQuery:
    """Validated filter, sort and pagination request for listing readings.

    ``limit`` of ``None`` means every matching row; ``offset`` is then unused.
    """

    limit: Optional[int] = 50
    offset: int = 0
    min_distance: float = 0.0
    date: Optional[str] = None
    sort_by: str = "created_at"
    sort_order: str = "DESC"


@dataclass(slots=True, frozen=True)
class StatsRow:
    """Raw aggregate values as returned by the store; any of them may be null."""

    total_records: Any = None
    avg_distance: Any = None
    min_distance: Any = None
    max_distance: Any = None
    first_record: Optional[datetime] = None
    last_record: Optional[datetime] = None
