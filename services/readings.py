"""Coordination of the reading store, query builder and aggregator."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache
from typing import List, Optional

from datastore.reading_store import ReadingStore, StoreError, build_default_store
from models.records import ListQuery, Reading
from services.aggregator import Aggregator, StatsSummary
from services.sample_data import MAX_SAMPLE_COUNT, SampleDataGenerator

logger = logging.getLogger(__name__)


@dataclass
class HealthReport:
    healthy: bool
    uptime: float
    timestamp: datetime
    details: Optional[str] = None


class ReadingService:
    """Entry point used by the HTTP layer for every reading operation."""

    def __init__(
        self,
        store: ReadingStore,
        aggregator: Aggregator,
        generator: SampleDataGenerator,
    ) -> None:
        self.store = store
        self.aggregator = aggregator
        self.generator = generator
        self._started = time.monotonic()

    def startup(self) -> None:
        self.store.create_schema()

    def shutdown(self) -> None:
        """Release pooled connections during application shutdown."""
        self.store.dispose()

    def list_readings(self, query: ListQuery) -> List[Reading]:
        readings = self.store.list_readings(query)
        logger.debug(
            "Listed readings",
            extra={
                "limit": "all" if query.limit is None else query.limit,
                "offset": query.offset,
                "sort": f"{query.sort_by} {query.sort_order}",
                "row_count": len(readings),
            },
        )
        return readings

    def stats(self) -> StatsSummary:
        return self.aggregator.summarize(self.store.aggregate())

    def latest(self) -> Reading:
        reading = self.store.latest()
        if reading is None:
            raise KeyError("No distance records found")
        return reading

    def record(self, distance: float) -> Reading:
        reading = self.store.insert(round(distance, 2))
        logger.info("Distance recorded", extra={"reading_id": reading.id})
        return reading

    def delete(self, reading_id: int) -> None:
        if not self.store.delete(reading_id):
            raise KeyError("Distance record not found")
        logger.info("Distance deleted", extra={"reading_id": reading_id})

    def delete_all(self) -> int:
        deleted = self.store.delete_all()
        logger.info("All distances deleted", extra={"deleted_count": deleted})
        return deleted

    def generate_samples(self, count: int) -> int:
        if count > MAX_SAMPLE_COUNT:
            raise ValueError(f"Count must not exceed {MAX_SAMPLE_COUNT}")
        samples = self.generator.generate(count)
        inserted = self.store.insert_many(
            {"distance": sample.distance, "created_at": sample.created_at} for sample in samples
        )
        logger.info("Sample data generated", extra={"count": inserted})
        return inserted

    def health(self) -> HealthReport:
        uptime = round(time.monotonic() - self._started, 3)
        now = datetime.now(timezone.utc)
        try:
            self.store.ping()
        except StoreError as exc:
            return HealthReport(healthy=False, uptime=uptime, timestamp=now, details=exc.details)
        return HealthReport(healthy=True, uptime=uptime, timestamp=now)


@lru_cache
def build_default_service() -> ReadingService:
    """Factory that wires the service with the configured database."""
    return ReadingService(
        store=build_default_store(),
        aggregator=Aggregator(),
        generator=SampleDataGenerator(),
    )
