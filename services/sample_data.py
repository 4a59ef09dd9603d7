"""Synthetic reading generation for exercising the dashboard and the API."""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

MAX_SAMPLE_COUNT = 1000

# HC-SR04 style rangefinders report roughly 2 to 400 centimetres.
MIN_SAMPLE_DISTANCE = 2.0
MAX_SAMPLE_DISTANCE = 400.0


@dataclass(slots=True, frozen=True)
class SampleReading:
    distance: float
    created_at: datetime


class SampleDataGenerator:
    """Produce readings spread over a trailing time window."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        window: timedelta = timedelta(days=7),
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._rng = rng or random.Random()
        self._window = window
        self._clock = clock

    def generate(self, count: int) -> List[SampleReading]:
        if count < 0 or count > MAX_SAMPLE_COUNT:
            raise ValueError(f"Count must be between 0 and {MAX_SAMPLE_COUNT}")

        now = self._clock().astimezone(timezone.utc).replace(tzinfo=None)
        window_seconds = self._window.total_seconds()
        samples = [
            SampleReading(
                distance=round(self._rng.uniform(MIN_SAMPLE_DISTANCE, MAX_SAMPLE_DISTANCE), 2),
                created_at=now - timedelta(seconds=self._rng.uniform(0, window_seconds)),
            )
            for _ in range(count)
        ]
        samples.sort(key=lambda sample: sample.created_at)
        return samples
