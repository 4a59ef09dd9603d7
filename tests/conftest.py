from __future__ import annotations

import random
from datetime import datetime, timezone
from typing import Iterator

import pytest

from datastore.reading_store import ReadingStore, build_engine
from services.aggregator import Aggregator
from services.readings import ReadingService
from services.sample_data import SampleDataGenerator


@pytest.fixture
def store(tmp_path) -> Iterator[ReadingStore]:
    engine = build_engine(f"sqlite:///{tmp_path / 'distances.db'}", pool_size=2, pool_timeout=1.0)
    reading_store = ReadingStore(engine)
    reading_store.create_schema()
    yield reading_store
    reading_store.dispose()


@pytest.fixture
def service(store: ReadingStore) -> ReadingService:
    generator = SampleDataGenerator(
        rng=random.Random(1234),
        clock=lambda: datetime(2024, 5, 10, 12, 0, tzinfo=timezone.utc),
    )
    return ReadingService(store=store, aggregator=Aggregator(), generator=generator)


@pytest.fixture
def seed(store: ReadingStore):
    """Insert readings with explicit timestamps: ``seed([(distance, "YYYY-MM-DD HH:MM:SS"), ...])``."""

    def _seed(rows):
        store.insert_many(
            {"distance": distance, "created_at": datetime.fromisoformat(created_at)}
            for distance, created_at in rows
        )

    return _seed
