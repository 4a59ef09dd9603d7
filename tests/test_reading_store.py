"""Tests for the SQLAlchemy-backed reading store."""

from __future__ import annotations

from datetime import datetime
from typing import List

import pytest
from sqlalchemy import inspect

from datastore.reading_store import ReadingStore, StoreError, build_engine
from models.records import ListQuery, Reading
from services.query_builder import parse_list_query


def _stored(store: ReadingStore) -> List[Reading]:
    return store.list_readings(ListQuery(limit=None))


def test_create_schema_builds_table_and_indexes(store: ReadingStore) -> None:
    inspector = inspect(store.engine)

    assert "distances" in inspector.get_table_names()
    columns = {column["name"] for column in inspector.get_columns("distances")}
    assert columns == {"id", "distance", "created_at"}
    indexes = {index["name"] for index in inspector.get_indexes("distances")}
    assert {"idx_created_at", "idx_distance"} <= indexes


def test_insert_assigns_increasing_ids_and_default_timestamp(store: ReadingStore) -> None:
    first = store.insert(5.0)
    second = store.insert(7.25)

    assert first.id > 0
    assert second.id > first.id
    assert second.distance == 7.25
    assert isinstance(second.created_at, datetime)
    assert second in _stored(store)


def test_delete_removes_only_the_target(store: ReadingStore) -> None:
    keep = store.insert(1.0)
    drop = store.insert(2.0)

    assert store.delete(drop.id) is True
    assert store.delete(drop.id) is False
    assert _stored(store) == [keep]


def test_delete_all_reports_row_count(store: ReadingStore, seed) -> None:
    seed([(1.0, "2024-05-01 10:00:00"), (2.0, "2024-05-02 10:00:00"), (3.0, "2024-05-03 10:00:00")])

    assert store.delete_all() == 3
    assert store.latest() is None
    assert store.delete_all() == 0


def test_list_filters_by_day_and_minimum(store: ReadingStore, seed) -> None:
    seed(
        [
            (5.0, "2024-05-01 08:00:00"),
            (15.0, "2024-05-01 12:30:00"),
            (25.0, "2024-05-01 23:59:59"),
            (35.0, "2024-05-02 00:00:00"),
        ]
    )

    readings = store.list_readings(
        parse_list_query(date="2024-05-01", min_distance="10", sort_by="distance", sort_order="ASC")
    )

    assert [reading.distance for reading in readings] == [15.0, 25.0]
    assert all(reading.created_at.date().isoformat() == "2024-05-01" for reading in readings)


def test_impossible_calendar_day_matches_nothing(store: ReadingStore, seed) -> None:
    seed([(5.0, "2024-05-01 08:00:00"), (6.0, "2024-12-31 08:00:00")])

    assert store.list_readings(parse_list_query(date="2024-13-99")) == []
    assert len(store.list_readings(parse_list_query(date="2024-12-31"))) == 1


def test_list_pagination_and_limit_all(store: ReadingStore, seed) -> None:
    seed([(float(value), f"2024-05-0{value} 10:00:00") for value in range(1, 6)])

    page = store.list_readings(parse_list_query(limit="2", offset="1"))
    everything = store.list_readings(parse_list_query(limit="all", offset="3"))

    assert [reading.distance for reading in page] == [4.0, 3.0]
    assert [reading.distance for reading in everything] == [5.0, 4.0, 3.0, 2.0, 1.0]


def test_latest_uses_creation_time(store: ReadingStore, seed) -> None:
    seed([(9.0, "2024-05-03 10:00:00"), (1.0, "2024-05-01 10:00:00")])

    latest = store.latest()

    assert latest is not None
    assert latest.distance == 9.0


def test_aggregate_on_empty_and_populated_table(store: ReadingStore, seed) -> None:
    empty = store.aggregate()
    assert empty.total_records == 0
    assert empty.avg_distance is None

    seed([(10.0, "2024-05-01 10:00:00"), (20.5, "2024-05-02 10:00:00"), (30.0, "2024-05-03 10:00:00")])
    row = store.aggregate()

    assert row.total_records == 3
    assert row.avg_distance == pytest.approx(20.1666, rel=1e-3)
    assert row.min_distance == 10.0
    assert row.max_distance == 30.0
    assert row.first_record == datetime(2024, 5, 1, 10, 0)
    assert row.last_record == datetime(2024, 5, 3, 10, 0)


def test_pool_timeout_surfaces_as_store_error(tmp_path) -> None:
    engine = build_engine(f"sqlite:///{tmp_path / 'pool.db'}", pool_size=1, pool_timeout=0.1)
    store = ReadingStore(engine)
    store.create_schema()
    try:
        with engine.connect():
            with pytest.raises(StoreError) as excinfo:
                store.latest()
        assert excinfo.value.details
        assert store.latest() is None
    finally:
        store.dispose()


def test_out_of_range_id_is_wrapped(store: ReadingStore) -> None:
    store.insert(1.0)

    with pytest.raises(StoreError):
        store.delete(2**70)

    assert len(_stored(store)) == 1


def test_failures_are_wrapped(tmp_path) -> None:
    store = ReadingStore(build_engine(f"sqlite:///{tmp_path / 'missing.db'}"))

    with pytest.raises(StoreError) as excinfo:
        store.aggregate()

    assert "distances" in (excinfo.value.details or "")
    store.dispose()
