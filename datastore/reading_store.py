"""Relational storage for distance readings behind a pooled SQLAlchemy engine."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Iterable, List, Optional

from sqlalchemy import (
    Column,
    DateTime,
    Engine,
    Index,
    Integer,
    MetaData,
    Numeric,
    Table,
    create_engine,
    delete,
    desc,
    func,
    make_url,
    select,
    text,
)
from sqlalchemy.exc import SQLAlchemyError

from models.records import ListQuery, Reading, StatsRow
from services.query_builder import build_list_statement
from settings import get_settings

logger = logging.getLogger(__name__)

# Drivers raise OverflowError for integers outside their column range.
STORE_FAILURES = (SQLAlchemyError, OverflowError)

metadata = MetaData()

distances = Table(
    "distances",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("distance", Numeric(10, 2, asdecimal=False), nullable=False),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    Index("idx_created_at", "created_at"),
    Index("idx_distance", "distance"),
)


class StoreError(RuntimeError):
    """Raised when the database cannot complete an operation."""

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.details = details


def _row_to_reading(row) -> Reading:
    return Reading(id=row.id, distance=float(row.distance), created_at=row.created_at)


class ReadingStore:

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self.table = distances

    def create_schema(self) -> None:
        try:
            metadata.create_all(self.engine)
        except STORE_FAILURES as exc:
            raise self._wrap("Failed to initialize database", exc) from exc
        logger.info("Distance table initialized", extra={"database": self.engine.url.get_backend_name()})

    def ping(self) -> None:
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except STORE_FAILURES as exc:
            raise self._wrap("Database unreachable", exc) from exc

    def insert(self, distance: float) -> Reading:
        try:
            with self.engine.begin() as connection:
                result = connection.execute(self.table.insert().values(distance=distance))
                reading_id = result.inserted_primary_key[0]
                row = connection.execute(
                    select(self.table).where(self.table.c.id == reading_id)
                ).one()
        except STORE_FAILURES as exc:
            raise self._wrap("Failed to save distance", exc) from exc
        return _row_to_reading(row)

    def insert_many(self, rows: Iterable[dict]) -> int:
        payload = list(rows)
        if not payload:
            return 0
        try:
            with self.engine.begin() as connection:
                connection.execute(self.table.insert(), payload)
        except STORE_FAILURES as exc:
            raise self._wrap("Failed to insert sample data", exc) from exc
        return len(payload)

    def delete(self, reading_id: int) -> bool:
        try:
            with self.engine.begin() as connection:
                result = connection.execute(
                    delete(self.table).where(self.table.c.id == reading_id)
                )
                deleted = result.rowcount
        except STORE_FAILURES as exc:
            raise self._wrap("Failed to delete distance record", exc) from exc
        return deleted > 0

    def delete_all(self) -> int:
        try:
            with self.engine.begin() as connection:
                result = connection.execute(delete(self.table))
                deleted = result.rowcount
        except STORE_FAILURES as exc:
            raise self._wrap("Failed to delete distance records", exc) from exc
        return deleted

    def list_readings(self, query: ListQuery) -> List[Reading]:
        statement = build_list_statement(query, self.table)
        try:
            with self.engine.connect() as connection:
                rows = connection.execute(statement).all()
        except STORE_FAILURES as exc:
            raise self._wrap("Database error", exc) from exc
        return [_row_to_reading(row) for row in rows]

    def latest(self) -> Optional[Reading]:
        statement = (
            select(self.table)
            .order_by(desc(self.table.c.created_at), desc(self.table.c.id))
            .limit(1)
        )
        try:
            with self.engine.connect() as connection:
                row = connection.execute(statement).first()
        except STORE_FAILURES as exc:
            raise self._wrap("Database error", exc) from exc
        return _row_to_reading(row) if row is not None else None

    def aggregate(self) -> StatsRow:
        column = self.table.c
        statement = select(
            func.count().label("total_records"),
            func.avg(column.distance).label("avg_distance"),
            func.min(column.distance).label("min_distance"),
            func.max(column.distance).label("max_distance"),
            func.min(column.created_at).label("first_record"),
            func.max(column.created_at).label("last_record"),
        ).select_from(self.table)
        try:
            with self.engine.connect() as connection:
                row = connection.execute(statement).one()
        except STORE_FAILURES as exc:
            raise self._wrap("Database error", exc) from exc
        return StatsRow(
            total_records=row.total_records,
            avg_distance=row.avg_distance,
            min_distance=row.min_distance,
            max_distance=row.max_distance,
            first_record=row.first_record,
            last_record=row.last_record,
        )

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database pool closed")

    @staticmethod
    def _wrap(message: str, exc: Exception) -> StoreError:
        details = str(getattr(exc, "orig", None) or exc)
        logger.error(message, exc_info=exc, extra={"reason": type(exc).__name__})
        return StoreError(message, details=details)


def build_engine(url: str, pool_size: int = 10, pool_timeout: float = 30.0) -> Engine:
    """Create an engine whose pool never grows past ``pool_size`` connections.

    Waiting longer than ``pool_timeout`` for a connection raises
    ``sqlalchemy.exc.TimeoutError``. SQLite file paths get their parent
    directory created.
    """
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite" and parsed.database and parsed.database != ":memory:":
        Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(
        url,
        pool_size=pool_size,
        max_overflow=0,
        pool_timeout=pool_timeout,
        pool_pre_ping=True,
    )


@lru_cache
def build_default_store(url: Optional[str] = None) -> ReadingStore:
    settings = get_settings()
    database_url = settings.database_url if url is None else url
    engine = build_engine(
        database_url,
        pool_size=settings.pool_size,
        pool_timeout=settings.pool_timeout,
    )
    return ReadingStore(engine)
