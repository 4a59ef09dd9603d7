"""Aggregation logic for distance readings."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional, Union

from models.records import StatsRow

_TWO_PLACES = Decimal("0.01")


@dataclass
class StatsSummary:
    """Fixed-shape statistics over every stored reading."""

    total_records: int = 0
    avg_distance: Union[str, int] = 0
    min_distance: float = 0
    max_distance: float = 0
    first_record: Optional[datetime] = None
    last_record: Optional[datetime] = None


def _to_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal(0)
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return Decimal(0)


def _to_float(value: Any) -> float:
    if value is None:
        return 0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0


def _to_int(value: Any) -> int:
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def format_average(value: Any) -> str:
    """Render an average with exactly two fractional digits, rounding half-up."""
    return str(_to_decimal(value).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


class Aggregator:
    """Pure aggregation component that can be unit tested in isolation."""

    def summarize(self, row: StatsRow) -> StatsSummary:
        total = _to_int(row.total_records)
        # AVG/MIN/MAX over an empty table are null; report zeros instead.
        if total == 0:
            return StatsSummary()

        return StatsSummary(
            total_records=total,
            avg_distance=format_average(row.avg_distance),
            min_distance=_to_float(row.min_distance),
            max_distance=_to_float(row.max_distance),
            first_record=row.first_record,
            last_record=row.last_record,
        )
