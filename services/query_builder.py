"""Validation and SQL composition for the reading listing endpoint."""

from __future__ import annotations

import math
import re
from typing import Optional

from sqlalchemy import Select, String, Table, asc, cast, desc, func, select

from models.records import ListQuery

DEFAULT_LIMIT = 50
DEFAULT_SORT_BY = "created_at"
DEFAULT_SORT_ORDER = "DESC"
LIMIT_ALL = "all"

# Largest value a signed 64-bit INTEGER column or LIMIT clause accepts.
MAX_SQL_INTEGER = 2**63 - 1

SORT_COLUMNS = frozenset({"id", "distance", "created_at"})
SORT_ORDERS = frozenset({"ASC", "DESC"})

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_INTEGER_PATTERN = re.compile(r"^\+?\d+$")


class ValidationError(ValueError):
    """Raised when a client-supplied parameter is malformed or out of range."""

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else ""


def _parse_non_negative_int(raw: str) -> Optional[int]:
    candidate = raw.strip()
    if not _INTEGER_PATTERN.match(candidate):
        return None
    value = int(candidate)
    return value if value <= MAX_SQL_INTEGER else None


def _parse_non_negative_float(raw: str) -> Optional[float]:
    try:
        value = float(raw.strip())
    except ValueError:
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


def parse_limit(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return DEFAULT_LIMIT
    if raw == LIMIT_ALL:
        return None
    value = _parse_non_negative_int(raw)
    if value is None:
        raise ValidationError("Limit must be a positive number or all")
    return value


def parse_offset(raw: Optional[str]) -> int:
    if raw is None:
        return 0
    value = _parse_non_negative_int(raw)
    if value is None:
        raise ValidationError("Offset must be a non-negative number")
    return value


def parse_min_distance(raw: Optional[str]) -> float:
    if raw is None:
        return 0.0
    value = _parse_non_negative_float(raw)
    if value is None:
        raise ValidationError("MinDistance must be a non-negative number")
    return value


def parse_date(raw: Optional[str]) -> Optional[str]:
    if not raw:
        return None
    if not _DATE_PATTERN.match(raw):
        raise ValidationError("Date must be in YYYY-MM-DD format")
    return raw


def resolve_sort(sort_by: Optional[str], sort_order: Optional[str]) -> tuple[str, str]:
    """Return the sort column and direction, or the default pair as a whole.

    A valid column with an invalid direction (or the reverse) never yields a
    mixed result.
    """
    column = DEFAULT_SORT_BY if sort_by is None else sort_by
    order = DEFAULT_SORT_ORDER if sort_order is None else sort_order.upper()
    if column in SORT_COLUMNS and order in SORT_ORDERS:
        return column, order
    return DEFAULT_SORT_BY, DEFAULT_SORT_ORDER


def parse_list_query(
    limit: Optional[str] = None,
    offset: Optional[str] = None,
    min_distance: Optional[str] = None,
    date: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
) -> ListQuery:
    """Validate raw query-string values into a :class:`ListQuery`.

    Raises :class:`ValidationError` with a field-specific message on the first
    invalid value.
    """
    parsed_limit = parse_limit(limit)
    parsed_offset = parse_offset(offset)
    parsed_min = parse_min_distance(min_distance)
    parsed_date = parse_date(date)
    column, order = resolve_sort(sort_by, sort_order)
    return ListQuery(
        limit=parsed_limit,
        offset=parsed_offset,
        min_distance=parsed_min,
        date=parsed_date,
        sort_by=column,
        sort_order=order,
    )


def build_list_statement(query: ListQuery, table: Table) -> Select:
    """Translate a validated query into a parameterized ``SELECT``.

    Only the sort column is chosen dynamically, from ``SORT_COLUMNS``; every
    value is a bound parameter.
    """
    if query.sort_by not in SORT_COLUMNS or query.sort_order not in SORT_ORDERS:
        raise ValidationError(f"Unsupported sort {query.sort_by} {query.sort_order}")

    statement = select(table.c.id, table.c.distance, table.c.created_at).where(
        table.c.distance >= query.min_distance
    )
    if query.date is not None:
        # Compared as text so a pattern-valid but impossible day matches nothing.
        statement = statement.where(cast(func.date(table.c.created_at), String) == query.date)

    direction = asc if query.sort_order == "ASC" else desc
    statement = statement.order_by(direction(table.c[query.sort_by]))

    if query.limit is not None:
        statement = statement.limit(query.limit).offset(query.offset)
    return statement
