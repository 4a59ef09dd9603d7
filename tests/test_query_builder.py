"""Unit tests for list parameter validation and SQL composition."""

from __future__ import annotations

import pytest
from sqlalchemy.dialects import sqlite

from datastore.reading_store import distances
from models.records import ListQuery
from services.query_builder import (
    MAX_SQL_INTEGER,
    ValidationError,
    build_list_statement,
    parse_list_query,
    resolve_sort,
)


def _compile(query: ListQuery):
    return build_list_statement(query, distances).compile(dialect=sqlite.dialect())


def test_defaults_when_no_parameters_given() -> None:
    query = parse_list_query()

    assert query == ListQuery(
        limit=50,
        offset=0,
        min_distance=0.0,
        date=None,
        sort_by="created_at",
        sort_order="DESC",
    )


def test_limit_all_means_unbounded() -> None:
    query = parse_list_query(limit="all", offset="10")

    assert query.limit is None
    assert query.offset == 10


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"limit": "-1"}, "Limit must be a positive number or all"),
        ({"limit": "ten"}, "Limit must be a positive number or all"),
        ({"limit": "ALL"}, "Limit must be a positive number or all"),
        ({"offset": "-5"}, "Offset must be a non-negative number"),
        ({"limit": "9223372036854775808"}, "Limit must be a positive number or all"),
        ({"offset": "1.5"}, "Offset must be a non-negative number"),
        ({"offset": "99999999999999999999999"}, "Offset must be a non-negative number"),
        ({"min_distance": "-0.5"}, "MinDistance must be a non-negative number"),
        ({"min_distance": "abc"}, "MinDistance must be a non-negative number"),
        ({"min_distance": "nan"}, "MinDistance must be a non-negative number"),
        ({"date": "05/01/2024"}, "Date must be in YYYY-MM-DD format"),
        ({"date": "2024-5-1"}, "Date must be in YYYY-MM-DD format"),
    ],
)
def test_invalid_parameters_raise_field_specific_errors(kwargs, message) -> None:
    with pytest.raises(ValidationError) as excinfo:
        parse_list_query(**kwargs)

    assert excinfo.value.message == message


def test_first_invalid_parameter_wins() -> None:
    with pytest.raises(ValidationError) as excinfo:
        parse_list_query(limit="x", offset="-1", date="bad")

    assert excinfo.value.message == "Limit must be a positive number or all"


def test_date_pattern_is_not_calendar_checked() -> None:
    assert parse_list_query(date="2024-13-99").date == "2024-13-99"


def test_largest_sql_integer_is_accepted() -> None:
    query = parse_list_query(limit=str(MAX_SQL_INTEGER), offset=str(MAX_SQL_INTEGER))

    assert query.limit == MAX_SQL_INTEGER
    assert query.offset == MAX_SQL_INTEGER


def test_zero_limit_is_accepted() -> None:
    assert parse_list_query(limit="0").limit == 0


@pytest.mark.parametrize(
    ("sort_by", "sort_order", "expected"),
    [
        ("distance", "asc", ("distance", "ASC")),
        ("id", "DESC", ("id", "DESC")),
        ("distance", None, ("distance", "DESC")),
        (None, "ASC", ("created_at", "ASC")),
        ("distance", "sideways", ("created_at", "DESC")),
        ("name", "ASC", ("created_at", "DESC")),
        ("Distance", "ASC", ("created_at", "DESC")),
        ("bogus", "bogus", ("created_at", "DESC")),
    ],
)
def test_sort_fallback_is_all_or_nothing(sort_by, sort_order, expected) -> None:
    assert resolve_sort(sort_by, sort_order) == expected


def test_statement_binds_values_and_orders_by_allow_listed_column() -> None:
    query = parse_list_query(
        limit="10",
        offset="20",
        min_distance="12.5",
        date="2024-05-01",
        sort_by="distance",
        sort_order="asc",
    )

    compiled = _compile(query)
    sql = str(compiled)

    assert "distances.distance >= ?" in sql
    assert "CAST(date(distances.created_at) AS VARCHAR) = ?" in sql
    assert "ORDER BY distances.distance ASC" in sql
    assert "LIMIT ? OFFSET ?" in sql
    assert "2024-05-01" not in sql
    assert sorted(compiled.params.values(), key=str) == sorted(
        [12.5, "2024-05-01", 10, 20], key=str
    )


def test_statement_without_date_or_limit() -> None:
    compiled = _compile(parse_list_query(limit="all", offset="30"))
    sql = str(compiled)

    assert "date(" not in sql
    assert "LIMIT" not in sql
    assert "OFFSET" not in sql
    assert "ORDER BY distances.created_at DESC" in sql
    assert list(compiled.params.values()) == [0.0]


def test_statement_rejects_unvalidated_sort() -> None:
    with pytest.raises(ValidationError):
        build_list_statement(ListQuery(sort_by="distance; DROP TABLE distances"), distances)
