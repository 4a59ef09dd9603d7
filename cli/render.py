from __future__ import annotations

from typing import Any, Dict, Iterable, List

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_reading(payload: Dict[str, Any], heading: str = "Reading") -> None:
    echo_heading(heading)
    echo_key_values(
        [
            ("id", payload.get("id")),
            ("distance", payload.get("distance")),
            ("created_at", payload.get("created_at")),
        ]
    )


def render_stats(payload: Dict[str, Any]) -> None:
    echo_heading("Statistics")
    echo_key_values(
        (key, payload.get(key) if payload.get(key) is not None else "-")
        for key in (
            "total_records",
            "avg_distance",
            "min_distance",
            "max_distance",
            "first_record",
            "last_record",
        )
    )


def render_readings(rows: List[Dict[str, Any]]) -> None:
    echo_heading(f"{len(rows)} reading(s)")
    if not rows:
        typer.echo("No readings match these filters.")
        return
    typer.echo(f"{'id':>8}  {'distance':>10}  created_at")
    for row in rows:
        typer.echo(f"{row.get('id'):>8}  {row.get('distance'):>10}  {row.get('created_at')}")


def render_health(payload: Dict[str, Any]) -> None:
    healthy = payload.get("status") == "healthy"
    typer.secho(
        f"status: {payload.get('status')}",
        fg=typer.colors.GREEN if healthy else typer.colors.RED,
    )
    echo_key_values(
        [
            ("database", payload.get("database")),
            ("uptime", payload.get("uptime")),
            ("timestamp", payload.get("timestamp")),
        ]
    )
    if payload.get("details"):
        typer.echo(f"details: {payload['details']}")
