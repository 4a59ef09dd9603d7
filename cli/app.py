from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_health, render_reading, render_readings, render_stats


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the distance reading service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Service base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each request.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("record")
def record_command(
    ctx: typer.Context,
    distance: float = typer.Argument(..., min=0, help="Measured distance in centimetres."),
) -> None:
    """Record a new reading."""
    state = _get_state(ctx)
    payload = state.client.record(distance)
    typer.secho(f"Recorded reading id={payload.get('id')}", fg=typer.colors.GREEN)
    render_reading(payload)


@app.command("latest")
def latest_command(ctx: typer.Context) -> None:
    """Show the most recent reading."""
    state = _get_state(ctx)
    render_reading(state.client.latest(), heading="Latest reading")


@app.command("stats")
def stats_command(ctx: typer.Context) -> None:
    """Show aggregate statistics."""
    state = _get_state(ctx)
    render_stats(state.client.stats())


@app.command("list")
def list_command(
    ctx: typer.Context,
    limit: Optional[str] = typer.Option(None, "--limit", "-n", help='Row count or "all".'),
    offset: Optional[int] = typer.Option(None, "--offset", min=0),
    date: Optional[str] = typer.Option(None, "--date", help="Only readings from this day (YYYY-MM-DD)."),
    min_distance: Optional[float] = typer.Option(None, "--min-distance", min=0),
    sort_by: Optional[str] = typer.Option(None, "--sort-by", help="id, distance or created_at."),
    sort_order: Optional[str] = typer.Option(None, "--sort-order", help="ASC or DESC."),
) -> None:
    """List readings with filters, sorting and pagination."""
    state = _get_state(ctx)
    rows = state.client.list_readings(
        {
            "limit": limit,
            "offset": offset,
            "date": date,
            "minDistance": min_distance,
            "sortBy": sort_by,
            "sortOrder": sort_order,
        }
    )
    render_readings(rows)


@app.command("delete")
def delete_command(
    ctx: typer.Context,
    reading_id: int = typer.Argument(..., help="Identifier of the reading to delete."),
) -> None:
    """Delete one reading."""
    state = _get_state(ctx)
    payload = state.client.delete(reading_id)
    typer.secho(payload.get("message", "Deleted."), fg=typer.colors.GREEN)


@app.command("clear")
def clear_command(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """Delete every reading."""
    state = _get_state(ctx)
    if not yes:
        typer.confirm("Delete every stored reading?", abort=True)
    payload = state.client.delete_all()
    typer.secho(f"Deleted {payload.get('deleted_count')} reading(s).", fg=typer.colors.GREEN)


@app.command("generate")
def generate_command(
    ctx: typer.Context,
    count: Optional[int] = typer.Option(None, "--count", "-c", min=1, max=1000),
) -> None:
    """Insert synthetic readings."""
    state = _get_state(ctx)
    payload = state.client.generate(count)
    typer.secho(f"Inserted {payload.get('count')} sample reading(s).", fg=typer.colors.GREEN)


@app.command("health")
def health_command(ctx: typer.Context) -> None:
    """Check service and database status."""
    state = _get_state(ctx)
    payload = state.client.health()
    render_health(payload)
    if payload.get("status") != "healthy":
        raise typer.Exit(code=1)
