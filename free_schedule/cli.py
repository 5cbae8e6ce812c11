"""
Command-line interface for the free schedule finder.

Run with: python -m free_schedule
"""

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from .config import Settings
from .errors import AuthRequired, ScheduleError, ValidationError
from .providers.google_client import GoogleClient
from .service import compute_schedule, parse_query

app = typer.Typer(
    name="free-schedule",
    help="Find free time in your Google Calendar over the next week",
    add_completion=False,
)
console = Console()


def _settings() -> Settings:
    return Settings.from_env()


@app.command()
def week(
    days: str = typer.Option(None, "--days", "-d", help="Weekday indices, 0 = Sunday (default: 1,2,3,4,5)"),
    hours: str = typer.Option(None, "--hours", "-H", help="Start and end hour (default: 8,20)"),
    length: str = typer.Option(None, "--length", "-l", help="Minimum meeting length in minutes (default: 60)"),
):
    """Print free blocks for the next seven days, grouped by day."""
    settings = _settings()
    try:
        day_set, hour_range, meeting_length = parse_query(days, hours, length, settings)
        schedule = asyncio.run(compute_schedule(day_set, hour_range, meeting_length, GoogleClient(settings), settings))
    except ValidationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(2)
    except AuthRequired as e:
        console.print(f"[yellow]{e}[/yellow] Run: [bold]python -m free_schedule auth[/bold]")
        raise typer.Exit(1)
    except ScheduleError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if not schedule:
        console.print("[dim]No free blocks in range.[/dim]")
        return

    table = Table(title="Free schedule")
    table.add_column("Day", style="cyan")
    table.add_column("Date")
    table.add_column("Free")
    for entry in schedule:
        table.add_row(entry.weekday, entry.date.isoformat(), "\n".join(entry.blocks))
    console.print(table)


@app.command()
def auth():
    """One-time Google Calendar consent; saves a token for later runs."""
    settings = _settings()
    GoogleClient(settings).authorize_interactive()
    console.print(f"[green]Token saved to:[/green] {settings.token_file}")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(8000, help="Bind port"),
):
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("free_schedule.main:app", host=host, port=port)


if __name__ == "__main__":
    app()
