"""
Main CLI application using Typer.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import List, Optional, Annotated

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..config import AppConfig, get_default_config_path
from ..adapters.json_provider import JsonBusyBlockProvider
from ..adapters.memory_provider import InMemoryBusyBlockProvider
from ..domain.exceptions import AvailabilityError
from ..services.availability_preview import AvailabilityPreviewService, BusyBlockProvider

app = typer.Typer(
    name="bookableslots",
    help="Preview bookable slots from a weekly schedule and busy calendars",
    add_completion=False
)

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    return AppConfig.load_from_yaml(config_path)


def _build_provider(busy_file: Optional[Path]) -> BusyBlockProvider:
    if busy_file is None:
        return InMemoryBusyBlockProvider()
    return JsonBusyBlockProvider(busy_file)


def _parse_date(value: Optional[str], tz: str, label: str):
    """Parse a YYYY-MM-DD option as midnight in ``tz``; defaults to now."""
    if not value:
        return pendulum.now(tz)
    try:
        return pendulum.from_format(value, "YYYY-MM-DD", tz=tz).start_of("day")
    except ValueError as e:
        console.print(f"[red]Error parsing {label}: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def preview(
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="Start date (YYYY-MM-DD). Defaults to now.")] = None,
    days: Annotated[Optional[int], typer.Option("--days", "-n", help="Number of days to preview")] = None,
    busy_file: Annotated[Optional[Path], typer.Option("--busy-file", "-b", help="JSON file with busy intervals")] = None,
    calendars: Annotated[Optional[List[str]], typer.Option("--calendar", help="Calendar id to consult (repeatable)")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the preview as JSON")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
):
    """
    Preview bookable slots for the coming days.

    Examples:

        bookableslots preview
        bookableslots preview --start 2025-01-27 --days 14
        bookableslots preview --busy-file busy.json --calendar work
    """
    _configure_logging(verbose)

    try:
        config = _load_config(config_file)
        tz = config.timezone
        start_date = _parse_date(start, tz, "start date")

        service = AvailabilityPreviewService(
            busy_block_provider=_build_provider(busy_file),
            settings=config.to_settings(),
            weekly_template=config.weekly_template(),
        )

        result = asyncio.run(
            service.preview(
                start_date=start_date,
                number_of_days=days if days is not None else config.preview_days,
                slot_duration_minutes=config.slot_duration,
                gap_minutes=config.time_gap,
                selected_calendar_ids=calendars or config.calendars,
                now=pendulum.now(tz),
            )
        )

        if as_json:
            console.print_json(json.dumps(result.to_dict()))
            return

        settings = service.settings
        table = Table(
            title=f"Availability ({settings.timezone})",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Date", style="bold")
        table.add_column("Day")
        table.add_column("Time ranges")
        table.add_column("Slots", justify="right")

        for day in result.days:
            ranges = ", ".join(day.time_ranges) if day.is_available else "[dim]unavailable[/dim]"
            table.add_row(day.date, day.day_of_week.value.title(), ranges, str(len(day.slots)))

        console.print()
        console.print(table)
        console.print(
            f"\n[bold green]✓ {result.total_slots} slot(s), "
            f"{result.total_hours} hour(s) bookable[/bold green]"
        )
        console.print(
            f"[dim]buffer {settings.buffer_time} min, "
            f"notice {settings.minimum_notice} min, "
            f"window {settings.booking_window} day(s)[/dim]\n"
        )

    except FileNotFoundError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    except (AvailabilityError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def slots(
    date: Annotated[str, typer.Option("--date", "-d", help="Day to inspect (YYYY-MM-DD)")],
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file")] = None,
    busy_file: Annotated[Optional[Path], typer.Option("--busy-file", "-b", help="JSON file with busy intervals")] = None,
    calendars: Annotated[Optional[List[str]], typer.Option("--calendar", help="Calendar id to consult (repeatable)")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
):
    """
    List the bookable slots of a single day.
    """
    _configure_logging(verbose)

    try:
        config = _load_config(config_file)
        day = _parse_date(date, config.timezone, "date")

        service = AvailabilityPreviewService(
            busy_block_provider=_build_provider(busy_file),
            settings=config.to_settings(),
            weekly_template=config.weekly_template(),
        )

        day_preview = asyncio.run(
            service.day_slots(
                date=day,
                slot_duration_minutes=config.slot_duration,
                gap_minutes=config.time_gap,
                selected_calendar_ids=calendars or config.calendars,
            )
        )

        console.print()
        if not day_preview.slots:
            console.print(f"[yellow]⚠ No bookable slots on {day_preview.date}.[/yellow]\n")
            return

        console.print(f"[bold green]✓ {len(day_preview.slots)} slot(s) on {day_preview.format_display()}[/bold green]\n")
        for slot in day_preview.slots:
            console.print(f"  {slot.time_string} ({slot.duration_minutes()} min)")
        console.print()

    except FileNotFoundError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    except (AvailabilityError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]bookableslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
