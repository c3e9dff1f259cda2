"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from ..adapters.file_calendar import FileBookingSource
from ..adapters.http_calendar import HttpBookingSource
from ..config import AppConfig, BookingsConfig, get_default_config_path
from ..domain.exceptions import SlotFinderError
from ..services.slot_finder import BookingSourceProtocol, SlotFinderService

app = typer.Typer(
    name="slotfinder",
    help="Find open appointment slots on recurring schedules",
    add_completion=False
)

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _build_booking_source(bookings: BookingsConfig) -> BookingSourceProtocol:
    if bookings.file is not None:
        return FileBookingSource(path=bookings.file)
    return HttpBookingSource(base_url=bookings.url, token=bookings.token)


def _determine_time_range(
    *,
    tz: str,
    this_week: bool,
    next_week: bool,
    start_option: Optional[str],
    end_option: Optional[str]
):
    """
    Resolve the desired time window based on shortcut flags or explicit dates.
    Returns (start_date, end_date) in the schedule's timezone.
    """
    if this_week and next_week:
        console.print("[red]Error: --this-week and --next-week cannot be combined.[/red]")
        raise typer.Exit(1)

    now = pendulum.now(tz)

    if this_week:
        return now, now.end_of("week")

    if next_week:
        next_monday = now.next(pendulum.MONDAY).start_of("day")
        return next_monday, next_monday.add(days=6).end_of("day")

    try:
        if start_option:
            start_date = pendulum.from_format(start_option, "YYYY-MM-DD", tz=tz).start_of("day")
        else:
            start_date = now.start_of("day")

        if end_option:
            end_date = pendulum.from_format(end_option, "YYYY-MM-DD", tz=tz).end_of("day")
        else:
            end_date = start_date.add(days=6).end_of("day")
    except ValueError as e:
        console.print(f"[red]Error parsing date: {e}[/red]")
        raise typer.Exit(1)

    return start_date, end_date


@app.command()
def find(
    schedule_id: Annotated[str, typer.Argument(help="Id of the configured schedule to search")],
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="Start date (YYYY-MM-DD)")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="End date (YYYY-MM-DD)")] = None,
    this_week: Annotated[bool, typer.Option("--this-week", help="Search from now until the end of this week.")] = False,
    next_week: Annotated[bool, typer.Option("--next-week", help="Search next week (Monday-Sunday).")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Find open slots on a schedule.

    Examples:

        slotfinder find dr-smith

        slotfinder find dr-smith --next-week

        slotfinder find dr-smith --start 2025-12-01 --end 2025-12-05
    """
    _configure_logging(verbose)

    try:
        config_path = config_file or get_default_config_path()
        config = AppConfig.load_from_yaml(config_path)
        schedule_config = config.find_schedule(schedule_id)
        schedule = schedule_config.to_domain()

        start_date, end_date = _determine_time_range(
            tz=schedule.timezone,
            this_week=this_week,
            next_week=next_week,
            start_option=start,
            end_option=end
        )

        console.print(f"\n[bold cyan]Schedule:[/bold cyan] {schedule_config.display_name()} ({schedule.timezone})")
        console.print(f"[bold cyan]Range:[/bold cyan] {start_date.format('YYYY-MM-DD HH:mm')} - {end_date.format('YYYY-MM-DD HH:mm')}\n")

        service = SlotFinderService(
            booking_source=_build_booking_source(config.bookings),
            max_range_days=config.search.max_range_days,
            max_bookings=config.search.max_bookings,
            page_size=config.search.page_size,
        )

        slots = asyncio.run(
            service.find_slots(
                schedule=schedule,
                start_date=start_date,
                end_date=end_date,
            )
        )

        if not slots:
            console.print(
                "[yellow]No open slots found.[/yellow]\n"
                "Try a longer range or check the schedule's availability rules."
            )
            return

        console.print(f"[bold green]{len(slots)} open slot(s) found:[/bold green]\n")
        for slot in slots:
            console.print(f"  {slot.format_display()}")
        console.print()

    except (FileNotFoundError, ValidationError, ValueError, SlotFinderError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def schedules(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to config file"
    )
):
    """
    List all configured schedules and their weekly availability.
    """
    try:
        config_path = config_file or get_default_config_path()
        config = AppConfig.load_from_yaml(config_path)
    except (FileNotFoundError, ValidationError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not config.schedules:
        console.print("[yellow]No schedules defined in the config file.[/yellow]")
        return

    table = Table(
        title="Configured schedules",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Id", style="bold yellow")
    table.add_column("Timezone", style="dim")
    table.add_column("Availability")
    table.add_column("Slot", style="dim")

    for schedule in config.schedules:
        if not schedule.scheduling_parameters:
            table.add_row(schedule.id, schedule.timezone, "-", "-")
        for parameters in schedule.scheduling_parameters:
            rules = "\n".join(
                f"{','.join(rule.days_of_week)} "
                f"{', '.join(t.strftime('%H:%M') for t in rule.times_of_day)} "
                f"({rule.duration} min)"
                for rule in parameters.availability
            )
            slot = (
                f"{parameters.duration} min every {parameters.alignment_interval} min"
                f" (+{parameters.alignment_offset})"
            )
            table.add_row(schedule.id, schedule.timezone, rules or "-", slot)

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]slotfinder[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
