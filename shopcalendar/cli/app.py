"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional, cast

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..adapters.json_repository import JsonFileShopRepository
from ..adapters.memory_repository import InMemoryShopRepository
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import ScheduleError
from ..domain.models import DaySchedule, EditMode, RangeType, Weekday, parse_date
from ..domain.selection import InputModality, MobileRangeSelector
from ..domain.slot_generator import generate_slots
from ..domain.time_utils import format_time, parse_time, period_of_day
from ..services.schedule_editor import ScheduleEditorService

app = typer.Typer(
    name="shopcalendar",
    help="Manage shop opening hours, special dates and bookable slots",
    add_completion=False
)

console = Console()

logger = logging.getLogger(__name__)

TYPE_STYLES = {
    RangeType.HOLIDAY: "bold red",
    RangeType.SPECIAL: "bold yellow",
    RangeType.PROMO: "bold green",
}

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
ShopOption = Annotated[Optional[str], typer.Option("--shop", "-s", help="Shop id. Defaults to shop_id from the config.")]
MockOption = Annotated[bool, typer.Option("--mock", help="Use demo data in memory; nothing is written to disk.")]


def _parse_weekday(value: str) -> Weekday:
    try:
        return Weekday.parse(value)
    except ValueError as e:
        raise typer.BadParameter(str(e))


DayArgument = Annotated[Weekday, typer.Argument(parser=_parse_weekday, help="Weekday, e.g. Monday or mon")]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
):
    """
    Shop availability editor.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )


def _load_config(config_file: Optional[Path]) -> tuple[AppConfig, Path]:
    """Load the config; without an explicit file a missing default is fine."""
    config_path = config_file or get_default_config_path()
    if config_file is None and not config_path.exists():
        logger.debug("No config file at %s, using defaults", config_path)
        return AppConfig(), config_path
    return AppConfig.load_from_yaml(config_path), config_path


def _mock_repository(shop_id: str) -> InMemoryShopRepository:
    """Repository pre-filled with a weekday 09:00-17:00 demo shop."""
    weekday_hours = {"open": "09:00", "close": "17:00", "slotDuration": 30}
    return InMemoryShopRepository({
        shop_id: {
            "availability": {
                day.value: dict(weekday_hours) for day in Weekday if not day.is_weekend
            },
            "specialDates": {},
        }
    })


def _open_session(
    config_file: Optional[Path],
    shop: Optional[str],
    mock: bool,
    modality: InputModality = InputModality.DESKTOP,
) -> tuple[ScheduleEditorService, AppConfig]:
    config, config_path = _load_config(config_file)
    shop_id = shop or config.shop_id

    if mock:
        console.print("[yellow]⚠  MOCK MODE: using demo data, changes are not stored[/yellow]")
        repository = _mock_repository(shop_id)
    else:
        repository = JsonFileShopRepository(config.resolve_data_dir(config_path))

    service = ScheduleEditorService(
        repository,
        shop_id,
        modality=modality,
        presets=config.get_presets(),
        standard_hours=(
            parse_time(config.defaults.standard_open),
            parse_time(config.defaults.standard_close),
        ),
    )
    asyncio.run(service.load())
    return service, config


def _save(service: ScheduleEditorService) -> None:
    asyncio.run(service.save())
    console.print(f"[green]✓ Saved shop '{service.shop_id}'[/green]")


def _fail(error: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {escape(str(error))}")
    raise typer.Exit(1)


def _print_weekly_hours(service: ScheduleEditorService) -> None:
    table = Table(title="Weekly opening hours", show_header=True, header_style="bold cyan")
    table.add_column("Day", style="bold")
    table.add_column("Hours")
    table.add_column("Slot", justify="right")
    table.add_column("Slots", justify="right")
    table.add_column("Period", style="dim")

    for day, schedule in service.availability.items():
        if schedule is None:
            table.add_row(day.value, "[dim]closed[/dim]", "", "", "")
            continue
        hours = f"{format_time(schedule.open)} - {format_time(schedule.close)}"
        if not schedule.is_well_ordered():
            hours = f"[red]{hours}[/red]"
        table.add_row(
            day.value,
            hours,
            f"{schedule.slot_duration_minutes} min",
            str(len(generate_slots(schedule, day))),
            period_of_day(schedule.open).value,
        )

    console.print(table)


def _print_special_dates(service: ScheduleEditorService) -> None:
    records = service.special_ranges()
    if not records:
        console.print("[dim]No special dates.[/dim]")
        return

    table = Table(title="Special dates", show_header=True, header_style="bold cyan")
    table.add_column("From")
    table.add_column("To")
    table.add_column("Days", justify="right")
    table.add_column("Type")

    for record in records:
        table.add_row(
            record.start_date.to_date_string(),
            record.end_date.to_date_string(),
            str(record.date_range.days()),
            f"[{TYPE_STYLES[record.type]}]{record.type.value}[/{TYPE_STYLES[record.type]}]",
        )

    console.print(table)


def _print_summary(service: ScheduleEditorService) -> None:
    summary = service.summary()
    parts = ", ".join(f"{range_type.value}: {summary.count(range_type)}" for range_type in RangeType)
    console.print(f"[bold cyan]📊 Special dates:[/bold cyan] {summary.total} ({parts})")


@app.command()
def show(
    config_file: ConfigOption = None,
    shop: ShopOption = None,
    mock: MockOption = False,
):
    """
    Show weekly hours, special dates and their summary.
    """
    try:
        service, _ = _open_session(config_file, shop, mock)
    except (FileNotFoundError, ValueError, ScheduleError) as e:
        _fail(e)

    console.print()
    _print_weekly_hours(service)
    console.print()
    _print_special_dates(service)
    _print_summary(service)
    console.print()


@app.command("set-day")
def set_day(
    day: DayArgument,
    open_time: Annotated[str, typer.Argument(help="Opening time (HH:MM)")],
    close_time: Annotated[str, typer.Argument(help="Closing time (HH:MM)")],
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Slot duration in minutes (15, 30, 45, 60)")] = None,
    config_file: ConfigOption = None,
    shop: ShopOption = None,
    mock: MockOption = False,
):
    """
    Set the opening hours of a day.
    """
    try:
        service, config = _open_session(config_file, shop, mock)
        if duration is None:
            current = service.availability.get(day)
            duration = current.slot_duration_minutes if current else config.defaults.slot_duration_minutes
        schedule = DaySchedule.from_strings(open_time, close_time, duration)
        if not schedule.is_well_ordered():
            console.print(f"[yellow]Warning: {day.value} closes before it opens[/yellow]")
        service.set_day(day, schedule)
        _save(service)
    except (FileNotFoundError, ValueError, ScheduleError) as e:
        _fail(e)


@app.command("close-day")
def close_day(
    day: DayArgument,
    config_file: ConfigOption = None,
    shop: ShopOption = None,
    mock: MockOption = False,
):
    """
    Mark a day as closed.
    """
    try:
        service, _ = _open_session(config_file, shop, mock)
        service.set_day(day, None)
        _save(service)
    except (FileNotFoundError, ValueError, ScheduleError) as e:
        _fail(e)


@app.command()
def preset(
    day: DayArgument,
    name: Annotated[str, typer.Argument(help="Preset name, see the 'presets' command")],
    config_file: ConfigOption = None,
    shop: ShopOption = None,
    mock: MockOption = False,
):
    """
    Apply a quick preset to a day, keeping its slot duration.
    """
    try:
        service, _ = _open_session(config_file, shop, mock)
        schedule = service.apply_preset(day, name)
        console.print(f"{day.value}: {schedule}")
        _save(service)
    except KeyError as e:
        _fail(ValueError(e.args[0]))
    except (FileNotFoundError, ValueError, ScheduleError) as e:
        _fail(e)


@app.command()
def presets(config_file: ConfigOption = None):
    """
    List the configured quick presets.
    """
    try:
        config, _ = _load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        _fail(e)

    table = Table(title="Presets", show_header=True, header_style="bold cyan")
    table.add_column("Name", style="bold yellow")
    table.add_column("Hours")
    for name, time_preset in config.get_presets().items():
        table.add_row(name, f"{format_time(time_preset.open)} - {format_time(time_preset.close)}")

    console.print()
    console.print(table)
    console.print()


@app.command()
def duration(
    day: DayArgument,
    minutes: Annotated[int, typer.Argument(help="Slot duration (15, 30, 45, 60)")],
    config_file: ConfigOption = None,
    shop: ShopOption = None,
    mock: MockOption = False,
):
    """
    Change the slot duration of an open day.
    """
    try:
        service, _ = _open_session(config_file, shop, mock)
        service.set_slot_duration(day, minutes)
        _save(service)
    except (FileNotFoundError, ValueError, ScheduleError) as e:
        _fail(e)


@app.command()
def copy(
    day: DayArgument,
    config_file: ConfigOption = None,
    shop: ShopOption = None,
    mock: MockOption = False,
):
    """
    Copy a day's opening hours to the whole week.
    """
    try:
        service, _ = _open_session(config_file, shop, mock)
        if not service.availability.is_open(day):
            console.print(f"[yellow]{day.value} is closed, nothing to copy.[/yellow]")
            return
        service.copy_to_all_days(day)
        _save(service)
    except (FileNotFoundError, ValueError, ScheduleError) as e:
        _fail(e)


@app.command("standard-hours")
def standard_hours(
    config_file: ConfigOption = None,
    shop: ShopOption = None,
    mock: MockOption = False,
):
    """
    Open Monday to Friday with the standard hours, close the weekend.
    """
    try:
        service, _ = _open_session(config_file, shop, mock)
        service.apply_standard_business_hours()
        _save(service)
    except (FileNotFoundError, ValueError, ScheduleError) as e:
        _fail(e)


@app.command("clear-hours")
def clear_hours(
    config_file: ConfigOption = None,
    shop: ShopOption = None,
    mock: MockOption = False,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation.")] = False,
):
    """
    Close every day of the week.
    """
    if not yes:
        typer.confirm("Clear all opening hours?", abort=True)
    try:
        service, _ = _open_session(config_file, shop, mock)
        service.clear_all()
        _save(service)
    except (FileNotFoundError, ValueError, ScheduleError) as e:
        _fail(e)


@app.command("add-range")
def add_range(
    start: Annotated[str, typer.Argument(help="First day (YYYY-MM-DD)")],
    end: Annotated[str, typer.Argument(help="Last day (YYYY-MM-DD); order does not matter")],
    range_type: Annotated[RangeType, typer.Option("--type", "-t", help="Tag of the range")] = RangeType.HOLIDAY,
    config_file: ConfigOption = None,
    shop: ShopOption = None,
    mock: MockOption = False,
):
    """
    Add a special date range (holiday, special or promo).
    """
    try:
        service, _ = _open_session(config_file, shop, mock, modality=InputModality.MOBILE)
        service.set_edit_mode(EditMode(range_type.value))

        selector = cast(MobileRangeSelector, service.controller)
        selector.handle_tap(parse_date(start))
        selector.handle_tap(parse_date(end))
        record = selector.confirm()

        if record is None:
            console.print(
                "[yellow]Nothing changed: the range starts in the past "
                "or overlaps an existing special date.[/yellow]"
            )
            return

        console.print(f"[green]✓ Added {escape(str(record))}[/green]")
        _save(service)
    except (FileNotFoundError, ValueError, ScheduleError) as e:
        _fail(e)


@app.command("remove-range")
def remove_range(
    start: Annotated[str, typer.Argument(help="First day of the range (YYYY-MM-DD)")],
    config_file: ConfigOption = None,
    shop: ShopOption = None,
    mock: MockOption = False,
):
    """
    Remove the special date range starting on a day.
    """
    try:
        service, _ = _open_session(config_file, shop, mock)
        if not service.remove_range(parse_date(start)):
            console.print(f"[yellow]No special date range starts on {start}.[/yellow]")
            return
        _save(service)
    except (FileNotFoundError, ValueError, ScheduleError) as e:
        _fail(e)


@app.command()
def slots(
    date: Annotated[str, typer.Argument(help="Day to list slots for (YYYY-MM-DD)")],
    include_holidays: Annotated[bool, typer.Option("--include-holidays", help="Do not hide slots on holidays.")] = False,
    config_file: ConfigOption = None,
    shop: ShopOption = None,
    mock: MockOption = False,
):
    """
    List the bookable slots of a day.
    """
    try:
        service, _ = _open_session(config_file, shop, mock)
        day = parse_date(date)
    except (FileNotFoundError, ValueError, ScheduleError) as e:
        _fail(e)

    found = service.get_slots_for(day, exclude_holidays=not include_holidays)

    console.print()
    if not found:
        console.print(f"[yellow]⚠ No bookable slots on {day.to_date_string()}.[/yellow]")
    else:
        console.print(f"[bold green]✓ {len(found)} slot(s) on {day.to_date_string()}:[/bold green]\n")
        for slot in found:
            console.print(f"  {slot.format_display()}")
    console.print()


@app.command()
def summary(
    config_file: ConfigOption = None,
    shop: ShopOption = None,
    mock: MockOption = False,
):
    """
    Count special date ranges per type.
    """
    try:
        service, _ = _open_session(config_file, shop, mock)
    except (FileNotFoundError, ValueError, ScheduleError) as e:
        _fail(e)

    _print_summary(service)


if __name__ == "__main__":
    app()
