# cli.py
import logging
from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from typing import Optional

import dateparser
import typer
from rich.console import Console
from rich.markup import escape

from worklog.config import Config, load_config
from worklog.logger import setup_logging
from worklog.notify import notify
from worklog.TIMETRACK.clock import local_now
from worklog.TIMETRACK.display import LiveTimer, format_duration, print_report, render_status
from worklog.TIMETRACK.errors import WorklogError
from worklog.TIMETRACK.model import Period
from worklog.TIMETRACK.report import generate
from worklog.TIMETRACK.store import LogFile
from worklog.TIMETRACK.tracker import Tracker

__version__ = "0.1.0"

app = typer.Typer(help="Simple work-hours logger.", add_completion=False)
console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)


class OutputFormat(str, Enum):
    table = "table"
    json = "json"


def fail(message: str):
    err_console.print(f"[bold red]Error:[/bold red] {escape(message)}", soft_wrap=True)
    raise typer.Exit(code=1)


@contextmanager
def errors_to_exit():
    try:
        yield
    except WorklogError as exc:
        logger.debug("Command failed", exc_info=True)
        fail(str(exc))


@contextmanager
def open_tracker(config: Config):
    """Lock the log, load it, hand out a Tracker, and save only if the body succeeds."""
    log_file = LogFile(config.log_file)
    with log_file.locked():
        store = log_file.load()
        yield Tracker(store)
        log_file.save(store)


def parse_time_arg(time_str: Optional[str]) -> Optional[datetime]:
    if not time_str:
        return None
    try:
        # Try ISO format first for explicit parsing
        parsed = datetime.fromisoformat(time_str)
    except ValueError:
        # Then try natural language parsing
        parsed = dateparser.parse(time_str)
    if parsed is None:
        fail(f"Could not parse time: '{time_str}'")
    return parsed.astimezone().replace(microsecond=0)


def _version_callback(value: bool):
    if value:
        console.print(f"worklog {__version__}")
        raise typer.Exit()


# --- Commands ---

@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
    version: bool = typer.Option(False, "--version", callback=_version_callback, is_eager=True,
                                 help="Show the version and exit."),
):
    """
    Worklog: track what you are working on and report where the time went.
    """
    try:
        config = load_config()
    except ValueError as exc:
        fail(str(exc))
    setup_logging(logging.DEBUG if verbose else config.log_level)
    ctx.obj = config


@app.command()
def start(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name (tag) of the activity."),
    detach: bool = typer.Option(False, "--detach", "-d", help="Don't show the running timer."),
):
    """Start logging a new activity tagged NAME."""
    config: Config = ctx.obj
    with errors_to_exit():
        with open_tracker(config) as tracker:
            session = tracker.start(name)

    console.print(f"🚀 Started: [bold cyan]{escape(session.name)}[/bold cyan]")
    notify("Worklog", f"Started: {session.name}", enabled=config.notify)

    if detach:
        return

    timer = LiveTimer(session.name, session.start, interval=config.refresh_seconds, console=console)
    try:
        timer.run()
    except KeyboardInterrupt:
        console.print(f"Display closed. '{escape(session.name)}' is still running.")


@app.command()
def stop(ctx: typer.Context):
    """Stop the currently running activity."""
    config: Config = ctx.obj
    with errors_to_exit():
        with open_tracker(config) as tracker:
            session = tracker.stop()

    elapsed = format_duration(session.seconds(session.end))
    console.print(f"Stopped [bold cyan]{escape(session.name)}[/bold cyan] after {elapsed}.")
    notify("Worklog", f"Stopped: {session.name} ({elapsed})", enabled=config.notify)


@app.command()
def status(ctx: typer.Context):
    """Show the current activity status."""
    config: Config = ctx.obj
    with errors_to_exit():
        store = LogFile(config.log_file).load()
    console.print(render_status(Tracker(store).status()))


@app.command()
def reset(ctx: typer.Context):
    """Reset (discard) the current activity without logging it."""
    config: Config = ctx.obj
    with errors_to_exit():
        with open_tracker(config) as tracker:
            discarded = tracker.reset()

    if discarded:
        console.print(f"Reset session: [bold cyan]{escape(discarded.name)}[/bold cyan]")
    else:
        console.print("No active session to reset.")


@app.command("log")
def log_hours(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name (tag) of the activity."),
    hours: float = typer.Argument(..., help="Hours spent, e.g. 2.5"),
    at: Optional[str] = typer.Option(None, "--at", "-a",
                                     help="When the work ended (e.g., '2 hours ago', '2024-01-01 17:00')."),
):
    """Log custom hours for an activity (e.g. "worklog log mytask 2.5")."""
    config: Config = ctx.obj
    end = parse_time_arg(at)
    with errors_to_exit():
        with open_tracker(config) as tracker:
            session = tracker.log(name, hours, end=end)

    console.print(f"Logged {hours:.2f} hours for '{escape(session.name)}'.")


@app.command()
def report(
    ctx: typer.Context,
    period: Period = typer.Argument(Period.DAILY, case_sensitive=False, help="daily, weekly or monthly."),
    date: Optional[str] = typer.Option(None, "--date", help="Report on the period containing this date (e.g., 'last monday')."),
    output_format: OutputFormat = typer.Option(OutputFormat.table, "--format", "-f", help="Output format: table or json."),
):
    """Show a report of tracked time - default: daily."""
    config: Config = ctx.obj
    now = local_now()
    reference = parse_time_arg(date) or now
    with errors_to_exit():
        store = LogFile(config.log_file).load()
    print_report(console, generate(store, period, reference, now=now), output_format.value)


@app.command()
def path(ctx: typer.Context):
    """Show the location of the log file."""
    config: Config = ctx.obj
    console.print(str(config.log_file), soft_wrap=True, markup=False, highlight=False)


if __name__ == "__main__":
    app()
