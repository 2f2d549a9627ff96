# TIMETRACK/display.py
import json
import threading
from datetime import datetime
from typing import Optional, Union

from rich import box
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from worklog.TIMETRACK.clock import Clock, clamp_seconds, local_now
from worklog.TIMETRACK.model import Idle, Report, Tracking


def format_duration(total_seconds: int) -> str:
    """Render a duration as HH:MM:SS."""
    safe_seconds = max(0, int(total_seconds))
    hours, remainder = divmod(safe_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02}:{minutes:02}:{seconds:02}"


def format_hours(total_seconds: int) -> str:
    return f"{max(0, total_seconds) / 3600:.2f}"


def render_status(status: Union[Idle, Tracking]) -> Text:
    if isinstance(status, Tracking):
        elapsed = int(status.elapsed.total_seconds())
        text = Text("Currently working on: ")
        text.append(status.name, style="bold cyan")
        text.append(f" ({format_duration(elapsed)}, since {status.start.strftime('%H:%M:%S')})")
        return text
    return Text("No active session.", style="dim")


def render_report(report: Report) -> Table:
    table = Table(
        title=f"[bold]{report.period.value.upper()} report[/bold] - {report.label}",
        show_header=True,
        header_style="bold magenta",
        box=box.ROUNDED,
    )
    table.add_column("Tag", style="cyan")
    table.add_column("Duration", justify="right")
    table.add_column("Hours", justify="right")

    for row in report.rows:
        table.add_row(row.name, format_duration(row.seconds), format_hours(row.seconds))

    table.add_section()
    table.add_row(
        Text("Total", style="bold"),
        format_duration(report.total_seconds),
        format_hours(report.total_seconds),
        style="bold",
    )
    return table


def print_report(console: Console, report: Report, output_format: str = "table") -> None:
    if output_format == "json":
        console.print_json(json.dumps(report.to_dict()))
        return

    if not report.rows:
        console.print(f"No sessions for {report.period.value} period ({report.label}).")
        return
    console.print(render_report(report))


class LiveTimer:
    """
    Read-only running clock for the active session.

    Wakes every ``interval`` seconds, redraws the elapsed time, and returns as
    soon as ``cancel`` is set. It never touches the log, so another process can
    stop the session while the timer is on screen.
    """

    def __init__(self, name: str, start: datetime, clock: Clock = local_now,
                 interval: float = 1.0, console: Optional[Console] = None):
        self.name = name
        self.start = start
        self.clock = clock
        self.interval = interval
        self.console = console or Console()

    def render(self) -> Panel:
        elapsed = clamp_seconds(self.clock() - self.start)
        body = (
            f"⏱  Time elapsed: [bold green]{format_duration(elapsed)}[/bold green]\n"
            "[dim]Press Ctrl+C to close the display (the activity keeps running)[/dim]"
        )
        return Panel.fit(body, title=f"🚀 {self.name}")

    def run(self, cancel: Optional[threading.Event] = None) -> None:
        cancel = cancel or threading.Event()
        with Live(self.render(), console=self.console, refresh_per_second=4) as live:
            while not cancel.wait(self.interval):
                live.update(self.render())
