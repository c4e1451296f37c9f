"""
interfaces/cli.py — Terminal Rendering

Turns a Schedule (or a scheduling failure) into something a person reads.
Uses rich for tables and panels; `--json` output bypasses rich entirely.
"""

from __future__ import annotations

import json
from datetime import datetime, timedelta

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from chronoplan.exceptions import SchedulingError
from chronoplan.scheduling.types import Schedule, SchedulingStrategy

_TIME_FMT = "%a %Y-%m-%d %H:%M"


def format_duration(duration: timedelta) -> str:
    total_minutes = int(duration.total_seconds() // 60)
    days, rest = divmod(total_minutes, 24 * 60)
    hours, minutes = divmod(rest, 60)
    parts = []
    if days:
        parts.append(f"{days}d")
    if hours:
        parts.append(f"{hours}h")
    if minutes or not parts:
        parts.append(f"{minutes}m")
    return " ".join(parts)


def _fmt(when: datetime) -> str:
    return when.strftime(_TIME_FMT)


def build_schedule_table(schedule: Schedule, strategy: SchedulingStrategy) -> Table:
    table = Table(
        title=f"Schedule ({strategy.value} first)",
        box=box.ROUNDED,
        show_lines=False,
    )
    table.add_column("#", justify="right", style="dim")
    table.add_column("Start", style="bold cyan")
    table.add_column("End", style="cyan")
    table.add_column("Duration", justify="right")
    table.add_column("Deadline", style="magenta")
    table.add_column("Imp.", justify="right")
    table.add_column("Task")

    for i, item in enumerate(schedule, start=1):
        table.add_row(
            str(i),
            _fmt(item.when),
            _fmt(item.end),
            format_duration(item.task.duration),
            _fmt(item.task.deadline),
            str(item.task.importance),
            item.task.content,
        )
    return table


def render_schedule(console: Console, schedule: Schedule, strategy: SchedulingStrategy) -> None:
    if not schedule:
        console.print("[dim]Nothing to schedule.[/dim]")
        return
    console.print(build_schedule_table(schedule, strategy))


def render_schedule_json(schedule: Schedule) -> str:
    return json.dumps(schedule.to_records(), indent=2)


def render_failure(console: Console, exc: SchedulingError) -> None:
    if exc.is_user_actionable:
        console.print(Panel(exc.failure.message, title="Cannot schedule", border_style="yellow"))
    else:
        console.print(
            Panel(
                f"{exc.failure.message}\n\nThis is a bug. Please report it together "
                f"with the task file you used.",
                title="Internal error",
                border_style="red",
            )
        )
