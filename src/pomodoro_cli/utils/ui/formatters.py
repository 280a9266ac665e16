"""Output formatters for session history and statistics."""

import json
from datetime import datetime
from typing import Any

import yaml
from rich.panel import Panel
from rich.table import Table

from pomodoro_cli.models.session import SessionRecord, SessionStats, SessionType

from .console import get_console

OUTPUT_FORMATS = ("table", "json", "yaml")


def format_output(data: Any, output_format: str = "table") -> None:
    """Print plain data as JSON or YAML.

    ``table`` output is rendered by the caller's dedicated formatter.
    """
    if output_format == "json":
        print(json.dumps(data, indent=2, default=str))
    elif output_format == "yaml":
        print(yaml.safe_dump(data, default_flow_style=False, sort_keys=False))
    elif isinstance(data, dict):
        format_single_item(data)
    else:
        get_console().print(data)


def format_timestamp(value: datetime | None) -> str:
    if value is None:
        return "-"
    return value.astimezone().strftime("%Y-%m-%d %H:%M")


def format_sessions_table(records: list[SessionRecord]) -> None:
    """Format session history as a table."""
    console = get_console()
    if not records:
        console.print("[yellow]No sessions found[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("Type")
    table.add_column("Started")
    table.add_column("Planned", justify="right")
    table.add_column("Actual", justify="right")
    table.add_column("Status")

    for record in records:
        session_type = "🍅 work" if record.session_type is SessionType.WORK else "☕ break"
        status = "[green]✓ completed[/green]" if record.completed else "[yellow]✗ cancelled[/yellow]"
        table.add_row(
            record.id,
            session_type,
            format_timestamp(record.started_at),
            f"{record.planned_duration_minutes}m",
            f"{record.actual_duration_minutes}m",
            status,
        )

    console.print(table)


def get_progress_bar(percentage: float) -> str:
    """Generate a progress bar string."""
    filled = int(percentage / 10)
    return "█" * filled + "░" * (10 - filled)


def get_completion_color(percentage: float) -> str:
    """Get color for completion percentage."""
    if percentage >= 80:
        return "green"
    if percentage >= 50:
        return "yellow"
    return "red"


def format_stats(stats: SessionStats) -> None:
    """Format session statistics as a panel."""
    rate = stats.completion_rate
    color = get_completion_color(rate)
    hours, minutes = divmod(stats.total_work_time, 60)

    body = (
        f"Sessions:        {stats.total_sessions}\n"
        f"Completed:       [green]{stats.completed_sessions}[/green]\n"
        f"Cancelled:       [yellow]{stats.cancelled_sessions}[/yellow]\n"
        f"Total time:      {hours}h {minutes}m\n"
        f"Average length:  {stats.average_session_length:.1f} min\n"
        f"Completion rate: [{color}]{get_progress_bar(rate)} {rate:.1f}%[/{color}]"
    )
    get_console().print(
        Panel(body, title="[bold]🍅 Pomodoro Stats[/bold]", border_style="cyan", padding=(1, 2))
    )


def format_single_item(item: dict) -> None:
    """Format a single item as key-value pairs."""
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")

    for key, value in item.items():
        formatted_key = key.replace("_", " ").title()
        if isinstance(value, bool):
            formatted_value = "✓" if value else "✗"
        elif value is None:
            formatted_value = "-"
        else:
            formatted_value = str(value)
        table.add_row(formatted_key, formatted_value)

    get_console().print(table)


def format_error(message: str) -> None:
    """Format and display an error message."""
    get_console().print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    get_console().print(f"[bold green]Success:[/bold green] {message}")


def format_warning(message: str) -> None:
    """Format and display a warning message."""
    get_console().print(f"[bold yellow]Warning:[/bold yellow] {message}")


def format_info(message: str) -> None:
    """Format and display an info message."""
    get_console().print(f"[bold blue]Info:[/bold blue] {message}")
