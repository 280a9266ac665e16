"""Timer settings commands."""

import typer
from pydantic import ValidationError

from pomodoro_cli.services.app_context import build_app_context
from pomodoro_cli.utils import exit_codes
from pomodoro_cli.utils.ui.formatters import format_output, format_success

from .decorators import AppError, command_wrapper

app = typer.Typer(help="Timer settings", no_args_is_help=True)


@app.command("show")
@command_wrapper
async def show_settings(
    output: str = typer.Option("table", "--output", "-o", help="Output format: table, json, yaml"),
) -> None:
    """Show the current timer settings."""
    async with build_app_context() as ctx:
        settings = ctx.settings_service.get()
    format_output(settings.model_dump(), output)


@app.command("set")
@command_wrapper
async def set_settings(
    work: int | None = typer.Option(None, "--work", help="Work session length in minutes"),
    break_: int | None = typer.Option(None, "--break", help="Break length in minutes"),
    notifications: bool | None = typer.Option(
        None, "--notifications/--no-notifications", help="Desktop notifications"
    ),
    vibration: bool | None = typer.Option(None, "--vibration/--no-vibration", help="Vibration"),
    sound: bool | None = typer.Option(None, "--sound/--no-sound", help="Terminal bell on completion"),
) -> None:
    """Change timer settings. Unspecified values are kept."""
    changes = {
        "work_duration_minutes": work,
        "break_duration_minutes": break_,
        "enable_notifications": notifications,
        "enable_vibration": vibration,
        "enable_sound": sound,
    }
    if all(v is None for v in changes.values()):
        raise AppError("Nothing to update", exit_code=exit_codes.ERROR_INVALID_ARGS)

    async with build_app_context() as ctx:
        try:
            settings = ctx.settings_service.update(**changes)
        except ValidationError as e:
            raise AppError(
                f"Invalid setting: {e.errors()[0]['msg']}",
                exit_code=exit_codes.ERROR_INVALID_ARGS,
            ) from e

    format_success(
        f"Settings saved: work {settings.work_duration_minutes}m, "
        f"break {settings.break_duration_minutes}m"
    )
