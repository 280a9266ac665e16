"""Configuration management commands."""

import typer

from pomodoro_cli.services.config_service import get_config_service
from pomodoro_cli.utils import exit_codes
from pomodoro_cli.utils.ui.console import get_console
from pomodoro_cli.utils.ui.formatters import format_info, format_output, format_success

from .decorators import AppError, command_wrapper

app = typer.Typer(help="Configuration management commands", no_args_is_help=True)
console = get_console()


@app.command("show")
@command_wrapper
def show_config(
    output: str = typer.Option("json", "--output", "-o", help="Output format: json, yaml"),
) -> None:
    """Show the current configuration."""
    format_output(get_config_service().config.model_dump(), output)


@app.command("get")
@command_wrapper
def get_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., api.endpoint)"),
) -> None:
    """Get a configuration value."""
    try:
        value = get_config_service().get_value(key)
    except KeyError as e:
        raise AppError(f"Configuration key '{key}' not found", exit_code=exit_codes.ERROR_NOT_FOUND) from e
    console.print(value)


@app.command("set")
@command_wrapper
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., storage.mode)"),
    value: str = typer.Argument(..., help="Configuration value"),
) -> None:
    """Set a configuration value."""
    parsed_value: str | None = None if value.lower() in ("null", "none") else value
    try:
        get_config_service().set_value(key, parsed_value)
    except KeyError as e:
        raise AppError(f"Configuration key '{key}' not found", exit_code=exit_codes.ERROR_NOT_FOUND) from e
    except ValueError as e:
        raise AppError(str(e), exit_code=exit_codes.ERROR_INVALID_ARGS) from e
    format_success(f"Set {key} = {value}")


@app.command("reset")
@command_wrapper
def reset_config(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration to defaults."""
    if not yes and not typer.confirm("Reset configuration to defaults?"):
        format_info("Cancelled")
        raise typer.Exit(0)
    get_config_service().reset_config()
    format_success("Configuration reset to defaults")
