"""Main entry point for Pomodoro CLI."""

import typer

from pomodoro_cli import __version__
from pomodoro_cli.commands import auth, config, history, settings, timer
from pomodoro_cli.utils.logger import setup_logging
from pomodoro_cli.utils.ui.console import get_console

app = typer.Typer(
    name="pomodoro",
    help="Pomodoro timer with local history and optional cloud sync",
    no_args_is_help=True,
)

console = get_console()


@app.callback()
def main_callback() -> None:
    setup_logging()


app.command("start")(timer.start_timer)
app.command("history")(history.list_history)
app.command("stats")(history.show_stats)
app.command("edit")(history.edit_session)
app.command("delete")(history.delete_session)
app.command("clear")(history.clear_history)
app.command("sync")(history.sync_sessions)

app.add_typer(settings.app, name="settings", help="Timer settings")
app.add_typer(auth.app, name="auth", help="Authentication commands")
app.add_typer(config.app, name="config", help="Configuration management")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]Pomodoro CLI[/bold] version [cyan]{__version__}[/cyan]")


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
