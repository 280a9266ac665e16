"""Run Pomodoro sessions in the terminal."""

import typer

from pomodoro_cli.focus.engine import TimerEngine
from pomodoro_cli.focus.ticker import AsyncioTickSource
from pomodoro_cli.focus.ui import TimerDisplay, show_finished_message
from pomodoro_cli.models.session import SessionRecord, SessionType
from pomodoro_cli.services.app_context import build_app_context
from pomodoro_cli.services.recorder import SessionRecorder
from pomodoro_cli.utils.ui.console import get_console
from pomodoro_cli.utils.ui.formatters import format_warning

from .decorators import command_wrapper

console = get_console()


@command_wrapper
async def start_timer(
    minutes: int | None = typer.Option(
        None, "--minutes", "-m", min=0, help="Custom length in minutes for the first session"
    ),
    take_break: bool = typer.Option(
        False, "--break", "-b", help="Start with a break instead of a work session"
    ),
    cycles: int = typer.Option(
        1, "--cycles", "-n", min=1, help="Number of sessions to run back to back"
    ),
    full_screen: bool = typer.Option(
        True, "--full-screen/--inline", help="Use the alternate screen for the timer"
    ),
) -> None:
    """Start a Pomodoro session.

    Keys while running: 'p' pause/resume, 'c' cancel, 'q' quit. Ctrl+C cancels.
    """
    async with build_app_context() as ctx:
        settings = ctx.settings_service.get()
        recorder = SessionRecorder(ctx.session_store, owner_provider=lambda: ctx.owner_id)
        engine = TimerEngine(AsyncioTickSource(), recorder=recorder, settings=settings)

        finished: list[SessionRecord] = []
        engine.on_session_finished = finished.append

        if take_break:
            engine.set_session_type(SessionType.BREAK)
        if minutes is not None:
            engine.set_custom_time(minutes)

        display = TimerDisplay(
            console=console,
            show_progress_bar=ctx.config.ui.show_progress_bar,
            screen=full_screen,
        )

        try:
            for _ in range(cycles):
                shown = len(finished)
                outcome = await display.run(engine)
                for record in finished[shown:]:
                    show_finished_message(record, console)
                    if record.completed and settings.enable_sound:
                        console.bell()
                if outcome != "completed":
                    break
        finally:
            results = await recorder.drain()

    if any(result.remote_failed for result in results):
        format_warning(
            "Saved locally but cloud upload failed. Run 'pomodoro sync' to retry."
        )
