"""Full-screen timer UI driven by a TimerEngine."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from rich.align import Align
from rich.console import Console, Group
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from pomodoro_cli.models.session import SessionRecord, SessionType, TimerState

from .engine import TimerEngine, TimerSnapshot, format_time

BAR_WIDTH = 40


def progress_bar(progress: float, width: int = BAR_WIDTH) -> str:
    filled = int(width * min(1.0, max(0.0, progress)))
    return "▓" * filled + "░" * (width - filled)


class TimerDisplay:
    """Renders the running session and maps keys to engine operations.

    Keys: ``p`` pauses or resumes, ``c`` or ``q`` cancels. Ctrl+C cancels
    too.
    """

    def __init__(
        self,
        console: Console | None = None,
        show_progress_bar: bool = True,
        keyboard_factory: Callable[[], object] | None = None,
        screen: bool = True,
    ):
        self.console = console or Console()
        self.show_progress_bar = show_progress_bar
        self.keyboard_factory = keyboard_factory
        self.screen = screen

    def create_layout(self, snapshot: TimerSnapshot) -> Layout:
        """Create the timer layout with all components."""
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=3),
        )

        if snapshot.state is TimerState.PAUSED:
            title, color = "⏸  PAUSED", "yellow"
        elif snapshot.state is TimerState.COMPLETED:
            title, color = "✓  COMPLETED", "green"
        elif snapshot.session_type is SessionType.BREAK:
            title, color = "☕  Break", "green"
        else:
            title, color = "🍅  Focus", "cyan"

        header_text = Text(title, style=f"bold {color}", justify="center")
        layout["header"].update(Align.center(header_text, vertical="middle"))
        layout["body"].update(Align.center(self._create_body(snapshot), vertical="middle"))
        layout["footer"].update(
            Align.center(self._create_footer(snapshot.state), vertical="middle")
        )
        return layout

    def _create_body(self, snapshot: TimerSnapshot) -> Group:
        remaining = snapshot.remaining_seconds
        if snapshot.state is TimerState.PAUSED:
            timer_color = "yellow"
        elif remaining < 60:
            timer_color = "red"
        elif remaining < 300:
            timer_color = "yellow"
        else:
            timer_color = "cyan"

        components = [
            Text(format_time(remaining), style=f"bold {timer_color}", justify="center"),
            Text(""),
        ]
        if self.show_progress_bar:
            pct = int(snapshot.progress * 100)
            components.append(
                Text(f"{progress_bar(snapshot.progress)}  {pct}%", style="dim", justify="center")
            )
        return Group(*components)

    def _create_footer(self, state: TimerState) -> Text:
        if state is TimerState.PAUSED:
            hints = "Press 'p' to resume  •  'c' to cancel  •  'q' to quit"
        else:
            hints = "Press 'p' to pause  •  'c' to cancel  •  'q' to quit"
        return Text(hints, style="dim", justify="center")

    async def run(self, engine: TimerEngine, poll_interval: float = 0.1) -> str:
        """Start the engine's current session and render it until it ends.

        Returns:
            'completed', 'cancelled' or 'interrupted'
        """
        if self.keyboard_factory is None:
            from .keyboard import KeyboardHandler

            self.keyboard_factory = KeyboardHandler

        outcome: str | None = None
        previous_hook = engine.on_state_change

        def on_state_change(state: TimerState) -> None:
            nonlocal outcome
            if state is TimerState.COMPLETED:
                outcome = "completed"
            if previous_hook is not None:
                previous_hook(state)

        engine.on_state_change = on_state_change
        keyboard = self.keyboard_factory()
        engine.start()

        try:
            with Live(
                self.create_layout(engine.snapshot()),
                console=self.console,
                refresh_per_second=4,
                screen=self.screen,
            ) as live:
                while outcome is None:
                    key = keyboard.get_key()
                    if key == "p":
                        engine.start()
                    elif key in ("c", "q"):
                        engine.cancel()
                        outcome = "cancelled"
                        break

                    live.update(self.create_layout(engine.snapshot()))
                    await asyncio.sleep(poll_interval)
        except (KeyboardInterrupt, asyncio.CancelledError):
            # Ctrl+C cancels like 'c'
            engine.cancel()
            outcome = "interrupted"
        finally:
            keyboard.stop()
            engine.on_state_change = previous_hook

        return outcome


def show_finished_message(record: SessionRecord, console: Console | None = None) -> None:
    """Summarize a completed or cancelled session."""
    console = console or Console()
    kind = "Focus" if record.session_type is SessionType.WORK else "Break"

    if record.completed:
        panel = Panel(
            f"[bold green]🎉 {kind} session complete![/bold green]\n\n"
            f"Duration: {record.planned_duration_minutes} minutes",
            border_style="green",
            padding=(1, 2),
        )
    else:
        panel = Panel(
            f"[yellow]{kind} session cancelled[/yellow]\n\n"
            f"Time spent: {record.actual_duration_minutes} of "
            f"{record.planned_duration_minutes} minutes",
            border_style="yellow",
            padding=(1, 2),
        )
    console.print(panel)
