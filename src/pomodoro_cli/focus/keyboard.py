"""Non-blocking single-key input for timer controls."""

from __future__ import annotations

import select
import sys
import termios
import tty


class KeyboardHandler:
    """Reads single keypresses from a terminal in cbreak mode.

    When stdin is not a terminal (pipes, test runners) no keys are ever
    reported.
    """

    def __init__(self):
        self.fd: int | None = None
        self.old_settings = None
        self._setup()

    def _setup(self) -> None:
        try:
            fd = sys.stdin.fileno()
            if not sys.stdin.isatty():
                return
            self.old_settings = termios.tcgetattr(fd)
            tty.setcbreak(fd)
            self.fd = fd
        except (OSError, ValueError, termios.error):
            self.fd = None

    def get_key(self) -> str | None:
        """Return the pressed key (lowercased) or None if nothing is waiting."""
        if self.fd is None:
            return None
        if select.select([sys.stdin], [], [], 0)[0]:
            return sys.stdin.read(1).lower()
        return None

    def stop(self) -> None:
        """Restore terminal settings."""
        if self.fd is not None and self.old_settings:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self.old_settings)
        self.fd = None
