"""Decorators for command functions."""

import asyncio
import functools
import inspect
import time
import traceback
from collections.abc import Callable

import typer

from pomodoro_cli.exceptions import (
    AmbiguousSessionIdError,
    PomodoroError,
    SessionNotFoundError,
    StorageError,
    TimerError,
)
from pomodoro_cli.utils import exit_codes
from pomodoro_cli.utils.logger import get_logger
from pomodoro_cli.utils.ui.formatters import format_error


class AppError(Exception):
    """Custom application error with exit code."""

    def __init__(self, message: str, exit_code: int = exit_codes.ERROR_GENERAL):
        super().__init__(message)
        self.exit_code = exit_code


def exit_code_for(error: PomodoroError) -> int:
    """Map a domain error to a semantic exit code."""
    if isinstance(error, (SessionNotFoundError, AmbiguousSessionIdError)):
        return exit_codes.ERROR_NOT_FOUND
    if isinstance(error, TimerError):
        return exit_codes.ERROR_INVALID_ARGS
    if isinstance(error, StorageError):
        return exit_codes.ERROR_STORAGE
    return exit_codes.ERROR_GENERAL


def _require_auth() -> None:
    """Require a signed-in user."""
    from pomodoro_cli.services.app_context import build_app_context

    if build_app_context().owner_id is None:
        raise AppError(
            "Not signed in. Use 'pomodoro auth login' first.",
            exit_code=exit_codes.ERROR_AUTH_FAILURE,
        )


def command_wrapper(_func: Callable | None = None, *, auth_required: bool = False):
    """Decorator to wrap command functions with common functionality."""

    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger()
            cmd = func.__name__
            start = time.monotonic()
            logger.info("command started: %s", cmd)
            try:
                if auth_required:
                    _require_auth()

                if inspect.iscoroutinefunction(func):
                    result = asyncio.run(func(*args, **kwargs))
                else:
                    result = func(*args, **kwargs)

                elapsed = time.monotonic() - start
                logger.info("command completed: %s (%.3fs)", cmd, elapsed)
                return result

            except AppError as e:
                elapsed = time.monotonic() - start
                logger.error("command failed: %s (%.3fs) - %s", cmd, elapsed, str(e))
                format_error(str(e))
                raise typer.Exit(code=e.exit_code) from e

            except PomodoroError as e:
                elapsed = time.monotonic() - start
                logger.error("command failed: %s (%.3fs) - %s", cmd, elapsed, str(e))
                format_error(str(e))
                raise typer.Exit(code=exit_code_for(e)) from e

            except typer.Exit:
                raise

            except Exception as e:
                elapsed = time.monotonic() - start
                logger.error(
                    "command failed: %s (%.3fs) - %s\n%s",
                    cmd,
                    elapsed,
                    str(e),
                    traceback.format_exc(),
                )
                format_error(f"An unexpected error occurred: {str(e)}")
                raise typer.Exit(code=1) from e

        return wrapper

    if _func is None:
        return decorator
    return decorator(_func)
