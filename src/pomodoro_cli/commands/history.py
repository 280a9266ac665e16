"""Session history commands: list, stats, edit, delete, clear and sync."""

import typer
from pydantic import ValidationError

from pomodoro_cli.models.session import SessionRecord, SessionType
from pomodoro_cli.services.app_context import build_app_context
from pomodoro_cli.services.session_store import WriteResult
from pomodoro_cli.utils import exit_codes
from pomodoro_cli.utils.session_helpers import resolve_session
from pomodoro_cli.utils.ui.console import get_console
from pomodoro_cli.utils.ui.formatters import (
    OUTPUT_FORMATS,
    format_info,
    format_output,
    format_sessions_table,
    format_stats,
    format_success,
    format_warning,
)

from .decorators import AppError, command_wrapper

console = get_console()


def _check_output_format(output: str) -> None:
    if output not in OUTPUT_FORMATS:
        raise AppError(
            f"Unknown output format '{output}'. Choose from: {', '.join(OUTPUT_FORMATS)}",
            exit_code=exit_codes.ERROR_INVALID_ARGS,
        )


def _warn_if_remote_failed(result: WriteResult) -> None:
    if result.remote_failed:
        format_warning("Saved locally but cloud update failed. Run 'pomodoro sync' to retry.")


@command_wrapper
async def list_history(
    completed_only: bool = typer.Option(False, "--completed", help="Only completed sessions"),
    cancelled_only: bool = typer.Option(False, "--cancelled", help="Only cancelled sessions"),
    limit: int | None = typer.Option(None, "--limit", "-n", min=1, help="Show at most N sessions"),
    output: str = typer.Option("table", "--output", "-o", help="Output format: table, json, yaml"),
) -> None:
    """Show session history, newest first."""
    _check_output_format(output)
    if completed_only and cancelled_only:
        raise AppError(
            "--completed and --cancelled cannot be combined",
            exit_code=exit_codes.ERROR_INVALID_ARGS,
        )

    async with build_app_context() as ctx:
        store = ctx.session_store
        owner_id = ctx.owner_id
        if completed_only:
            records = await store.list_completed(owner_id)
        elif cancelled_only:
            records = await store.list_cancelled(owner_id)
        else:
            records = await store.list_all(owner_id)

    if limit is not None:
        records = records[:limit]

    if output == "table":
        format_sessions_table(records)
    else:
        format_output([r.to_json_dict() for r in records], output)


@command_wrapper
async def show_stats(
    output: str = typer.Option("table", "--output", "-o", help="Output format: table, json, yaml"),
) -> None:
    """Show totals, average session length and completion rate."""
    _check_output_format(output)
    async with build_app_context() as ctx:
        stats = await ctx.session_store.stats(ctx.owner_id)

    if output == "table":
        format_stats(stats)
    else:
        format_output(stats.model_dump(), output)


@command_wrapper
async def edit_session(
    session_id: str = typer.Argument(..., help="Session ID or unique prefix"),
    duration: int | None = typer.Option(None, "--duration", min=0, help="Planned minutes"),
    actual: int | None = typer.Option(None, "--actual", min=0, help="Actual minutes"),
    session_type: SessionType | None = typer.Option(
        None, "--type", case_sensitive=False, help="WORK or BREAK"
    ),
    completed: bool | None = typer.Option(
        None, "--completed/--cancelled", help="Mark as completed or cancelled"
    ),
) -> None:
    """Correct a recorded session."""
    changes = {
        "planned_duration_minutes": duration,
        "actual_duration_minutes": actual,
        "session_type": session_type,
        "completed": completed,
    }
    changes = {k: v for k, v in changes.items() if v is not None}
    if not changes:
        raise AppError("Nothing to update", exit_code=exit_codes.ERROR_INVALID_ARGS)

    async with build_app_context() as ctx:
        owner_id = ctx.owner_id
        record = await resolve_session(ctx.session_store, session_id, owner_id)
        try:
            updated = SessionRecord.model_validate({**record.model_dump(), **changes})
        except ValidationError as e:
            raise AppError(
                f"Invalid session: {e.errors()[0]['msg']}",
                exit_code=exit_codes.ERROR_INVALID_ARGS,
            ) from e
        result = await ctx.session_store.update(updated, owner_id)

    format_success(f"Session {result.session_id} updated")
    _warn_if_remote_failed(result)


@command_wrapper
async def delete_session(
    session_id: str = typer.Argument(..., help="Session ID or unique prefix"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a session from history."""
    async with build_app_context() as ctx:
        owner_id = ctx.owner_id
        record = await resolve_session(ctx.session_store, session_id, owner_id)
        if not yes and not typer.confirm(f"Delete session {record.id}?"):
            format_info("Cancelled")
            raise typer.Exit(0)
        result = await ctx.session_store.delete(record.id, owner_id)

    format_success(f"Session {result.session_id} deleted")
    _warn_if_remote_failed(result)


@command_wrapper
async def clear_history(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete the whole session history."""
    if not yes and not typer.confirm("Delete ALL sessions? This cannot be undone."):
        format_info("Cancelled")
        raise typer.Exit(0)

    async with build_app_context() as ctx:
        result = await ctx.session_store.clear(ctx.owner_id)

    format_success("Session history cleared")
    _warn_if_remote_failed(result)


@command_wrapper(auth_required=True)
async def sync_sessions() -> None:
    """Upload local sessions missing from the cloud."""
    async with build_app_context() as ctx:
        if ctx.session_store.storage_type == "local":
            format_info(
                "Storage mode is 'local'; nothing to sync. "
                "Use 'pomodoro config set storage.mode cloud' to enable it."
            )
            return
        result = await ctx.session_store.sync(ctx.owner_id)

    if result.error:
        raise AppError(f"Sync failed: {result.error}", exit_code=exit_codes.ERROR_STORAGE)

    console.print(
        f"Local sessions: {result.sessions_local}  "
        f"Uploaded: [green]{result.sessions_uploaded}[/green]  "
        f"Up to date: {result.sessions_unchanged}  "
        f"Failed: [red]{result.sessions_failed}[/red]"
    )
    if result.success:
        format_success("Sync complete")
    else:
        format_warning(f"{result.sessions_failed} session(s) failed to upload")
