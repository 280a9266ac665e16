"""Sign-in commands.

The identity provider handshake happens outside the CLI; ``login`` records
the resulting user id and token.
"""

import typer

from pomodoro_cli.services.app_context import build_app_context
from pomodoro_cli.utils import exit_codes
from pomodoro_cli.utils.ui.console import get_console
from pomodoro_cli.utils.ui.formatters import format_info, format_success

from .decorators import AppError, command_wrapper

app = typer.Typer(help="Authentication commands", no_args_is_help=True)
console = get_console()


@app.command("login")
@command_wrapper
async def login(
    user_id: str = typer.Option(..., "--user-id", "-u", help="User id from the identity provider"),
    token: str | None = typer.Option(None, "--token", "-t", help="API bearer token"),
    email: str | None = typer.Option(None, "--email", "-e", help="Account email"),
    name: str | None = typer.Option(None, "--name", help="Display name"),
) -> None:
    """Record a signed-in user so sessions are mirrored to the cloud."""
    async with build_app_context() as ctx:
        try:
            ctx.identity.signed_in(user_id, token, email=email, name=name)
        except ValueError as e:
            raise AppError(str(e), exit_code=exit_codes.ERROR_INVALID_ARGS) from e
        storage_type = ctx.session_store.storage_type

    format_success(f"Signed in as {user_id.strip()}")
    if storage_type == "local":
        format_info("Storage mode is 'local'; sessions stay on this device.")


@app.command("logout")
@command_wrapper
async def logout() -> None:
    """Forget the signed-in user."""
    async with build_app_context() as ctx:
        if ctx.owner_id is None:
            format_info("Not signed in")
            return
        ctx.identity.signed_out()
    format_success("Signed out")


@app.command("whoami")
@command_wrapper
async def whoami() -> None:
    """Show the signed-in user."""
    async with build_app_context() as ctx:
        profile = ctx.identity.profile()
    if profile is None:
        raise AppError("Not signed in", exit_code=exit_codes.ERROR_AUTH_FAILURE)
    console.print(profile["user_id"])
    if profile["name"]:
        console.print(f"Name:  {profile['name']}")
    if profile["email"]:
        console.print(f"Email: {profile['email']}")
