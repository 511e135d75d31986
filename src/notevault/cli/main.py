"""notevault CLI — run the server and do operator chores against the store.

Usage:
    notevault serve                                  # Run the API with uvicorn
    notevault bootstrap-admin -e a@b.c -p longpass   # Create or promote an admin
    notevault sweep-sessions                         # Drop expired session rows

Commands talk to the configured store directly (NOTEVAULT_DATABASE_URL),
not through the HTTP API.
"""

from __future__ import annotations

import asyncio
import sys

import click

from notevault import __version__
from notevault.config import settings
from notevault.errors import AppError, ConfigurationError

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous Click handler."""
    return asyncio.run(coro)


async def _with_db(fn):
    """Open the schema and one session, run fn(db), dispose the engine."""
    from notevault.db.engine import async_session_factory, create_schema, engine

    try:
        await create_schema(engine)
        async with async_session_factory() as db:
            return await fn(db)
    finally:
        await engine.dispose()


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="notevault")
def main():
    """notevault — notes backend with sessions and share links."""


@main.command()
@click.option("--host", default=None, help="Bind address (default: NOTEVAULT_HOST)")
@click.option("--port", type=int, default=None, help="Port (default: NOTEVAULT_PORT)")
def serve(host: str | None, port: int | None):
    """Run the HTTP server."""
    import uvicorn

    uvicorn.run(
        "notevault.main:app",
        host=host or settings.host,
        port=port or settings.port,
        log_config=None,
    )


@main.command("bootstrap-admin")
@click.option("--email", "-e", default=None, help="Admin email (default: NOTEVAULT_ADMIN_EMAIL)")
@click.option("--password", "-p", default=None, help="Admin password (default: NOTEVAULT_ADMIN_PASSWORD)")
def bootstrap_admin_cmd(email: str | None, password: str | None):
    """Create the admin account, or promote it if it already exists."""
    from notevault.services.admin_service import bootstrap_admin

    email = settings.admin_email if email is None else email
    password = settings.admin_password if password is None else password

    try:
        user = _run(_with_db(lambda db: bootstrap_admin(db, email, password)))
    except (ConfigurationError, AppError) as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    if user is None:
        click.echo("No admin email/password configured; nothing to do.")
    else:
        click.secho(f"Admin ready: {user.email} (id {user.id})", fg="green")


@main.command("sweep-sessions")
def sweep_sessions():
    """Delete session rows that are already past their expiry."""
    from notevault.services.session_service import SessionService

    removed = _run(_with_db(lambda db: SessionService(db).sweep_expired()))
    click.echo(f"Removed {removed} expired session(s)")


if __name__ == "__main__":
    main()
