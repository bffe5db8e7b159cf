"""
CLI command: telofy-sync
Sign in and reconcile local objectives/tasks with the Telofy backend.
"""
import asyncio
import sys
from datetime import date
from pathlib import Path

import click

# make the project root importable when run as a script
project_root = Path(__file__).parent.parent
sys.path.append(str(project_root))

from core.bootstrap import SyncRuntime, create_runtime
from core.exceptions import SyncInProgressError, TelofyError
from core.logger import setup_logging
from core.models import as_utc, derive_overdue


def _run(coro_factory):
    """Build a runtime, run ``coro_factory(runtime)`` and close the runtime."""
    runtime = create_runtime()

    async def _main():
        try:
            return await coro_factory(runtime)
        finally:
            await runtime.aclose()

    return asyncio.run(_main())


@click.group()
def telofy():
    """Telofy sync commands"""
    setup_logging()


@telofy.command()
@click.argument("email")
@click.password_option(confirmation_prompt=False)
def login(email: str, password: str):
    """Sign in to the Telofy backend"""

    async def _login(runtime: SyncRuntime):
        return await runtime.session.sign_in(email, password)

    ok, error = _run(_login)
    if not ok:
        click.echo(f"❌ Sign in failed: {error}", err=True)
        sys.exit(1)
    click.echo(f"✅ Signed in as {email}")


@telofy.command()
@click.argument("email")
@click.option("--name", prompt=True, help="Display name")
@click.password_option()
def signup(email: str, name: str, password: str):
    """Create an account and sign in"""

    async def _signup(runtime: SyncRuntime):
        return await runtime.session.sign_up(email, password, name)

    ok, error = _run(_signup)
    if not ok:
        click.echo(f"❌ Sign up failed: {error}", err=True)
        sys.exit(1)
    click.echo(f"✅ Account created for {email}")


@telofy.command()
def logout():
    """Sign out and forget the stored token"""

    async def _logout(runtime: SyncRuntime):
        await runtime.session.sign_out()

    _run(_logout)
    click.echo("Signed out")


@telofy.command()
def run():
    """Run one reconciliation pass"""

    async def _sync(runtime: SyncRuntime):
        runtime.orchestrator.publisher.subscribe(
            lambda state: click.echo(f"[{state.status.value}]")
        )
        return await runtime.orchestrator.sync_all()

    try:
        result = _run(_sync)
    except SyncInProgressError as e:
        click.echo(f"❌ {e.get_user_message()}", err=True)
        sys.exit(1)
    except TelofyError as e:
        click.echo(f"❌ Sync failed: {e.get_user_message()}", err=True)
        sys.exit(1)

    if not result.success:
        click.echo(f"❌ {result.error}", err=True)
        sys.exit(1)
    click.echo("✅ Sync completed")


@telofy.command()
def status():
    """Show session and local data summary"""
    runtime = create_runtime()
    try:
        session = runtime.session
        if session.is_authenticated and session.user:
            click.echo(f"Signed in as {session.user.email}")
        else:
            click.echo("Not signed in")

        click.echo(f"Objectives: {len(runtime.store.objectives)}")

        today = date.today()
        todays = [t for t in runtime.store.tasks if t.scheduled_on() == today]
        derive_overdue(todays)
        click.echo(f"Tasks today: {len(todays)}")
        for task in sorted(todays, key=lambda t: as_utc(t.scheduled_at)):
            click.echo(f"  [{task.status.value}] {task.scheduled_at:%H:%M} {task.title}")
    finally:
        asyncio.run(runtime.aclose())


if __name__ == "__main__":
    telofy()
