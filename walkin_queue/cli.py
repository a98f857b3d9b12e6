"""Command-line interface for the walk-in queue."""

import sys

import click
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from .config import settings
from .core.exceptions import QueueError
from .database import Base, SessionLocal, engine, init_db
from .models import StaffRole
from .services import queue_number_service, queue_service, reconcile_stale_serving, staff_service
from .utils.office_time import office_today


@click.group()
def cli():
    """Walk-in queue CLI."""
    pass


# Database commands
@cli.group()
def db():
    """Database management commands."""
    pass


@db.command()
def init():
    """Initialize the database (migrations and default data)."""
    click.echo("Initializing database...")
    try:
        init_db()
        click.echo("✅ Database initialized successfully!")
    except Exception as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)


@db.command()
@click.confirmation_option(prompt="Are you sure you want to drop all tables?")
def reset():
    """Reset the database (drop and recreate all tables)."""
    click.echo("Resetting database...")
    try:
        Base.metadata.drop_all(engine)
        Base.metadata.create_all(engine)
        click.echo("✅ Database reset successfully!")
    except Exception as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)


# Queue commands
@cli.group()
def queue():
    """Queue maintenance commands."""
    pass


@queue.command("issue-number")
def issue_number():
    """Consume and print the next queue number for today."""
    session = SessionLocal()
    try:
        click.echo(queue_number_service.issue_queue_number(session))
    except QueueError as e:
        click.echo(f"❌ Error: {e.message}", err=True)
        sys.exit(1)
    finally:
        session.close()


@queue.command()
def status():
    """Show today's counter value."""
    session = SessionLocal()
    try:
        today = office_today()
        counter = queue_number_service.current_counter(session, today)
        click.echo(f"{today.isoformat()} ({settings.office_timezone}): {counter} number(s) issued")
        if counter:
            click.echo(f"Last issued: {queue_number_service.format_queue_number(today, counter)}")
    finally:
        session.close()


@queue.command()
def reconcile():
    """Resolve entries left NOW_SERVING from a previous day."""
    session = SessionLocal()
    try:
        resolved = reconcile_stale_serving(session)
        click.echo(f"✅ Resolved {resolved} stale serving entries")
    finally:
        session.close()


@queue.command("reset")
@click.confirmation_option(prompt="Delete every queue entry, serving log and counter?")
def reset_queue():
    """Clear the whole queue."""
    session = SessionLocal()
    try:
        deleted = queue_service.reset_queue(session)
        click.echo(f"✅ Deleted {deleted} queue entries")
    finally:
        session.close()


# Staff commands
@cli.group()
def staff():
    """Staff account commands."""
    pass


@staff.command()
@click.option("--username", prompt=True, help="Login name")
@click.option("--name", prompt=True, help="Display name")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
@click.option(
    "--role",
    type=click.Choice([r.value for r in StaffRole]),
    default=StaffRole.STAFF.value,
    help="Account role",
)
@click.option("--category-id", "category_ids", type=int, multiple=True, help="Specialization")
def create(username, name, password, role, category_ids):
    """Create a staff or admin account."""
    session = SessionLocal()
    try:
        account = staff_service.create_staff(
            session,
            username=username,
            name=name,
            password=password,
            role=StaffRole(role),
            category_ids=category_ids,
        )
        click.echo(f"✅ Created {account.role.value} account {account.username} (ID: {account.id})")
    except QueueError as e:
        click.echo(f"❌ Error: {e.message}", err=True)
        sys.exit(1)
    finally:
        session.close()


@cli.command()
@click.option("--host", default="0.0.0.0", help="Bind address")
@click.option("--port", default=8000, type=int, help="Bind port")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host, port, reload):
    """Run the API server."""
    import uvicorn

    uvicorn.run("walkin_queue.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    cli()
