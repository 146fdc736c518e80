"""almanac CLI - calendar feed to todo importer."""

import json
import logging
import sys
from datetime import date, datetime, time, timezone

import click

from .adapters.feed_source import FeedFetchError, project_title_for, read_feed
from .adapters.todo_api import TodoApiAdapter
from .config import load_config
from .core.recurrence import RecurrenceError
from .core.wire import compose_due_date, format_instant, normalize_due_date, resolve_to_utc
from .workflows import import_feed, prepare_events


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.version_option(package_name="almanac")
def main(debug: bool):
    """almanac - turn calendar feeds into todos."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


def _read_or_exit(source: str) -> str:
    try:
        return read_feed(source)
    except FeedFetchError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command("import")
@click.argument("source")
@click.option("--project", "-p", default=None, help="Project name (defaults to the feed's file name)")
@click.option("--dry-run", is_flag=True, help="Build todos without sending them")
@click.option("--json", "as_json", is_flag=True, help="Output todos as JSON")
def import_cmd(source: str, project: str | None, dry_run: bool, as_json: bool):
    """Import a calendar feed (file or URL) as todos."""
    config = load_config()
    text = _read_or_exit(source)

    store = None if dry_run else TodoApiAdapter(config)
    report = import_feed(
        text,
        store,
        project or project_title_for(source),
        config=config,
        dry_run=dry_run,
    )

    if as_json:
        click.echo(json.dumps(report.payloads, indent=2))
    elif report.created == 0 and report.failed == 0:
        click.echo("No upcoming events found in the calendar feed.")
        return
    else:
        verb = "Would import" if dry_run else "Imported"
        click.echo(f"{verb} into project {report.project_id}: {report.summary()}")

    if not report.ok:
        sys.exit(1)


@main.command()
@click.argument("source")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def preview(source: str, as_json: bool):
    """Show which events of a feed would be imported."""
    config = load_config()
    tz = config.tzinfo()
    now = datetime.now(timezone.utc)
    events, skipped = prepare_events(_read_or_exit(source), now)

    rows = []
    for event in events:
        try:
            due = event.due_on_or_after(now)
        except RecurrenceError as e:
            click.echo(f"Error: {event.summary}: {e}", err=True)
            continue
        rows.append(
            {
                "title": event.summary or config.untitled_title,
                "due_date": format_instant(resolve_to_utc(due, tz)) if due else None,
                "all_day": bool(event.due and event.due.is_all_day),
                "recurrence": event.recurrence.describe() if event.recurrence else None,
            }
        )

    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return

    if not rows:
        click.echo("No upcoming events.")
    for row in rows:
        due = row["due_date"] or "no date"
        repeat = f" ({row['recurrence']})" if row["recurrence"] else ""
        click.echo(f"  {due:20} {row['title']}{repeat}")
    if skipped:
        click.echo(f"\n{skipped} past event(s) skipped.")


@main.command()
@click.argument("due_date")
def normalize(due_date: str):
    """Print a stored due date in strict wire form."""
    config = load_config()
    click.echo(normalize_due_date(due_date, config.tzinfo()))


@main.command()
@click.option("--date", "-d", "day", default=None, help="Due date (YYYY-MM-DD)")
@click.option("--time", "-t", "at", default=None, help="Due time (HH:MM)")
def due(day: str | None, at: str | None):
    """Compose a strict due date from a date and/or time."""
    config = load_config()
    try:
        parsed_day = date.fromisoformat(day) if day else None
        parsed_at = time.fromisoformat(at) if at else None
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    tz = config.tzinfo()
    value = compose_due_date(parsed_day, parsed_at, today=datetime.now(tz).date(), tz=tz)
    click.echo(value or "")


if __name__ == "__main__":
    main()
