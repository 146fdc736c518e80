"""Import workflow shared by the CLI commands.

Turns feed text into todos: parse, classify, filter against a single
``now``, then persist one todo per surviving event. A failure on one
event is logged and the rest still go through.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .config import Config, load_config
from .core.events import ParsedEvent, build_events, next_todo_payload, to_todo_payload
from .core.feed import parse_feed
from .core.recurrence import RecurrenceError
from .core.relevance import filter_relevant
from .ports.todo_store import TodoStore, TodoStoreError

logger = logging.getLogger(__name__)


@dataclass
class ImportReport:
    """Outcome of one import run."""

    project_id: int | None = None
    created: int = 0
    failed: int = 0
    skipped: int = 0
    duplicates: int = 0
    payloads: list[dict] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.failed == 0

    def summary(self) -> str:
        text = f"{self.created} created, {self.failed} failed, {self.skipped} skipped"
        if self.duplicates:
            text += f", {self.duplicates} already imported"
        return text


@dataclass
class CompletionResult:
    """Outcome of completing a todo."""

    updated: dict
    follow_up: dict | None = None


def prepare_events(text: str, now: datetime) -> tuple[list[ParsedEvent], int]:
    """
    Parse a feed and keep the events still worth importing.

    Returns: (relevant_events, number_skipped)
    """
    events = build_events(parse_feed(text))
    relevant = filter_relevant(events, now)
    return relevant, len(events) - len(relevant)


def drop_known(events: list[ParsedEvent], known_uids: set[str]) -> tuple[list[ParsedEvent], int]:
    """
    Drop events whose UID was already imported, or already seen earlier in
    the same feed. Events without a UID are always kept.

    Returns: (fresh_events, number_dropped)
    """
    seen = set(known_uids)
    fresh = []
    for event in events:
        if event.uid and event.uid in seen:
            logger.debug(f"Skipping already imported event '{event.summary}' ({event.uid})")
            continue
        if event.uid:
            seen.add(event.uid)
        fresh.append(event)
    return fresh, len(events) - len(fresh)


def import_feed(
    text: str,
    store: TodoStore | None,
    project_title: str,
    config: Config | None = None,
    now: datetime | None = None,
    dry_run: bool = False,
    known_uids: set[str] | None = None,
) -> ImportReport:
    """
    Import a calendar feed as todos in a new project.

    The clock is read once so every event in the run is judged against the
    same instant. With ``dry_run`` the payloads are built but nothing is
    sent to the store. Events whose UID is in ``known_uids`` are counted as
    duplicates and not imported again.

    Raises:
        ValueError: no store was given and this is not a dry run
    """
    if store is None and not dry_run:
        raise ValueError("A todo store is required unless dry_run is set")

    config = config or load_config()
    now = now or datetime.now(timezone.utc)
    tz = config.tzinfo()

    events, skipped = prepare_events(text, now)
    events, duplicates = drop_known(events, known_uids or set())
    report = ImportReport(skipped=skipped, duplicates=duplicates)
    if not events:
        logger.info("No upcoming events found in the calendar feed")
        return report

    report.project_id = config.default_project_id
    if not dry_run:
        try:
            report.project_id = store.create_project(project_title)
        except TodoStoreError as e:
            logger.warning(
                f"Project creation failed, falling back to project {config.default_project_id}: {e}"
            )

    for event in events:
        try:
            payload = to_todo_payload(
                event, report.project_id, now, tz, untitled_title=config.untitled_title
            )
            if not dry_run:
                store.create_todo(payload)
        except (TodoStoreError, RecurrenceError) as e:
            logger.warning(f"Failed to import event '{event.summary}': {e}")
            report.failed += 1
            continue
        report.payloads.append(payload)
        report.created += 1

    logger.info(f"Imported calendar into project {report.project_id}: {report.summary()}")
    return report


def complete_todo(todo: dict, store: TodoStore, now: datetime | None = None) -> CompletionResult:
    """
    Mark a todo completed, creating its next occurrence if it recurs.

    The follow-up is only created when the todo was not already completed.
    A recurrence that cannot step forward is logged and the todo is still
    completed.

    Raises:
        TodoStoreError: the store rejected the update or the follow-up
    """
    now = now or datetime.now(timezone.utc)

    follow_up = None
    if not todo.get("completed"):
        try:
            follow_up = next_todo_payload(todo, now)
        except (RecurrenceError, ValueError) as e:
            logger.warning(f"No next occurrence for '{todo.get('title')}': {e}")

    updated = store.update_todo({**todo, "completed": True})
    result = CompletionResult(updated=updated)
    if follow_up is not None:
        result.follow_up = store.create_todo(follow_up)
        logger.info(f"Created next occurrence of '{todo.get('title')}' due {follow_up['due_date']}")
    return result
