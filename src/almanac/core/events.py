"""Pure event assembly - no I/O dependencies."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo

from .dates import Instant, classify_date
from .feed import RawEvent
from .recurrence import RecurrenceRule, advance, next_occurrence, parse_rule, rule_from_fields
from .wire import format_instant, parse_lenient, resolve_to_utc

logger = logging.getLogger(__name__)

UNTITLED = "Untitled event"


@dataclass(frozen=True)
class ParsedEvent:
    """A calendar event classified and ready to become a todo."""

    summary: str | None
    due: Instant | None = None
    recurrence: RecurrenceRule | None = None
    uid: str | None = None

    @property
    def is_recurring(self) -> bool:
        return self.recurrence is not None

    def due_on_or_after(self, now: datetime) -> Instant | None:
        """
        Due instant to record: the start itself, or for recurring events
        the next occurrence at or after ``now``.
        """
        if self.due is None or self.recurrence is None:
            return self.due
        return next_occurrence(self.due, self.recurrence, now)


def build_event(raw: RawEvent) -> ParsedEvent:
    """Classify the date and recurrence of a raw block."""
    if not raw.summary:
        logger.warning(f"Calendar event without a summary (start {raw.raw_date!r})")
    return ParsedEvent(
        summary=raw.summary,
        due=classify_date(raw.raw_date),
        recurrence=parse_rule(raw.raw_recurrence),
        uid=raw.uid,
    )


def build_events(raws: list[RawEvent]) -> list[ParsedEvent]:
    return [build_event(r) for r in raws]


def to_todo_payload(
    event: ParsedEvent,
    project_id: int,
    now: datetime,
    tz: tzinfo = timezone.utc,
    untitled_title: str = UNTITLED,
) -> dict:
    """
    Build the task-store record for an event.

    Recurrence fields are only present when the event has a rule, and
    ``uid`` only when the feed gave the event one.

    Raises:
        RecurrenceError: the event's rule cannot be projected forward
    """
    due = event.due_on_or_after(now)
    payload = {
        "title": event.summary or untitled_title,
        "completed": False,
        "project_id": project_id,
        "due_date": format_instant(resolve_to_utc(due, tz)) if due else None,
    }
    if event.recurrence is not None:
        payload["recurrence_interval"] = event.recurrence.interval
        payload["recurrence_unit"] = event.recurrence.unit.value
    if event.uid:
        payload["uid"] = event.uid
    return payload


def next_todo_payload(todo: dict, now: datetime) -> dict | None:
    """
    Build the follow-up todo for a recurring todo that is being completed.

    The due date moves forward by one interval and keeps its time of day.
    A todo with no due date steps from ``now`` instead. Returns None when
    the todo has no usable recurrence.

    Raises:
        RecurrenceError: the interval is not positive, or the step runs off the calendar
        ValueError: the stored due date is not a recognisable date-time
    """
    rule = rule_from_fields(todo.get("recurrence_interval"), todo.get("recurrence_unit"))
    if rule is None:
        return None

    due = todo.get("due_date")
    base = parse_lenient(due) if due else now
    next_due = advance(Instant.utc(base), rule)

    return {
        "title": todo.get("title", ""),
        "completed": False,
        "project_id": todo.get("project_id"),
        "due_date": format_instant(next_due),
        "recurrence_interval": rule.interval,
        "recurrence_unit": rule.unit.value,
    }
