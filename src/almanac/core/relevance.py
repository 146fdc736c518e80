"""Pure relevance filtering - no I/O dependencies."""

from datetime import date, datetime, timezone

from .events import ParsedEvent


def is_relevant(event: ParsedEvent, now: datetime, today: date | None = None) -> bool:
    """
    Decide whether a parsed event is still worth surfacing.

    Recurring events and undated events are always kept. All-day events
    are kept from their day onward, timed events from their second onward.

    Args:
        event: Event to judge
        now: Reference instant (timezone-aware)
        today: Reference calendar date, defaults to the UTC date of ``now``
    """
    if event.recurrence is not None:
        return True
    if event.due is None:
        return True
    if event.due.is_all_day:
        today = today or now.astimezone(timezone.utc).date()
        return event.due.value >= today
    return not event.due.is_before(now)


def filter_relevant(
    events: list[ParsedEvent],
    now: datetime,
    today: date | None = None,
) -> list[ParsedEvent]:
    """Keep the relevant events, preserving order."""
    return [e for e in events if is_relevant(e, now, today)]
