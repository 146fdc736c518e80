"""Pure calendar feed parsing - no I/O dependencies."""

import re
from dataclasses import dataclass
from enum import Enum

BLOCK_OPEN = "BEGIN:VEVENT"
BLOCK_CLOSE = "END:VEVENT"
SUMMARY_MARKER = "SUMMARY:"
DATE_MARKER = "DTSTART"
RECURRENCE_MARKER = "RRULE:"
UID_MARKER = "UID:"

_FOLD = re.compile(r"\r?\n[ \t]")
_LINE_BREAK = re.compile(r"\r?\n")


@dataclass
class RawEvent:
    """Fields collected from one VEVENT block, unvalidated."""

    summary: str | None = None
    raw_date: str | None = None
    raw_recurrence: str | None = None
    uid: str | None = None


class _State(Enum):
    OUTSIDE_BLOCK = "outside"
    INSIDE_BLOCK = "inside"


def unfold(text: str) -> str:
    """Join continuation lines (a line break followed by one space or tab)."""
    return _FOLD.sub("", text)


def parse_feed(text: str) -> list[RawEvent]:
    """
    Parse calendar feed text into raw event records.

    Pure function - no I/O. Never raises on malformed input: blocks that
    are never closed are dropped and unrecognised lines are ignored.
    Components nested inside an event (alarms and the like) are skipped so
    their fields do not overwrite the event's own. A nested component only
    ends at the END line carrying its own name.

    Returns:
        RawEvents in the order their blocks appear in the text
    """
    events: list[RawEvent] = []
    state = _State.OUTSIDE_BLOCK
    current: RawEvent | None = None
    nested: list[str] = []

    for line in _LINE_BREAK.split(unfold(text)):
        if line == BLOCK_OPEN:
            # A second open before a close restarts the record
            state, current, nested = _State.INSIDE_BLOCK, RawEvent(), []
            continue

        if state is _State.OUTSIDE_BLOCK:
            continue

        if line == BLOCK_CLOSE:
            events.append(current)
            state, current, nested = _State.OUTSIDE_BLOCK, None, []
            continue

        if line.startswith("BEGIN:"):
            nested.append(line[len("BEGIN:"):])
        elif nested and line == f"END:{nested[-1]}":
            nested.pop()
        elif not nested:
            _extract_field(current, line)

    return events


def _extract_field(event: RawEvent, line: str) -> None:
    """Set the field a content line carries, if it is one we read."""
    if line.startswith(SUMMARY_MARKER):
        event.summary = line[len(SUMMARY_MARKER):].strip()
    elif line.startswith(DATE_MARKER):
        # DTSTART may carry parameters, e.g. DTSTART;VALUE=DATE:20250310
        _, colon, value = line.partition(":")
        if colon:
            event.raw_date = value.strip()
    elif line.startswith(RECURRENCE_MARKER):
        event.raw_recurrence = line[len(RECURRENCE_MARKER):].strip()
    elif line.startswith(UID_MARKER):
        event.uid = line[len(UID_MARKER):].strip() or None
