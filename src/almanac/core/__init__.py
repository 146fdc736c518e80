"""Functional core - pure calendar ingestion logic with no I/O."""

from .feed import RawEvent, parse_feed
from .dates import Instant, InstantKind, classify_date
from .recurrence import (
    RecurrenceError,
    RecurrenceRule,
    RecurrenceUnit,
    advance,
    next_occurrence,
    parse_rule,
    rule_from_fields,
)
from .events import ParsedEvent, build_event, build_events, next_todo_payload, to_todo_payload
from .relevance import filter_relevant, is_relevant
from .wire import (
    WireFormatError,
    compose_due_date,
    format_instant,
    normalize_due_date,
    resolve_to_utc,
)

__all__ = [
    # Feed
    "RawEvent",
    "parse_feed",
    # Dates
    "Instant",
    "InstantKind",
    "classify_date",
    # Recurrence
    "RecurrenceError",
    "RecurrenceRule",
    "RecurrenceUnit",
    "advance",
    "next_occurrence",
    "parse_rule",
    "rule_from_fields",
    # Events
    "ParsedEvent",
    "build_event",
    "build_events",
    "next_todo_payload",
    "to_todo_payload",
    # Relevance
    "filter_relevant",
    "is_relevant",
    # Wire format
    "WireFormatError",
    "compose_due_date",
    "format_instant",
    "normalize_due_date",
    "resolve_to_utc",
]
