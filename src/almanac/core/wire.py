"""Strict due-date wire format - no I/O dependencies.

Every due date handed to the task store is ``YYYY-MM-DDThh:mm:ssZ``:
UTC fields, no fractional seconds, no numeric offset.
"""

import logging
import re
from datetime import date, datetime, time, timezone, tzinfo

from .dates import Instant, InstantKind

logger = logging.getLogger(__name__)

STRICT_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}Z")


class WireFormatError(ValueError):
    """Raised when a value cannot be written in the strict wire format."""

    pass


def format_instant(instant: Instant | datetime) -> str:
    """
    Format a UTC instant as ``YYYY-MM-DDThh:mm:ssZ``.

    Accepts a UTC-kind Instant or an aware datetime. Floating and all-day
    instants must go through resolve_to_utc first.
    """
    if isinstance(instant, Instant):
        if instant.kind is not InstantKind.UTC:
            raise WireFormatError(
                f"Only UTC instants have a wire form, got {instant.kind.value}; resolve it first"
            )
        dt = instant.value
    else:
        if instant.tzinfo is None or instant.utcoffset() is None:
            raise WireFormatError(f"Naive datetime {instant} has no wire form")
        dt = instant.astimezone(timezone.utc)

    return (
        f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}"
        f"T{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}Z"
    )


def resolve_to_utc(instant: Instant, tz: tzinfo = timezone.utc) -> Instant:
    """
    Pin a floating or all-day instant to a concrete UTC instant.

    The wall-clock fields are read in ``tz``. With the default UTC they are
    used as-is, with no offset conversion. All-day instants resolve to
    midnight. UTC instants are returned unchanged.
    """
    if instant.kind is InstantKind.UTC:
        return instant
    if instant.kind is InstantKind.ALL_DAY:
        return Instant.utc(datetime.combine(instant.value, time(0, 0), tzinfo=tz))
    return Instant.utc(instant.value.replace(tzinfo=tz))


def is_strict(value: str) -> bool:
    return bool(STRICT_PATTERN.fullmatch(value))


def parse_lenient(value: str, tz: tzinfo = timezone.utc) -> datetime:
    """
    Parse an ISO 8601-ish due string into an aware datetime.

    Accepts offsets, a trailing Z, fractional seconds, date-only values and
    the compact ``YYYYMMDDThhmmss`` form. Naive values are read in ``tz``.

    Raises:
        ValueError: the string is not a recognisable date or date-time
    """
    dt = datetime.fromisoformat(value.strip())
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz)
    return dt


def normalize_due_date(value: str | None, tz: tzinfo = timezone.utc) -> str | None:
    """
    Re-emit a stored due string in strict form.

    Strict strings pass through untouched. Anything else, such as a value
    not terminated in Z, is parsed leniently and re-formatted. Values that
    cannot be parsed are returned as they are.
    """
    if not value or is_strict(value):
        return value
    try:
        return format_instant(parse_lenient(value, tz))
    except (ValueError, OverflowError) as e:
        logger.debug(f"Leaving unparseable due date {value!r} as-is: {e}")
        return value


def compose_due_date(
    day: date | None,
    at: time | None,
    today: date,
    tz: tzinfo = timezone.utc,
) -> str | None:
    """
    Build a due date from separate date and time inputs.

    A date alone means midnight; a time alone means that time today.
    Neither means no due date. Seconds are always zero.
    """
    if day is None and at is None:
        return None
    wall = (at or time(0, 0)).replace(second=0, microsecond=0, tzinfo=None)
    return format_instant(datetime.combine(day or today, wall, tzinfo=tz))
