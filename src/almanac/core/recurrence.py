"""Pure recurrence logic - no I/O dependencies."""

import dataclasses
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from enum import Enum

from .dates import Instant, InstantKind


class RecurrenceError(Exception):
    """Raised when a recurrence rule cannot advance towards the reference time."""

    pass


class RecurrenceUnit(Enum):
    """Step unit of a recurrence, valued by its wire name."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


FREQUENCIES = {
    "DAILY": RecurrenceUnit.DAY,
    "WEEKLY": RecurrenceUnit.WEEK,
    "MONTHLY": RecurrenceUnit.MONTH,
    "YEARLY": RecurrenceUnit.YEAR,
}


@dataclass(frozen=True)
class RecurrenceRule:
    """Normalised repetition: every ``interval`` ``unit``s."""

    interval: int
    unit: RecurrenceUnit

    def describe(self) -> str:
        return f"every {self.interval} {self.unit.value}(s)"


def parse_rule(raw: str | None) -> RecurrenceRule | None:
    """
    Parse an RRULE value such as ``FREQ=WEEKLY;INTERVAL=2``.

    Only FREQ and INTERVAL are read. Unknown or missing FREQ means no rule.
    INTERVAL defaults to 1 when absent or not an integer; a zero or negative
    INTERVAL is kept so next_occurrence can reject it.
    """
    if not raw:
        return None

    parts: dict[str, str] = {}
    for pair in raw.split(";"):
        key, eq, value = pair.partition("=")
        if eq:
            parts[key.strip().upper()] = value.strip()

    unit = FREQUENCIES.get(parts.get("FREQ", "").upper())
    if unit is None:
        return None

    try:
        interval = int(parts.get("INTERVAL", "1"))
    except ValueError:
        interval = 1

    return RecurrenceRule(interval=interval, unit=unit)


def next_occurrence(start: Instant, rule: RecurrenceRule, reference_now: datetime) -> Instant:
    """
    Project a recurring start forward to its first occurrence not before now.

    Pure function - no I/O. A start that is already at or after
    ``reference_now`` is returned unchanged. The result keeps the start's kind.

    Raises:
        RecurrenceError: interval is not positive, or stepping runs off the calendar
    """
    if rule.interval <= 0:
        raise RecurrenceError(f"Recurrence interval must be positive, got {rule.interval}")

    if not start.is_before(reference_now):
        return start

    try:
        if rule.unit in (RecurrenceUnit.DAY, RecurrenceUnit.WEEK):
            days = rule.interval * (7 if rule.unit is RecurrenceUnit.WEEK else 1)
            return _advance_days(start, days, reference_now)

        months = rule.interval * (12 if rule.unit is RecurrenceUnit.YEAR else 1)
        current = start
        while current.is_before(reference_now):
            current = dataclasses.replace(current, value=add_months(current.value, months))
        return current
    except (OverflowError, ValueError) as e:
        raise RecurrenceError(f"Cannot advance {start.value} {rule.describe()}: {e}") from e


def rule_from_fields(interval: int | None, unit: str | None) -> RecurrenceRule | None:
    """
    Rebuild a rule from a stored todo's recurrence fields.

    The unit is matched case-insensitively and may be plural ("weeks").
    Missing fields or an unknown unit mean no rule.
    """
    if interval is None or not unit:
        return None
    name = unit.strip().lower()
    name = name[:-1] if name.endswith("s") else name
    try:
        return RecurrenceRule(interval=int(interval), unit=RecurrenceUnit(name))
    except (TypeError, ValueError):
        return None


def advance(instant: Instant, rule: RecurrenceRule) -> Instant:
    """
    Step an instant forward by exactly one interval of its rule.

    Time of day and kind are kept. Month and year steps roll surplus days
    over the same way add_months does.

    Raises:
        RecurrenceError: interval is not positive, or the step runs off the calendar
    """
    if rule.interval <= 0:
        raise RecurrenceError(f"Recurrence interval must be positive, got {rule.interval}")

    try:
        if rule.unit in (RecurrenceUnit.DAY, RecurrenceUnit.WEEK):
            days = rule.interval * (7 if rule.unit is RecurrenceUnit.WEEK else 1)
            value = instant.value + timedelta(days=days)
        else:
            months = rule.interval * (12 if rule.unit is RecurrenceUnit.YEAR else 1)
            value = add_months(instant.value, months)
    except (OverflowError, ValueError) as e:
        raise RecurrenceError(f"Cannot advance {instant.value} {rule.describe()}: {e}") from e
    return dataclasses.replace(instant, value=value)


def _advance_days(start: Instant, days: int, reference_now: datetime) -> Instant:
    """Jump straight to the first step at or after the reference."""
    step = timedelta(days=days)
    now_utc = reference_now.astimezone(timezone.utc).replace(microsecond=0)

    if start.kind is InstantKind.ALL_DAY:
        gap = now_utc.date() - start.value
    elif start.kind is InstantKind.FLOATING_LOCAL:
        gap = now_utc.replace(tzinfo=None) - start.value
    else:
        gap = now_utc - start.value

    steps = -(-gap // step)  # ceiling division
    return dataclasses.replace(start, value=start.value + step * steps)


def add_months(value: date, months: int) -> date:
    """
    Add calendar months, rolling surplus days into the following month.

    Jan 31 + 1 month is Mar 3 (Feb 28 + 3 days), not a clamped Feb 28.
    Works for both dates and datetimes.
    """
    index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(index, 12)
    first = value.replace(year=year, month=month + 1, day=1)
    return first + timedelta(days=value.day - 1)
