"""Pure date classification logic - no I/O dependencies.

Calendar feeds carry three shapes of DTSTART value. Each maps to one
``InstantKind``:

- ``20250310T090000Z``: an absolute instant in UTC
- ``20250310T090000``: a floating wall-clock time with no zone attached
- ``20250310``: a whole calendar day
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum

_UTC_PATTERN = re.compile(r"[0-9]{8}T[0-9]{6}Z")
_FLOATING_PATTERN = re.compile(r"[0-9]{8}T[0-9]{6}")
_DATE_PATTERN = re.compile(r"[0-9]{8}")


class InstantKind(Enum):
    """Precision of an instant."""

    UTC = "utc"
    FLOATING_LOCAL = "floating"
    ALL_DAY = "all_day"


@dataclass(frozen=True)
class Instant:
    """
    A point in time tagged with its precision.

    UTC instants hold an aware datetime in UTC, floating instants hold a
    naive datetime, and all-day instants hold a plain date.
    """

    kind: InstantKind
    value: datetime | date

    def __post_init__(self):
        if self.kind is InstantKind.ALL_DAY:
            if isinstance(self.value, datetime) or not isinstance(self.value, date):
                raise TypeError("all-day instants hold a date")
        elif not isinstance(self.value, datetime):
            raise TypeError(f"{self.kind.value} instants hold a datetime")
        elif self.kind is InstantKind.UTC and self.value.tzinfo is None:
            raise TypeError("UTC instants must be timezone-aware")
        elif self.kind is InstantKind.FLOATING_LOCAL and self.value.tzinfo is not None:
            raise TypeError("floating instants carry no timezone")

    @classmethod
    def utc(cls, value: datetime) -> "Instant":
        """UTC instant from an aware datetime (converted to UTC)."""
        return cls(InstantKind.UTC, value.astimezone(timezone.utc))

    @classmethod
    def floating(cls, value: datetime) -> "Instant":
        return cls(InstantKind.FLOATING_LOCAL, value)

    @classmethod
    def all_day(cls, value: date) -> "Instant":
        return cls(InstantKind.ALL_DAY, value)

    @property
    def is_all_day(self) -> bool:
        return self.kind is InstantKind.ALL_DAY

    @property
    def day(self) -> date:
        """Calendar date of the instant, as written."""
        if isinstance(self.value, datetime):
            return self.value.date()
        return self.value

    def is_before(self, now: datetime) -> bool:
        """
        Check if this instant is strictly earlier than ``now``.

        All-day instants compare by calendar date against the UTC date of
        ``now``. Floating instants compare their wall-clock fields against
        the UTC wall-clock of ``now``, since no zone is known for them.
        Comparison is at whole-second granularity.
        """
        now_utc = now.astimezone(timezone.utc).replace(microsecond=0)
        if self.kind is InstantKind.ALL_DAY:
            return self.value < now_utc.date()
        if self.kind is InstantKind.FLOATING_LOCAL:
            return self.value < now_utc.replace(tzinfo=None)
        return self.value < now_utc


def classify_date(raw: str | None) -> Instant | None:
    """
    Classify a raw DTSTART value.

    Returns None for anything that is not one of the three recognised
    shapes, including shapes whose digits do not form a real date or time.
    """
    if not raw:
        return None
    value = raw.strip()

    try:
        if _UTC_PATTERN.fullmatch(value):
            return Instant.utc(
                datetime(*_date_fields(value), *_time_fields(value), tzinfo=timezone.utc)
            )
        if _FLOATING_PATTERN.fullmatch(value):
            return Instant.floating(datetime(*_date_fields(value), *_time_fields(value)))
        if _DATE_PATTERN.fullmatch(value):
            return Instant.all_day(date(*_date_fields(value)))
    except ValueError:
        # Right shape, impossible value (e.g. month 13)
        return None

    return None


def _date_fields(value: str) -> tuple[int, int, int]:
    return int(value[0:4]), int(value[4:6]), int(value[6:8])


def _time_fields(value: str) -> tuple[int, int, int]:
    # Position 8 is the "T" separator
    return int(value[9:11]), int(value[11:13]), int(value[13:15])
