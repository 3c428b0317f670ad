"""
Clock and time arithmetic for bookings.

All booking math happens on timezone-aware datetimes. Durations are added
in UTC and the result is converted back to the booking zone, so "3 hours
before" is 3 real hours across DST changes. A ``Clock`` supplies "now" in
the booking zone; tests swap in ``FixedClock`` so lead-time checks are
deterministic.
"""

from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from beautybird.schemas.booking_schema import DISPLAY_FORMAT

REMINDER_LEAD = timedelta(hours=3)
BOOKING_SLACK = timedelta(minutes=5)
DEFAULT_FORM_OFFSET = timedelta(hours=3, minutes=10)

DATE_FORMAT = "%Y-%m-%d"
CLOCK_FORMAT = "%H:%M"
_INPUT_FORMATS = ("%Y-%m-%d %H:%M", "%Y-%m-%d %H:%M:%S")


def resolve_timezone(name: str) -> Optional[tzinfo]:
    """Return the zone for an IANA name, or None for the server's local zone."""
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown timezone: {name!r}") from None


class Clock:
    """Wall clock in a fixed zone (server local zone when ``tz`` is None)."""

    def __init__(self, tz: Optional[tzinfo] = None) -> None:
        self._tz = tz

    @property
    def tz(self) -> Optional[tzinfo]:
        return self._tz

    def now(self) -> datetime:
        if self._tz is None:
            return datetime.now().astimezone()
        return datetime.now(self._tz)


class FixedClock(Clock):
    """Clock frozen at a given aware instant."""

    def __init__(self, instant: datetime) -> None:
        if instant.tzinfo is None:
            raise ValueError("FixedClock needs a timezone-aware datetime")
        super().__init__(instant.tzinfo)
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def advance(self, delta: timedelta) -> None:
        self._instant = shift(self._instant, delta, self.tz)


def to_zone(value: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Express an instant in ``tz`` (the server's local zone when None)."""
    if tz is None:
        return value.astimezone()
    return value.astimezone(tz)


def shift(value: datetime, delta: timedelta, tz: Optional[tzinfo] = None) -> datetime:
    """Move an instant by an absolute duration and express it in ``tz``."""
    return to_zone(value.astimezone(timezone.utc) + delta, tz)


def parse_local(date: str, time: str, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """Parse ``YYYY-MM-DD`` and ``HH:mm`` into an aware datetime.

    Returns None when the values do not form a real calendar moment. A wall
    time skipped by a DST jump resolves to the instant just after the jump.
    """
    text = f"{date.strip()} {time.strip()}"
    for fmt in _INPUT_FORMATS:
        try:
            naive = datetime.strptime(text, fmt)
        except ValueError:
            continue
        if tz is None:
            return naive.astimezone()
        return to_zone(naive.replace(tzinfo=tz).astimezone(timezone.utc), tz)
    return None


def earliest_bookable(
    now: datetime,
    lead: timedelta = REMINDER_LEAD,
    slack: timedelta = BOOKING_SLACK,
    tz: Optional[tzinfo] = None,
) -> datetime:
    return shift(now, lead + slack, tz)


def reminder_time(
    appointment_at: datetime,
    lead: timedelta = REMINDER_LEAD,
    tz: Optional[tzinfo] = None,
) -> datetime:
    return shift(appointment_at, -lead, tz)


def format_display(value: datetime) -> str:
    return value.strftime(DISPLAY_FORMAT)


def format_clock(value: datetime) -> str:
    return value.strftime(CLOCK_FORMAT)


def format_iso(value: datetime) -> str:
    """ISO-8601 with offset, as the scheduled-message API expects."""
    return value.isoformat(timespec="seconds")


def default_form_values(
    now: datetime,
    offset: timedelta = DEFAULT_FORM_OFFSET,
    tz: Optional[tzinfo] = None,
) -> dict[str, str]:
    """Date and time pre-filled on an empty booking form."""
    suggested = shift(now, offset, tz)
    return {
        "date": suggested.strftime(DATE_FORMAT),
        "time": suggested.strftime(CLOCK_FORMAT),
    }
