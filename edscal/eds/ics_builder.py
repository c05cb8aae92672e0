"""Build VEVENT payloads and query timestamps for EDS D-Bus calls.

``build_vevent`` produces the escaped single-line form gdbus expects as a
string argument, which is also the form the extractor reads back.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Optional

from pydantic import BaseModel, Field

ICAL_UTC_FORMAT = "%Y%m%dT%H%M%SZ"
ICAL_DATE_FORMAT = "%Y%m%d"

# Lines are joined with an escaped CRLF, not a real one
GDBUS_LINE_SEPARATOR = "\\r\\n"

DEFAULT_EVENT_DURATION = timedelta(hours=1)
QUERY_WINDOW_PADDING = timedelta(minutes=15)


def _as_utc(dt: datetime) -> datetime:
    """Convert to UTC, treating naive datetimes as already UTC."""
    return dt.astimezone(UTC) if dt.tzinfo is not None else dt.replace(tzinfo=UTC)


def to_query_utc(dt: datetime) -> str:
    """Format a datetime as an iCalendar UTC stamp (``YYYYMMDDTHHMMSSZ``).

    Examples:
        >>> to_query_utc(datetime(2024, 6, 15, 10, 0, tzinfo=UTC))
        '20240615T100000Z'
    """
    return _as_utc(dt).strftime(ICAL_UTC_FORMAT)


def now_utc_stamp() -> str:
    """Current time as an iCalendar UTC stamp."""
    return to_query_utc(datetime.now(UTC))


def query_window(dt: datetime, padding: timedelta = QUERY_WINDOW_PADDING) -> tuple[str, str]:
    """UTC stamps for ``dt - padding`` and ``dt + padding``.

    Used to look up an event that was just created around its start time.
    """
    return to_query_utc(dt - padding), to_query_utc(dt + padding)


class NewEvent(BaseModel):
    """Event to be created through CalendarFactory/Calendar.CreateObjects."""

    uid: str
    summary: str = ""
    start: datetime
    end: Optional[datetime] = None
    all_day: bool = False
    description: str = ""
    location: str = ""
    dtstamp: str = Field(default_factory=now_utc_stamp)


def build_vevent(event: NewEvent) -> str:
    """Serialize a NewEvent as a gdbus-escaped VEVENT.

    All-day events get a DATE-valued DTSTART and a DTEND on the following
    day. Timed events without an end last one hour. Newlines in the
    description are escaped as ``\\n``.

    Returns:
        Single-line VEVENT with literal ``\\r\\n`` separators
    """
    lines = [
        "BEGIN:VEVENT",
        f"UID:{event.uid}",
        f"DTSTAMP:{event.dtstamp}",
    ]

    if event.all_day:
        start_date = event.start.date()
        lines.append(f"DTSTART;VALUE=DATE:{start_date.strftime(ICAL_DATE_FORMAT)}")
        lines.append(f"DTEND;VALUE=DATE:{(start_date + timedelta(days=1)).strftime(ICAL_DATE_FORMAT)}")
    else:
        end = event.end if event.end is not None else event.start + DEFAULT_EVENT_DURATION
        lines.append(f"DTSTART:{to_query_utc(event.start)}")
        lines.append(f"DTEND:{to_query_utc(end)}")

    lines.append(f"SUMMARY:{event.summary}")
    if event.description:
        lines.append("DESCRIPTION:" + event.description.replace("\n", "\\n"))
    if event.location:
        lines.append(f"LOCATION:{event.location}")
    lines.append("END:VEVENT")

    return GDBUS_LINE_SEPARATOR.join(lines)
