"""VEVENT property-line parsing - edscal.

A deliberately shallow parser: one ``KEY:VALUE`` per line, parameters are
left attached to the key, values are kept verbatim. Lines that do not look
like properties are skipped rather than rejected.
"""

import logging

from edscal.calendar.models import (
    DEFAULT_CALENDAR_COLOR,
    DEFAULT_CALENDAR_NAME,
    CalendarEvent,
)

logger = logging.getLogger(__name__)

# Present on DTSTART lines for date-only values, e.g. DTSTART;VALUE=DATE:20240615
VALUE_DATE_MARKER = ";VALUE=DATE:"

# Exact-key properties copied straight onto the event
_TEXT_PROPERTIES = {
    "UID": "id",
    "SUMMARY": "title",
    "DESCRIPTION": "description",
    "LOCATION": "location",
}


def split_property_line(line: str) -> tuple[str, str] | None:
    """Split a stripped property line at its first colon.

    Returns:
        (uppercased key, verbatim value), or None if the line has no colon
    """
    if ":" not in line:
        return None
    key, value = line.split(":", 1)
    return key.upper(), value


def build_event(
    block: str,
    calendar_name: str = DEFAULT_CALENDAR_NAME,
    calendar_color: str = DEFAULT_CALENDAR_COLOR,
) -> CalendarEvent:
    """Build an event record from one unescaped VEVENT block.

    Later occurrences of a property overwrite earlier ones. DTSTART and
    DTEND match by prefix so that parameters such as ``;TZID=...`` or
    ``;VALUE=DATE`` do not hide them.

    Args:
        block: VEVENT text with real line breaks
        calendar_name: Value for the ``calendar`` field
        calendar_color: Value for the ``color`` field

    Returns:
        Populated CalendarEvent (possibly with an empty title)
    """
    fields: dict[str, object] = {}

    for raw_line in block.split("\n"):
        line = raw_line.strip()
        parts = split_property_line(line)
        if parts is None:
            continue
        key, value = parts

        if key in _TEXT_PROPERTIES:
            fields[_TEXT_PROPERTIES[key]] = value
        elif key.startswith("DTSTART"):
            fields["start"] = value
            fields["all_day"] = VALUE_DATE_MARKER in line
        elif key.startswith("DTEND"):
            fields["end"] = value

    return CalendarEvent(calendar=calendar_name, color=calendar_color, **fields)


class EventBlockParser:
    """Parser for VEVENT blocks into CalendarEvent objects."""

    def __init__(
        self,
        calendar_name: str = DEFAULT_CALENDAR_NAME,
        calendar_color: str = DEFAULT_CALENDAR_COLOR,
    ):
        """Initialize event block parser.

        Args:
            calendar_name: Calendar name stamped on every event
            calendar_color: Calendar color stamped on every event
        """
        self.calendar_name = calendar_name
        self.calendar_color = calendar_color

    def parse_block(self, block: str) -> CalendarEvent:
        """Parse a single VEVENT block."""
        event = build_event(block, self.calendar_name, self.calendar_color)
        if not event.has_title:
            logger.debug("VEVENT %r has no SUMMARY", event.id)
        return event

    def __repr__(self) -> str:
        return f"EventBlockParser(calendar={self.calendar_name!r}, color={self.calendar_color!r})"
