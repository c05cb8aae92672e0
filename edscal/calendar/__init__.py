"""VEVENT extraction and parsing."""

from .block_extractor import iter_vevent_blocks, unescape_block
from .datetime_utils import parse_ical_date, parse_range_date
from .event_parser import EventBlockParser, build_event
from .exceptions import DateFormatError, EdsCalError, RangeFormatError, SerializationError
from .models import CalendarEvent, DateRange

__all__ = [
    "CalendarEvent",
    "DateFormatError",
    "DateRange",
    "EdsCalError",
    "EventBlockParser",
    "RangeFormatError",
    "SerializationError",
    "build_event",
    "iter_vevent_blocks",
    "parse_ical_date",
    "parse_range_date",
    "unescape_block",
]
