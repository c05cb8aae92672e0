"""Helpers for Evolution Data Server gdbus replies and requests."""

from .ics_builder import NewEvent, build_vevent, now_utc_stamp, query_window, to_query_utc
from .sources import (
    CalendarSource,
    OpenCalendarReply,
    extract_calendar_meta,
    extract_calendar_sources,
    parse_open_calendar,
)

__all__ = [
    "CalendarSource",
    "NewEvent",
    "OpenCalendarReply",
    "build_vevent",
    "extract_calendar_meta",
    "extract_calendar_sources",
    "now_utc_stamp",
    "parse_open_calendar",
    "query_window",
    "to_query_utc",
]
