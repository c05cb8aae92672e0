"""Date range matching for extracted events - edscal.

The range is a set of whole days: ``2024-06-15..2024-06-15`` covers
``[2024-06-15 00:00, 2024-06-16 00:00)``.

Matching fails open. Any bound or event date that cannot be parsed yields
``MatchResult.UNKNOWN_INCLUDE`` instead of an error, so malformed data is
over-reported rather than lost.

All-day detection here looks at the raw DTSTART token length only. It does
not consult ``CalendarEvent.all_day`` (which is derived from the
``;VALUE=DATE:`` marker on the property line); the two checks are kept
separate on purpose.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from edscal.calendar.datetime_utils import is_date_only_token, parse_ical_date, parse_range_date
from edscal.calendar.exceptions import DateFormatError, RangeFormatError
from edscal.calendar.models import CalendarEvent, DateRange

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


class MatchResult(str, Enum):
    """Outcome of matching one event against a date range."""

    MATCHED = "matched"
    NOT_MATCHED = "not_matched"
    UNKNOWN_INCLUDE = "unknown_include"

    @property
    def included(self) -> bool:
        """True for MATCHED and UNKNOWN_INCLUDE."""
        return self is not MatchResult.NOT_MATCHED


def _parse_bounds(range_start: str, range_end: str) -> Optional[tuple[datetime, datetime]]:
    try:
        return parse_range_date(range_start), parse_range_date(range_end)
    except RangeFormatError as e:
        logger.debug("Range not parseable (%s), including everything", e)
        return None


def _match_with_bounds(
    event_start: str,
    event_end: str,
    range_start: datetime,
    range_end: datetime,
) -> MatchResult:
    try:
        start = parse_ical_date(event_start)
    except DateFormatError as e:
        logger.debug("Event start not parseable (%s), including", e)
        return MatchResult.UNKNOWN_INCLUDE

    range_end_exclusive = range_end + ONE_DAY

    if is_date_only_token(event_start):
        if range_start <= start < range_end_exclusive:
            return MatchResult.MATCHED
        return MatchResult.NOT_MATCHED

    end = start
    if event_end:
        try:
            end = parse_ical_date(event_end)
        except DateFormatError:
            logger.debug("Event end %r not parseable, using start", event_end)

    if start >= range_end_exclusive or end < range_start:
        return MatchResult.NOT_MATCHED
    return MatchResult.MATCHED


def match_event_range(
    event_start: str,
    event_end: str,
    range_start: str,
    range_end: str,
) -> MatchResult:
    """Match raw DTSTART/DTEND tokens against ``YYYY-MM-DD`` range bounds.

    Args:
        event_start: Raw DTSTART token
        event_end: Raw DTEND token ("" when absent)
        range_start: First day of the range
        range_end: Last day of the range (inclusive)

    Returns:
        MatchResult; UNKNOWN_INCLUDE when the range or event start is unparseable

    Examples:
        >>> match_event_range("20240615", "", "2024-06-15", "2024-06-15")
        <MatchResult.MATCHED: 'matched'>
        >>> match_event_range("20240615", "", "not-a-date", "")
        <MatchResult.UNKNOWN_INCLUDE: 'unknown_include'>
    """
    bounds = _parse_bounds(range_start, range_end)
    if bounds is None:
        return MatchResult.UNKNOWN_INCLUDE
    return _match_with_bounds(event_start, event_end, *bounds)


def overlaps(event_start: str, event_end: str, range_start: str, range_end: str) -> bool:
    """Boolean form of match_event_range (unknown counts as overlapping)."""
    return match_event_range(event_start, event_end, range_start, range_end).included


class DateRangeMatcher:
    """Matches events against a fixed DateRange.

    Bounds are parsed once at construction.
    """

    def __init__(self, date_range: DateRange) -> None:
        """Initialize matcher.

        Args:
            date_range: Inclusive range to match against
        """
        self.date_range = date_range
        self._bounds = _parse_bounds(date_range.start, date_range.end)

    @property
    def is_open(self) -> bool:
        """True when the range could not be parsed and every event matches."""
        return self._bounds is None

    def match(self, event: CalendarEvent) -> MatchResult:
        """Match one event by its raw start/end tokens."""
        if self._bounds is None:
            return MatchResult.UNKNOWN_INCLUDE
        return _match_with_bounds(event.start, event.end, *self._bounds)

    def __repr__(self) -> str:
        return f"DateRangeMatcher(range={self.date_range})"
