"""Date parsing utilities for iCalendar tokens - edscal.

Only the three shapes EDS emits for DTSTART/DTEND are understood. No
timezone database lookups happen here: a trailing ``Z`` is accepted but the
result stays naive, and floating timestamps are compared as if they were in
the same zone.
"""

import logging
import re
from datetime import datetime

from edscal.calendar.exceptions import DateFormatError, RangeFormatError

logger = logging.getLogger(__name__)

# (shape, strptime format) in priority order; the shape guard keeps strptime
# from accepting single-digit months or days.
ICAL_DATE_FORMATS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"^\d{8}$"), "%Y%m%d"),
    (re.compile(r"^\d{8}T\d{6}Z$"), "%Y%m%dT%H%M%SZ"),
    (re.compile(r"^\d{8}T\d{6}$"), "%Y%m%dT%H%M%S"),
)

RANGE_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
RANGE_DATE_FORMAT = "%Y-%m-%d"

# Length of a bare YYYYMMDD token
DATE_ONLY_TOKEN_LENGTH = 8


def parse_ical_date(token: str) -> datetime:
    """Parse a raw DTSTART/DTEND value.

    Args:
        token: Raw property value, e.g. ``20240615`` or ``20240615T100000Z``

    Returns:
        Naive datetime for the token (midnight for date-only tokens)

    Raises:
        DateFormatError: If the token matches none of the supported shapes

    Examples:
        >>> parse_ical_date("20240615")
        datetime.datetime(2024, 6, 15, 0, 0)
        >>> parse_ical_date("20240615T100000Z")
        datetime.datetime(2024, 6, 15, 10, 0)
    """
    if not isinstance(token, str):
        raise DateFormatError(token)

    for shape, fmt in ICAL_DATE_FORMATS:
        if not shape.match(token):
            continue
        try:
            return datetime.strptime(token, fmt)
        except ValueError:
            # Right shape, impossible calendar value (e.g. month 13)
            break

    raise DateFormatError(token)


def parse_range_date(value: str) -> datetime:
    """Parse a ``YYYY-MM-DD`` range bound to midnight of that day.

    Raises:
        RangeFormatError: If the value is not a valid ``YYYY-MM-DD`` date
    """
    if not isinstance(value, str) or not RANGE_DATE_PATTERN.match(value):
        raise RangeFormatError(value)
    try:
        return datetime.strptime(value, RANGE_DATE_FORMAT)
    except ValueError as e:
        raise RangeFormatError(value) from e


def is_date_only_token(token: str) -> bool:
    """Check whether a raw token has the length of a bare ``YYYYMMDD`` date.

    This is a length test only, independent of any ``VALUE=DATE`` parameter
    on the property line.
    """
    return len(token) == DATE_ONLY_TOKEN_LENGTH
