"""Exception hierarchy for edscal parsing and output.

Date and range errors never escape the range matcher: they are converted
into permissive inclusion there. ``SerializationError`` is the only one the
CLI sees, and it answers it by printing an empty JSON array.
"""


class EdsCalError(Exception):
    """Base exception for all edscal errors."""


class DateFormatError(EdsCalError, ValueError):
    """An iCalendar date/time token matched none of the supported encodings.

    Supported encodings:
    - ``YYYYMMDD`` (date only)
    - ``YYYYMMDDTHHMMSSZ`` (UTC timestamp)
    - ``YYYYMMDDTHHMMSS`` (floating timestamp)
    """

    def __init__(self, token: object) -> None:
        super().__init__(f"unparseable date: {token!r}")
        self.token = token


class RangeFormatError(EdsCalError, ValueError):
    """A range bound was not a ``YYYY-MM-DD`` date."""

    def __init__(self, value: object) -> None:
        super().__init__(f"unparseable range date: {value!r}")
        self.value = value


class SerializationError(EdsCalError):
    """Events could not be rendered as a JSON array."""
