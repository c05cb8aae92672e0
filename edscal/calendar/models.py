"""Data models for extracted calendar events - edscal."""

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CALENDAR_NAME = "Personal"
DEFAULT_CALENDAR_COLOR = "#1976d2"


class CalendarEvent(BaseModel):
    """Normalized event record built from one VEVENT block.

    ``start`` and ``end`` keep the raw DTSTART/DTEND tokens exactly as they
    appeared in the block. Field order is the JSON output order.
    """

    id: str = Field(default="", description="UID property")
    title: str = Field(default="", description="SUMMARY property")
    description: str = Field(default="", description="DESCRIPTION property")
    location: str = Field(default="", description="LOCATION property")
    start: str = Field(default="", description="Raw DTSTART value")
    end: str = Field(default="", description="Raw DTEND value")
    all_day: bool = Field(
        default=False,
        alias="allDay",
        description="True when the DTSTART line carries ;VALUE=DATE:",
    )
    calendar: str = Field(default=DEFAULT_CALENDAR_NAME, description="Calendar display name")
    color: str = Field(default=DEFAULT_CALENDAR_COLOR, description="Calendar color")

    model_config = ConfigDict(populate_by_name=True)

    @property
    def has_title(self) -> bool:
        """Check if event has the title required to be emitted."""
        return self.title != ""


class DateRange(BaseModel):
    """Caller-supplied inclusive date range.

    Bounds are kept as given (normally ``YYYY-MM-DD``). Empty or malformed
    bounds are legal here; the range matcher treats them as "include all".
    """

    start: str = ""
    end: str = ""

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.start or '?'}..{self.end or '?'}"
