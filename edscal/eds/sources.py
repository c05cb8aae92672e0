"""Evolution Data Server source discovery from gdbus text replies.

These helpers read the textual GVariant output of ``gdbus call`` against the
EDS SourceManager and CalendarFactory objects. They use plain pattern
matching on the dump, the same way the VEVENT extractor does, rather than a
GVariant parser.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import Literal, Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)

SYSTEM_CALENDAR_UID = "system-calendar"

# How far around a UID to look for its [Calendar] section
_SECTION_LOOKBEHIND = 2500
_SECTION_LOOKAHEAD = 5000

# Lines scanned after the UID line when reading source metadata
_META_LINE_WINDOW = 50

_OBJECT_PATH_PATTERN = re.compile(r"'(/[^']+)'")
_BUS_NAME_PATTERN = re.compile(r", '([^']+)'")
_SOURCE_UID_PATTERN = re.compile(r"UID.*<'([a-f0-9-]{32,40}|system-calendar)'>")
_DATA_PATTERN = re.compile(r"'Data':\s*<'([^']*(?:\\.[^']*)*)'>")
_DISPLAY_NAME_PATTERN = re.compile(r"^DisplayName=(.+)$", re.MULTILINE)
_CALENDAR_SECTION_PATTERN = re.compile(r"\[Calendar\]\n(.*?)(?:\n\[|\Z)", re.DOTALL)
_BACKEND_NAME_PATTERN = re.compile(r"^BackendName=(.+)$", re.MULTILINE)

BackendName = Literal["local", "contacts", "caldav", "unknown"]
_KNOWN_BACKENDS = ("local", "contacts", "caldav")


class OpenCalendarReply(BaseModel):
    """Object path and bus name returned by CalendarFactory.OpenCalendar."""

    object_path: str
    bus: str


class CalendarSource(BaseModel):
    """Display metadata for one EDS calendar source."""

    uid: str
    name: str
    backend: BackendName = "unknown"
    enabled: bool = True


def _split_entries(raw: str) -> str:
    # GVariant dumps separate dict entries with ", " on a single line
    return raw.replace(", ", "\n")


def parse_open_calendar(raw: str) -> Optional[OpenCalendarReply]:
    """Parse an OpenCalendar reply.

    Accepts both reply shapes EDS produces::

        ('/org/gnome/evolution/dataserver/Subprocess/122783/11', 'org.gnome.evolution.dataserver.Calendar8')
        (objectpath '/obj', 'org.gnome.evolution.dataserver.Calendar8')

    Returns:
        The reply, or None if the path or bus name is missing
    """
    path_match = _OBJECT_PATH_PATTERN.search(raw)
    bus_match = _BUS_NAME_PATTERN.search(raw)
    if not path_match or not bus_match:
        logger.debug("OpenCalendar reply not recognized: %.200r", raw)
        return None
    return OpenCalendarReply(object_path=path_match.group(1), bus=bus_match.group(1))


def extract_calendar_sources(raw: str) -> list[str]:
    """List the UIDs of sources that carry a ``[Calendar]`` section.

    ``system-calendar`` is always included, last if it was not found.

    Args:
        raw: SourceManager.GetManagedObjects reply text

    Returns:
        De-duplicated source UIDs in discovery order
    """
    text = _split_entries(raw)
    uids: list[str] = []

    for match in _SOURCE_UID_PATTERN.finditer(text):
        uid = match.group(1)
        idx = text.find(uid)
        chunk = text[max(0, idx - _SECTION_LOOKBEHIND) : idx + _SECTION_LOOKAHEAD]
        if "[Calendar]" in chunk:
            uids.append(uid)

    if SYSTEM_CALENDAR_UID not in uids:
        uids.append(SYSTEM_CALENDAR_UID)

    return list(dict.fromkeys(uids))


def _backend_from_data(data: str) -> BackendName:
    section = _CALENDAR_SECTION_PATTERN.search(data)
    if not section:
        return "unknown"
    backend = _BACKEND_NAME_PATTERN.search(section.group(1))
    if backend and backend.group(1) in _KNOWN_BACKENDS:
        return backend.group(1)  # type: ignore[return-value]
    return "unknown"


def _source_meta(lines: list[str], uid: str) -> CalendarSource:
    uid_pattern = re.compile(rf"UID.*<'{re.escape(uid)}'>")
    display = ""
    backend: BackendName = "unknown"

    start_index = next((i for i, line in enumerate(lines) if uid_pattern.search(line)), -1)
    if start_index >= 0:
        section = "\n".join(lines[start_index : start_index + _META_LINE_WINDOW])
        data_match = _DATA_PATTERN.search(section)
        if data_match:
            data = data_match.group(1).replace("\\n", "\n")
            name_match = _DISPLAY_NAME_PATTERN.search(data)
            if name_match:
                display = name_match.group(1)
            backend = _backend_from_data(data)
    else:
        logger.debug("Source %s not found in reply", uid)

    if not display.strip():
        display = f"Calendar {uid}"

    return CalendarSource(uid=uid, name=display, backend=backend)


def extract_calendar_meta(raw: str, uids: Iterable[str]) -> list[CalendarSource]:
    """Read display name and backend for each source UID.

    Args:
        raw: SourceManager.GetManagedObjects reply text
        uids: Source UIDs, typically from extract_calendar_sources()

    Returns:
        One CalendarSource per UID, in the given order
    """
    lines = _split_entries(raw).split("\n")
    return [_source_meta(lines, uid) for uid in uids]
