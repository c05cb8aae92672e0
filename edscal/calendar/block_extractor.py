"""VEVENT block extraction from raw D-Bus dumps - edscal.

EDS hands calendar objects back as single-quoted, backslash-escaped strings
inside a GVariant text dump, e.g.::

    (['BEGIN:VEVENT\\r\\nUID:1\\r\\nSUMMARY:Standup\\r\\nEND:VEVENT'],)

Some callers pass already-unwrapped iCalendar text instead, so extraction
falls back to scanning for bare BEGIN/END markers when nothing quoted is
found.
"""

from __future__ import annotations

import itertools
import logging
import re
from collections.abc import Iterator

logger = logging.getLogger(__name__)

BEGIN_MARKER = "BEGIN:VEVENT"
END_MARKER = "END:VEVENT"

# A quoted run holding both markers and no further single quote
QUOTED_VEVENT_PATTERN = re.compile(r"'([^']*BEGIN:VEVENT[^']*END:VEVENT[^']*)'")

# Two-character escape sequences as they appear in gdbus output
_ESCAPED_CRLF = "\\r\\n"
_ESCAPED_LF = "\\n"


def unescape_block(block: str) -> str:
    """Turn literal ``\\r\\n`` and ``\\n`` sequences into real line breaks."""
    return block.replace(_ESCAPED_CRLF, "\n").replace(_ESCAPED_LF, "\n")


def _iter_unquoted_candidates(text: str) -> Iterator[str]:
    """Yield BEGIN..END spans, each ending at the nearest following END marker."""
    pos = 0
    while True:
        begin = text.find(BEGIN_MARKER, pos)
        if begin < 0:
            return
        end = text.find(END_MARKER, begin + len(BEGIN_MARKER))
        if end < 0:
            logger.debug("Unterminated VEVENT at offset %d, stopping scan", begin)
            return
        pos = end + len(END_MARKER)
        yield text[begin:pos]


def iter_vevent_blocks(text: str) -> Iterator[str]:
    """Lazily yield unescaped VEVENT blocks found in ``text``.

    Quoted blocks win: the bare-marker scan only runs when no quoted block
    exists anywhere in the input. Candidates that lack ``BEGIN:VEVENT`` after
    unescaping are dropped.

    The returned iterator is single pass; call again to re-extract.

    Args:
        text: Full captured input

    Yields:
        Unescaped block text, in input order
    """
    if not text:
        return

    quoted = QUOTED_VEVENT_PATTERN.finditer(text)
    first = next(quoted, None)
    if first is not None:
        candidates = (match.group(1) for match in itertools.chain((first,), quoted))
    else:
        logger.debug("No quoted VEVENT blocks found, scanning for bare markers")
        candidates = _iter_unquoted_candidates(text)

    for raw_block in candidates:
        block = unescape_block(raw_block)
        if BEGIN_MARKER not in block:
            continue
        yield block
