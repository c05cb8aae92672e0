"""Concrete pipeline stages for event extraction.

Each stage wraps one edscal component into the EventProcessor protocol.
"""

from __future__ import annotations

import logging
from collections import Counter

from edscal.calendar.block_extractor import iter_vevent_blocks
from edscal.calendar.event_parser import EventBlockParser
from edscal.calendar.models import DateRange
from edscal.domain.pipeline import ProcessingContext, ProcessingResult
from edscal.domain.range_matcher import DateRangeMatcher, MatchResult

logger = logging.getLogger(__name__)


class BlockExtractionStage:
    """Pull unescaped VEVENT blocks out of context.raw_content."""

    def __init__(self) -> None:
        self._name = "BlockExtraction"

    @property
    def name(self) -> str:
        """Stage name for logging."""
        return self._name

    def process(self, context: ProcessingContext) -> ProcessingResult:
        """Populate context.blocks from the raw input."""
        result = ProcessingResult(stage_name=self.name)

        context.blocks = list(iter_vevent_blocks(context.raw_content))

        result.metadata["blocks_found"] = len(context.blocks)
        result.events_out = len(context.blocks)
        if context.raw_content and not context.blocks:
            logger.debug("No VEVENT blocks in %d characters of input", len(context.raw_content))
        return result


class EventBuildStage:
    """Build one CalendarEvent per extracted block."""

    def __init__(self, parser: EventBlockParser) -> None:
        """Initialize build stage.

        Args:
            parser: Block parser used for every block
        """
        self._name = "EventBuild"
        self.parser = parser

    @property
    def name(self) -> str:
        """Stage name for logging."""
        return self._name

    def process(self, context: ProcessingContext) -> ProcessingResult:
        """Replace context.events with one event per block, in block order."""
        result = ProcessingResult(stage_name=self.name, events_in=len(context.blocks))

        context.events = [self.parser.parse_block(block) for block in context.blocks]

        result.events = context.events
        result.events_out = len(context.events)
        return result


class TitleFilterStage:
    """Drop events without a SUMMARY."""

    def __init__(self) -> None:
        self._name = "TitleFilter"

    @property
    def name(self) -> str:
        """Stage name for logging."""
        return self._name

    def process(self, context: ProcessingContext) -> ProcessingResult:
        """Keep only events whose title is non-empty."""
        result = ProcessingResult(stage_name=self.name, events_in=len(context.events))

        context.events = [event for event in context.events if event.has_title]

        result.events = context.events
        result.events_out = len(context.events)
        result.events_filtered = result.events_in - result.events_out
        if result.events_filtered:
            logger.debug("Dropped %d untitled events", result.events_filtered)
        return result


class DateRangeFilterStage:
    """Keep events that overlap the configured date range.

    Events whose dates cannot be parsed are kept and counted under
    ``metadata["unknown_included"]``.
    """

    def __init__(self, date_range: DateRange) -> None:
        """Initialize range filter.

        Args:
            date_range: Inclusive range, fixed for the lifetime of the stage
        """
        self._name = "DateRangeFilter"
        self.matcher = DateRangeMatcher(date_range)

    @property
    def name(self) -> str:
        """Stage name for logging."""
        return self._name

    def process(self, context: ProcessingContext) -> ProcessingResult:
        """Filter context.events through the range matcher, preserving order."""
        result = ProcessingResult(stage_name=self.name, events_in=len(context.events))

        if self.matcher.is_open:
            message = f"Date range {self.matcher.date_range} is not parseable; including all events"
            result.warnings.append(message)
            logger.info("%s", message)

        outcomes: Counter[MatchResult] = Counter()
        kept = []
        for event in context.events:
            outcome = self.matcher.match(event)
            outcomes[outcome] += 1
            if outcome.included:
                kept.append(event)

        context.events = kept

        result.events = context.events
        result.events_out = len(context.events)
        result.events_filtered = result.events_in - result.events_out
        result.metadata["unknown_included"] = outcomes[MatchResult.UNKNOWN_INCLUDE]

        logger.debug(
            "Range filter %s: %d matched, %d unknown (kept), %d outside",
            self.matcher.date_range,
            outcomes[MatchResult.MATCHED],
            outcomes[MatchResult.UNKNOWN_INCLUDE],
            outcomes[MatchResult.NOT_MATCHED],
        )
        return result
