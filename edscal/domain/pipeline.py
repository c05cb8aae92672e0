"""Event extraction pipeline architecture for edscal.

Raw text goes through a fixed sequence of stages, each reading from and
writing to a shared ProcessingContext:

    BlockExtractionStage -> EventBuildStage -> TitleFilterStage -> DateRangeFilterStage

Usage:
    pipeline = create_extraction_pipeline(DateRange(start="2024-06-01", end="2024-06-30"))
    result = pipeline.process(ProcessingContext(raw_content=text))

    # or, in one call
    events = extract_events(text, DateRange(start="2024-06-01", end="2024-06-30"))

The whole run is synchronous and single pass. The date range is fixed when
the pipeline is built; nothing is read from the environment mid-run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from edscal.calendar.event_parser import EventBlockParser
from edscal.calendar.models import CalendarEvent, DateRange

logger = logging.getLogger(__name__)


@dataclass
class ProcessingContext:
    """Context passed between pipeline stages."""

    # Input
    raw_content: str = ""

    # Processing state (modified by stages)
    blocks: list[str] = field(default_factory=list)
    events: list[CalendarEvent] = field(default_factory=list)

    # Stage-specific data (extensible)
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class ProcessingResult:
    """Result from a pipeline stage or complete pipeline execution."""

    success: bool = True
    events: list[CalendarEvent] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    # Statistics
    events_in: int = 0
    events_out: int = 0
    events_filtered: int = 0
    stage_name: str = ""

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)
        logger.warning("[%s] %s", self.stage_name, message)

    def add_error(self, message: str) -> None:
        """Add an error message and mark as failed."""
        self.errors.append(message)
        self.success = False
        logger.error("[%s] %s", self.stage_name, message)


class EventProcessor(Protocol):
    """Protocol for a single stage in the extraction pipeline.

    Each stage receives the ProcessingContext, does one job, updates the
    context for downstream stages and returns a ProcessingResult.
    """

    def process(self, context: ProcessingContext) -> ProcessingResult:
        """Run this stage against the context."""
        ...

    @property
    def name(self) -> str:
        """Name of this processing stage for logging."""
        ...


class EventProcessingPipeline:
    """Runs stages in sequence over a shared context.

    A stage that reports failure, or raises, stops the pipeline; the
    aggregated result then has ``success=False`` and no events.
    """

    def __init__(self) -> None:
        """Initialize empty pipeline."""
        self.stages: list[EventProcessor] = []

    def add_stage(self, stage: EventProcessor) -> EventProcessingPipeline:
        """Add a processing stage to the pipeline (builder pattern).

        Returns:
            Self for method chaining
        """
        self.stages.append(stage)
        logger.debug("Added stage to pipeline: %s", stage.name)
        return self

    def process(self, context: ProcessingContext) -> ProcessingResult:
        """Execute all pipeline stages in sequence.

        Args:
            context: Processing context with the raw input set

        Returns:
            Aggregated result; ``events`` holds the surviving events in input order
        """
        logger.debug("Starting pipeline with %d stages", len(self.stages))

        aggregated_result = ProcessingResult(stage_name="Pipeline")

        for i, stage in enumerate(self.stages):
            stage_num = i + 1
            logger.debug("Executing stage %d/%d: %s", stage_num, len(self.stages), stage.name)

            try:
                stage_result = stage.process(context)
            except Exception as e:
                aggregated_result.add_error(f"Stage {stage.name} raised exception: {e}")
                logger.exception("Stage %s failed with exception", stage.name)
                return aggregated_result

            logger.debug(
                "Stage %s/%s (%s) completed: success=%s, events_in=%s, events_out=%s, filtered=%s",
                stage_num,
                len(self.stages),
                stage.name,
                stage_result.success,
                stage_result.events_in,
                stage_result.events_out,
                stage_result.events_filtered,
            )

            aggregated_result.warnings.extend(stage_result.warnings)
            aggregated_result.errors.extend(stage_result.errors)

            if not stage_result.success:
                aggregated_result.success = False
                logger.error("Pipeline stopped at stage %s (%s) due to failure", stage_num, stage.name)
                return aggregated_result

            aggregated_result.metadata.update(stage_result.metadata)

        aggregated_result.success = True
        aggregated_result.events = list(context.events)
        aggregated_result.events_out = len(context.events)

        logger.info(
            "Pipeline completed: %s events, %s warnings",
            aggregated_result.events_out,
            len(aggregated_result.warnings),
        )
        return aggregated_result

    def __repr__(self) -> str:
        stage_names = [stage.name for stage in self.stages]
        return f"EventProcessingPipeline(stages={stage_names})"


def create_extraction_pipeline(
    date_range: DateRange,
    event_parser: Optional[EventBlockParser] = None,
) -> EventProcessingPipeline:
    """Build the standard extract -> build -> filter pipeline.

    Args:
        date_range: Inclusive range events must overlap
        event_parser: Block parser (defaults to Personal / #1976d2)

    Returns:
        Pipeline ready to process a ProcessingContext
    """
    # Local import: pipeline_stages imports this module
    from edscal.domain.pipeline_stages import (
        BlockExtractionStage,
        DateRangeFilterStage,
        EventBuildStage,
        TitleFilterStage,
    )

    return (
        EventProcessingPipeline()
        .add_stage(BlockExtractionStage())
        .add_stage(EventBuildStage(event_parser or EventBlockParser()))
        .add_stage(TitleFilterStage())
        .add_stage(DateRangeFilterStage(date_range))
    )


def extract_events(
    text: str,
    date_range: DateRange,
    event_parser: Optional[EventBlockParser] = None,
) -> list[CalendarEvent]:
    """Extract, build and filter events from raw text in one call.

    Args:
        text: Full captured input
        date_range: Inclusive range events must overlap
        event_parser: Optional block parser override

    Returns:
        Surviving events in extraction order; empty if the pipeline failed
    """
    pipeline = create_extraction_pipeline(date_range, event_parser)
    result = pipeline.process(ProcessingContext(raw_content=text))
    if not result.success:
        logger.error("Event extraction failed: %s", "; ".join(result.errors))
        return []
    return result.events
