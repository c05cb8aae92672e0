"""Event filtering and the extraction pipeline."""

from .pipeline import (
    EventProcessingPipeline,
    ProcessingContext,
    ProcessingResult,
    create_extraction_pipeline,
    extract_events,
)
from .range_matcher import DateRangeMatcher, MatchResult, match_event_range, overlaps

__all__ = [
    "DateRangeMatcher",
    "EventProcessingPipeline",
    "MatchResult",
    "ProcessingContext",
    "ProcessingResult",
    "create_extraction_pipeline",
    "extract_events",
    "match_event_range",
    "overlaps",
]
