"""JSON output for extracted events and sources - edscal."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence

from pydantic import BaseModel
from pydantic_core import PydanticSerializationError

from edscal.calendar.exceptions import SerializationError
from edscal.calendar.models import CalendarEvent

logger = logging.getLogger(__name__)

EMPTY_JSON_ARRAY = "[]"


def serialize_models(models: Sequence[BaseModel]) -> str:
    """Render models as a compact JSON array using their aliases as keys.

    Raises:
        SerializationError: If any model cannot be rendered
    """
    try:
        payload = [model.model_dump(mode="json", by_alias=True) for model in models]
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    except (PydanticSerializationError, TypeError, ValueError) as e:
        raise SerializationError(f"JSON marshal error: {e}") from e


def serialize_models_or_empty(models: Sequence[BaseModel]) -> str:
    """Render models, falling back to ``[]`` when serialization fails.

    The failure is logged; callers always get a valid JSON array.
    """
    try:
        return serialize_models(models)
    except SerializationError:
        logger.exception("Failed to serialize %d records, emitting empty array", len(models))
        return EMPTY_JSON_ARRAY


def serialize_events(events: Sequence[CalendarEvent]) -> str:
    """Render events as a compact JSON array.

    Keys are ``id, title, description, location, start, end, allDay,
    calendar, color`` in that order.

    Raises:
        SerializationError: If the events cannot be rendered
    """
    return serialize_models(events)


def serialize_events_or_empty(events: Sequence[CalendarEvent]) -> str:
    """Render events, or ``[]`` if they cannot be rendered."""
    try:
        return serialize_events(events)
    except SerializationError:
        logger.exception("Failed to serialize %d events, emitting empty array", len(events))
        return EMPTY_JSON_ARRAY
