"""Domain event constants and publisher.

Defines event type constants and a simple publish() callable used by the
submission flow. Published events are logged and buffered in-process so a
thin client (or a test) can observe the celebration trigger. The buffer keeps
only the most recent `EVENT_BUFFER_SIZE` events.
"""

from __future__ import annotations

from collections import deque
from typing import Any, Deque, Dict, List
import logging

logger = logging.getLogger(__name__)

SURVEY_COMPLETED = "survey.completed"
SURVEY_SUBMISSION_FAILED = "survey.submission_failed"

EVENT_BUFFER_SIZE = 100


def publish(event_type: str, payload: Dict[str, Any]) -> None:
    """Publish a domain event by logging it and appending it to the buffer."""
    logger.info("event_publish type=%s payload=%s", event_type, payload)
    EVENT_BUFFER.append({"type": event_type, "payload": payload})


EVENT_BUFFER: Deque[Dict[str, Any]] = deque(maxlen=EVENT_BUFFER_SIZE)


def get_buffered_events(clear: bool = True) -> List[Dict[str, Any]]:
    """Return buffered domain events; optionally clear the buffer."""
    events = list(EVENT_BUFFER)
    if clear:
        EVENT_BUFFER.clear()
    return events

__all__ = [
    "SURVEY_COMPLETED",
    "SURVEY_SUBMISSION_FAILED",
    "EVENT_BUFFER_SIZE",
    "publish",
    "get_buffered_events",
    "EVENT_BUFFER",
]
