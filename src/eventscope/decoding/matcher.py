"""Classify raw logs against a registry by their topic0."""

from __future__ import annotations

from eventscope.core.models import RawLog
from eventscope.decoding.specs import EventRegistry, EventSchema


def match(log: RawLog, registry: EventRegistry) -> EventSchema | None:
    """Return the schema whose signature hash equals ``log.topics[0]``.

    Returns None when the log has no topics (anonymous or malformed) or when
    no registered event matches; neither is an error.
    """
    if not log.topics:
        return None
    return registry.get(log.topics[0])
