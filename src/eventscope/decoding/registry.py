"""Registry construction helpers.

This module exposes:
- `make_registry(entries)` → frozen EventRegistry from schemas and/or
  Solidity event signatures

A registry is built once and never mutated; compose registries with
`EventRegistry.merge` (or ``a | b``).
"""

from __future__ import annotations

from collections.abc import Iterable

from eventscope.decoding.registry_builder import schema_from_signature
from eventscope.decoding.specs import EventRegistry, EventSchema


def make_registry(entries: EventSchema | str | Iterable[EventSchema | str] = ()) -> EventRegistry:
    """Create a registry from schemas and/or event signature strings.

    Raises `SchemaError` for unparsable signatures and topic0 collisions.
    """
    if isinstance(entries, (EventSchema, str)):
        entries = [entries]
    return EventRegistry(schema_from_signature(e) if isinstance(e, str) else e for e in entries)

