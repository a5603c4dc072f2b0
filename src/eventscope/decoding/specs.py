"""Event schema primitives and the frozen topic0 registry.

- `EventField`: one declared event argument (name, type, indexed flag)
- `EventSchema`: one event (ordered fields + derived signature / topic0 and
  the indexed / data partition, computed once at construction)
- `EventRegistry`: immutable mapping from topic0 bytes to `EventSchema`
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from eventscope.constants import MAX_INDEXED_FIELDS
from eventscope.decoding.signature import canonical_signature, signature_hash
from eventscope.decoding.types import FieldType
from eventscope.errors import SchemaError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventField:
    """One declared event argument."""

    name: str
    type: FieldType
    indexed: bool = False


@dataclass(frozen=True)
class EventSchema:
    """One event definition.

    `fields` keeps the declaration order. `signature`, `signature_hash`,
    `indexed_fields` and `data_fields` are derived from it and never passed in.
    """

    name: str
    fields: tuple[EventField, ...]
    signature: str = field(init=False, compare=False)
    signature_hash: bytes = field(init=False, compare=False, repr=False)
    indexed_fields: tuple[EventField, ...] = field(init=False, compare=False, repr=False)
    data_fields: tuple[EventField, ...] = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not self.name:
            raise SchemaError("event name is missing")
        fields = tuple(self.fields)

        seen: set[str] = set()
        for f in fields:
            if f.name in seen:
                raise SchemaError(f"{self.name}: duplicate field name {f.name!r}")
            seen.add(f.name)

        indexed = tuple(f for f in fields if f.indexed)
        if len(indexed) > MAX_INDEXED_FIELDS:
            raise SchemaError(
                f"{self.name}: {len(indexed)} indexed fields, at most {MAX_INDEXED_FIELDS} allowed"
            )

        signature = canonical_signature(self.name, (f.type for f in fields))
        object.__setattr__(self, "fields", fields)
        object.__setattr__(self, "signature", signature)
        object.__setattr__(self, "signature_hash", signature_hash(signature))
        object.__setattr__(self, "indexed_fields", indexed)
        object.__setattr__(self, "data_fields", tuple(f for f in fields if not f.indexed))

    @property
    def topic0(self) -> str:
        """Lowercased 0x-hex signature hash."""
        return "0x" + self.signature_hash.hex()

    @property
    def num_indexed(self) -> int:
        return len(self.indexed_fields)

    def same_layout(self, other: EventSchema) -> bool:
        """True when both schemas decode logs identically."""
        return self.name == other.name and self.fields == other.fields


def _topic_key(topic0: bytes | str) -> bytes:
    if isinstance(topic0, str):
        return bytes.fromhex(topic0.removeprefix("0x").removeprefix("0X"))
    return bytes(topic0)


class EventRegistry(Mapping[bytes, EventSchema]):
    """Immutable topic0 → EventSchema mapping, built once and shared read-only.

    Two different schemas with the same signature hash (e.g. ERC-20 vs ERC-721
    `Transfer`, which differ only in indexed flags) cannot be told apart by
    topic0 and are rejected with `SchemaError`. Registering the same schema
    twice is a no-op.
    """

    __slots__ = ("_by_topic0",)

    def __init__(self, schemas: Iterable[EventSchema] = ()) -> None:
        table: dict[bytes, EventSchema] = {}
        for schema in schemas:
            existing = table.get(schema.signature_hash)
            if existing is not None:
                if existing.same_layout(schema):
                    continue
                raise SchemaError(
                    f"topic0 collision for {schema.signature}: "
                    f"indexed layouts differ ({existing.num_indexed} vs {schema.num_indexed} indexed)"
                )
            table[schema.signature_hash] = schema
        self._by_topic0: Mapping[bytes, EventSchema] = MappingProxyType(table)
        logger.debug("built event registry with %d schemas", len(table))

    def __getitem__(self, topic0: bytes | str) -> EventSchema:
        try:
            key = _topic_key(topic0)
        except ValueError:
            raise KeyError(topic0) from None
        return self._by_topic0[key]

    def __iter__(self) -> Iterator[bytes]:
        return iter(self._by_topic0)

    def __len__(self) -> int:
        return len(self._by_topic0)

    def __repr__(self) -> str:
        names = ", ".join(s.name for s in self._by_topic0.values())
        return f"<EventRegistry: {names}>"

    def merge(self, other: Iterable[EventSchema] | EventRegistry) -> EventRegistry:
        """Return a new registry holding the schemas of both."""
        more = other.values() if isinstance(other, EventRegistry) else other
        return EventRegistry([*self._by_topic0.values(), *more])

    __or__ = merge

    def topic0s(self) -> list[str]:
        """All topic0s as lowercased 0x-hex strings (for eth_getLogs filters)."""
        return [s.topic0 for s in self._by_topic0.values()]

    def by_name(self, name: str) -> list[EventSchema]:
        """Schemas whose event name equals `name` (overloads share a name)."""
        return [s for s in self._by_topic0.values() if s.name == name]
