"""Event schemas from JSON ABI descriptions.

ABI entries are validated with pydantic before being mapped onto the schema
model; anything pydantic rejects surfaces as `SchemaError`.
"""

import json
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ValidationError

from eventscope.decoding.registry import make_registry
from eventscope.decoding.registry_builder import schema_from_signature
from eventscope.decoding.specs import EventField, EventRegistry, EventSchema
from eventscope.decoding.types import parse_type
from eventscope.errors import SchemaError


class AbiInput(BaseModel):
    indexed: bool = False
    internalType: str | None = None
    name: str = ""
    type: str


class AbiEvent(BaseModel):
    anonymous: bool = False
    inputs: Sequence[AbiInput] = ()
    name: str
    type: Literal["event"]


def get_event_field(event_input: AbiInput, position: int) -> EventField:
    return EventField(
        name=event_input.name or f"arg{position}",
        type=parse_type(event_input.type),
        indexed=event_input.indexed,
    )


def get_event_schema(event: AbiEvent) -> EventSchema:
    if event.anonymous:
        raise SchemaError(f"anonymous event {event.name!r} carries no topic0")
    return EventSchema(
        name=event.name,
        fields=tuple(get_event_field(event_input, i) for i, event_input in enumerate(event.inputs)),
    )


def parse_abi_event(entry: Mapping[str, Any] | AbiEvent) -> AbiEvent:
    if isinstance(entry, AbiEvent):
        return entry
    try:
        return AbiEvent.model_validate(entry)
    except ValidationError as exc:
        raise SchemaError(f"malformed ABI event entry: {exc}") from exc


def parse_schema(entry: Mapping[str, Any] | AbiEvent) -> EventSchema:
    """Build an EventSchema from one ABI event entry."""
    return get_event_schema(parse_abi_event(entry))


def register_schema(abi_description: Mapping[str, Any] | AbiEvent | str) -> EventSchema:
    """Build an EventSchema from an ABI event entry, its JSON text, or a
    Solidity signature such as ``"Transfer(address indexed from, ...)"``.
    """
    if isinstance(abi_description, str):
        text = abi_description.strip()
        if not text.startswith("{"):
            return schema_from_signature(text)
        try:
            abi_description = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SchemaError(f"ABI event is not valid JSON: {exc}") from exc
    if not isinstance(abi_description, (Mapping, AbiEvent)):
        raise SchemaError(f"ABI event must be an object, got {type(abi_description).__name__}")
    return parse_schema(abi_description)


AbiJson = Iterable[Mapping[str, Any]]
AbiSpec = AbiJson | Path | str


def _load_abi(abi: AbiSpec) -> AbiJson:
    if isinstance(abi, Path):
        abi = abi.read_text()
    if isinstance(abi, str):
        try:
            abi = json.loads(abi)
        except json.JSONDecodeError as exc:
            raise SchemaError(f"ABI is not valid JSON: {exc}") from exc
    # compiler artifacts wrap the ABI under "abi"
    if isinstance(abi, Mapping):
        if "abi" not in abi:
            raise SchemaError("ABI JSON object has no 'abi' key")
        abi = abi["abi"]
    if not isinstance(abi, Iterable):
        raise SchemaError("ABI must be a list of entries")
    return abi


def iter_abi_events(abi: AbiSpec) -> list[AbiEvent]:
    """Every event entry of the ABI in declaration order (overloads included)."""
    out: list[AbiEvent] = []
    for entry in _load_abi(abi):
        if not isinstance(entry, Mapping):
            raise SchemaError(f"ABI entry is not an object: {entry!r}")
        if entry.get("type") == "event":
            out.append(parse_abi_event(entry))
    return out


def get_events_from_abi(abi: AbiSpec) -> dict[str, AbiEvent]:
    """Event entries keyed by name (the last overload of a name wins)."""
    return {event.name: event for event in iter_abi_events(abi)}


def schemas_from_abi(abi: AbiSpec, events: Iterable[str] | None = None) -> list[EventSchema]:
    """Event schemas of the ABI, optionally restricted to the named events.

    Every overload of a selected name is included.
    """
    found = iter_abi_events(abi)
    if events is not None:
        names = set(events)
        missing = names - {event.name for event in found}
        if missing:
            raise SchemaError(f"events not present in ABI: {', '.join(sorted(missing))}")
        found = [event for event in found if event.name in names]
    return [get_event_schema(event) for event in found]


def make_event_registry_from_events(events: Iterable[AbiEvent]) -> EventRegistry:
    return make_registry([get_event_schema(event) for event in events])


def make_event_registry_from_abi(abi: AbiSpec, events: Iterable[str] | None = None) -> EventRegistry:
    return make_registry(schemas_from_abi(abi, events))
