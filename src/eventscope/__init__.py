from __future__ import annotations

from .abi_events import make_event_registry_from_abi, parse_schema, register_schema, schemas_from_abi
from .core.config import DecoderConfig, ObserverConfig
from .core.models import RawLog
from .decoding.decoder import DecodedEvent, assemble, decode_log, decode_logs
from .decoding.matcher import match
from .decoding.payload import decode_payload
from .decoding.registry import make_registry
from .decoding.specs import EventField, EventRegistry, EventSchema
from .decoding.utils import TopicHash
from .errors import DecodeError, EventScopeError, LogDecodingError, SchemaError, TopicCountError

__all__ = [
    "register_schema",
    "parse_schema",
    "schemas_from_abi",
    "make_event_registry_from_abi",
    "make_registry",
    "DecoderConfig",
    "ObserverConfig",
    "RawLog",
    "DecodedEvent",
    "assemble",
    "decode_log",
    "decode_logs",
    "match",
    "decode_payload",
    "EventField",
    "EventRegistry",
    "EventSchema",
    "TopicHash",
    "DecodeError",
    "EventScopeError",
    "LogDecodingError",
    "SchemaError",
    "TopicCountError",
]
