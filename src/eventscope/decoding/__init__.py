"""ABI-driven event decoding.

This package provides:
- Field type model (Uint, Int, Address, Bool, FixedBytes, DynamicBytes,
  String, Array) and the type-string parser
- Event schemas, canonical signatures and the frozen topic0 registry
- Log matching, head/tail payload decoding and event assembly
- Pre-built registries for common contracts
"""

from eventscope.decoding.decoder import DecodedEvent, assemble, decode_log, decode_logs
from eventscope.decoding.matcher import match
from eventscope.decoding.payload import decode_payload
from eventscope.decoding.registry import make_registry
from eventscope.decoding.registry_builder import schema_from_signature
from eventscope.decoding.signature import canonical_signature, event_topic0, signature_hash
from eventscope.decoding.specs import EventField, EventRegistry, EventSchema
from eventscope.decoding.types import (
    Address,
    Array,
    Bool,
    DynamicBytes,
    FieldType,
    FixedBytes,
    Int,
    String,
    Uint,
    parse_type,
)
from eventscope.decoding.utils import TopicHash

__all__ = [
    "DecodedEvent",
    "assemble",
    "decode_log",
    "decode_logs",
    "match",
    "decode_payload",
    "make_registry",
    "schema_from_signature",
    "canonical_signature",
    "event_topic0",
    "signature_hash",
    "EventField",
    "EventRegistry",
    "EventSchema",
    "Address",
    "Array",
    "Bool",
    "DynamicBytes",
    "FieldType",
    "FixedBytes",
    "Int",
    "String",
    "Uint",
    "parse_type",
    "TopicHash",
]
