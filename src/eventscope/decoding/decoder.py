"""Event assembler: turn a matched raw log into a `DecodedEvent`.

Indexed values come from ``topics[1:]``, non-indexed values from the data
payload. Both are merged back into the schema's declared field order. A log
either decodes completely or raises; nothing is partially populated.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any, Literal

from eventscope.core.config import DEFAULT_DECODER_CONFIG, DecoderConfig
from eventscope.core.models import RawLog
from eventscope.decoding.matcher import match
from eventscope.decoding.payload import decode_payload
from eventscope.decoding.specs import EventRegistry, EventSchema
from eventscope.decoding.utils import decode_topic
from eventscope.errors import LogDecodingError, TopicCountError

logger = logging.getLogger(__name__)

# ---------- decoded event ----------


@dataclass(slots=True)
class DecodedEvent:
    """Decoded event; `values` follows the schema's declared field order."""

    schema: EventSchema
    values: dict[str, Any]
    log: RawLog | None = None

    @property
    def name(self) -> str:
        return self.schema.name

    @property
    def position(self) -> tuple[int, int]:
        return self.log.position if self.log is not None else (-1, -1)


# ---------- assembler ----------


def assemble(
    log: RawLog,
    schema: EventSchema,
    config: DecoderConfig = DEFAULT_DECODER_CONFIG,
) -> DecodedEvent:
    """Decode `log` with an already matched `schema`.

    Raises `TopicCountError` when the log does not carry exactly one topic per
    indexed field plus the signature slot, and `DecodeError` for payload or
    topic problems.
    """
    expected = 1 + schema.num_indexed
    if len(log.topics) != expected:
        raise TopicCountError(event=schema.signature, expected=expected, actual=len(log.topics))

    topic_vals = {
        f.name: decode_topic(topic, f.type, config)
        for f, topic in zip(schema.indexed_fields, log.topics[1:])
    }
    data_vals = dict(
        zip(
            (f.name for f in schema.data_fields),
            decode_payload(log.data, schema.data_fields, config),
        )
    )

    values = {f.name: topic_vals[f.name] if f.indexed else data_vals[f.name] for f in schema.fields}
    return DecodedEvent(schema=schema, values=values, log=log)


def decode_log(
    log: RawLog,
    registry: EventRegistry,
    config: DecoderConfig = DEFAULT_DECODER_CONFIG,
) -> DecodedEvent | None:
    """Match and decode one log.

    Returns None when no registered event matches; raises `DecodeError` /
    `TopicCountError` when the matched event cannot be decoded.
    """
    schema = match(log, registry)
    if schema is None:
        return None
    return assemble(log, schema, config)


def decode_logs(
    logs: Iterable[RawLog],
    registry: EventRegistry,
    config: DecoderConfig = DEFAULT_DECODER_CONFIG,
    *,
    on_error: Literal["skip", "raise"] = "skip",
) -> Iterator[DecodedEvent]:
    """Decode a stream of logs, yielding matched events in input order.

    Unmatched logs are dropped. With ``on_error="skip"`` a log that fails to
    decode is logged and skipped; with ``"raise"`` the error propagates.
    """
    for log in logs:
        try:
            event = decode_log(log, registry, config)
        except LogDecodingError as exc:
            if on_error == "raise":
                raise
            logger.warning(
                "skipping log tx=%s index=%s: %s",
                log.tx_hash,
                log.log_index,
                exc,
            )
            continue
        if event is not None:
            yield event
