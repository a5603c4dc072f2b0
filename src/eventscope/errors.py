"""Exception hierarchy for schema registration and log decoding.

- `SchemaError`: the ABI / signature cannot be turned into a usable schema.
  Always raised at registration time.
- `LogDecodingError`: one log cannot be decoded against its matched schema.
  Callers usually skip the offending log and keep going.
"""

from __future__ import annotations


class EventScopeError(Exception):
    """Base class for every error raised by eventscope."""


class SchemaError(EventScopeError, ValueError):
    """Malformed ABI entry, unsupported type, indexed budget or topic0 collision."""


class LogDecodingError(EventScopeError, ValueError):
    """A matched log could not be decoded."""


class DecodeError(LogDecodingError):
    """Truncated payload, out-of-range offset/length, or a strict-mode violation."""

    def __init__(self, message: str, *, offset: int | None = None) -> None:
        super().__init__(message)
        self.offset = offset


class TopicCountError(LogDecodingError):
    """Number of topics does not match 1 + the schema's indexed field count."""

    def __init__(self, *, event: str, expected: int, actual: int) -> None:
        super().__init__(f"{event}: expected {expected} topics, log has {actual}")
        self.event = event
        self.expected = expected
        self.actual = actual


class RpcError(EventScopeError, RuntimeError):
    """JSON-RPC node returned an error payload."""

    def __init__(self, code: int | None, message: str | None) -> None:
        super().__init__(f"RPC error: {code} {message}")
        self.code = code
