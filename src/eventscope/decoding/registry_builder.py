"""Build event schemas from human-readable Solidity event signatures.

Example input:
  "Transfer(address indexed from, address indexed to, uint256 value)"
"""

from __future__ import annotations

import re

from eventscope.decoding.specs import EventField, EventSchema
from eventscope.decoding.types import parse_type
from eventscope.errors import SchemaError

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def _split_params(params_str: str) -> list[str]:
    """Split the parameter list by commas while respecting nested parentheses.

    Tuple types are rejected later by `parse_type`; the splitter only keeps
    them in one piece so the error names the whole type. An empty list is
    fine, an empty parameter between commas is not.
    """
    if not params_str.strip():
        return []
    items: list[str] = []
    depth = 0
    buf: list[str] = []
    for ch in params_str:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif ch == "," and depth == 0:
            items.append("".join(buf).strip())
            buf = []
            continue
        buf.append(ch)
    items.append("".join(buf).strip())
    if depth != 0:
        raise SchemaError(f"unbalanced parentheses in parameters {params_str!r}")
    if not all(items):
        raise SchemaError(f"empty parameter in {params_str!r}")
    return items


def _parse_param(p: str, fallback_name: str) -> EventField:
    """Parse one ``type [indexed] [name]`` fragment."""
    tokens = p.split()
    indexed = "indexed" in tokens[1:]
    tokens = [tokens[0]] + [t for t in tokens[1:] if t != "indexed"]
    if len(tokens) > 2:
        raise SchemaError(f"cannot parse event parameter {p!r}")
    name = tokens[1] if len(tokens) == 2 else fallback_name
    if not _IDENTIFIER_RE.match(name):
        raise SchemaError(f"invalid parameter name {name!r} in {p!r}")
    return EventField(name=name, type=parse_type(tokens[0]), indexed=indexed)


def schema_from_signature(signature: str) -> EventSchema:
    """Build an EventSchema from a Solidity event signature string.

    Parameter names are optional; unnamed parameters become ``arg{i}``.
    Anything the grammar does not cover raises `SchemaError`.
    """
    sig = signature.strip().removeprefix("event ").strip().rstrip(";")
    open_paren = sig.find("(")
    close_paren = sig.rfind(")")
    if open_paren == -1 or close_paren == -1 or close_paren < open_paren:
        raise SchemaError(f"Invalid event signature: {signature}")
    name = sig[:open_paren].strip()
    if not _IDENTIFIER_RE.match(name):
        raise SchemaError(f"invalid event name {name!r} in {signature!r}")
    rest = sig[close_paren + 1 :].strip()
    if rest == "anonymous":
        raise SchemaError(f"anonymous events carry no topic0: {signature}")
    if rest:
        raise SchemaError(f"unexpected text {rest!r} after parameters in {signature!r}")

    params = _split_params(sig[open_paren + 1 : close_paren])
    fields = tuple(_parse_param(part, fallback_name=f"arg{i}") for i, part in enumerate(params))
    return EventSchema(name=name, fields=fields)
