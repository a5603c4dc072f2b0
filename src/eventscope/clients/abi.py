"""Retrieve ABI descriptions from disk or over HTTP."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx

from eventscope.errors import SchemaError


def _parse(text: str, source: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise SchemaError(f"ABI at {source} is not valid JSON: {exc}") from exc


async def fetch_abi(url: str, *, timeout_s: int = 20) -> Any:
    """Download and parse a JSON ABI (raw `.abi` / `.json` file)."""
    async with httpx.AsyncClient(timeout=timeout_s, follow_redirects=True) as client:
        r = await client.get(url)
        r.raise_for_status()
    return _parse(r.text, url)


def read_abi(path: Path) -> Any:
    """Read and parse a JSON ABI file."""
    return _parse(path.read_text(), str(path))


async def load_abi(source: str | Path, *, timeout_s: int = 20) -> Any:
    """Load an ABI from an http(s) URL or a local path."""
    if isinstance(source, str) and source.startswith(("http://", "https://")):
        return await fetch_abi(source, timeout_s=timeout_s)
    return read_abi(Path(source))
