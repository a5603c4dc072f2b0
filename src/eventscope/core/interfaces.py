from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from eventscope.core.models import RawLog


# ---------------------------------------------------------------------------
# ILogSource
# ---------------------------------------------------------------------------

@runtime_checkable
class ILogSource(Protocol):
    """
    Abstract provider of raw logs.

    Domain expectations:
    - It returns RawLog objects already normalized (bytes topics and data).
    - It hides transport, pagination and node quirks.
    - It may raise on transient failures; retry policy belongs to the caller.
    """

    async def get_logs(
        self,
        *,
        address: str,
        topic0s: Sequence[str],
        from_block: int,
        to_block: int,
    ) -> list[RawLog]:
        """
        Return all logs for (address, topic0s) over the inclusive block range.

        Implementations:
        - RPC-based (`eventscope.clients.rpc.RPC`)
        - In-memory or synthetic provider for testing
        """
        ...

    async def latest_block(self) -> int:
        """Return the current chain head height."""
        ...
