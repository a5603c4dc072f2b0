from __future__ import annotations

import logging

from eventscope.abi_events import make_event_registry_from_abi
from eventscope.clients.abi import load_abi
from eventscope.clients.rpc import RPC
from eventscope.core.config import ObserverConfig
from eventscope.core.interfaces import ILogSource
from eventscope.core.use_cases.observe import ObserveOutput, ObserveService
from eventscope.decoding.specs import EventRegistry
from eventscope.orchestration.utils import resolve_block_range

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# 1) Pure application use case (no concrete instantiation)
# ---------------------------------------------------------------------------


async def observe(
    *,
    config: ObserverConfig,
    registry: EventRegistry,
    logs_source: ILogSource,
) -> ObserveOutput:
    """Resolve the block range and run the observe service on `logs_source`.

    Does NOT instantiate or close the log source.
    """
    start, end = await resolve_block_range(
        logs_source=logs_source,
        start_block=config.start_block,
        end_block=config.end_block,
    )
    logger.info(
        "observing %s blocks %d-%d for %d event(s)",
        config.address,
        start,
        end,
        len(registry),
    )

    service = ObserveService(logs_source, registry, config.decoder)
    return await service.run(
        address=config.address,
        from_block=start,
        to_block=end,
        step=config.step,
        concurrency=config.concurrency,
        max_attempts=config.max_attempts,
    )


# ---------------------------------------------------------------------------
# 2) Concrete wiring (RPC client lifecycle)
# ---------------------------------------------------------------------------


async def observe_contract(
    *,
    config: ObserverConfig,
    registry: EventRegistry,
) -> ObserveOutput:
    """Observe with a concrete JSON-RPC client built from `config`."""
    rpc = RPC(config.rpc_url, timeout_s=config.timeout_s, max_connections=max(1, config.concurrency))
    try:
        return await observe(config=config, registry=registry, logs_source=rpc)
    finally:
        await rpc.aclose()


async def load_registry(config: ObserverConfig) -> EventRegistry:
    """Load the ABI named by `config` and build the registry of selected events."""
    abi = await load_abi(config.abi_source, timeout_s=config.timeout_s)
    return make_event_registry_from_abi(abi, config.events or None)


async def observe_from_config(config: ObserverConfig) -> tuple[EventRegistry, ObserveOutput]:
    """Load the ABI, build the registry and observe the contract."""
    registry = await load_registry(config)
    output = await observe_contract(config=config, registry=registry)
    return registry, output
