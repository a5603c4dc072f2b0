import asyncio
from pathlib import Path

import pyarrow.parquet as pq

from eventscope.core.config import ObserverConfig
from eventscope.logging_setup import setup_logging
from eventscope.orchestration.orchestrator import observe_from_config
from eventscope.storage import write_events_parquet

EXAMPLES_ROOT = Path(__file__).parent
assert EXAMPLES_ROOT.name == "examples"
OUT_ROOT = EXAMPLES_ROOT.parent / "data_examples"

config = ObserverConfig(
    rpc_url="https://chainrpc.testnet.mev-commit.xyz/",
    address="0xCAC68D97a56b19204Dd3dbDC103CB24D47A825A3",  # PreConfCommitmentStore
    abi_source="https://raw.githubusercontent.com/primev/mev-commit/v0.4.3/contracts-abi/abi/PreConfCommitmentStore.abi",
    events=("CommitmentStored",),
    start_block=0,
    end_block="latest",
    step=10_000,
)


async def main():
    registry, output = await observe_from_config(config)
    print(registry)
    print(output.stats)

    for event in output.events[:5]:
        print(event.log.block_number, event.values["commitmentHash"].hex(), event.values["bid"])

    path = OUT_ROOT / "commitments.parquet"
    rows = write_events_parquet(output.events, path)
    table = pq.read_table(path)
    print(rows, table.column_names)
    print(table.select(["block_number", "bidder", "bid", "txnHash"]).slice(0, 5).to_pylist())


setup_logging("INFO")
asyncio.run(main())
