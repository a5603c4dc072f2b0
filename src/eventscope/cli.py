import asyncio
import time
from pathlib import Path
from typing import Any

import click
import httpx
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from eventscope.abi_events import make_event_registry_from_abi
from eventscope.clients.abi import load_abi
from eventscope.core.config import DecoderConfig, ObserverConfig
from eventscope.decoding.decoder import DecodedEvent
from eventscope.decoding.registry_builder import schema_from_signature
from eventscope.decoding.utils import TopicHash
from eventscope.errors import EventScopeError
from eventscope.logging_setup import setup_logging
from eventscope.orchestration.orchestrator import observe_from_config
from eventscope.storage import write_events_parquet

console = Console()


def format_value(v: Any) -> str:
    """Human-readable rendering of one decoded value."""
    if isinstance(v, TopicHash):
        return f"0x{v.hex()} (hashed)"
    if isinstance(v, bytes):
        return "0x" + v.hex()
    if isinstance(v, list):
        return "[" + ", ".join(format_value(x) for x in v) + "]"
    return str(v)


def print_event(ev: DecodedEvent) -> None:
    log = ev.log
    where = f"block {log.block_number} • tx {log.tx_hash} • log {log.log_index}" if log else ""
    table = Table(title=f"[bold]{ev.name}[/] {where}", title_justify="left", show_header=False, box=None)
    table.add_column("field", style="cyan")
    table.add_column("type", style="dim")
    table.add_column("value")
    for f in ev.schema.fields:
        label = f"{f.name} (indexed)" if f.indexed else f.name
        table.add_row(escape(label), escape(f.type.canonical), escape(format_value(ev.values[f.name])))
    console.print(table)


def _parse_to_block(value: str) -> int | str:
    if value == "latest":
        return value
    try:
        return int(value, 0)
    except ValueError:
        raise click.BadParameter(f"expected a block number or 'latest', got {value!r}") from None


@click.group()
@click.option("--log-level", default="WARNING", show_default=True, help="Python logging level")
def cli(log_level: str) -> None:
    """eventscope: decode a contract's event logs from its ABI."""
    setup_logging(log_level)


@cli.command("decode")
@click.option("--rpc", "rpc_url", envvar="EVENTSCOPE_RPC_URL", required=True, help="RPC endpoint URL")
@click.option("--contract", envvar="EVENTSCOPE_CONTRACT", required=True, help="Emitter contract address")
@click.option("--abi", "abi_source", envvar="EVENTSCOPE_ABI", required=True, help="ABI file path or http(s) URL")
@click.option("--event", "events", multiple=True, help="Event name to decode; repeat for several (default: all)")
@click.option("--from-block", type=int, default=0, show_default=True)
@click.option("--to-block", default="latest", show_default=True, help="Block number or 'latest'")
@click.option("--step", type=int, default=5_000, show_default=True, help="Blocks per request")
@click.option("--concurrency", type=int, default=8, show_default=True, help="Max parallel requests")
@click.option("--timeout", "timeout_s", type=int, default=20, show_default=True, help="Per-request timeout (s)")
@click.option("--strict/--relaxed", default=False, show_default=True, help="Reject out-of-range values and dirty padding")
@click.option("--out", "out_path", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write events to Parquet")
@click.option("--quiet", is_flag=True, help="Only print the summary")
def decode_cmd(
    rpc_url: str,
    contract: str,
    abi_source: str,
    events: tuple[str, ...],
    from_block: int,
    to_block: str,
    step: int,
    concurrency: int,
    timeout_s: int,
    strict: bool,
    out_path: Path | None,
    quiet: bool,
) -> None:
    """Fetch a contract's logs over a block range and print the decoded events."""
    config = ObserverConfig(
        rpc_url=rpc_url,
        address=contract,
        abi_source=abi_source,
        events=events,
        start_block=from_block,
        end_block=_parse_to_block(to_block),
        step=step,
        concurrency=concurrency,
        timeout_s=timeout_s,
        decoder=DecoderConfig(strict=strict),
    )

    t0 = time.time()
    try:
        with console.status("fetching logs"):
            registry, output = asyncio.run(observe_from_config(config))
    except (EventScopeError, httpx.HTTPError, OSError) as e:
        raise click.ClickException(str(e)) from e

    if not quiet:
        for ev in output.events:
            print_event(ev)

    if out_path is not None:
        rows = write_events_parquet(output.events, out_path)
        console.print(f"[bold]wrote[/] {rows} rows → {out_path}")

    s = output.stats
    elapsed = time.time() - t0
    console.print(f"[bold]done[/]: {s.decoded} events from {s.total_logs} logs • {elapsed:.2f}s")
    console.print(
        f"[bold]summary[/]: "
        f"[green]chunks_ok[/]={s.chunks_ok}  "
        f"[red]chunks_failed[/]={s.chunks_failed}  "
        f"[yellow]decode_errors[/]={s.decode_errors}  "
        f"[yellow]topic_count_errors[/]={s.topic_count_errors}  "
        f"unmatched={s.unmatched}  "
        f"(events={len(registry)})"
    )
    if output.failed_ranges:
        ranges = ", ".join(f"{a}-{b}" for a, b in output.failed_ranges)
        raise click.ClickException(f"blocks not fetched: {ranges}")


@cli.command("events")
@click.option("--abi", "abi_source", envvar="EVENTSCOPE_ABI", required=True, help="ABI file path or http(s) URL")
def events_cmd(abi_source: str) -> None:
    """List the events of an ABI with their canonical signature and topic0."""
    try:
        registry = make_event_registry_from_abi(asyncio.run(load_abi(abi_source)))
    except (EventScopeError, httpx.HTTPError, OSError) as e:
        raise click.ClickException(str(e)) from e

    table = Table(title="events")
    table.add_column("name", style="bold")
    table.add_column("signature")
    table.add_column("topic0", style="cyan")
    table.add_column("indexed", justify="right")
    for schema in registry.values():
        table.add_row(escape(schema.name), escape(schema.signature), schema.topic0, str(schema.num_indexed))
    console.print(table)


@cli.command("topic0")
@click.argument("signature")
def topic0_cmd(signature: str) -> None:
    """Print the canonical signature and topic0 of SIGNATURE."""
    try:
        schema = schema_from_signature(signature)
    except EventScopeError as e:
        raise click.ClickException(str(e)) from e
    console.print(schema.signature, markup=False)
    console.print(schema.topic0, markup=False)
