from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, patch

import pyarrow.parquet as pq
import pytest
from click.testing import CliRunner
from rich.console import Console

from eventscope import cli as cli_module
from eventscope.cli import cli, format_value
from eventscope.constants import TRANSFER_T0
from eventscope.core.use_cases.observe import ObserveOutput, ObserveStats
from eventscope.decoding.decoder import decode_log
from eventscope.decoding.specs import EventRegistry
from eventscope.decoding.utils import TopicHash


@pytest.fixture(autouse=True)
def wide_console(monkeypatch: pytest.MonkeyPatch) -> None:
    # tables must not wrap topic0s in the captured output
    monkeypatch.setattr(cli_module, "console", Console(width=400, no_color=True))


def _observe_result(registry: EventRegistry, events: list, failed: list[tuple[int, int]] | None = None):
    stats = ObserveStats(chunks_ok=1, total_logs=len(events), decoded=len(events))
    return registry, ObserveOutput(events=events, stats=stats, failed_ranges=failed or [])


def test_format_value():
    assert format_value(b"\x01") == "0x01"
    assert format_value(TopicHash(b"\x02")) == "0x02 (hashed)"
    assert format_value([1, [b"\x00"]]) == "[1, [0x00]]"
    assert format_value("plain") == "plain"


def test_topic0_command():
    result = CliRunner().invoke(cli, ["topic0", "event Transfer(address indexed from, address indexed to, uint256 value);"])
    assert result.exit_code == 0, result.output
    assert "Transfer(address,address,uint256)" in result.output
    assert TRANSFER_T0 in result.output


def test_topic0_command_rejects_bad_signature():
    result = CliRunner().invoke(cli, ["topic0", "Transfer(uint7 x)"])
    assert result.exit_code != 0
    assert "uint7" in result.output


def test_events_command(commitment_abi_path: Path):
    result = CliRunner().invoke(cli, ["events", "--abi", str(commitment_abi_path)])
    assert result.exit_code == 0, result.output
    for name in ("CommitmentStored", "CommitmentUsed", "OwnershipTransferred"):
        assert name in result.output


def test_events_command_missing_file(tmp_path: Path):
    result = CliRunner().invoke(cli, ["events", "--abi", str(tmp_path / "missing.json")])
    assert result.exit_code == 1
    assert "Error" in result.output


def test_decode_command(tmp_path: Path, make_transfer_log, erc20_registry: EventRegistry):
    event = decode_log(make_transfer_log(1000, block_number=12), erc20_registry)
    out = tmp_path / "events.parquet"
    observe = AsyncMock(return_value=_observe_result(erc20_registry, [event]))

    with patch("eventscope.cli.observe_from_config", observe):
        result = CliRunner().invoke(
            cli,
            ["decode", "--rpc", "http://node", "--contract", "0xab", "--abi", "abi.json",
             "--event", "Transfer", "--from-block", "10", "--to-block", "0x20", "--strict", "--out", str(out)],
        )

    assert result.exit_code == 0, result.output
    config: Any = observe.await_args.args[0]
    assert config.events == ("Transfer",)
    assert (config.start_block, config.end_block) == (10, 32)
    assert config.decoder.strict is True
    assert "Transfer" in result.output
    assert "1000" in result.output
    assert "1 events from 1 logs" in result.output
    assert pq.read_table(out).num_rows == 1


def test_decode_command_reads_env(erc20_registry: EventRegistry):
    observe = AsyncMock(return_value=_observe_result(erc20_registry, []))
    env = {"EVENTSCOPE_RPC_URL": "http://node", "EVENTSCOPE_CONTRACT": "0xab", "EVENTSCOPE_ABI": "abi.json"}

    with patch("eventscope.cli.observe_from_config", observe):
        result = CliRunner().invoke(cli, ["decode", "--quiet"], env=env)

    assert result.exit_code == 0, result.output
    config: Any = observe.await_args.args[0]
    assert (config.rpc_url, config.address, config.end_block) == ("http://node", "0xab", "latest")


def test_decode_command_reports_failed_ranges(erc20_registry: EventRegistry):
    observe = AsyncMock(return_value=_observe_result(erc20_registry, [], failed=[(42, 42)]))

    with patch("eventscope.cli.observe_from_config", observe):
        result = CliRunner().invoke(cli, ["decode", "--rpc", "x", "--contract", "0xab", "--abi", "a.json"])

    assert result.exit_code == 1
    assert "42-42" in result.output


def test_decode_command_bad_to_block():
    result = CliRunner().invoke(
        cli, ["decode", "--rpc", "x", "--contract", "0xab", "--abi", "a.json", "--to-block", "soon"]
    )
    assert result.exit_code == 2
    assert "latest" in result.output
