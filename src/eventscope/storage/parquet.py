from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import pyarrow.parquet as pq

from eventscope.core.models import EventTable, RawLog
from eventscope.decoding.decoder import DecodedEvent


def events_to_table(events: Iterable[DecodedEvent]) -> EventTable:
    """Collect decoded events into a columnar buffer."""
    table = EventTable()
    for ev in events:
        log = ev.log if ev.log is not None else RawLog(address="", topics=(), data=b"")
        table.append_decoded(event_name=ev.name, log=log, values=ev.values)
    return table


def write_events_parquet(events: Iterable[DecodedEvent], path: Path) -> int:
    """Write decoded events to a Parquet file; returns the number of rows."""
    table = events_to_table(events)
    path.parent.mkdir(parents=True, exist_ok=True)
    pq.write_table(table.to_arrow_table(), path)
    return table.size()
