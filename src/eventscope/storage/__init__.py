"""Storage of decoded events as Parquet via pyarrow."""

from eventscope.storage.parquet import events_to_table, write_events_parquet

__all__ = [
    "events_to_table",
    "write_events_parquet",
]
