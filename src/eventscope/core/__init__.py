"""Core data models, configuration and collaborator interfaces.

This package provides:
- Data models (RawLog, EventTable)
- Configuration classes (DecoderConfig, ObserverConfig)
- The ILogSource protocol implemented by log retrieval clients
"""

from eventscope.core.config import DEFAULT_DECODER_CONFIG, DecoderConfig, ObserverConfig
from eventscope.core.interfaces import ILogSource
from eventscope.core.models import EventTable, RawLog

__all__ = [
    "DEFAULT_DECODER_CONFIG",
    "DecoderConfig",
    "ObserverConfig",
    "ILogSource",
    "EventTable",
    "RawLog",
]
