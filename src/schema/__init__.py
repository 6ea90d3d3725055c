"""Schema definitions and loading."""

from .definitions import (
    MessageDefinition,
    MuxRole,
    SignalDefinition,
    SwitchSignal,
    Unmultiplexed,
    ValueSignal,
)
from .loader import SchemaLoadError, load_schema

__all__ = [
    "MessageDefinition",
    "MuxRole",
    "SignalDefinition",
    "SwitchSignal",
    "Unmultiplexed",
    "ValueSignal",
    "SchemaLoadError",
    "load_schema",
]
