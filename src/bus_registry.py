"""Per-interface index from arbitration id to message definition.

The registry is filled once from every loaded schema before any frame is
decoded and is only read afterwards.  When two schemas routed to the same
interface define the same arbitration id, the definition registered first is
kept and the later one is reported and ignored.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from interfaces import DEFAULT_INTERFACE, iface_for_schema_path
from metrics import record_duplicate_id, record_schema_failure
from schema import MessageDefinition, SchemaLoadError, load_schema


class BusMap:
    """Arbitration id lookup for a single interface."""

    def __init__(self) -> None:
        self._idmap: Dict[int, MessageDefinition] = {}

    def __len__(self) -> int:
        return len(self._idmap)

    def add(self, message: MessageDefinition) -> bool:
        """Insert ``message`` unless its id is already present.

        Returns ``True`` if the message was stored.
        """
        if message.frame_id in self._idmap:
            return False
        self._idmap[message.frame_id] = message
        return True

    def find(self, arbitration_id: int) -> Optional[MessageDefinition]:
        return self._idmap.get(arbitration_id)

    def dump(self, interface: str) -> List[str]:
        """Return a human readable listing of the map."""
        lines = [f"{interface} bus map:"]
        for frame_id, message in self._idmap.items():
            lines.append(f"  0x{frame_id:x} -> {message.name}")
        return lines


class BusRegistry:
    """Mapping of interface label to :class:`BusMap`."""

    def __init__(self) -> None:
        self._maps: Dict[str, BusMap] = {}

    def register(self, interface: str, messages: Iterable[MessageDefinition]) -> None:
        bus_map = self._maps.setdefault(interface, BusMap())
        for message in messages:
            if bus_map.add(message):
                continue
            kept = bus_map.find(message.frame_id)
            record_duplicate_id()
            logging.warning(
                "Duplicate id 0x%X on %s: keeping %s, ignoring %s",
                message.frame_id,
                interface,
                kept.name if kept else "?",
                message.name,
            )

    def lookup(
        self, interface: str, arbitration_id: int
    ) -> Optional[MessageDefinition]:
        bus_map = self._maps.get(interface)
        if bus_map is None:
            return None
        return bus_map.find(arbitration_id)

    def interfaces(self) -> List[str]:
        return list(self._maps)

    def dump(self) -> List[str]:
        lines: List[str] = []
        for interface, bus_map in self._maps.items():
            lines.extend(bus_map.dump(interface))
        return lines


def load_registry(
    schema_paths: Sequence[str],
    *,
    keywords: Optional[Sequence[Sequence[str]]] = None,
    default_interface: str = DEFAULT_INTERFACE,
    strict: bool = False,
) -> Tuple[BusRegistry, int]:
    """Load every schema in ``schema_paths`` into a new registry.

    A schema that fails to load is logged and skipped.  Returns the registry
    and the number of schemas that loaded successfully.
    """
    registry = BusRegistry()
    loaded = 0
    for path in schema_paths:
        try:
            messages = load_schema(path, strict=strict)
        except SchemaLoadError as exc:
            record_schema_failure()
            logging.warning("Failed to load schema %s: %s", exc.path, exc.reason)
            continue
        interface = iface_for_schema_path(path, keywords, default_interface)
        registry.register(interface, messages)
        loaded += 1
        logging.info(
            "Loaded %s on %s with %d messages", path, interface, len(messages)
        )
    return registry, loaded
