"""Frame grammar for candump-style trace lines.

A trace line looks like::

    (1730892639.316946) can1 709#FF7F0080A3BC

i.e. a parenthesised timestamp, the interface the frame was captured on and
``<hex id>#<hex payload>``.  Lines that do not match are not frames and are
skipped by the caller.
"""

from __future__ import annotations

import re
from typing import NamedTuple, Optional

PAYLOAD_LENGTH = 8
MAX_ARBITRATION_ID = 0xFFFFFFFF

FRAME_PATTERN = re.compile(
    r"\((\d+\.\d+)\)\s+(\S+)\s+([0-9A-Fa-f]+)#([0-9A-Fa-f]*)"
)


class Frame(NamedTuple):
    """A single captured CAN frame."""

    timestamp: float
    interface: str
    arbitration_id: int
    payload: bytes


def parse_frame(line: str) -> Optional[Frame]:
    """Parse ``line`` into a :class:`Frame`.

    Returns ``None`` when the line does not match the frame grammar, when the
    payload has an odd number of hex digits or when the identifier does not
    fit in 32 bits.
    """
    match = FRAME_PATTERN.search(line)
    if match is None:
        return None

    ts_text, iface, id_text, data_text = match.groups()
    if len(data_text) % 2:
        return None

    arbitration_id = int(id_text, 16)
    if arbitration_id > MAX_ARBITRATION_ID:
        return None

    return Frame(float(ts_text), iface, arbitration_id, bytes.fromhex(data_text))


def pad_payload(data: bytes) -> bytes:
    """Return ``data`` zero-padded (or truncated) to exactly 8 bytes."""
    head = bytes(data[:PAYLOAD_LENGTH])
    return head + bytes(PAYLOAD_LENGTH - len(head))
