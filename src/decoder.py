"""Select and decode the signals carried by a frame."""

from __future__ import annotations

from typing import List, NamedTuple

from frames import pad_payload
from schema import MessageDefinition, SignalDefinition, ValueSignal


class DecodedSignal(NamedTuple):
    name: str
    value: float


def select_active_signals(
    message: MessageDefinition, payload: bytes
) -> List[SignalDefinition]:
    """Return the signals of ``message`` present in ``payload``.

    Unmultiplexed signals and the switch signal are always present.  A
    multiplexed signal is present only if the message has a switch signal
    and the switch decodes to the signal's code.  ``payload`` must already be
    padded to 8 bytes.
    """
    switch = message.mux_signal
    switch_value = switch.decode(payload) if switch is not None else None

    active = []
    for signal in message.signals:
        role = signal.role
        if isinstance(role, ValueSignal) and (
            switch_value is None or switch_value != role.code
        ):
            continue
        active.append(signal)
    return active


def decode_signals(message: MessageDefinition, data: bytes) -> List[DecodedSignal]:
    """Decode every active signal of ``message`` from the frame ``data``."""
    payload = pad_payload(data)
    return [
        DecodedSignal(sig.name, sig.raw_to_physical(sig.decode(payload)))
        for sig in select_active_signals(message, payload)
    ]
