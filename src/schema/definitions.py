"""Message and signal definitions used by the decoder.

Definitions wrap the signals of a cantools database and never change
afterwards.  Signals carry an explicit multiplexing role instead of the
loosely related ``is_multiplexer`` / ``multiplexer_ids`` flags cantools uses.
Bit extraction and scaling are left to cantools.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple, Union

try:  # pragma: no cover - import error handled in runtime environments
    from cantools.database.can import Signal
    from cantools.database.conversion import BaseConversion
    from cantools.database.utils import create_encode_decode_formats, decode_data
except Exception as exc:  # pragma: no cover - dependency resolution
    raise RuntimeError("cantools is required for signal decoding") from exc

# Frames are always decoded from a zero-padded 8 byte buffer.
PAYLOAD_LENGTH = 8


@dataclass(frozen=True)
class Unmultiplexed:
    """Signal present in every frame of its message."""


@dataclass(frozen=True)
class SwitchSignal:
    """Signal whose raw value selects the active multiplexed group."""


@dataclass(frozen=True)
class ValueSignal:
    """Signal present only when the switch signal decodes to ``code``."""

    code: int


MuxRole = Union[Unmultiplexed, SwitchSignal, ValueSignal]


def _mux_role(signal: Any) -> MuxRole:
    ids = signal.multiplexer_ids
    if ids:
        return ValueSignal(int(ids[0]))
    if signal.is_multiplexer:
        return SwitchSignal()
    return Unmultiplexed()


@dataclass(frozen=True)
class SignalDefinition:
    """A cantools signal together with its multiplexing role."""

    name: str
    role: MuxRole
    signal: Signal = field(compare=False, repr=False)
    _formats: Any = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        formats = create_encode_decode_formats([self.signal], PAYLOAD_LENGTH)
        object.__setattr__(self, "_formats", formats)

    @classmethod
    def from_cantools(cls, signal: Signal) -> "SignalDefinition":
        return cls(signal.name, _mux_role(signal), signal)

    @classmethod
    def create(
        cls,
        name: str,
        start: int,
        length: int,
        *,
        byte_order: str = "little_endian",
        is_signed: bool = False,
        is_float: bool = False,
        scale: float = 1,
        offset: float = 0,
        unit: Optional[str] = None,
        role: MuxRole = Unmultiplexed(),
    ) -> "SignalDefinition":
        """Build a definition without a network-definition file.

        ``start`` follows the DBC convention: the least significant bit for
        ``little_endian`` signals and the most significant bit for
        ``big_endian`` ones.
        """
        signal = Signal(
            name=name,
            start=start,
            length=length,
            byte_order=byte_order,
            is_signed=is_signed,
            conversion=BaseConversion.factory(
                scale=scale, offset=offset, is_float=is_float
            ),
            unit=unit,
            is_multiplexer=isinstance(role, SwitchSignal),
            multiplexer_ids=[role.code] if isinstance(role, ValueSignal) else None,
        )
        return cls.from_cantools(signal)

    @property
    def unit(self) -> Optional[str]:
        return self.signal.unit or None

    def decode(self, data: bytes) -> Union[int, float]:
        """Extract the raw value of this signal from an 8-byte buffer."""
        decoded = decode_data(
            data,
            PAYLOAD_LENGTH,
            [self.signal],
            self._formats,
            False,
            False,
            False,
            True,
        )
        return decoded[self.name]

    def raw_to_physical(self, raw: Union[int, float]) -> float:
        return float(self.signal.conversion.raw_to_scaled(raw, False))


@dataclass(frozen=True)
class MessageDefinition:
    """A message layout: its identifier and signals in declaration order."""

    frame_id: int
    name: str
    signals: Tuple[SignalDefinition, ...]
    mux_signal: Optional[SignalDefinition] = None

    @classmethod
    def from_signals(
        cls, frame_id: int, name: str, signals: Tuple[SignalDefinition, ...]
    ) -> "MessageDefinition":
        """Build a message, linking the first switch signal as its multiplexor."""
        switch = next(
            (sig for sig in signals if isinstance(sig.role, SwitchSignal)), None
        )
        return cls(frame_id, name, tuple(signals), switch)

    @classmethod
    def from_cantools(cls, message: Any) -> "MessageDefinition":
        signals = tuple(SignalDefinition.from_cantools(s) for s in message.signals)
        return cls.from_signals(message.frame_id, message.name, signals)
