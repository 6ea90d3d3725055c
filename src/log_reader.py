"""Open trace files and turn their contents into frames.

Text traces in candump format go through :func:`frames.parse_frame`.  Binary
and vendor formats (BLF, ASC, TRC, ...) are read with python-can and each
``can.Message`` is converted into a :class:`frames.Frame`.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import IO, Any, Iterable, Iterator, NamedTuple, Optional, Union

try:  # pragma: no cover - import error handled in runtime environments
    import can
except Exception as exc:  # pragma: no cover - dependency resolution
    raise RuntimeError("python-can is required for reading trace files") from exc

from frames import Frame, parse_frame
from interfaces import DEFAULT_INTERFACE
from metrics import record_line

CAN_LOG_EXTENSIONS = frozenset({".asc", ".blf", ".csv", ".db", ".mf4", ".trc"})


class StreamOpenFailure(NamedTuple):
    """Returned instead of a stream when a path cannot be opened."""

    path: str
    reason: str


def open_input(path: str) -> Union[IO[str], StreamOpenFailure]:
    if path == "-":
        return sys.stdin
    try:
        return open(path, "r", encoding="utf-8", errors="replace")
    except OSError as exc:
        return StreamOpenFailure(path, exc.strerror or str(exc))


def open_output(path: str) -> Union[IO[str], StreamOpenFailure]:
    if path == "-":
        return sys.stdout
    try:
        return open(path, "w", encoding="utf-8", newline="\n")
    except OSError as exc:
        return StreamOpenFailure(path, exc.strerror or str(exc))


def is_can_log(path: str) -> bool:
    """Return ``True`` if ``path`` should be read with python-can."""
    suffixes = Path(path).suffixes
    if len(suffixes) >= 2 and suffixes[-1] == ".gz":
        return suffixes[-2].lower() in CAN_LOG_EXTENSIONS
    return Path(path).suffix.lower() in CAN_LOG_EXTENSIONS


def iter_frames(lines: Iterable[str]) -> Iterator[Frame]:
    """Yield a frame for every line of ``lines`` that matches the grammar."""
    for line in lines:
        frame = parse_frame(line)
        record_line(frame is not None)
        if frame is not None:
            yield frame


def frame_from_message(
    msg: "can.Message", default_interface: str = DEFAULT_INTERFACE
) -> Optional[Frame]:
    """Convert a python-can message, skipping error and remote frames."""
    if msg.is_error_frame or msg.is_remote_frame:
        return None
    channel = msg.channel
    if channel is None or channel == "":
        interface = default_interface
    elif isinstance(channel, int):
        interface = f"can{channel}"
    else:
        interface = str(channel)
    return Frame(
        float(msg.timestamp), interface, msg.arbitration_id, bytes(msg.data or b"")
    )


def open_can_log(path: str) -> Union["can.LogReader", StreamOpenFailure]:
    """Open ``path`` with the python-can reader matching its extension."""
    try:
        return can.LogReader(path)
    except (OSError, ValueError) as exc:
        return StreamOpenFailure(path, getattr(exc, "strerror", None) or str(exc))


def iter_can_log(
    reader: "can.LogReader", default_interface: str = DEFAULT_INTERFACE
) -> Iterator[Frame]:
    """Lazily read frames from an open python-can log reader."""
    for msg in reader:
        frame = frame_from_message(msg, default_interface)
        record_line(frame is not None)
        if frame is not None:
            yield frame


def close_stream(stream: Any) -> None:
    """Close a stream returned by one of the ``open_*`` helpers.

    The standard streams are left open.
    """
    if stream in (sys.stdin, sys.stdout):
        return
    stop = getattr(stream, "stop", None)
    if stop is not None:
        stop()
    else:
        stream.close()
