import io
import sys
from pathlib import Path

import can
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from frames import Frame  # noqa: E402
from log_reader import (  # noqa: E402
    StreamOpenFailure,
    close_stream,
    frame_from_message,
    is_can_log,
    iter_can_log,
    iter_frames,
    open_can_log,
    open_input,
    open_output,
)
from metrics import get_metrics, reset_metrics  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_metrics():
    reset_metrics()


def test_iter_frames_skips_non_frame_lines():
    text = io.StringIO(
        "header line\n"
        "(1.000000) can1 709#FF7F\n"
        "(1.100000) can1 709#FFF\n"
        "\n"
        "(1.200000) can0 100#\n"
    )
    frames = list(iter_frames(text))
    assert [f.arbitration_id for f in frames] == [0x709, 0x100]
    stats = get_metrics()
    assert stats["lines_read"] == 5
    assert stats["frames_parsed"] == 2
    assert stats["lines_rejected"] == 3


def test_open_input_missing_file(tmp_path):
    path = str(tmp_path / "missing.log")
    result = open_input(path)
    assert isinstance(result, StreamOpenFailure)
    assert result.path == path


def test_open_output_in_missing_directory(tmp_path):
    path = str(tmp_path / "nope" / "out.txt")
    result = open_output(path)
    assert isinstance(result, StreamOpenFailure)
    assert result.path == path


def test_open_and_close_streams(tmp_path):
    path = tmp_path / "dump.log"
    path.write_text("(1.0) can0 1#00\n")
    stream = open_input(str(path))
    assert stream.readline() == "(1.0) can0 1#00\n"
    close_stream(stream)
    assert stream.closed


def test_standard_streams_stay_open():
    assert open_input("-") is sys.stdin
    assert open_output("-") is sys.stdout
    close_stream(sys.stdout)
    assert not sys.stdout.closed


@pytest.mark.parametrize(
    "path, expected",
    [
        ("trace.blf", True),
        ("trace.ASC", True),
        ("trace.asc.gz", True),
        ("trace.trc", True),
        ("dump.log", False),
        ("dump.log.gz", False),
        ("-", False),
    ],
)
def test_is_can_log(path, expected):
    assert is_can_log(path) is expected


@pytest.mark.parametrize(
    "channel, interface",
    [("vcan1", "vcan1"), (2, "can2"), (None, "can0"), ("", "can0")],
)
def test_frame_from_message_channel(channel, interface):
    msg = can.Message(
        timestamp=5.25, arbitration_id=0x709, data=b"\x01\x02", channel=channel
    )
    assert frame_from_message(msg) == Frame(5.25, interface, 0x709, b"\x01\x02")


def test_frame_from_message_default_interface():
    msg = can.Message(arbitration_id=0x1, data=b"")
    assert frame_from_message(msg, "can3").interface == "can3"


def test_error_and_remote_frames_are_skipped():
    error = can.Message(is_error_frame=True)
    remote = can.Message(arbitration_id=0x10, is_remote_frame=True, dlc=2)
    assert frame_from_message(error) is None
    assert frame_from_message(remote) is None


def test_iter_can_log_counts_messages():
    messages = [
        can.Message(timestamp=1.0, arbitration_id=0x709, data=b"\xff", channel="can1"),
        can.Message(timestamp=1.1, is_error_frame=True),
        can.Message(timestamp=1.2, arbitration_id=0x100, data=b"\x01", channel=0),
    ]
    frames = list(iter_can_log(messages))
    assert [f.interface for f in frames] == ["can1", "can0"]
    stats = get_metrics()
    assert stats["lines_read"] == 3
    assert stats["lines_rejected"] == 1


def test_open_can_log_missing_file(tmp_path):
    result = open_can_log(str(tmp_path / "missing.asc"))
    assert isinstance(result, StreamOpenFailure)
