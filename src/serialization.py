"""Utilities for rendering decoded signals."""
from __future__ import annotations

import csv
import io
import json
import math

FORMATS = ("text", "json", "csv")


def format_decoded_line(timestamp: float, name: str, value: float) -> str:
    """Render one decoded signal as ``(<ts>): <name>: <value>``.

    The timestamp is printed with six fractional digits, the value with six
    significant digits in general notation.
    """
    return f"({timestamp:.6f}): {name}: {value:g}"


def serialize_signal(timestamp: float, name: str, value: float, fmt: str) -> str:
    """Serialize a decoded signal.

    Parameters
    ----------
    timestamp:
        Frame timestamp in seconds.
    name:
        Signal name.
    value:
        Physical value.
    fmt:
        Serialization format: ``"text"``, ``"json"`` or ``"csv"``.
    """
    if fmt == "text":
        return format_decoded_line(timestamp, name, value)
    if fmt == "json":
        # NaN and infinities have no JSON spelling and are written as null.
        json_value = value if math.isfinite(value) else None
        return json.dumps(
            {"timestamp": timestamp, "signal": name, "value": json_value},
            allow_nan=False,
        )
    if fmt == "csv":
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow([f"{timestamp:.6f}", name, f"{value:g}"])
        return output.getvalue().strip()
    raise ValueError(f"Unknown format: {fmt}")
