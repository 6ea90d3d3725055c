"""Simple in-process counters for a decoding run."""

from __future__ import annotations

import json
from typing import Dict, Optional

_metrics: Dict[str, int] = {
    "lines_read": 0,
    "frames_parsed": 0,
    "lines_rejected": 0,
    "lookup_misses": 0,
    "frames_decoded": 0,
    "signals_decoded": 0,
    "schema_failures": 0,
    "duplicate_ids": 0,
}

_output_file: Optional[str] = None


def get_metrics() -> Dict[str, int]:
    """Return a snapshot of the current metrics."""
    return dict(_metrics)


def reset_metrics() -> None:
    """Reset all counters to zero."""
    for key in _metrics:
        _metrics[key] = 0


def set_output_file(path: str | None) -> None:
    """Write metrics to ``path`` when :func:`write_metrics` is called."""
    global _output_file
    _output_file = path


def record_line(parsed: bool) -> None:
    _metrics["lines_read"] += 1
    if parsed:
        _metrics["frames_parsed"] += 1
    else:
        _metrics["lines_rejected"] += 1


def record_lookup_miss() -> None:
    _metrics["lookup_misses"] += 1


def record_decoded_frame(signal_count: int) -> None:
    _metrics["frames_decoded"] += 1
    _metrics["signals_decoded"] += signal_count


def record_schema_failure() -> None:
    _metrics["schema_failures"] += 1


def record_duplicate_id() -> None:
    _metrics["duplicate_ids"] += 1


def write_metrics() -> None:
    if _output_file:
        with open(_output_file, "w", encoding="utf-8") as f:
            json.dump(_metrics, f)
