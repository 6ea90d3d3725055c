#!/usr/bin/env python3
"""Decode recorded CAN traces into physical signal values.

Each frame in the input trace is routed to the schema loaded for its
interface, the signals active for its payload are decoded and every value is
written to the output as ``(<timestamp>): <signal>: <value>``.
"""

from __future__ import annotations

import argparse
import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import IO, Any, Iterable, Optional

from bus_registry import BusRegistry, load_registry
from config import load_config
from decoder import decode_signals
from frames import Frame
from log_reader import (
    StreamOpenFailure,
    close_stream,
    is_can_log,
    iter_can_log,
    iter_frames,
    open_can_log,
    open_input,
    open_output,
)
from metrics import (
    get_metrics,
    record_decoded_frame,
    record_lookup_miss,
    reset_metrics,
    set_output_file,
    write_metrics,
)
from serialization import FORMATS, serialize_signal

EXIT_OK = 0
EXIT_STREAM_FAILURE = 1
EXIT_NO_SCHEMAS = 2


def decode_log(
    frames: Iterable[Frame],
    registry: BusRegistry,
    out: IO[str],
    *,
    fmt: str = "text",
    logger: Optional[logging.Logger] = None,
) -> int:
    """Decode ``frames`` against ``registry`` and write results to ``out``.

    Frames whose interface or id is not registered are skipped.  Returns the
    number of lines written.
    """
    log = logger or logging.getLogger(__name__)
    written = 0
    for frame in frames:
        message = registry.lookup(frame.interface, frame.arbitration_id)
        if message is None:
            record_lookup_miss()
            log.debug(
                "No message for %s id=0x%X", frame.interface, frame.arbitration_id
            )
            continue

        decoded = decode_signals(message, frame.payload)
        record_decoded_frame(len(decoded))
        for sig in decoded:
            out.write(serialize_signal(frame.timestamp, sig.name, sig.value, fmt))
            out.write("\n")
            written += 1
    return written


def _configure_logging(level_name: str, log_path: Optional[str]) -> None:
    level = getattr(logging, str(level_name).upper(), logging.INFO)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_path:
        handlers.append(
            RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=5)
        )
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s: %(message)s",
        handlers=handlers,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Decode a recorded CAN trace using network definition files"
    )
    parser.add_argument("--input", help="Trace file to decode ('-' for stdin)")
    parser.add_argument("--output", help="Output file ('-' for stdout)")
    parser.add_argument(
        "--dbc",
        dest="schemas",
        action="append",
        help="Network definition file; may be repeated",
    )
    parser.add_argument("--config", help="Path to JSON configuration file")
    parser.add_argument("--format", choices=FORMATS, help="Output format")
    parser.add_argument("--log", dest="log_path", help="Path to diagnostic log file")
    parser.add_argument("--log-level", help="Logging level (e.g. INFO, DEBUG)")
    parser.add_argument("--stats", help="Write run counters as JSON to this path")
    parser.add_argument(
        "--dump-maps",
        action="store_true",
        help="Print the id -> message map of every interface to stderr",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Reject schemas with overlapping or out-of-range signals",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config: dict[str, Any] = load_config(args.config)
    for key in ("input", "output", "schemas", "format", "log_level", "strict"):
        value = getattr(args, key)
        if value is not None:
            config[key] = value
    if args.stats:
        config["stats_file"] = args.stats

    _configure_logging(config["log_level"], args.log_path)
    logger = logging.getLogger(__name__)
    reset_metrics()
    set_output_file(config["stats_file"])

    can_log = is_can_log(config["input"])
    if can_log:
        source = open_can_log(config["input"])
    else:
        source = open_input(config["input"])
    if isinstance(source, StreamOpenFailure):
        logger.error("Failed to open input file: %s (%s)", source.path, source.reason)
        return EXIT_STREAM_FAILURE

    out = open_output(config["output"])
    if isinstance(out, StreamOpenFailure):
        logger.error("Failed to open output file: %s (%s)", out.path, out.reason)
        close_stream(source)
        return EXIT_STREAM_FAILURE

    try:
        registry, loaded = load_registry(
            config["schemas"],
            keywords=config["interface_keywords"],
            default_interface=config["default_interface"],
            strict=bool(config["strict"]),
        )
        if not loaded:
            logger.error("No schema could be loaded; nothing to decode")
            write_metrics()
            return EXIT_NO_SCHEMAS

        if args.dump_maps:
            for line in registry.dump():
                print(line, file=sys.stderr)

        if can_log:
            frames = iter_can_log(source, config["default_interface"])
        else:
            frames = iter_frames(source)
        written = decode_log(frames, registry, out, fmt=config["format"], logger=logger)
    finally:
        close_stream(source)
        close_stream(out)

    stats = get_metrics()
    logger.info(
        "Decoded %d of %d frames into %d lines (%d lines skipped, %d unknown ids)",
        stats["frames_decoded"],
        stats["frames_parsed"],
        written,
        stats["lines_rejected"],
        stats["lookup_misses"],
    )
    write_metrics()
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
