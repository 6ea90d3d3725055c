"""Configuration defaults and JSON config file loading."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from interfaces import DEFAULT_INTERFACE, INTERFACE_KEYWORDS
from serialization import FORMATS

DEFAULT_CONFIG: Dict[str, Any] = {
    "input": "dump.log",
    "output": "output.txt",
    "schemas": [
        "dbc-files/ControlBus.dbc",
        "dbc-files/SensorBus.dbc",
        "dbc-files/TractiveBus.dbc",
    ],
    "interface_keywords": [list(pair) for pair in INTERFACE_KEYWORDS],
    "default_interface": DEFAULT_INTERFACE,
    "format": "text",
    "log_level": "INFO",
    "stats_file": None,
    "strict": False,
}


def load_config(path: Optional[str]) -> Dict[str, Any]:
    """Return the defaults overlaid with the JSON object stored at ``path``.

    Unknown keys are ignored.  A missing or invalid file is reported and the
    defaults are returned unchanged, as is an unknown output ``format``.
    """
    config = dict(DEFAULT_CONFIG)
    if not path:
        return config

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        logging.warning("Failed to load config file %s: %s", path, exc)
        return config

    if not isinstance(data, dict):
        logging.warning("Config file %s must contain a JSON object", path)
        return config

    for key in DEFAULT_CONFIG:
        if key in data:
            config[key] = data[key]

    if config["format"] not in FORMATS:
        logging.warning(
            "Unknown output format %r in %s; using %s",
            config["format"],
            path,
            DEFAULT_CONFIG["format"],
        )
        config["format"] = DEFAULT_CONFIG["format"]
    return config
