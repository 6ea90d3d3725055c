"""Map network-definition files to logical bus interfaces."""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

DEFAULT_INTERFACE = "can0"

# Checked in order; the first keyword found in the schema path decides.
INTERFACE_KEYWORDS: Tuple[Tuple[str, str], ...] = (
    ("Tractive", "can2"),
    ("Sensor", "can1"),
)


def iface_for_schema_path(
    path: str,
    keywords: Optional[Sequence[Sequence[str]]] = None,
    default: str = DEFAULT_INTERFACE,
) -> str:
    """Return the interface label for the schema at ``path``.

    Parameters
    ----------
    path:
        Schema source identifier, usually a file path.
    keywords:
        Ordered ``(keyword, label)`` pairs.  Defaults to
        :data:`INTERFACE_KEYWORDS`.
    default:
        Label used when no keyword occurs in ``path``.
    """
    table = INTERFACE_KEYWORDS if keywords is None else keywords
    for keyword, label in table:
        if keyword in path:
            return label
    return default
