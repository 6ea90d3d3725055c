"""Load network-definition files with cantools."""

from __future__ import annotations

from typing import List

try:  # pragma: no cover - import error handled in runtime environments
    import cantools
except Exception as exc:  # pragma: no cover - dependency resolution
    raise RuntimeError("cantools is required for loading schema files") from exc

from .definitions import MessageDefinition


class SchemaLoadError(Exception):
    """Raised when a schema source cannot be read or parsed."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


def load_schema(path: str, *, strict: bool = False) -> List[MessageDefinition]:
    """Load the schema at ``path`` and return its message definitions.

    Signals keep the order in which the file declares them.  Any read or
    parse failure is raised as :class:`SchemaLoadError`.
    """
    try:
        db = cantools.database.load_file(path, strict=strict, sort_signals=None)
    except OSError as exc:
        raise SchemaLoadError(path, exc.strerror or str(exc)) from exc
    except (cantools.database.Error, ValueError) as exc:
        raise SchemaLoadError(path, str(exc)) from exc

    messages = getattr(db, "messages", None)
    if messages is None:
        raise SchemaLoadError(path, "not a CAN network definition")
    return [MessageDefinition.from_cantools(msg) for msg in messages]
