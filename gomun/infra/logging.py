"""Structured logging helpers shared by the API and the client."""

from __future__ import annotations

import logging
from typing import Any

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


class ExtraFieldsFormatter(logging.Formatter):
    """Formatter that appends `extra=` fields as sorted key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        fields = {
            key: value
            for key, value in vars(record).items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if not fields:
            return base
        rendered = " ".join(f"{key}={_render(value)}" for key, value in sorted(fields.items()))
        return f"{base} {rendered}"


def _render(value: Any) -> str:
    if isinstance(value, str) and " " in value:
        return repr(value)
    return str(value)


def configure_logging(
    level: str | int = "INFO",
    fmt: str = DEFAULT_LOG_FORMAT,
) -> None:
    """Install the structured formatter on the root logger."""

    root = logging.getLogger()
    for existing in list(root.handlers):
        if isinstance(existing.formatter, ExtraFieldsFormatter):
            root.removeHandler(existing)
    handler = logging.StreamHandler()
    handler.setFormatter(ExtraFieldsFormatter(fmt))
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger; configuration is owned by the entrypoints."""

    return logging.getLogger(name)
