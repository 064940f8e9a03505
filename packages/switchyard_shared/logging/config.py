"""Root logger setup driven by the ``logging`` section of ``SwitchyardSettings``."""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any, TextIO

from packages.switchyard_shared.config import LoggingSettings

from . import fields
from .context import bind_context, get_context

_RECORD_FIELDS_ATTR = "switchyard_fields"


class ContextFilter(logging.Filter):
    """Snapshot the bound logging fields onto each record at emit time."""

    def filter(self, record: logging.LogRecord) -> bool:
        setattr(record, _RECORD_FIELDS_ATTR, get_context())
        return True


class StructuredFormatter(logging.Formatter):
    """Render a record as one JSON object, or as text with ``key=value`` pairs."""

    def __init__(self, *, json_output: bool = True) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
        self._json_output = json_output

    def format(self, record: logging.LogRecord) -> str:
        bound: dict[str, str] = getattr(record, _RECORD_FIELDS_ATTR, None) or {}
        if not self._json_output:
            text = super().format(record)
            pairs = " ".join(f"{key}={bound[key]}" for key in sorted(bound))
            return f"{text} {pairs}" if pairs else text

        payload: dict[str, Any] = {
            fields.TIMESTAMP: datetime.now(UTC).isoformat(),
            fields.LEVEL: record.levelname,
            fields.LOGGER: record.name,
            fields.MESSAGE: record.getMessage(),
            **bound,
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, separators=(",", ":"))


def configure_logging(
    settings: LoggingSettings | None = None,
    *,
    stream: TextIO | None = None,
) -> logging.Handler:
    """Route all logging through one handler configured from ``settings``.

    Any handler already on the root logger is replaced. The service and
    environment names are bound as process-wide fields.
    """
    if settings is None:
        settings = LoggingSettings()

    handler = logging.StreamHandler(stream=stream or sys.stdout)
    handler.addFilter(ContextFilter())
    handler.setFormatter(StructuredFormatter(json_output=settings.json_output))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(settings.level)

    bind_context(
        **{fields.SERVICE: settings.service, fields.ENVIRONMENT: settings.environment}
    )
    return handler


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger from the standard logging hierarchy."""
    return logging.getLogger(name)
