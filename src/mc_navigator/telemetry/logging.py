"""Contract for runtime telemetry and structured logging sinks."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from rich.logging import RichHandler

_HANDLER_NAME = "mc_navigator.rich"


class Telemetry(Protocol):
    """Reports movement events such as completed steps and watchdog trips."""

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        """Publish telemetry event to the configured sink."""


class LoggingTelemetry:
    """Telemetry sink that writes events as structured log records."""

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.INFO) -> None:
        self._logger = logger or logging.getLogger("mc_navigator.telemetry")
        self._level = level

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        self._logger.log(self._level, event_name, extra={"event": event_name, "payload": payload})


class NullTelemetry:
    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        return None


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach a rich console handler to the package logger once."""
    root = logging.getLogger("mc_navigator")
    root.setLevel(level.upper() if isinstance(level, str) else level)
    if not any(handler.get_name() == _HANDLER_NAME for handler in root.handlers):
        handler = RichHandler(rich_tracebacks=True, show_path=False)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
    return root
