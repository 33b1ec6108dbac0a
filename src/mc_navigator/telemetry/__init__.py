"""Structured logging and telemetry sinks."""

from .logging import LoggingTelemetry, NullTelemetry, Telemetry, configure_logging

__all__ = ["LoggingTelemetry", "NullTelemetry", "Telemetry", "configure_logging"]
