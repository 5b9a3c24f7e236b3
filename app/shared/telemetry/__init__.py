"""Shared telemetry: logging setup and OpenTelemetry tracing."""

from app.shared.telemetry.logging import RequestContextFilter, get_logger, setup_logging
from app.shared.telemetry.telemetry import TelemetryConfig, get_telemetry, set_telemetry

__all__ = [
    "RequestContextFilter",
    "TelemetryConfig",
    "get_logger",
    "get_telemetry",
    "set_telemetry",
    "setup_logging",
]
