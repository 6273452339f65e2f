"""
Observability module: structured logging.
"""

from beaconscale.observability.logging import (
    StructuredLogger,
    LogLevel,
    JsonFormatter,
    KeyValueFormatter,
    setup_logging,
    current_context,
)

__all__ = [
    "StructuredLogger",
    "LogLevel",
    "JsonFormatter",
    "KeyValueFormatter",
    "setup_logging",
    "current_context",
]
