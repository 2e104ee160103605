"""
Reporting components for the Modbus client.

Modules:
- logging_system: Structured logging and outcome reporting
"""

from components.reporting.logging_system import (
    EventCategory,
    EventSeverity,
    ICSLogger,
    LogEntry,
    configure_logging,
    get_logger,
)

__all__ = [
    "EventCategory",
    "EventSeverity",
    "ICSLogger",
    "LogEntry",
    "configure_logging",
    "get_logger",
]
