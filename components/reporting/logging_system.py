# components/reporting/logging_system.py
"""
Structured logging for the Modbus client.

Provides:
- Structured logging (JSON file output, plain text console)
- Event severity and category classification
- Session-relative timestamps on console output
- One structured event per operation outcome
- Thread-safe logger factory
"""

import json
import logging
import logging.handlers
import threading
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

__all__ = [
    "EventSeverity",
    "EventCategory",
    "LogEntry",
    "SessionTimeFormatter",
    "JSONFormatter",
    "ICSLogger",
    "configure_logging",
    "get_logger",
]

# Reference point for session-relative timestamps
_SESSION_START = time.monotonic()


def session_elapsed() -> float:
    """Seconds since this process started logging."""
    return time.monotonic() - _SESSION_START


# ----------------------------------------------------------------
# Event Classification
# ----------------------------------------------------------------


class EventSeverity(Enum):
    """
    Event severity levels.

    Lower number = higher severity
    """

    CRITICAL = 1  # Fatal, the process is about to exit
    ERROR = 3  # Failed operation
    WARNING = 4  # Potential issues
    NOTICE = 5  # Normal but significant events
    INFO = 6  # Informational messages
    DEBUG = 7  # Debug/diagnostic information


class EventCategory(Enum):
    """Event categories."""

    COMMUNICATION = "communication"  # Request/response exchanges
    CONFIGURATION = "configuration"  # Argument and config file handling
    SYSTEM = "system"  # Process lifecycle


# Map Python logging levels to severity
LOGGING_TO_SEVERITY = {
    logging.CRITICAL: EventSeverity.CRITICAL,
    logging.ERROR: EventSeverity.ERROR,
    logging.WARNING: EventSeverity.WARNING,
    logging.INFO: EventSeverity.INFO,
    logging.DEBUG: EventSeverity.DEBUG,
}

SEVERITY_TO_LOGGING = {
    EventSeverity.CRITICAL: logging.CRITICAL,
    EventSeverity.ERROR: logging.ERROR,
    EventSeverity.WARNING: logging.WARNING,
    EventSeverity.NOTICE: logging.INFO,
    EventSeverity.INFO: logging.INFO,
    EventSeverity.DEBUG: logging.DEBUG,
}


# ----------------------------------------------------------------
# Structured Log Entry
# ----------------------------------------------------------------


@dataclass
class LogEntry:
    """Structured log entry."""

    session_time: float  # Seconds since session start
    wall_time: float  # Wall clock time
    severity: EventSeverity
    category: EventCategory
    message: str

    # Context
    device: str = ""  # Target, e.g. "10.0.0.5:502/1"
    component: str = ""  # Logger name

    event_id: str = ""
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialisation."""
        entry_dict = {
            "session_time": self.session_time,
            "wall_time": self.wall_time,
            "severity": self.severity.name,
            "category": self.category.value,
            "message": self.message,
        }

        if self.device:
            entry_dict["device"] = self.device
        if self.component:
            entry_dict["component"] = self.component
        if self.event_id:
            entry_dict["event_id"] = self.event_id
        if self.data:
            entry_dict["data"] = self.data

        return entry_dict

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    def to_human_readable(self) -> str:
        device_str = f"{self.device}: " if self.device else ""
        return f"{device_str}{self.message}"


# ----------------------------------------------------------------
# Formatters
# ----------------------------------------------------------------


class SessionTimeFormatter(logging.Formatter):
    """Format log records with a session-relative time prefix."""

    def __init__(self):
        super().__init__(
            fmt="[T+%(session_time)8.2fs] [%(levelname)8s] %(name)s: %(message)s"
        )

    def format(self, record: logging.LogRecord) -> str:
        record.session_time = session_elapsed()
        return super().format(record)


class JSONFormatter(logging.Formatter):
    """Format log records as JSON lines."""

    def __init__(self, device: str = ""):
        super().__init__()
        self.device = device

    def format(self, record: logging.LogRecord) -> str:
        severity = LOGGING_TO_SEVERITY.get(record.levelno, EventSeverity.INFO)

        log_entry = LogEntry(
            session_time=session_elapsed(),
            wall_time=record.created,
            severity=severity,
            category=getattr(record, "category", EventCategory.SYSTEM),
            message=record.getMessage(),
            device=getattr(record, "device", self.device),
            component=record.name,
        )

        if record.exc_info:
            log_entry.data["exception"] = self.formatException(record.exc_info)

        return log_entry.to_json()


# ----------------------------------------------------------------
# Shared file handlers
# ----------------------------------------------------------------

LOG_FILE_NAME = "modbus_client.json.log"

# One handler per log file, so rollover happens exactly once
_file_handlers: dict[Path, logging.handlers.RotatingFileHandler] = {}
_file_handlers_lock = threading.Lock()


def _shared_file_handler(log_dir: Path) -> logging.handlers.RotatingFileHandler:
    log_file = (log_dir / LOG_FILE_NAME).resolve()

    with _file_handlers_lock:
        handler = _file_handlers.get(log_file)
        if handler is None:
            log_dir.mkdir(parents=True, exist_ok=True)
            # Rotating file handler (10MB max, 5 backups)
            handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
            )
            handler.setFormatter(JSONFormatter())
            _file_handlers[log_file] = handler
        return handler


def _close_file_handlers() -> None:
    with _file_handlers_lock:
        for handler in _file_handlers.values():
            handler.close()
        _file_handlers.clear()


# ----------------------------------------------------------------
# ICS Logger
# ----------------------------------------------------------------


class ICSLogger:
    """
    Wraps Python's logging with:
    - Console output with session time
    - Optional rotating JSON log file
    - Event classification
    """

    def __init__(
        self,
        name: str,
        device: str = "",
        log_dir: Path | None = None,
        enable_json: bool = True,
        enable_console: bool = True,
        level: int = logging.INFO,
    ):
        """
        Initialise logger.

        Args:
            name: Logger name (typically module name)
            device: Target description for context
            log_dir: Directory for log files (None = no file logging)
            enable_json: Enable JSON formatted logs (requires log_dir)
            enable_console: Enable console output
            level: Minimum level emitted by the handlers
        """
        self.name = name
        self.device = device
        self.log_dir = log_dir

        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False

        self._detach_handlers()

        if enable_console:
            self._add_console_handler(level)

        if enable_json and log_dir:
            self._add_json_handler(level)

    def _detach_handlers(self) -> None:
        """Remove handlers added by this module, leaving foreign ones attached."""
        for handler in list(self.logger.handlers):
            if isinstance(handler.formatter, (SessionTimeFormatter, JSONFormatter)):
                self.logger.removeHandler(handler)
                if handler not in _file_handlers.values():
                    handler.close()

    def _add_console_handler(self, level: int) -> None:
        handler = logging.StreamHandler()
        handler.setLevel(level)
        handler.setFormatter(SessionTimeFormatter())
        self.logger.addHandler(handler)

    def _add_json_handler(self, level: int) -> None:
        """Attach the shared rotating JSON handler for log_dir."""
        if not self.log_dir:
            return

        handler = _shared_file_handler(self.log_dir)
        handler.setLevel(level)
        self.logger.addHandler(handler)

    # ----------------------------------------------------------------
    # Standard logging methods
    # ----------------------------------------------------------------

    def _log(self, level: int, message: str, **kwargs) -> None:
        # Loggers for different devices can share one stdlib logger
        kwargs["extra"] = {"device": self.device, **kwargs.get("extra", {})}
        self.logger.log(level, message, **kwargs)

    def debug(self, message: str, **kwargs) -> None:
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        self._log(logging.ERROR, message, **kwargs)

    def critical(self, message: str, **kwargs) -> None:
        self._log(logging.CRITICAL, message, **kwargs)

    # ----------------------------------------------------------------
    # Structured events
    # ----------------------------------------------------------------

    async def log_event(
        self,
        severity: EventSeverity,
        category: EventCategory,
        message: str,
        **kwargs,
    ) -> LogEntry:
        """
        Log structured event.

        Args:
            severity: Event severity level
            category: Event category
            message: Event message
            **kwargs: Additional context (device, data, ...)

        Returns:
            LogEntry that was created
        """
        device = kwargs.pop("device", self.device)

        entry = LogEntry(
            session_time=session_elapsed(),
            wall_time=time.time(),
            severity=severity,
            category=category,
            message=message,
            device=device,
            component=self.name,
            event_id=str(uuid.uuid4()),
            **kwargs,
        )

        log_level = SEVERITY_TO_LOGGING.get(severity, logging.INFO)
        self.logger.log(
            log_level,
            entry.to_human_readable(),
            extra={"category": category, "device": device},
        )

        return entry

    async def log_outcome(self, outcome, iteration: int = 0) -> LogEntry:
        """
        Report one operation outcome.

        Successful outcomes are INFO, failures ERROR.

        Args:
            outcome: ExecutionOutcome to report
            iteration: 1-based iteration number

        Returns:
            LogEntry that was created
        """
        severity = EventSeverity.INFO if outcome.success else EventSeverity.ERROR
        data = {
            "operation": outcome.kind.value,
            "iteration": iteration,
            "success": outcome.success,
        }
        if outcome.success:
            data["values"] = list(outcome.values)
        else:
            data["error"] = outcome.error

        return await self.log_event(
            severity=severity,
            category=EventCategory.COMMUNICATION,
            message=outcome.describe(),
            data=data,
        )


# ----------------------------------------------------------------
# Global logger factory
# ----------------------------------------------------------------

_loggers: dict[str, ICSLogger] = {}
_loggers_lock = threading.Lock()
_default_log_dir: Path | None = None
_default_level: int = logging.INFO


def configure_logging(
    log_dir: Path | str | None = None,
    level: int | str = logging.INFO,
) -> None:
    """
    Configure global logging settings.

    Loggers already handed out are rebuilt so the settings apply to
    module-level loggers too.

    Args:
        log_dir: Directory for JSON log files
        level: Minimum level for console and file output
    """
    global _default_log_dir, _default_level

    if log_dir:
        _default_log_dir = Path(log_dir)
        _default_log_dir.mkdir(parents=True, exist_ok=True)
    else:
        _default_log_dir = None

    if isinstance(level, str):
        level_name = level
        level = logging.getLevelName(level_name.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level_name}")
    _default_level = level

    with _loggers_lock:
        for logger in _loggers.values():
            logger._detach_handlers()
        _close_file_handlers()

        for logger in _loggers.values():
            logger.log_dir = _default_log_dir
            logger._add_console_handler(_default_level)
            if _default_log_dir:
                logger._add_json_handler(_default_level)


def get_logger(name: str, device: str = "", **kwargs) -> ICSLogger:
    """
    Get or create a logger.

    Thread-safe logger factory.

    Args:
        name: Logger name (typically __name__)
        device: Target description for context
        **kwargs: Additional ICSLogger arguments

    Returns:
        ICSLogger instance
    """
    logger_key = f"{name}:{device}"

    with _loggers_lock:
        if logger_key not in _loggers:
            if "log_dir" not in kwargs and _default_log_dir:
                kwargs["log_dir"] = _default_log_dir
            kwargs.setdefault("level", _default_level)

            _loggers[logger_key] = ICSLogger(name, device, **kwargs)

        return _loggers[logger_key]
