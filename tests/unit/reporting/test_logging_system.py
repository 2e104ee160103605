# tests/unit/reporting/test_logging_system.py
"""Tests for the client logging system.

Test Coverage:
- LogEntry serialisation
- SessionTimeFormatter and JSONFormatter
- ICSLogger outcome reporting
- Logger factory (get_logger, configure_logging)
"""

import json
import logging
import logging.handlers

import pytest

from components.protocols.modbus.operations import (
    ExecutionOutcome,
    NumericMode,
    OperationKind,
)
from components.reporting.logging_system import (
    EventCategory,
    EventSeverity,
    ICSLogger,
    JSONFormatter,
    LogEntry,
    SessionTimeFormatter,
    configure_logging,
    get_logger,
)


@pytest.fixture
def quiet_logger():
    """ICSLogger without console output."""
    return ICSLogger("test.quiet", enable_console=False)


@pytest.fixture(autouse=True)
def reset_logging():
    """Restore factory defaults after each test."""
    yield
    configure_logging(log_dir=None, level=logging.INFO)


def own_handlers(logger):
    """Handlers attached by the logging system, ignoring pytest capture."""
    return [
        h
        for h in logger.logger.handlers
        if isinstance(h.formatter, (SessionTimeFormatter, JSONFormatter))
    ]


def make_record(message="hello", level=logging.INFO):
    return logging.LogRecord(
        name="test.component",
        level=level,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )


# ================================================================
# LOG ENTRY TESTS
# ================================================================
class TestLogEntry:
    """Test LogEntry serialisation."""

    def test_to_dict_minimal(self):
        entry = LogEntry(
            session_time=1.5,
            wall_time=1000.0,
            severity=EventSeverity.INFO,
            category=EventCategory.COMMUNICATION,
            message="Read response (signed): [1]",
        )

        data = entry.to_dict()

        assert data == {
            "session_time": 1.5,
            "wall_time": 1000.0,
            "severity": "INFO",
            "category": "communication",
            "message": "Read response (signed): [1]",
        }

    def test_to_json_includes_optional_fields(self):
        entry = LogEntry(
            session_time=0.0,
            wall_time=0.0,
            severity=EventSeverity.ERROR,
            category=EventCategory.COMMUNICATION,
            message="Error during read operation: timeout",
            device="10.0.0.5:502/1",
            data={"iteration": 3},
        )

        data = json.loads(entry.to_json())

        assert data["device"] == "10.0.0.5:502/1"
        assert data["data"] == {"iteration": 3}

    def test_human_readable_prefixes_device(self):
        entry = LogEntry(
            session_time=0.0,
            wall_time=0.0,
            severity=EventSeverity.INFO,
            category=EventCategory.SYSTEM,
            message="started",
            device="plc",
        )

        assert entry.to_human_readable() == "plc: started"

    def test_severity_ordering(self):
        """Lower value = more severe."""
        assert EventSeverity.CRITICAL.value < EventSeverity.ERROR.value
        assert EventSeverity.ERROR.value < EventSeverity.WARNING.value
        assert EventSeverity.INFO.value < EventSeverity.DEBUG.value


# ================================================================
# FORMATTER TESTS
# ================================================================
class TestFormatters:
    """Test console and JSON formatters."""

    def test_session_time_formatter(self):
        output = SessionTimeFormatter().format(make_record("hello"))

        assert output.startswith("[T+")
        assert "[    INFO] test.component: hello" in output

    def test_json_formatter(self):
        output = JSONFormatter(device="plc").format(
            make_record("broken", logging.ERROR)
        )

        data = json.loads(output)
        assert data["severity"] == "ERROR"
        assert data["message"] == "broken"
        assert data["device"] == "plc"
        assert data["component"] == "test.component"
        assert data["category"] == "system"


# ================================================================
# LOGGER TESTS
# ================================================================
class TestICSLogger:
    """Test ICSLogger behaviour."""

    def test_logger_does_not_propagate(self, quiet_logger):
        assert quiet_logger.logger.propagate is False
        assert own_handlers(quiet_logger) == []

    def test_json_file_handler(self, tmp_path):
        logger = ICSLogger("test.file", log_dir=tmp_path, enable_console=False)

        logger.info("written to file")
        for handler in logger.logger.handlers:
            handler.flush()

        lines = (tmp_path / "modbus_client.json.log").read_text().splitlines()
        assert json.loads(lines[-1])["message"] == "written to file"

    @pytest.mark.asyncio
    async def test_log_outcome_success(self, quiet_logger):
        outcome = ExecutionOutcome.ok(
            OperationKind.READ_HOLDING_REGISTERS, [10, 65535], NumericMode.UNSIGNED
        )

        entry = await quiet_logger.log_outcome(outcome, iteration=1)

        assert entry.severity is EventSeverity.INFO
        assert entry.category is EventCategory.COMMUNICATION
        assert entry.message == "Read response (unsigned): [10, 65535]"
        assert entry.data["values"] == [10, 65535]
        assert entry.data["iteration"] == 1

    @pytest.mark.asyncio
    async def test_log_outcome_failure(self, quiet_logger):
        outcome = ExecutionOutcome.failure(OperationKind.WRITE_SINGLE_COIL, "timeout")

        entry = await quiet_logger.log_outcome(outcome, iteration=2)

        assert entry.severity is EventSeverity.ERROR
        assert entry.data["error"] == "timeout"
        assert "values" not in entry.data


# ================================================================
# FACTORY TESTS
# ================================================================
class TestLoggerFactory:
    """Test get_logger and configure_logging."""

    def test_get_logger_returns_same_instance(self):
        assert get_logger("test.factory") is get_logger("test.factory")

    def test_device_distinguishes_loggers(self):
        assert get_logger("test.factory", device="a") is not get_logger(
            "test.factory", device="b"
        )

    def test_configure_logging_adds_file_handler(self, tmp_path):
        logger = get_logger("test.configure")

        configure_logging(log_dir=tmp_path, level="DEBUG")

        handler_types = {type(h).__name__ for h in own_handlers(logger)}
        assert "RotatingFileHandler" in handler_types
        assert all(h.level == logging.DEBUG for h in own_handlers(logger))

    def test_configure_logging_rejects_unknown_level(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging(level="LOUD")

    def test_loggers_share_one_rotating_handler(self, tmp_path):
        """Test every logger writes through a single handler per file."""
        first = get_logger("test.shared", device="plc-a")
        second = get_logger("test.shared", device="plc-b")

        configure_logging(log_dir=tmp_path)

        file_handlers = {
            id(h)
            for logger in (first, second)
            for h in logger.logger.handlers
            if isinstance(h, logging.handlers.RotatingFileHandler)
        }
        assert len(file_handlers) == 1

    def test_shared_file_keeps_each_device(self, tmp_path):
        first = get_logger("test.devices", device="plc-a")
        second = get_logger("test.devices", device="plc-b")
        configure_logging(log_dir=tmp_path)

        first.info("from a")
        second.info("from b")
        for handler in own_handlers(first):
            handler.flush()

        lines = (tmp_path / "modbus_client.json.log").read_text().splitlines()
        records = [json.loads(line) for line in lines]
        devices = {r["message"]: r["device"] for r in records}
        assert devices["from a"] == "plc-a"
        assert devices["from b"] == "plc-b"

    def test_configure_logging_keeps_foreign_handlers(self, tmp_path):
        logger = get_logger("test.foreign")
        foreign = logging.NullHandler()
        logger.logger.addHandler(foreign)

        configure_logging(log_dir=tmp_path)

        assert foreign in logger.logger.handlers
        logger.logger.removeHandler(foreign)
