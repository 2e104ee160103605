# tests/conftest.py
"""Shared pytest fixtures for Modbus client tests.

Transport-facing tests use mocks shaped like pymodbus responses so no
network access is needed. Everything above the adapter is exercised
with real objects.
"""

import tempfile
from pathlib import Path
from typing import Generator
from unittest.mock import AsyncMock, Mock

import pytest
import yaml


# ----------------------------------------------------------------
# pymodbus response fakes
# ----------------------------------------------------------------
def make_response(registers=None, bits=None, error: bool = False, text: str = ""):
    """Build a mock with the parts of a pymodbus response the client reads."""
    response = Mock()
    response.isError = Mock(return_value=error)
    response.registers = list(registers or [])
    response.bits = list(bits or [])
    response.__str__ = Mock(return_value=text or "ExceptionResponse(dev_id=1)")
    return response


@pytest.fixture
def response_factory():
    """Factory fixture returning make_response."""
    return make_response


@pytest.fixture
def mock_adapter():
    """Create a mock transport adapter with all eight primitives.

    Every primitive succeeds with an empty response unless a test
    overrides it.
    """
    adapter = Mock()
    adapter.host = "192.168.1.100"
    adapter.port = 502
    adapter.connected = True
    adapter.connect = AsyncMock(return_value=True)
    adapter.disconnect = AsyncMock()
    adapter.probe = AsyncMock(
        return_value={"transport": "modbus-tcp", "host": "192.168.1.100"}
    )
    for name in (
        "read_coils",
        "read_discrete_inputs",
        "read_holding_registers",
        "read_input_registers",
        "write_coil",
        "write_register",
        "write_multiple_coils",
        "write_multiple_registers",
    ):
        setattr(adapter, name, AsyncMock(return_value=make_response()))
    return adapter


# ----------------------------------------------------------------
# Configuration fixtures
# ----------------------------------------------------------------
@pytest.fixture
def temp_config_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test configuration files.

    Yields:
        Path to temporary configuration directory
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def write_config_file(temp_config_dir):
    """Factory fixture for writing YAML configuration files.

    Args:
        temp_config_dir: Temporary directory for config files

    Returns:
        Function that writes config dict to YAML file
    """

    def _write_config(config: dict, filename: str = "client.yml") -> Path:
        config_file = temp_config_dir / filename
        with open(config_file, "w") as f:
            yaml.dump(config, f)
        return config_file

    return _write_config
