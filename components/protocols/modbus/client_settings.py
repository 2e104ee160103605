# components/protocols/modbus/client_settings.py
"""
Immutable run configuration.

Built once from the config file and command-line arguments, then passed
into the adapter and scheduler. Nothing here is mutated after startup.
"""

from dataclasses import dataclass

from components.protocols.modbus.operations import ConfigurationError, OperationRequest
from components.protocols.modbus.repeat_scheduler import RepeatPolicy


@dataclass(frozen=True)
class Endpoint:
    """Modbus TCP target."""

    host: str
    port: int = 502
    unit_id: int = 1
    timeout: float = 3.0
    retries: int = 3

    def __post_init__(self):
        if not self.host:
            raise ConfigurationError("Server address is required")
        if not 1 <= self.port <= 65535:
            raise ConfigurationError(f"Port must be 1-65535, got {self.port}")
        if not 0 <= self.unit_id <= 255:
            raise ConfigurationError(f"Unit id must be 0-255, got {self.unit_id}")
        if self.timeout <= 0:
            raise ConfigurationError(f"Timeout must be positive, got {self.timeout}")

    def __str__(self) -> str:
        return f"{self.host}:{self.port}/{self.unit_id}"


@dataclass(frozen=True)
class RunSettings:
    """Everything one client run needs."""

    endpoint: Endpoint
    request: OperationRequest
    policy: RepeatPolicy
    interval_ms: int = 1000
