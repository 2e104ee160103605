"""Modbus TCP client: operation model, codec, dispatcher and scheduler."""

from components.protocols.modbus.client_settings import Endpoint, RunSettings
from components.protocols.modbus.modbus_protocol import ModbusProtocol
from components.protocols.modbus.operations import (
    ConfigurationError,
    ExecutionOutcome,
    NumericMode,
    OperationKind,
    OperationRequest,
)
from components.protocols.modbus.pymodbus_3114 import PyModbus3114Adapter
from components.protocols.modbus.repeat_scheduler import (
    Bounded,
    RepeatScheduler,
    SchedulerState,
    Unbounded,
    repeat_policy,
)

__all__ = [
    "Bounded",
    "ConfigurationError",
    "Endpoint",
    "ExecutionOutcome",
    "ModbusProtocol",
    "NumericMode",
    "OperationKind",
    "OperationRequest",
    "PyModbus3114Adapter",
    "RepeatScheduler",
    "RunSettings",
    "SchedulerState",
    "Unbounded",
    "repeat_policy",
]
