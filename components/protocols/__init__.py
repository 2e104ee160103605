"""
Protocol clients.

Structure:
    components/protocols/
    ├── base_protocol.py          # BaseProtocol (lifecycle, async with)
    └── modbus/
        ├── operations.py         # OperationKind, OperationRequest, ExecutionOutcome
        ├── value_codec.py        # register payload encode/decode
        ├── pymodbus_3114.py      # PyModbus3114Adapter (transport)
        ├── modbus_protocol.py    # ModbusProtocol (dispatch)
        ├── repeat_scheduler.py   # RepeatScheduler
        └── client_settings.py    # Endpoint, RunSettings

Usage:
    from components.protocols.modbus import ModbusProtocol, PyModbus3114Adapter

    adapter = PyModbus3114Adapter(host="127.0.0.1", port=502, device_id=1)
    async with ModbusProtocol(adapter) as protocol:
        outcome = await protocol.execute(request)
"""

from components.protocols.base_protocol import BaseProtocol

__all__ = ["BaseProtocol"]
