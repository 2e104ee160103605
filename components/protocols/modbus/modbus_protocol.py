# protocols/modbus/modbus_protocol.py
"""
Modbus protocol abstraction.

Maps one OperationRequest onto exactly one adapter call and turns the
response into an ExecutionOutcome. Transport failures come back as
failure outcomes instead of exceptions so the caller decides whether
to carry on.
"""

import asyncio

from pymodbus.exceptions import ModbusException

from components.protocols.base_protocol import BaseProtocol
from components.protocols.modbus import value_codec
from components.protocols.modbus.operations import (
    ExecutionOutcome,
    OperationKind,
    OperationRequest,
)
from components.reporting.logging_system import get_logger

logger = get_logger(__name__)

TRANSPORT_ERRORS = (
    ModbusException,
    value_codec.CodecError,
    asyncio.TimeoutError,
    OSError,
)


class ModbusProtocol(BaseProtocol):
    def __init__(self, adapter):
        super().__init__("modbus")
        self.adapter = adapter

    # ------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------

    async def connect(self) -> bool:
        self.connected = await self.adapter.connect()
        if not self.connected:
            logger.warning(
                f"Could not connect to {self.adapter.host}:{self.adapter.port}, "
                f"retrying on the next request"
            )
        return self.connected

    async def disconnect(self) -> None:
        await self.adapter.disconnect()
        self.connected = False

    async def probe(self) -> dict[str, object]:
        result = {"protocol": self.protocol_name, "connected": self.connected}
        result.update(await self.adapter.probe())
        return result

    # ------------------------------------------------------------
    # dispatch
    # ------------------------------------------------------------

    async def execute(self, request: OperationRequest) -> ExecutionOutcome:
        """Perform one request/response exchange for request.

        pymodbus only reconnects a connection that dropped, so a unit
        that was unreachable at startup is dialled again here.
        """
        logger.debug(
            f"FC {request.kind.function_code:#04x} {request.kind.value} "
            f"start={request.start} count={request.count}"
        )
        try:
            if not self.adapter.connected and not await self.connect():
                return ExecutionOutcome.failure(
                    request.kind,
                    f"Not connected to {self.adapter.host}:{self.adapter.port}",
                )
            if request.kind.is_read:
                values = await self._read(request)
            else:
                values = await self._write(request)
        except TRANSPORT_ERRORS as e:
            return ExecutionOutcome.failure(request.kind, str(e) or type(e).__name__)
        except _ExceptionResponse as e:
            return ExecutionOutcome.failure(request.kind, str(e))

        return ExecutionOutcome.ok(request.kind, values, request.mode)

    async def _read(self, request: OperationRequest) -> list[int]:
        reader = {
            OperationKind.READ_COILS: self.adapter.read_coils,
            OperationKind.READ_DISCRETE_INPUTS: self.adapter.read_discrete_inputs,
            OperationKind.READ_HOLDING_REGISTERS: self.adapter.read_holding_registers,
            OperationKind.READ_INPUT_REGISTERS: self.adapter.read_input_registers,
        }[request.kind]

        response = _checked(await reader(request.start, request.quantity))

        if request.kind.is_bit_access:
            # Bits arrive padded to a whole byte
            if len(response.bits) < request.quantity:
                raise _ExceptionResponse(
                    f"Short response: expected {request.quantity} bits, "
                    f"got {len(response.bits)}"
                )
            return [int(bool(bit)) for bit in response.bits[: request.quantity]]

        if len(response.registers) != request.quantity:
            raise _ExceptionResponse(
                f"Malformed response: expected {request.quantity} registers, "
                f"got {len(response.registers)}"
            )
        payload = value_codec.encode(response.registers)
        logger.debug(f"Register payload: {payload.hex()}")
        return value_codec.decode(payload, request.mode)

    async def _write(self, request: OperationRequest) -> list[int]:
        kind = request.kind
        address = request.start

        if kind is OperationKind.WRITE_SINGLE_COIL:
            response = await self.adapter.write_coil(
                address, value_codec.coil_state(request.value)
            )
        elif kind is OperationKind.WRITE_SINGLE_REGISTER:
            response = await self.adapter.write_register(
                address, value_codec.to_word(request.value)
            )
        elif kind is OperationKind.WRITE_MULTIPLE_COILS:
            response = await self.adapter.write_multiple_coils(
                address, [value_codec.coil_state(v) for v in request.values]
            )
        else:
            response = await self.adapter.write_multiple_registers(
                address, value_codec.encode(request.values)
            )

        _checked(response)
        return request.written_values


class _ExceptionResponse(Exception):
    """The remote unit answered with an exception or unusable response."""


def _checked(response):
    if response is None:
        raise _ExceptionResponse("No response from unit")
    if response.isError():
        raise _ExceptionResponse(str(response))
    return response
