# components/protocols/modbus/pymodbus_3114.py
"""
Modbus TCP adapter using pymodbus 3.11

Transport-only adapter.
MBAP framing, transaction ids and timeouts belong to pymodbus.
No operation semantics.
"""

from pymodbus.client import AsyncModbusTcpClient

from components.protocols.modbus import value_codec


class PyModbus3114Adapter:
    def __init__(
        self,
        host: str,
        port: int = 502,
        device_id: int = 1,
        timeout: float = 3.0,
        retries: int = 3,
    ):
        self.host = host
        self.port = port
        self.device_id = device_id
        self.timeout = timeout
        self.retries = retries

        self.client: AsyncModbusTcpClient | None = None
        self.connected: bool = False

    # ------------------------------------------------------------------
    # Client lifecycle
    # ------------------------------------------------------------------
    async def connect(self) -> bool:
        if not self.client:
            self.client = AsyncModbusTcpClient(
                host=self.host,
                port=self.port,
                timeout=self.timeout,
                retries=self.retries,
            )

        if not self.connected:
            self.connected = await self.client.connect()

        return self.connected

    async def disconnect(self) -> None:
        if self.client:
            self.client.close()
            self.client = None

        self.connected = False

    def _require_client(self) -> AsyncModbusTcpClient:
        if not self.client:
            raise RuntimeError("Client not connected")
        return self.client

    # ------------------------------------------------------------------
    # Modbus TCP primitives (one request per call)
    # ------------------------------------------------------------------
    async def read_coils(self, address: int, count: int = 1):
        client = self._require_client()
        return await client.read_coils(
            address, count=count, device_id=self.device_id
        )

    async def read_discrete_inputs(self, address: int, count: int = 1):
        client = self._require_client()
        return await client.read_discrete_inputs(
            address, count=count, device_id=self.device_id
        )

    async def read_holding_registers(self, address: int, count: int = 1):
        client = self._require_client()
        return await client.read_holding_registers(
            address, count=count, device_id=self.device_id
        )

    async def read_input_registers(self, address: int, count: int = 1):
        client = self._require_client()
        return await client.read_input_registers(
            address, count=count, device_id=self.device_id
        )

    async def write_coil(self, address: int, value: bool):
        client = self._require_client()
        return await client.write_coil(address, value, device_id=self.device_id)

    async def write_register(self, address: int, value: int):
        client = self._require_client()
        return await client.write_register(
            address, value_codec.to_word(value), device_id=self.device_id
        )

    async def write_multiple_coils(self, address: int, values: list[bool]):
        client = self._require_client()
        return await client.write_coils(address, values, device_id=self.device_id)

    async def write_multiple_registers(self, address: int, payload: bytes):
        """Write an encoded register payload starting at address."""
        client = self._require_client()
        registers = value_codec.decode(payload)
        return await client.write_registers(
            address, registers, device_id=self.device_id
        )

    # ------------------------------------------------------------------
    # Transport-level introspection only
    # ------------------------------------------------------------------
    async def probe(self) -> dict:
        return {
            "transport": "modbus-tcp",
            "host": self.host,
            "port": self.port,
            "device_id": self.device_id,
            "timeout": self.timeout,
            "connected": self.connected,
        }
