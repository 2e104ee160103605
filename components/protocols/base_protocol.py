# components/protocols/base_protocol.py
"""
Base class for protocol wrappers.

A protocol owns a transport adapter and tracks connection state.
Used as an async context manager it guarantees the transport is
released on every exit path:

    async with ModbusProtocol(adapter) as protocol:
        outcome = await protocol.execute(request)
"""


class BaseProtocol:
    def __init__(self, protocol_name: str):
        self.protocol_name = protocol_name
        self.connected: bool = False

    # ------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------

    async def connect(self) -> bool:
        raise NotImplementedError

    async def disconnect(self) -> None:
        raise NotImplementedError

    async def probe(self) -> dict[str, object]:
        raise NotImplementedError

    # ------------------------------------------------------------
    # scoped acquisition
    # ------------------------------------------------------------

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.disconnect()
