# components/protocols/modbus/value_codec.py
"""
Register value codec.

Pure helpers converting between raw register payloads (packed big-endian
16-bit words, as carried in Modbus PDUs) and integer values.
No IO. No state.
"""

import struct
from collections.abc import Iterable

from components.protocols.modbus.operations import NumericMode

__all__ = [
    "CodecError",
    "WORD_MASK",
    "COIL_ON",
    "COIL_OFF",
    "to_word",
    "to_signed",
    "decode",
    "encode",
    "coil_state",
]

WORD_MASK = 0xFFFF
COIL_ON = 0xFF00
COIL_OFF = 0x0000


class CodecError(ValueError):
    """Raised when a payload cannot be split into 16-bit words."""


def to_word(value: int) -> int:
    """Reduce an integer to its 16-bit two's-complement bit pattern."""
    return int(value) & WORD_MASK


def to_signed(word: int) -> int:
    """Reinterpret a 16-bit word as a signed integer."""
    word = to_word(word)
    return word - 0x10000 if word >= 0x8000 else word


def decode(payload: bytes, mode: NumericMode = NumericMode.UNSIGNED) -> list[int]:
    """
    Decode a register payload into integers.

    Args:
        payload: Big-endian 16-bit words, concatenated
        mode: Interpret each word as signed or unsigned

    Returns:
        One integer per word, in payload order

    Raises:
        CodecError: If the payload length is odd
    """
    if len(payload) % 2:
        raise CodecError(
            f"Register payload must have even length, got {len(payload)} bytes"
        )

    words = list(struct.unpack(f">{len(payload) // 2}H", payload))
    if mode is NumericMode.SIGNED:
        return [to_signed(w) for w in words]
    return words


def encode(values: Iterable[int]) -> bytes:
    """Encode integers as big-endian 16-bit words (two's-complement wrapped)."""
    words = [to_word(v) for v in values]
    return struct.pack(f">{len(words)}H", *words)


def coil_state(value: int) -> bool:
    """Map a 16-bit value onto a coil state: zero is OFF, anything else ON."""
    return to_word(value) != COIL_OFF
