# components/protocols/modbus/operations.py
"""
Modbus operation model.

Provides:
- OperationKind: the eight supported operations and their function codes
- NumericMode: signed/unsigned interpretation of 16-bit values
- OperationRequest: immutable, validated description of one operation
- ExecutionOutcome: result of a single execution of a request
"""

from dataclasses import dataclass, field
from enum import Enum

__all__ = [
    "ConfigurationError",
    "OperationKind",
    "NumericMode",
    "OperationRequest",
    "ExecutionOutcome",
    "ADDRESS_SPACE",
]

ADDRESS_SPACE = 0x10000

# Per-request quantity limits from the Modbus application protocol
MAX_READ_BITS = 2000
MAX_READ_REGISTERS = 125
MAX_WRITE_COILS = 1968
MAX_WRITE_REGISTERS = 123


class ConfigurationError(ValueError):
    """Fatal configuration problem, detected before any network activity."""


# ----------------------------------------------------------------
# Operation kinds
# ----------------------------------------------------------------


class OperationKind(Enum):
    """Supported Modbus operations, valued by their wire name."""

    READ_COILS = "read_coils"
    READ_DISCRETE_INPUTS = "read_discrete_inputs"
    READ_HOLDING_REGISTERS = "read_holding_registers"
    READ_INPUT_REGISTERS = "read_input_registers"
    WRITE_SINGLE_COIL = "write_single_coil"
    WRITE_SINGLE_REGISTER = "write_single_register"
    WRITE_MULTIPLE_COILS = "write_multiple_coils"
    WRITE_MULTIPLE_REGISTERS = "write_multiple_registers"

    @classmethod
    def from_name(cls, name: str) -> "OperationKind":
        """Look up an operation by name, rejecting anything unsupported."""
        try:
            return cls(name)
        except ValueError:
            raise ConfigurationError(f"Invalid operation: {name}") from None

    @classmethod
    def names(cls) -> list[str]:
        return [kind.value for kind in cls]

    @property
    def function_code(self) -> int:
        return _FUNCTION_CODES[self]

    @property
    def is_read(self) -> bool:
        return self.value.startswith("read_")

    @property
    def is_bit_access(self) -> bool:
        """True for coils and discrete inputs (single-bit data model)."""
        return self in (
            OperationKind.READ_COILS,
            OperationKind.READ_DISCRETE_INPUTS,
            OperationKind.WRITE_SINGLE_COIL,
            OperationKind.WRITE_MULTIPLE_COILS,
        )

    @property
    def is_single_write(self) -> bool:
        return self in (
            OperationKind.WRITE_SINGLE_COIL,
            OperationKind.WRITE_SINGLE_REGISTER,
        )

    @property
    def is_multiple_write(self) -> bool:
        return self in (
            OperationKind.WRITE_MULTIPLE_COILS,
            OperationKind.WRITE_MULTIPLE_REGISTERS,
        )

    @property
    def label(self) -> str:
        """Human-readable name, e.g. 'multiple registers'."""
        return self.value.split("_", 1)[1].replace("_", " ")


_FUNCTION_CODES = {
    OperationKind.READ_COILS: 0x01,
    OperationKind.READ_DISCRETE_INPUTS: 0x02,
    OperationKind.READ_HOLDING_REGISTERS: 0x03,
    OperationKind.READ_INPUT_REGISTERS: 0x04,
    OperationKind.WRITE_SINGLE_COIL: 0x05,
    OperationKind.WRITE_SINGLE_REGISTER: 0x06,
    OperationKind.WRITE_MULTIPLE_COILS: 0x0F,
    OperationKind.WRITE_MULTIPLE_REGISTERS: 0x10,
}


class NumericMode(Enum):
    """Interpretation of 16-bit register values."""

    SIGNED = "signed"
    UNSIGNED = "unsigned"


# ----------------------------------------------------------------
# Request
# ----------------------------------------------------------------


@dataclass(frozen=True)
class OperationRequest:
    """
    One fully validated Modbus operation.

    quantity applies to reads, value to single writes and values to
    multiple writes. Multiple writes derive their quantity from values.
    Construction raises ConfigurationError on inconsistent parameters.
    """

    kind: OperationKind
    start: int = 0
    quantity: int = 1
    value: int = 0
    values: tuple[int, ...] = field(default_factory=tuple)
    mode: NumericMode = NumericMode.SIGNED

    def __post_init__(self):
        # Accept lists from callers but keep the request immutable
        object.__setattr__(self, "values", tuple(self.values))

        if not 0 <= self.start < ADDRESS_SPACE:
            raise ConfigurationError(
                f"Start address {self.start} outside 0-{ADDRESS_SPACE - 1}"
            )

        if self.kind.is_read:
            limit = MAX_READ_BITS if self.kind.is_bit_access else MAX_READ_REGISTERS
            self._check_quantity(self.quantity, limit)
        elif self.kind.is_multiple_write:
            if not self.values:
                raise ConfigurationError(
                    f"{self.kind.value} requires at least one value"
                )
            limit = (
                MAX_WRITE_COILS if self.kind.is_bit_access else MAX_WRITE_REGISTERS
            )
            self._check_quantity(len(self.values), limit)

    def _check_quantity(self, quantity: int, limit: int) -> None:
        if not 1 <= quantity <= limit:
            raise ConfigurationError(
                f"{self.kind.value} quantity must be 1-{limit}, got {quantity}"
            )
        if self.start + quantity > ADDRESS_SPACE:
            raise ConfigurationError(
                f"Address range {self.start}+{quantity} exceeds the 16-bit "
                f"address space"
            )

    @property
    def count(self) -> int:
        """Number of coils/registers the request touches."""
        if self.kind.is_multiple_write:
            return len(self.values)
        if self.kind.is_single_write:
            return 1
        return self.quantity

    @property
    def written_values(self) -> list[int]:
        if self.kind.is_single_write:
            return [self.value]
        return list(self.values)


# ----------------------------------------------------------------
# Outcome
# ----------------------------------------------------------------


@dataclass(frozen=True)
class ExecutionOutcome:
    """Result of one execution of an OperationRequest."""

    kind: OperationKind
    success: bool
    values: tuple[int, ...] = ()
    mode: NumericMode = NumericMode.SIGNED
    error: str = ""

    @classmethod
    def ok(
        cls, kind: OperationKind, values, mode: NumericMode = NumericMode.SIGNED
    ) -> "ExecutionOutcome":
        return cls(kind=kind, success=True, values=tuple(values), mode=mode)

    @classmethod
    def failure(cls, kind: OperationKind, error: str) -> "ExecutionOutcome":
        return cls(kind=kind, success=False, error=error)

    def describe(self) -> str:
        """One-line report for this outcome."""
        action = "read" if self.kind.is_read else "write"
        if not self.success:
            return f"Error during {action} operation: {self.error}"
        if self.kind.is_read:
            return f"Read response ({self.mode.value}): {list(self.values)}"
        if self.kind.is_single_write:
            return f"Successfully wrote {self.kind.label}: {self.values[0]}"
        return f"Successfully wrote {self.kind.label}: {list(self.values)}"
