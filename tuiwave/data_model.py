"""Core value types for tuiwave.

This module defines the 4-state logic values carried by signals and the
time-stamped change records stored per signal. Nothing here depends on the
rest of the package.

    LogicValue
    ├── Bit(True/False)          1-bit signal, asserted or deasserted
    ├── Vector(value, width)     2..128-bit bus with every bit resolved
    ├── Unknown                  contention / uninitialized (X)
    └── HighZ                    floating / undriven (Z)

A multi-bit value with any unresolved bit collapses to Unknown or HighZ as a
whole; the first unresolved bit scanning from the MSB decides which.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar, Union

Time = int  # Simulation ticks

# SignalIndex is a plain integer key into the SignalStore. Scope tree leaves hold
# it instead of a reference to the stream so the tree never owns signal data.
SignalIndex = int

MAX_VECTOR_WIDTH = 128


@dataclass(frozen=True)
class Bit:
    value: bool


@dataclass(frozen=True)
class Vector:
    value: int
    width: int

    def __post_init__(self) -> None:
        if not 2 <= self.width <= MAX_VECTOR_WIDTH:
            raise ValueError(f"vector width must be in 2..{MAX_VECTOR_WIDTH}, got {self.width}")
        if not 0 <= self.value < (1 << self.width):
            raise ValueError(f"value {self.value} does not fit in {self.width} bits")


class _Unresolved(Enum):
    """Singleton states for unresolved logic levels."""
    UNKNOWN = "X"
    HIGH_Z = "Z"

    def __repr__(self) -> str:
        return "Unknown" if self is _Unresolved.UNKNOWN else "HighZ"


Unknown = _Unresolved.UNKNOWN
HighZ = _Unresolved.HIGH_Z

LogicValue = Union[Bit, Vector, _Unresolved]
RealValue = float
TextValue = str
Value = Union[LogicValue, RealValue, TextValue]


def is_unresolved(value: object) -> bool:
    """True for Unknown and HighZ."""
    return value is Unknown or value is HighZ


class SignalKind(Enum):
    BITS = "bits"       # 4-state logic, 1..128 bits
    REAL = "real"       # floating-point scalar
    STRING = "string"   # text scalar


V = TypeVar("V")


@dataclass(frozen=True)
class ChangeEvent(Generic[V]):
    time: Time
    value: V


_SCALAR_STATES = {
    "0": Bit(False),
    "1": Bit(True),
    "x": Unknown,
    "X": Unknown,
    "z": HighZ,
    "Z": HighZ,
}


def decode_scalar(state: str) -> LogicValue:
    """Decode a single-bit sample. Unrecognized states decode to Unknown."""
    return _SCALAR_STATES.get(state, Unknown)


def decode_vector(bits: str) -> LogicValue:
    """Decode an MSB-first bit string into a LogicValue.

    Args:
        bits: One character per bit, most significant first (e.g. "10x1").

    Returns:
        Bit for 0/1-bit strings, Vector when every bit is 0 or 1, otherwise
        Unknown or HighZ according to the first unresolved bit from the MSB.
    """
    width = len(bits)
    if width > MAX_VECTOR_WIDTH:
        raise ValueError(f"vector of {width} bits exceeds {MAX_VECTOR_WIDTH}")
    if width == 0:
        return Bit(False)
    if width == 1:
        return decode_scalar(bits)

    value = 0
    for char in bits:
        state = decode_scalar(char)
        if not isinstance(state, Bit):
            return state
        value = (value << 1) | int(state.value)
    return Vector(value, width)


def decode_native(raw: Optional[Union[int, str]], width: int) -> LogicValue:
    """Decode a logic value as delivered by the pywellen reader.

    pywellen returns an int for fully two-state values, a bit string when any
    bit is X/Z and None for undefined samples.
    """
    if raw is None:
        return Unknown
    if isinstance(raw, str):
        return decode_vector(raw)
    if width <= 1:
        return Bit(raw != 0)
    return Vector(raw & ((1 << width) - 1), width)
