"""Exception types raised by the tuiwave core."""


class TuiwaveError(Exception):
    """Base class for all tuiwave errors."""


class IndexOutOfRange(TuiwaveError, IndexError):
    """A signal index does not exist in the signal store."""

    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"signal index {index} out of range (store holds {size} signals)")
        self.index = index
        self.size = size


class ContractViolation(TuiwaveError, AssertionError):
    """A caller broke a precondition of the core (programmer error)."""


class ConfigError(TuiwaveError, ValueError):
    """The user configuration file is malformed."""
