"""Core enumerations for asyncrun."""
from enum import Enum


class OutcomeStatus(str, Enum):
    """
    Classification of a single outcome slot.

    - SUCCESS: the unit returned a value before the deadline
    - FAILED: the unit raised; its own exception fills the slot
    - TIMED_OUT: the deadline won; a synthesized timeout error fills the slot
    """

    SUCCESS = "success"
    FAILED = "failed"
    TIMED_OUT = "timed_out"

    def __str__(self) -> str:
        """Return string representation of the enum value."""
        return self.value


class RunMode(str, Enum):
    """Which executor produced an outcome."""

    SINGLE = "single"
    BATCH = "batch"

    def __str__(self) -> str:
        """Return string representation of the enum value."""
        return self.value
