"""Custom exceptions for asyncrun."""
from typing import Optional


TIMEOUT_MESSAGE = "operation timed out"


class AsyncrunException(Exception):
    """Base exception for all asyncrun-specific exceptions."""

    pass


class OperationTimeoutError(AsyncrunException, TimeoutError):
    """
    Synthesized when a unit's outcome is not observed before the deadline.

    Never raised by the executor itself; it is placed in the outcome slot
    of the unit that ran out of time.
    """

    def __init__(self, timeout: Optional[float] = None):
        super().__init__(TIMEOUT_MESSAGE)
        self.timeout = timeout

    def __str__(self) -> str:
        return TIMEOUT_MESSAGE
