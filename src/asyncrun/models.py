"""Outcome models returned by the executors."""
from typing import Any, Iterator, List, NamedTuple, Optional
from asyncrun.core.enums import OutcomeStatus
from asyncrun.core.exceptions import OperationTimeoutError


def classify(error: Optional[BaseException]) -> OutcomeStatus:
    """Map an outcome slot's error to its status."""
    if error is None:
        return OutcomeStatus.SUCCESS
    if isinstance(error, OperationTimeoutError):
        return OutcomeStatus.TIMED_OUT
    return OutcomeStatus.FAILED


class Outcome(NamedTuple):
    """
    Result of running a single unit.

    Unpacks as ``value, error``. At most one of the two is meaningful:
    on failure or timeout ``value`` is None.
    """

    value: Any = None
    error: Optional[BaseException] = None

    @property
    def status(self) -> OutcomeStatus:
        return classify(self.error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def timed_out(self) -> bool:
        return isinstance(self.error, OperationTimeoutError)


class BatchOutcome(NamedTuple):
    """
    Result of running many units, aligned by position with the input.

    ``values[i]`` and ``errors[i]`` always belong to unit ``i``.
    """

    values: List[Any]
    errors: List[Optional[BaseException]]

    def outcomes(self) -> Iterator[Outcome]:
        """Iterate per-slot outcomes in input order."""
        for value, error in zip(self.values, self.errors):
            yield Outcome(value, error)

    def statuses(self) -> List[OutcomeStatus]:
        return [classify(error) for error in self.errors]

    @property
    def all_ok(self) -> bool:
        return all(error is None for error in self.errors)
