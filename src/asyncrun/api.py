"""Public entry points for asyncrun."""
from asyncrun.core.enums import OutcomeStatus
from asyncrun.core.exceptions import AsyncrunException, OperationTimeoutError
from asyncrun.executor.batch import run_all, run_all_async
from asyncrun.executor.single import run, run_async
from asyncrun.executor.units import WorkUnit, abandoned
from asyncrun.models import BatchOutcome, Outcome
from asyncrun.options import Option, RunOptions, make_options, with_timeout

__all__ = [
    "AsyncrunException",
    "BatchOutcome",
    "OperationTimeoutError",
    "Option",
    "Outcome",
    "OutcomeStatus",
    "RunOptions",
    "WorkUnit",
    "abandoned",
    "make_options",
    "run",
    "run_all",
    "run_all_async",
    "run_async",
    "with_timeout",
]
