"""Multi-unit executor: fan out many units, fan in position-aligned outcomes."""
import asyncio
import concurrent.futures
import logging
import threading
import time
from typing import Any, List, Optional, Sequence
from asyncrun.core.enums import RunMode
from asyncrun.core.exceptions import OperationTimeoutError
from asyncrun.executor.units import (
    WorkUnit,
    capture,
    capture_async,
    ensure_unit,
    is_async_unit,
    submit_thread,
)
from asyncrun.models import BatchOutcome, Outcome
from asyncrun.observability.metrics import (
    record_unit_abandoned,
    record_unit_completed,
    record_unit_started,
)
from asyncrun.options import Option, Timeout, resolve_call_options

logger = logging.getLogger(__name__)


class _Batch:
    """
    Preallocated outcome slots shared by the contexts of one call.

    Each context writes only its own index, so slots need no locking.
    """

    def __init__(self, units: Sequence[WorkUnit], timeout_seconds: float):
        self.units = [ensure_unit(unit) for unit in units]
        self.timeout_seconds = timeout_seconds
        self.values: List[Any] = [None] * len(self.units)
        self.errors: List[Optional[BaseException]] = [None] * len(self.units)
        self.flags = [threading.Event() for _ in self.units]
        self.finished = [False] * len(self.units)
        self.started = time.monotonic()
        self.deadline = self.started + timeout_seconds

    def record(self, index: int, outcome: Outcome) -> None:
        """
        Store unit ``index``'s outcome, judged against the shared deadline.

        Past the deadline a unit's own error is kept; a value is replaced by
        a timeout error.
        """
        now = time.monotonic()
        if now >= self.deadline:
            if outcome.error is None:
                logger.warning(
                    f"Work unit {index} finished after the {self.timeout_seconds}s deadline"
                )
                self.errors[index] = OperationTimeoutError(self.timeout_seconds)
            else:
                self.errors[index] = outcome.error
        else:
            self.values[index] = outcome.value
            self.errors[index] = outcome.error

        self.finished[index] = True
        slot = Outcome(self.values[index], self.errors[index])
        record_unit_completed(RunMode.BATCH, slot.status, now - self.started)

    def run_unit(self, index: int) -> None:
        self.record(index, capture(self.units[index], self.flags[index]))

    async def run_unit_async(self, index: int) -> None:
        self.record(index, await capture_async(self.units[index], self.flags[index]))

    def mark_overdue(self) -> None:
        """Flag every still-running unit as abandoned."""
        overdue = [i for i, done in enumerate(self.finished) if not done]
        for index in overdue:
            self.flags[index].set()
            record_unit_abandoned(RunMode.BATCH)
        if overdue:
            logger.warning(
                f"{len(overdue)} of {len(self.units)} work units still running "
                f"after {self.timeout_seconds}s deadline, waiting for them"
            )

    def outcome(self) -> BatchOutcome:
        return BatchOutcome(self.values, self.errors)


def run_all(
    units: Sequence[WorkUnit], *opts: Option, timeout: Optional[Timeout] = None
) -> BatchOutcome:
    """
    Run every unit on its own thread against one shared deadline.

    Blocks until all units have physically finished, even past the
    deadline; the deadline only decides what each slot records.

    Args:
        units: Zero-argument callables or coroutine functions
        *opts: Option adjustments, applied in order
        timeout: Shortcut for ``with_timeout(timeout)``, applied last

    Returns:
        BatchOutcome: ``values`` and ``errors``, one entry per unit, in
        input order
    """
    options = resolve_call_options(opts, timeout)
    batch = _Batch(units, options.timeout_seconds)
    if not batch.units:
        return batch.outcome()

    futures = []
    for index in range(len(batch.units)):
        futures.append(submit_thread(lambda index=index: batch.run_unit(index)))
        record_unit_started(RunMode.BATCH)
    logger.debug(f"Started {len(futures)} work units")

    concurrent.futures.wait(futures, timeout=options.timeout_seconds)
    batch.mark_overdue()
    concurrent.futures.wait(futures)
    for future in futures:
        future.result()

    return batch.outcome()


async def run_all_async(
    units: Sequence[WorkUnit], *opts: Option, timeout: Optional[Timeout] = None
) -> BatchOutcome:
    """
    Coroutine version of ``run_all``.

    Coroutine units run as tasks on the current loop, plain callables on
    their own threads. Never cancels a unit.
    """
    options = resolve_call_options(opts, timeout)
    batch = _Batch(units, options.timeout_seconds)
    if not batch.units:
        return batch.outcome()

    pending = []
    for index, unit in enumerate(batch.units):
        if is_async_unit(unit):
            pending.append(asyncio.create_task(batch.run_unit_async(index)))
        else:
            future = submit_thread(lambda index=index: batch.run_unit(index))
            pending.append(asyncio.wrap_future(future))
        record_unit_started(RunMode.BATCH)
    logger.debug(f"Started {len(pending)} work units")

    loop = asyncio.get_running_loop()
    overdue_timer = loop.call_later(options.timeout_seconds, batch.mark_overdue)
    try:
        await asyncio.gather(*pending)
    finally:
        overdue_timer.cancel()

    return batch.outcome()
