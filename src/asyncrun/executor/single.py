"""Single-unit executor: one unit raced against a deadline."""
import asyncio
import concurrent.futures
import logging
import threading
import time
from typing import Optional, Set
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
from asyncrun.models import Outcome
from asyncrun.observability.metrics import (
    record_unit_abandoned,
    record_unit_completed,
    record_unit_started,
)
from asyncrun.options import Option, Timeout, resolve_call_options

logger = logging.getLogger(__name__)

# Abandoned tasks stay referenced until they finish so the loop does not drop them.
_abandoned_tasks: Set[asyncio.Task] = set()


def run(unit: WorkUnit, *opts: Option, timeout: Optional[Timeout] = None) -> Outcome:
    """
    Run one unit on its own thread and wait for it, bounded by a timeout.

    The first of {unit returns, unit raises, deadline elapses} decides the
    outcome. On timeout the unit keeps running but its result is dropped;
    ``abandoned()`` turns True inside it.

    Args:
        unit: Zero-argument callable or coroutine function
        *opts: Option adjustments, applied in order
        timeout: Shortcut for ``with_timeout(timeout)``, applied last

    Returns:
        Outcome: ``(value, None)``, ``(None, error)`` or
        ``(None, OperationTimeoutError)``
    """
    ensure_unit(unit)
    options = resolve_call_options(opts, timeout)
    started = time.monotonic()
    flag = threading.Event()

    future = submit_thread(lambda: capture(unit, flag))
    record_unit_started(RunMode.SINGLE)

    concurrent.futures.wait([future], timeout=options.timeout_seconds)
    if future.done():
        outcome = future.result()
    else:
        outcome = _abandon(flag, options.timeout_seconds)

    record_unit_completed(RunMode.SINGLE, outcome.status, time.monotonic() - started)
    return outcome


async def run_async(
    unit: WorkUnit, *opts: Option, timeout: Optional[Timeout] = None
) -> Outcome:
    """
    Coroutine version of ``run``.

    Coroutine units run as tasks on the current loop; plain callables run on
    their own thread. Either way the unit is abandoned, not cancelled, when
    the deadline wins.
    """
    ensure_unit(unit)
    options = resolve_call_options(opts, timeout)
    started = time.monotonic()
    flag = threading.Event()

    if is_async_unit(unit):
        task = asyncio.create_task(capture_async(unit, flag))
        record_unit_started(RunMode.SINGLE)
        await asyncio.wait({task}, timeout=options.timeout_seconds)
        if task.done():
            outcome = task.result()
        else:
            _keep_alive(task)
            outcome = _abandon(flag, options.timeout_seconds)
    else:
        future = submit_thread(lambda: capture(unit, flag))
        wrapped = asyncio.wrap_future(future)
        record_unit_started(RunMode.SINGLE)
        await asyncio.wait({wrapped}, timeout=options.timeout_seconds)
        # The thread may have finished in time with delivery still in flight.
        if future.done():
            outcome = future.result()
        else:
            wrapped.cancel()
            outcome = _abandon(flag, options.timeout_seconds)

    record_unit_completed(RunMode.SINGLE, outcome.status, time.monotonic() - started)
    return outcome


def _abandon(flag: threading.Event, timeout_seconds: float) -> Outcome:
    flag.set()
    record_unit_abandoned(RunMode.SINGLE)
    logger.warning(f"Work unit did not finish within {timeout_seconds}s, abandoning it")
    return Outcome(None, OperationTimeoutError(timeout_seconds))


def _keep_alive(task: asyncio.Task) -> None:
    _abandoned_tasks.add(task)
    task.add_done_callback(_discard_abandoned)


def _discard_abandoned(task: asyncio.Task) -> None:
    _abandoned_tasks.discard(task)
    if task.cancelled():
        return
    outcome = task.result()
    if outcome.error is not None:
        logger.debug(
            "Abandoned work unit failed after its deadline",
            exc_info=outcome.error,
        )
