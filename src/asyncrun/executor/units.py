"""Launching work units in their own concurrent contexts."""
import asyncio
import concurrent.futures
import contextvars
import inspect
import itertools
import threading
from typing import Any, Callable, Optional
from asyncrun.config import get_settings
from asyncrun.models import Outcome

WorkUnit = Callable[[], Any]

_thread_counter = itertools.count(1)

# Set inside each unit's context; the executor flips it when it stops waiting.
_abandon_flag: contextvars.ContextVar[Optional[threading.Event]] = contextvars.ContextVar(
    "asyncrun_abandon_flag", default=None
)


def abandoned() -> bool:
    """
    Tell a running unit whether the executor has given up on it.

    Units that may outlive their deadline can poll this to stop early.
    Outside of a unit it always returns False.

    Returns:
        bool: True once the unit's result will be discarded
    """
    flag = _abandon_flag.get()
    return flag is not None and flag.is_set()


def ensure_unit(unit: Any) -> WorkUnit:
    """
    Validate a work unit before anything is launched.

    Raises:
        TypeError: If ``unit`` is not callable
    """
    if not callable(unit):
        raise TypeError(f"Work unit must be callable, got {type(unit).__name__}")
    return unit


def is_async_unit(unit: WorkUnit) -> bool:
    """Whether calling ``unit`` produces a coroutine."""
    if inspect.iscoroutinefunction(unit):
        return True
    return inspect.iscoroutinefunction(getattr(unit, "__call__", None))


def capture(unit: WorkUnit, flag: threading.Event) -> Outcome:
    """
    Invoke a unit on the current thread and capture its outcome.

    Coroutine units get a fresh event loop. Exceptions never escape;
    they become the outcome's error.
    """
    token = _abandon_flag.set(flag)
    try:
        result = unit()
        if inspect.iscoroutine(result):
            result = asyncio.run(result)
    except BaseException as exc:
        return Outcome(None, exc)
    finally:
        _abandon_flag.reset(token)
    return Outcome(result, None)


async def capture_async(unit: WorkUnit, flag: threading.Event) -> Outcome:
    """Await a coroutine unit inside the current task and capture its outcome."""
    token = _abandon_flag.set(flag)
    try:
        result = unit()
        if inspect.isawaitable(result):
            result = await result
    except asyncio.CancelledError:
        raise
    except Exception as exc:
        return Outcome(None, exc)
    finally:
        _abandon_flag.reset(token)
    return Outcome(result, None)


def thread_name() -> str:
    return f"{get_settings().THREAD_NAME_PREFIX}-{next(_thread_counter)}"


def submit_thread(fn: Callable[[], Any]) -> concurrent.futures.Future:
    """
    Run ``fn`` on a new daemon thread.

    The thread inherits the caller's context variables. ``fn`` is expected
    to capture its own errors; anything that still escapes is stored on the
    returned future.

    Returns:
        concurrent.futures.Future: Resolves with ``fn``'s return value
    """
    future: concurrent.futures.Future = concurrent.futures.Future()
    ctx = contextvars.copy_context()

    def target() -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            result = ctx.run(fn)
        except BaseException as exc:
            future.set_exception(exc)
        else:
            future.set_result(result)

    threading.Thread(target=target, name=thread_name(), daemon=True).start()
    return future
