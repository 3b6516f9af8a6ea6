"""Per-call execution options and their resolution."""
from datetime import timedelta
from typing import Any, Callable, Mapping, Optional, Union
from pydantic import BaseModel, Field, field_validator
from asyncrun.config import get_settings


def _default_timeout() -> timedelta:
    return timedelta(seconds=get_settings().DEFAULT_TIMEOUT_SECONDS)


class RunOptions(BaseModel):
    """
    Immutable settings for a single executor invocation.

    Numbers given for ``timeout`` are read as seconds.
    """

    timeout: timedelta = Field(
        default_factory=_default_timeout,
        description="Deadline window measured from call start",
    )

    model_config = {
        "frozen": True,
    }

    @field_validator("timeout")
    @classmethod
    def _non_negative(cls, value: timedelta) -> timedelta:
        if value < timedelta(0):
            raise ValueError("timeout must not be negative")
        return value

    @property
    def timeout_seconds(self) -> float:
        """Timeout as float seconds, the unit asyncio and threading expect."""
        return self.timeout.total_seconds()

    def replace(self, **changes: Any) -> "RunOptions":
        """Return a validated copy with ``changes`` applied."""
        return type(self).model_validate({**self.model_dump(), **changes})


Option = Union[Callable[[RunOptions], RunOptions], RunOptions, Mapping[str, Any]]
Timeout = Union[timedelta, float, int]


def with_timeout(timeout: Timeout) -> Callable[[RunOptions], RunOptions]:
    """
    Build an adjustment that sets the timeout.

    Args:
        timeout: Deadline window, a timedelta or a number of seconds

    Returns:
        Callable: Adjustment to pass to an executor or ``make_options``
    """

    def apply(options: RunOptions) -> RunOptions:
        return options.replace(timeout=timeout)

    return apply


def make_options(*opts: Option, base: Optional[RunOptions] = None) -> RunOptions:
    """
    Resolve adjustments over the defaults.

    Adjustments are applied in the order given, so a later one overrides an
    earlier one for the same field. A ``RunOptions`` adjustment replaces
    everything resolved before it; a mapping is treated as field overrides.

    Args:
        *opts: Adjustments to apply
        base: Starting point (defaults to ``RunOptions()``)

    Returns:
        RunOptions: Resolved, immutable options

    Raises:
        pydantic.ValidationError: If an adjustment carries an invalid value
        TypeError: If an adjustment is of an unsupported kind
    """
    options = base if base is not None else RunOptions()

    for opt in opts:
        if isinstance(opt, RunOptions):
            options = opt
        elif isinstance(opt, Mapping):
            options = options.replace(**opt)
        elif callable(opt):
            options = opt(options)
        else:
            raise TypeError(f"Unsupported option: {opt!r}")

    return options


def resolve_call_options(opts: tuple, timeout: Optional[Timeout] = None) -> RunOptions:
    """Resolve executor arguments; the ``timeout`` keyword is applied last."""
    if timeout is not None:
        opts = opts + (with_timeout(timeout),)
    return make_options(*opts)
