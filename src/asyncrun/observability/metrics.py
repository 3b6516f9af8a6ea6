"""Prometheus metrics for asyncrun."""
from prometheus_client import Counter, Histogram
from asyncrun.config import get_settings
from asyncrun.core.enums import OutcomeStatus, RunMode


units_started_total = Counter(
    'asyncrun_units_started_total',
    'Total number of work units started',
    ['mode']
)

units_completed_total = Counter(
    'asyncrun_units_completed_total',
    'Total number of work unit outcomes recorded',
    ['mode', 'status']
)

unit_duration_seconds = Histogram(
    'asyncrun_unit_duration_seconds',
    'Time from call start until a unit outcome was recorded',
    ['mode', 'status'],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0]
)

units_abandoned_total = Counter(
    'asyncrun_units_abandoned_total',
    'Total number of still-running units whose result was discarded',
    ['mode']
)


def _enabled() -> bool:
    return get_settings().METRICS_ENABLED


def record_unit_started(mode: RunMode) -> None:
    """Record a unit being launched."""
    if _enabled():
        units_started_total.labels(mode=str(mode)).inc()


def record_unit_completed(mode: RunMode, status: OutcomeStatus, duration: float) -> None:
    """Record a unit outcome and how long the caller waited for it."""
    if not _enabled():
        return
    units_completed_total.labels(mode=str(mode), status=str(status)).inc()
    unit_duration_seconds.labels(mode=str(mode), status=str(status)).observe(duration)


def record_unit_abandoned(mode: RunMode) -> None:
    """Record a unit left running after the deadline."""
    if _enabled():
        units_abandoned_total.labels(mode=str(mode)).inc()
