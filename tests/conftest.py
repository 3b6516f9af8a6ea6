"""Shared pytest fixtures for all tests."""
import pytest
from asyncrun.config import get_settings


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """
    Reset the cached settings before and after each test.

    Tests that change ``ASYNCRUN_*`` variables get a fresh Settings
    instance instead of one cached by an earlier test.
    """
    for name in (
        "ASYNCRUN_DEFAULT_TIMEOUT_SECONDS",
        "ASYNCRUN_THREAD_NAME_PREFIX",
        "ASYNCRUN_METRICS_ENABLED",
    ):
        monkeypatch.delenv(name, raising=False)

    get_settings.cache_clear()

    yield

    get_settings.cache_clear()


@pytest.fixture
def short_default_timeout(monkeypatch):
    """Make the default timeout short enough for timing tests."""
    monkeypatch.setenv("ASYNCRUN_DEFAULT_TIMEOUT_SECONDS", "0.5")
    get_settings.cache_clear()
    return 0.5
