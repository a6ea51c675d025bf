"""Shared fixtures for core unit tests."""

import pytest

from research_assistant.core.error_handling import (
    ErrorHandler,
    ErrorStatistics,
    ExecutionContext,
    StrategyConfig,
)


class SleepRecorder:
    """Async sleep stand-in that records requested delays instead of waiting."""

    def __init__(self):
        self.calls = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class CountingOperation:
    """Operation that fails ``failures`` times, then returns ``result``.

    ``failures=None`` fails on every call. ``error_factory`` builds a fresh
    exception per failure.
    """

    def __init__(self, error_factory, failures=None, result="ok", is_async=True):
        self.error_factory = error_factory
        self.failures = failures
        self.result = result
        self.is_async = is_async
        self.calls = 0

    def _step(self):
        self.calls += 1
        if self.failures is None or self.calls <= self.failures:
            raise self.error_factory()
        return self.result

    def __call__(self):
        if not self.is_async:
            return self._step()

        async def _run():
            return self._step()

        return _run()


@pytest.fixture
def fake_sleep():
    return SleepRecorder()


@pytest.fixture
def context():
    return ExecutionContext(component="TestComponent", plugin_id="research-assistant")


@pytest.fixture
def make_handler(fake_sleep, context):
    """Factory building handlers with recorded sleep and the test context."""

    def _make(reporter=None, statistics=None, **config_overrides):
        return ErrorHandler(
            StrategyConfig(**config_overrides),
            context,
            statistics=statistics,
            reporter=reporter,
            sleep_func=fake_sleep,
        )

    return _make


@pytest.fixture
def counting_operation():
    return CountingOperation
