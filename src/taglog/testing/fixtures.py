"""
Pytest fixtures for code that logs through taglog.

Register with ``pytest_plugins = ("taglog.testing.fixtures",)``.
"""

from __future__ import annotations

from collections.abc import Generator

import pytest

from ..appenders import MemoryAppender
from ..core.dispatcher import Dispatcher
from ..core.levels import LogLevel
from ..core.logger import Logger


@pytest.fixture
def isolated_dispatcher() -> Generator[Dispatcher, None, None]:
    """A private dispatcher, paused (drained) at teardown."""
    dispatcher = Dispatcher(name="taglog-test-dispatcher")
    yield dispatcher
    dispatcher.pause_logging(timeout=5.0)


@pytest.fixture
def memory_appender(isolated_dispatcher: Dispatcher) -> MemoryAppender:
    """A memory appender registered on ``isolated_dispatcher``."""
    appender = MemoryAppender()
    isolated_dispatcher.add_appender(appender)
    return appender


@pytest.fixture
def debug_logger(isolated_dispatcher: Dispatcher) -> Logger:
    """A DEBUG-level logger bound to ``isolated_dispatcher``."""
    return Logger(LogLevel.DEBUG, dispatcher=isolated_dispatcher, name="test")
