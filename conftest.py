"""
Root pytest configuration.
"""

from __future__ import annotations

from collections.abc import Generator

import pytest

# Register taglog testing fixtures for all tests
pytest_plugins = ("taglog.testing.fixtures",)


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line(
        "markers",
        "critical: Tests that must never fail - core functionality",
    )
    config.addinivalue_line(
        "markers",
        "slow: Tests that take >1 second",
    )
    config.addinivalue_line(
        "markers",
        "asyncio: Async tests",
    )
    config.addinivalue_line(
        "markers",
        "property: Property-based tests (may be slow)",
    )


@pytest.fixture(autouse=True)
def reset_diagnostics_cache() -> Generator[None, None, None]:
    """Reset the diagnostics module before and after each test.

    The diagnostics module caches the `internal_logging_enabled` setting at
    first access. Resetting keeps tests from inheriting cached state or a
    swapped writer from previous tests.
    """
    import taglog.core.diagnostics as diag

    diag._reset_for_tests()
    yield
    diag._reset_for_tests()


@pytest.fixture(autouse=True)
def reset_default_logging() -> Generator[None, None, None]:
    """Give each test a fresh default dispatcher and default logger.

    The previous dispatcher is paused so its worker thread drains and exits
    before the next test starts.
    """
    from taglog.core.dispatcher import _reset_default_dispatcher
    from taglog.core.logger import _reset_default_logger

    _reset_default_dispatcher()
    _reset_default_logger()
    yield
    _reset_default_dispatcher()
    _reset_default_logger()
