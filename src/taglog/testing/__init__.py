"""
Testing utilities for taglog users.

Example:
    from taglog.testing import validate_appender

    def test_my_appender():
        result = validate_appender(MyAppender())
        assert result.valid

Pytest fixtures live in ``taglog.testing.fixtures`` and require pytest:
``pip install taglog[testing]``.
"""

from .validators import ProtocolViolationError, ValidationResult, validate_appender

__all__ = [
    "ProtocolViolationError",
    "ValidationResult",
    "validate_appender",
]
