"""
Exception types raised by taglog.

Emission APIs never raise; these only surface from configuration calls such
as registering an appender.
"""

from __future__ import annotations


class TaglogError(Exception):
    """Base class for taglog errors."""


class InvalidAppenderError(TaglogError, ValueError):
    """Raised when ``None`` is registered as an appender."""


class AppenderProtocolError(TaglogError, TypeError):
    """Raised when a registered object does not implement the appender protocol."""
